"""Summary: Site statistics services for InsightHub.

Importance: Gathers the counts shown on the dashboard and in the shortcode.
Alternatives: Run count queries directly in the views.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from insighthub.errors import StoreError
from insighthub.storage.base import Clock, ContentStore


logger = logging.getLogger(__name__)

DAY_IN_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class StatsService:
    """Summary: Provides lightweight analytics and counts.

    Importance: Enables dashboards and quick health checks.
    Alternatives: Calculate counts directly in the API or UI.
    """

    content: ContentStore
    clock: Clock = time.time
    woocommerce_enabled: bool = False
    woocommerce_statuses: tuple[str, ...] = field(default=("processing", "completed"))

    def get_totals(self) -> dict[str, int]:
        """Summary: Return overall totals for key site metrics.

        Importance: Feeds the dashboard cards and the shortcode.
        Alternatives: Cache totals in an option updated on publish.
        """

        return {
            "posts": self._safe_count(self.content.count_published, "post"),
            "pages": self._safe_count(self.content.count_published, "page"),
            "comments": self._safe_count(self.content.count_approved_comments),
            "users": self._safe_count(self.content.count_users),
            "categories": self._safe_count(self.content.count_terms, "category"),
            "tags": self._safe_count(self.content.count_terms, "post_tag"),
        }

    def get_recent_activity(self) -> dict[str, int]:
        """Summary: Return post and comment counts for the last 7 and 30 days.

        Importance: Shows publishing momentum at a glance.
        Alternatives: Chart daily counts over a longer window.
        """

        return {
            "posts_7_days": self._safe_count(
                self.content.count_published_since, "post", self._days_ago(7)
            ),
            "posts_30_days": self._safe_count(
                self.content.count_published_since, "post", self._days_ago(30)
            ),
            "comments_7_days": self._safe_count(
                self.content.count_approved_comments, self._days_ago(7)
            ),
            "comments_30_days": self._safe_count(
                self.content.count_approved_comments, self._days_ago(30)
            ),
        }

    def get_post_type_totals(self) -> dict[str, dict[str, int | str]]:
        """Summary: Return published counts per public post type.

        Importance: Includes custom types registered by other plugins.
        Alternatives: Show only posts and pages.
        """

        try:
            post_types = self.content.list_post_types()
        except StoreError as exc:
            logger.warning("Could not list post types: %s", exc)
            return {}
        return {
            post_type.name: {
                "label": post_type.label or post_type.name,
                "count": self._safe_count(self.content.count_published, post_type.name),
            }
            for post_type in post_types
        }

    def get_woocommerce_activity(self, days: int = 30) -> dict[str, int | float]:
        """Summary: Return order activity when e-commerce data is available.

        Importance: Adds sales context for stores without breaking content-only sites.
        Alternatives: Require a separate e-commerce report.
        """

        if not self._can_access_woocommerce():
            return {}
        days = abs(int(days))
        try:
            orders, sales_total = self.content.order_totals(
                self.woocommerce_statuses, self._days_ago(days)
            )
        except StoreError as exc:
            logger.warning("Could not read order totals: %s", exc)
            orders, sales_total = 0, 0.0
        return {"orders": orders, "sales_total": sales_total, "days": days}

    def _can_access_woocommerce(self) -> bool:
        if not self.woocommerce_enabled:
            return False
        try:
            return self.content.has_orders()
        except StoreError as exc:
            logger.warning("Could not check order data: %s", exc)
            return False

    def _days_ago(self, days: int) -> int:
        return int(self.clock()) - abs(days) * DAY_IN_SECONDS

    def _safe_count(self, query: Callable[..., int | None], *args: object) -> int:
        try:
            value = query(*args)
        except StoreError as exc:
            logger.warning("Count query %s failed: %s", getattr(query, "__name__", query), exc)
            return 0
        return int(value or 0)
