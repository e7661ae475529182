"""Summary: Tests for site statistics.

Importance: Ensures dashboard counts reflect stored content.
Alternatives: Validate stats manually via the API.
"""

from __future__ import annotations

from pathlib import Path

from insighthub.errors import StoreError
from insighthub.services import DAY_IN_SECONDS, StatsService
from insighthub.storage.sqlite_store import SqliteStore


def _seeded_store(tmp_path: Path, now: int) -> SqliteStore:
    store = SqliteStore(str(tmp_path / "test.db"))
    store.initialize()
    store.import_content(
        {
            "post_types": [{"name": "product", "label": "Products"}],
            "posts": [
                {"post_type": "post", "created_at": now - 2 * DAY_IN_SECONDS},
                {"post_type": "post", "created_at": now - 10 * DAY_IN_SECONDS},
                {"post_type": "post", "created_at": now - 40 * DAY_IN_SECONDS},
                {"post_type": "post", "status": "draft", "created_at": now},
                {"post_type": "page", "created_at": now - 400 * DAY_IN_SECONDS},
                {"post_type": "product", "created_at": now - DAY_IN_SECONDS},
            ],
            "comments": [
                {"created_at": now - DAY_IN_SECONDS},
                {"created_at": now - 20 * DAY_IN_SECONDS},
                {"status": "pending", "created_at": now},
            ],
            "terms": [
                {"taxonomy": "category", "name": "News"},
                {"taxonomy": "post_tag", "name": "a"},
                {"taxonomy": "post_tag", "name": "b"},
            ],
            "users": [{"email": "admin@example.com"}],
            "orders": [
                {"status": "completed", "total": 20, "created_at": now - DAY_IN_SECONDS},
                {"status": "processing", "total": 5.5, "created_at": now - 3 * DAY_IN_SECONDS},
                {"status": "cancelled", "total": 99, "created_at": now - DAY_IN_SECONDS},
                {"status": "completed", "total": 50, "created_at": now - 60 * DAY_IN_SECONDS},
            ],
        }
    )
    return store


def test_totals_and_recent_activity(tmp_path: Path, clock) -> None:
    """Summary: Verify totals and 7/30-day windows.

    Importance: Confirms dashboard cards and the activity list are populated.
    Alternatives: Use direct SQL queries in the API.
    """

    now = int(clock())
    stats = StatsService(content=_seeded_store(tmp_path, now), clock=clock)
    assert stats.get_totals() == {
        "posts": 3,
        "pages": 1,
        "comments": 2,
        "users": 1,
        "categories": 1,
        "tags": 2,
    }
    assert stats.get_recent_activity() == {
        "posts_7_days": 1,
        "posts_30_days": 2,
        "comments_7_days": 1,
        "comments_30_days": 2,
    }
    assert stats.get_post_type_totals() == {
        "post": {"label": "Post", "count": 3},
        "page": {"label": "Page", "count": 1},
        "product": {"label": "Products", "count": 1},
    }


def test_woocommerce_activity(tmp_path: Path, clock) -> None:
    """Summary: Ensure order activity honors the flag, statuses, and window.

    Importance: Content-only sites must not show an empty sales card.
    Alternatives: Always render the card.
    """

    store = _seeded_store(tmp_path, int(clock()))
    assert StatsService(content=store, clock=clock).get_woocommerce_activity() == {}

    stats = StatsService(content=store, clock=clock, woocommerce_enabled=True)
    assert stats.get_woocommerce_activity(30) == {"orders": 2, "sales_total": 25.5, "days": 30}
    assert stats.get_woocommerce_activity(-2) == {"orders": 1, "sales_total": 20.0, "days": 2}


def test_woocommerce_without_orders(tmp_path: Path, clock) -> None:
    store = SqliteStore(str(tmp_path / "empty.db"))
    store.initialize()
    stats = StatsService(content=store, clock=clock, woocommerce_enabled=True)
    assert stats.get_woocommerce_activity() == {}


class BrokenContent(SqliteStore):
    def count_users(self) -> int:
        raise StoreError("users table unavailable")


def test_store_errors_count_as_zero(tmp_path: Path, clock) -> None:
    """Summary: Verify a failing count degrades to zero.

    Importance: One broken query must not take down the dashboard.
    Alternatives: Return HTTP 500 for the whole page.
    """

    store = BrokenContent(str(tmp_path / "broken.db"))
    store.initialize()
    assert StatsService(content=store, clock=clock).get_totals()["users"] == 0
