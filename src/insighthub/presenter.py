"""Summary: HTML rendering for the dashboard and the stats shortcode.

Importance: Keeps markup out of the services and the API handlers.
Alternatives: Use a template engine such as Jinja2.
"""

from __future__ import annotations

from datetime import datetime, timezone
from html import escape
from typing import Any

from insighthub.errors import IntegrationError
from insighthub.manager import IntegrationManager
from insighthub.models import ValidationStatus
from insighthub.services import StatsService


TOTAL_CARDS = (
    ("posts", "Total Posts"),
    ("pages", "Total Pages"),
    ("comments", "Total Comments"),
    ("users", "Total Users"),
    ("categories", "Categories"),
    ("tags", "Tags"),
)

RECENT_ROWS = (
    ("posts_7_days", "Posts in last 7 days:"),
    ("posts_30_days", "Posts in last 30 days:"),
    ("comments_7_days", "Comments in last 7 days:"),
    ("comments_30_days", "Comments in last 30 days:"),
)


def render_stats_shortcode(stats: StatsService) -> str:
    """Summary: Render the [insighthub_stats] shortcode block.

    Importance: Lets front-end pages show headline counts.
    Alternatives: Expose counts only over JSON.
    """

    totals = stats.get_totals()
    return (
        '<div class="insighthub-stats-box">'
        f"<p><strong>Total Posts:</strong> {_number(totals['posts'])}</p>"
        f"<p><strong>Total Comments:</strong> {_number(totals['comments'])}</p>"
        f"<p><strong>Total Users:</strong> {_number(totals['users'])}</p>"
        "</div>"
    )


def render_dashboard(
    stats: StatsService,
    manager: IntegrationManager,
    notice: IntegrationError | str | None = None,
) -> str:
    """Summary: Render the admin dashboard page.

    Importance: Combines site counts and integration state in one view.
    Alternatives: Build a single-page app against the JSON endpoints.
    """

    totals = stats.get_totals()
    recent = stats.get_recent_activity()
    post_types = stats.get_post_type_totals()
    woocommerce = stats.get_woocommerce_activity(30)

    parts = ['<div class="wrap insighthub-dashboard">', "<h1>InsightHub Dashboard</h1>"]
    if notice is not None:
        parts.append(_render_notice(notice))
    parts.append('<div class="insighthub-cards">')
    for key, label in TOTAL_CARDS:
        parts.append(
            f'<div class="card"><h2>{escape(label)}</h2>'
            f'<p class="insighthub-number">{_number(totals[key])}</p></div>'
        )
    parts.append("</div>")

    parts.append('<div class="card insighthub-recent-activity"><h2>Recent Activity</h2><ul>')
    for key, label in RECENT_ROWS:
        parts.append(f"<li><strong>{escape(label)}</strong> {_number(recent[key])}</li>")
    parts.append("</ul></div>")

    parts.append(
        '<div class="card"><h2>Post Type Totals</h2>'
        '<table class="widefat striped insighthub-table">'
        "<thead><tr><th>Post Type</th><th>Published Count</th></tr></thead><tbody>"
    )
    for data in post_types.values():
        parts.append(f"<tr><td>{escape(str(data['label']))}</td><td>{_number(data['count'])}</td></tr>")
    parts.append("</tbody></table></div>")

    if woocommerce:
        parts.append(
            f'<div class="card insighthub-woocommerce"><h2>WooCommerce (last {woocommerce["days"]} days)</h2><ul>'
            f"<li><strong>Orders:</strong> {_number(woocommerce['orders'])}</li>"
            f"<li><strong>Sales Total:</strong> {woocommerce['sales_total']:,.2f}</li>"
            "</ul></div>"
        )

    parts.append(_render_integrations(manager))
    parts.append("</div>")
    return "".join(parts)


def _render_integrations(manager: IntegrationManager) -> str:
    status = manager.get_sync_status()
    parts = [
        '<div class="card insighthub-integrations"><h2>Marketing Integrations</h2>',
        f'<p class="insighthub-sync">Sync status: {escape(status.state.value)}'
        f"{_when(' · last run ', status.ended_at)}</p>",
        '<table class="widefat striped insighthub-table">'
        "<thead><tr><th>Tool</th><th>Status</th><th>Details</th><th>Latest data</th></tr></thead><tbody>",
    ]
    for tool, definition in manager.get_tools().items():
        validation = manager.get_validation_state(tool)
        if manager.is_connected(tool):
            label = "Connected"
        elif validation.status == ValidationStatus.FAILED:
            label = "Validation failed"
        else:
            label = "Not connected"
        metadata = manager.get_connection_metadata(tool)
        summary = manager.get_cached_summary(tool)
        details = "".join(
            f"<div>{escape(key)}: {escape(str(value))}</div>" for key, value in metadata.items()
        )
        if validation.message:
            details += f'<div class="insighthub-validation">{escape(validation.message)}</div>'
        parts.append(
            f'<tr data-tool="{escape(tool)}">'
            f"<td><strong>{escape(definition.label)}</strong><br>{escape(definition.description)}</td>"
            f"<td>{escape(label)}{_when('<br>checked ', validation.checked_at)}</td>"
            f"<td>{details}</td>"
            f"<td>{_render_summary(summary.data)}{_when('<br>cached ', summary.cached_at)}</td>"
            "</tr>"
        )
    parts.append("</tbody></table></div>")
    return "".join(parts)


def _render_summary(data: dict[str, Any]) -> str:
    if not data:
        return "No data yet"
    items = []
    for key, value in data.items():
        if isinstance(value, dict):
            inner = ", ".join(f"{escape(str(k))}: {escape(str(v))}" for k, v in value.items())
            items.append(f"<li>{escape(key)}: {inner}</li>")
        else:
            items.append(f"<li>{escape(key)}: {escape(str(value))}</li>")
    return "<ul>" + "".join(items) + "</ul>"


def _render_notice(notice: IntegrationError | str) -> str:
    if isinstance(notice, IntegrationError):
        return f'<div class="notice notice-error"><p>{escape(notice.message)}</p></div>'
    return f'<div class="notice notice-success"><p>{escape(notice)}</p></div>'


def _when(prefix: str, timestamp: int | None) -> str:
    if not timestamp:
        return ""
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return prefix + escape(moment.strftime("%Y-%m-%d %H:%M UTC"))


def _number(value: int | float | str) -> str:
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return escape(str(value))
