"""Summary: Command-line interface for InsightHub.

Importance: Provides a local-first entry point for site stats and integration workflows.
Alternatives: Drive everything through the HTTP API.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

import uvicorn

from insighthub.api import create_app
from insighthub.app import build_services
from insighthub.config import AppConfig
from insighthub.errors import Result
from insighthub.presenter import render_stats_shortcode


def build_parser() -> argparse.ArgumentParser:
    """Summary: Build the CLI argument parser.

    Importance: Defines supported commands for local operation.
    Alternatives: Use a CLI framework like Typer or Click.
    """

    parser = argparse.ArgumentParser(description="InsightHub CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_content = subparsers.add_parser("import-content", help="Import site content from JSON")
    import_content.add_argument(
        "--fixture", type=str, default=str(Path("data") / "mock_site.json")
    )

    subparsers.add_parser("stats", help="Show site totals and recent activity")
    subparsers.add_parser("post-types", help="Show published counts per post type")

    woocommerce = subparsers.add_parser("woocommerce", help="Show order activity")
    woocommerce.add_argument("--days", type=int, default=30)

    subparsers.add_parser("tools", help="List integrations and their status")

    connect = subparsers.add_parser("connect", help="Connect an integration")
    connect.add_argument("tool", type=str)
    connect.add_argument("--api-url", type=str, default=None)
    connect.add_argument("--api-key", type=str, default=None)
    connect.add_argument("--project-id", type=str, default=None)
    connect.add_argument("--project-key", type=str, default=None)

    callback = subparsers.add_parser("oauth-callback", help="Complete an OAuth connection")
    callback.add_argument("tool", type=str)
    callback.add_argument("code", type=str)
    callback.add_argument("state", type=str)

    disconnect = subparsers.add_parser("disconnect", help="Disconnect an integration")
    disconnect.add_argument("tool", type=str)

    validate = subparsers.add_parser("validate", help="Re-validate stored credentials")
    validate.add_argument("tool", type=str)

    summary = subparsers.add_parser("summary", help="Show the cached summary for a tool")
    summary.add_argument("tool", type=str)

    subparsers.add_parser("sync-now", help="Queue an immediate sync")
    subparsers.add_parser("sync-status", help="Show the sync status")
    subparsers.add_parser("run-cron", help="Run scheduled events that are due")
    subparsers.add_parser("shortcode", help="Render the stats shortcode HTML")
    subparsers.add_parser("serve", help="Run the HTTP API")
    return parser


def _report(result: Result, success: str) -> None:
    if result.ok:
        print(success)
        return
    if result.error is not None:
        print(f"Error ({result.error.code.value}): {result.error.message}")


def run_cli() -> None:
    """Summary: Execute CLI commands based on arguments.

    Importance: Drives the local workflow without a browser.
    Alternatives: Invoke services via an HTTP API.
    """

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args()
    config = AppConfig.from_env()

    if args.command == "serve":
        uvicorn.run(create_app(config), host=config.api_host, port=config.api_port)
        return

    services = build_services(config)
    integrations = services.integrations

    if args.command == "import-content":
        payload = json.loads(Path(args.fixture).read_text(encoding="utf-8"))
        imported = services.store.import_content(payload)
        for key, value in imported.items():
            print(f"{key}: {value}")
        return

    if args.command == "stats":
        for key, value in services.stats.get_totals().items():
            print(f"{key}: {value}")
        for key, value in services.stats.get_recent_activity().items():
            print(f"{key}: {value}")
        return

    if args.command == "post-types":
        for name, data in services.stats.get_post_type_totals().items():
            print(f"{name} ({data['label']}): {data['count']}")
        return

    if args.command == "woocommerce":
        activity = services.stats.get_woocommerce_activity(args.days)
        if not activity:
            print("WooCommerce data not available.")
            return
        print(f"orders: {activity['orders']}")
        print(f"sales_total: {activity['sales_total']:.2f}")
        return

    if args.command == "tools":
        for tool, definition in integrations.get_tools().items():
            validation = integrations.get_validation_state(tool)
            state = "connected" if integrations.is_connected(tool) else validation.status.value
            print(f"{tool}: {definition.label} [{state}] {validation.message}".rstrip())
        return

    if args.command == "connect":
        data = {
            "api_url": args.api_url,
            "api_key": args.api_key,
            "project_id": args.project_id,
            "project_key": args.project_key,
        }
        result = integrations.connect_tool(
            args.tool, {key: value for key, value in data.items() if value is not None}
        )
        if result.ok and result.redirect:
            print(result.redirect)
            return
        _report(result, f"Connected {args.tool}.")
        return

    if args.command == "oauth-callback":
        result = integrations.handle_oauth_callback(args.tool, args.code, args.state)
        _report(result, f"Connected {args.tool}.")
        return

    if args.command == "disconnect":
        _report(integrations.disconnect_tool(args.tool), f"Disconnected {args.tool}.")
        return

    if args.command == "validate":
        _report(integrations.validate_tool(args.tool), f"Validated {args.tool}.")
        return

    if args.command == "summary":
        entry = integrations.get_cached_summary(args.tool)
        if not entry.data:
            print("No data yet.")
            return
        print(json.dumps(entry.data, indent=2, sort_keys=True))
        return

    if args.command == "sync-now":
        _report(integrations.trigger_immediate_sync(), "Sync queued.")
        return

    if args.command == "sync-status":
        status = integrations.get_sync_status()
        for key, value in status.to_dict().items():
            print(f"{key}: {value}")
        return

    if args.command == "run-cron":
        ran = services.scheduler.run_due()
        print(f"Ran {ran} scheduled events.")
        return

    if args.command == "shortcode":
        print(render_stats_shortcode(services.stats))
        return


if __name__ == "__main__":
    run_cli()
