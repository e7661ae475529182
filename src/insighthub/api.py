"""Summary: FastAPI application for InsightHub.

Importance: Exposes the dashboard, stats, and integration actions over HTTP.
Alternatives: Use a CLI-only workflow or a different web framework.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from insighthub.app import build_services
from insighthub.config import AppConfig
from insighthub.errors import ErrorCode, IntegrationError, Result
from insighthub.presenter import render_dashboard, render_stats_shortcode


class ConnectRequest(BaseModel):
    """Summary: Request payload for key-based tool connections.

    Importance: Accepts the credential fields of every key-based tool.
    Alternatives: Use a separate request model per tool.
    """

    api_url: str | None = None
    api_key: str | None = None
    project_id: str | None = None
    project_key: str | None = None


def create_app(config: AppConfig) -> FastAPI:
    """Summary: Create a FastAPI app wired to InsightHub services.

    Importance: Ensures the API layer shares the same configuration and storage.
    Alternatives: Instantiate services globally outside the factory.
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = FastAPI(title="InsightHub API", version="1.0.0")
    services = build_services(config)
    integrations = services.integrations

    def require_admin(x_api_key: str | None = Header(default=None)) -> None:
        """Summary: Enforce the administrative capability when configured.

        Importance: Gates every state-mutating entry point and the dashboard.
        Alternatives: Use OAuth or session-based authentication.
        """

        if not config.admin_api_key:
            return
        if x_api_key != config.admin_api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")

    def ensure_tool(tool: str) -> None:
        if tool not in integrations.get_tools():
            raise HTTPException(
                status_code=404,
                detail={"code": ErrorCode.INVALID_TOOL.value, "message": "Unknown marketing tool."},
            )

    def status_for(error: IntegrationError) -> int:
        return 404 if error.code == ErrorCode.INVALID_TOOL else 400

    def raise_for(result: Result) -> None:
        if result.ok or result.error is None:
            return
        raise HTTPException(status_code=status_for(result.error), detail=result.error.to_dict())

    def describe(tool: str) -> dict[str, Any]:
        definition = integrations.get_tools()[tool]
        summary = integrations.get_cached_summary(tool)
        return {
            "tool": tool,
            **definition.to_dict(),
            "connected": integrations.is_connected(tool),
            "metadata": integrations.get_connection_metadata(tool),
            "validation": integrations.get_validation_state(tool).to_dict(),
            "summary": {"data": summary.data, "cached_at": summary.cached_at},
        }

    @app.get("/health")
    def health() -> dict[str, str]:
        """Summary: Health check endpoint.

        Importance: Supports uptime checks in local and cloud deployments.
        Alternatives: Use a metrics endpoint only.
        """

        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse, dependencies=[Depends(require_admin)])
    def dashboard() -> str:
        """Summary: Serve the admin dashboard.

        Importance: Provides the main analytics view without extra tooling.
        Alternatives: Build a separate frontend app served by a web server.
        """

        return render_dashboard(services.stats, integrations)

    @app.get("/shortcode/insighthub_stats", response_class=HTMLResponse)
    def stats_shortcode() -> str:
        """Summary: Render the public stats shortcode block.

        Importance: Lets site pages embed headline counts.
        Alternatives: Render counts client-side from /stats.
        """

        return render_stats_shortcode(services.stats)

    @app.get("/stats", dependencies=[Depends(require_admin)])
    def stats() -> dict[str, int]:
        return services.stats.get_totals()

    @app.get("/stats/recent", dependencies=[Depends(require_admin)])
    def recent_activity() -> dict[str, int]:
        return services.stats.get_recent_activity()

    @app.get("/stats/post-types", dependencies=[Depends(require_admin)])
    def post_type_totals() -> dict[str, dict[str, Any]]:
        return services.stats.get_post_type_totals()

    @app.get("/stats/woocommerce", dependencies=[Depends(require_admin)])
    def woocommerce_activity(days: int = Query(default=30, ge=1, le=365)) -> dict[str, Any]:
        return services.stats.get_woocommerce_activity(days)

    @app.get("/integrations", dependencies=[Depends(require_admin)])
    def list_integrations() -> list[dict[str, Any]]:
        """Summary: List tools with connection state and cached summaries.

        Importance: Exposes integration status to clients.
        Alternatives: Return only connected tools.
        """

        return [describe(tool) for tool in integrations.get_tools()]

    @app.get("/integrations/sync/status", dependencies=[Depends(require_admin)])
    def sync_status() -> dict[str, Any]:
        status = integrations.get_sync_status()
        return {**status.to_dict(), "running": integrations.is_sync_running()}

    @app.post("/integrations/refresh", dependencies=[Depends(require_admin)])
    def refresh_integrations() -> dict[str, Any]:
        """Summary: Queue an immediate background sync.

        Importance: Lets admins refresh summaries on demand.
        Alternatives: Wait for the hourly run.
        """

        raise_for(integrations.trigger_immediate_sync())
        return {"status": "queued"}

    @app.get("/integrations/{tool}", dependencies=[Depends(require_admin)])
    def get_integration(tool: str) -> dict[str, Any]:
        ensure_tool(tool)
        return describe(tool)

    @app.post("/integrations/{tool}/connect", dependencies=[Depends(require_admin)])
    def connect_integration(tool: str, payload: ConnectRequest | None = None) -> dict[str, Any]:
        """Summary: Connect a tool or start its OAuth flow.

        Importance: Single entry point for every connect style.
        Alternatives: Provide one endpoint per tool.
        """

        data = payload.model_dump(exclude_none=True) if payload else {}
        result = integrations.connect_tool(tool, data)
        raise_for(result)
        if result.redirect:
            return {"status": "redirect", "redirect": result.redirect}
        return {"status": "connected", **describe(tool)}

    @app.post("/integrations/{tool}/disconnect", dependencies=[Depends(require_admin)])
    def disconnect_integration(tool: str) -> dict[str, str]:
        raise_for(integrations.disconnect_tool(tool))
        return {"status": "disconnected"}

    @app.post("/integrations/{tool}/validate", dependencies=[Depends(require_admin)])
    def validate_integration(tool: str) -> dict[str, Any]:
        raise_for(integrations.validate_tool(tool))
        return {"status": "validated", **describe(tool)}

    @app.get("/oauth/callback", response_class=HTMLResponse, dependencies=[Depends(require_admin)])
    def oauth_callback(tool: str = "", code: str = "", state: str = "") -> HTMLResponse:
        """Summary: Handle the OAuth consent callback.

        Importance: Completes the Google Site Kit connection.
        Alternatives: Exchange codes from a separate auth service.
        """

        result = integrations.handle_oauth_callback(tool, code, state)
        if result.error is not None:
            return HTMLResponse(
                render_dashboard(services.stats, integrations, notice=result.error),
                status_code=status_for(result.error),
            )
        label = integrations.get_tools()[tool].label
        return HTMLResponse(
            render_dashboard(services.stats, integrations, notice=f"{label} connected.")
        )

    @app.post("/cron/run", dependencies=[Depends(require_admin)])
    def run_cron() -> dict[str, int]:
        """Summary: Run scheduled events that are due.

        Importance: Drives the hourly and immediate syncs from an external cron or uptime pinger.
        Alternatives: Run a scheduler thread inside the web process.
        """

        return {"ran": services.scheduler.run_due()}

    return app
