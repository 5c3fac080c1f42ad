"""FastAPI service: CSV export, indexer proxy and read-only dashboard routes."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from .config import GlobalConfig
from .dashboard import Dashboard
from .engine import (
    ExportError,
    ExportService,
    IndexerClient,
    IndexerTransportError,
    TableState,
    TableView,
)
from .limits import clamp_limit
from .logging_conf import configure_logging

GRAPHQL_PATH = "/api/graphql"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _view_payload(view: TableView) -> dict[str, Any]:
    return {
        "rows": [record.to_wire() for record in view.rows],
        "page": view.page.page_index + 1,
        "pageCount": view.page.page_count,
        "pageSize": view.page.page_size,
        "matching": view.matching,
        "loaded": view.loaded,
        "sort": {"key": view.state.sort_key, "desc": view.state.descending},
        "facets": {
            "protocols": view.facets.protocols,
            "chains": {str(chain): count for chain, count in view.facets.chains.items()},
        },
        "query": view.state.to_query(),
    }


def create_app(
    config: GlobalConfig,
    client: IndexerClient,
    export_service: ExportService,
    dashboard: Dashboard | None = None,
) -> FastAPI:
    """Build the application around already-constructed collaborators."""

    logger = configure_logging().bind(component="server")

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if dashboard is not None and config.server.poll:
            dashboard.start()
        try:
            yield
        finally:
            if dashboard is not None:
                dashboard.stop()
            client.close()

    app = FastAPI(title="Liqo", lifespan=lifespan)

    @app.get("/healthz")
    def healthz() -> dict[str, Any]:
        version = dashboard.store.version if dashboard is not None else None
        return {"status": "ok", "version": version}

    @app.get("/api/export")
    def export_csv(email: str | None = None, limit: str | None = None) -> Response:
        try:
            result = export_service.export(email, limit)
        except ExportError as exc:
            return _error(exc.status_code, exc.message)
        except Exception:  # noqa: BLE001
            logger.exception("export_failed")
            return _error(500, "Failed to generate CSV")
        return Response(
            content=result.encode(),
            status_code=200,
            media_type="text/csv; charset=utf-8",
            headers={
                "Content-Disposition": f'attachment; filename="{result.filename}"',
                "Cache-Control": "no-store, max-age=0",
            },
        )

    @app.post(GRAPHQL_PATH)
    async def graphql_proxy(request: Request) -> Response:
        body = await request.body()
        try:
            # Sync httpx call; keep it off the event loop
            forwarded = await run_in_threadpool(client.forward, body)
        except IndexerTransportError:
            return _error(502, "Upstream request failed")
        return Response(
            content=forwarded.text,
            status_code=forwarded.status_code,
            media_type="application/json",
        )

    @app.api_route(GRAPHQL_PATH, methods=["GET", "PUT", "PATCH", "DELETE"])
    def graphql_method_not_allowed() -> JSONResponse:
        return _error(405, "Method Not Allowed")

    @app.get("/api/liquidations")
    def liquidations(request: Request) -> Any:
        if dashboard is None:
            return _error(503, "Dashboard is not configured")
        dashboard.ensure_bootstrapped()
        state = TableState.from_query(
            request.query_params.multi_items(),
            default_page_size=config.table.page_size,
        )
        return _view_payload(dashboard.view(state))

    @app.get("/api/stats")
    def stats() -> dict[str, Any]:
        current = client.fetch_stats()
        return {"stats": asdict(current) if current is not None else None}

    @app.get("/api/leaderboard")
    def leaderboard(limit: str | None = None) -> dict[str, Any]:
        effective = clamp_limit(
            limit,
            default=config.leaderboard.default_limit,
            upper=config.leaderboard.max_limit,
        )
        rows = client.fetch_leaderboard(effective)
        return {"limit": effective, "rows": [asdict(row) for row in rows]}

    return app


__all__ = ["GRAPHQL_PATH", "create_app"]
