# khonreep/main.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import RedirectResponse

from khonreep import __version__
from khonreep.config import Settings, get_settings
from khonreep.db.store import LocationStore, build_store
from khonreep.routes import map as map_routes
from khonreep.routes import pin as pin_routes
from khonreep.routes import session as session_routes
from khonreep.services.ip_lookup import IPLookupClient
from khonreep.services.session import ReporterSession, SessionRegistry

log = logging.getLogger("uvicorn.error")


def _cors_kwargs(settings: Settings) -> dict:
    # Session cookies need credentials, so origins are never "*".
    # With no CORS_ORIGINS only a browser on this machine can call us.
    cors_kwargs = dict(allow_methods=["*"], allow_headers=["*"], allow_credentials=True)
    if settings.cors_origins:
        cors_kwargs.update(allow_origins=settings.cors_origins)
    else:
        cors_kwargs.update(allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$")
    return cors_kwargs


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[LocationStore] = None,
    ip_lookup: Optional[IPLookupClient] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.getLogger("khonreep").setLevel(settings.log_level)

    store = store if store is not None else build_store(settings)
    ip_lookup = ip_lookup or IPLookupClient(settings.ip_lookup_url, timeout=settings.ip_lookup_timeout)

    app = FastAPI(
        title="Khon Reep API",
        version=__version__,
        description="Drop traffic-safety incident pins and view them on a map.",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.sessions = SessionRegistry(
        lambda session_id: ReporterSession(session_id, settings, store, ip_lookup),
        max_sessions=settings.max_sessions,
    )

    # ---------------- CORS ----------------
    cors_kwargs = _cors_kwargs(settings)
    app.add_middleware(CORSMiddleware, **cors_kwargs)
    log.info("CORS configured: %s", cors_kwargs)

    # ---------------- Session cookie ----------------
    @app.middleware("http")
    async def issue_session_cookie(request: Request, call_next):
        response = await call_next(request)
        new_id = getattr(request.state, "new_session_id", None)
        if new_id:
            response.set_cookie(settings.session_cookie, new_id, httponly=True, samesite="lax")
        return response

    # ---------------- Routers ----------------
    prefix = settings.api_prefix
    app.include_router(session_routes.router, prefix=prefix)
    app.include_router(pin_routes.router, prefix=prefix)
    app.include_router(map_routes.router, prefix=prefix)

    # ---------------- Meta/utility ----------------
    @app.get("/", include_in_schema=False)
    def root() -> RedirectResponse:
        # no HTML client ships with the API; send people to the endpoint list
        return RedirectResponse(url="/docs")

    @app.get(f"{prefix}/health", tags=["meta"])
    def health():
        return {"status": "ok", "prefix": prefix, "store": settings.store_backend}

    return app


app = create_app()


# ---------------- Local dev entrypoint ----------------
if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(
        "khonreep.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
