from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from tripmate.core.config import Settings, get_settings
from tripmate.core.logging import configure_logging
from tripmate.api.responses import install_error_handlers
from tripmate.api.routers import chat, health
from tripmate.db.session import AsyncSessionLocal
from tripmate.realtime import gateway
from tripmate.realtime.hub import RealtimeHub
from tripmate.realtime.presence import PresenceStore
from tripmate.realtime.presence_broadcaster import PresenceBroadcaster
from tripmate.services.storage import FileStorage, get_file_storage
from tripmate.services.store import ChatStore, SqlChatStore


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[ChatStore] = None,
    presence: Optional[PresenceStore] = None,
    file_storage: Optional[FileStorage] = None,
) -> FastAPI:
    """Build the application with its real-time collaborators on ``app.state``.

    ``store``, ``presence`` and ``file_storage`` default to the SQL store, the
    in-memory presence map and S3 (when a bucket is configured); pass
    replacements to run against another backend.
    """
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name)

    app.state.store = store if store is not None else SqlChatStore(AsyncSessionLocal)
    app.state.hub = RealtimeHub(presence)
    app.state.presence = PresenceBroadcaster(app.state.hub, app.state.store)
    app.state.file_storage = file_storage if file_storage is not None else get_file_storage(settings)

    if settings.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[settings.client_url] if settings.client_url else ["*"],
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    install_error_handlers(app)

    def _include(router):
        app.include_router(router, prefix=settings.api_prefix)

    _include(health.router)
    _include(chat.router)
    app.include_router(gateway.router)

    @app.get("/")
    async def root():
        return {"service": settings.app_name, "status": "ok"}

    return app


settings = get_settings()
configure_logging(settings.log_level)

app = create_app(settings)
