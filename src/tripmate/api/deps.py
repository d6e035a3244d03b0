"""Centralized FastAPI dependency definitions for the API layer.

Routers should import dependencies from here instead of directly from
their underlying implementation modules. This provides:

* A stable import surface (refactors in lower layers don't ripple up)
* Easier test overrides via ``app.dependency_overrides[deps.get_db]``
* One place where the per-application real-time objects (hub, store,
  delivery bridge, file storage) are pulled off ``app.state`` so handlers
  receive them explicitly instead of importing module-level singletons.
"""
from typing import Optional

from fastapi import Request

from tripmate.db.session import get_db
from tripmate.core.auth import get_current_user
from tripmate.realtime.hub import RealtimeHub
from tripmate.services.delivery import MessageDeliveryBridge
from tripmate.services.storage import FileStorage
from tripmate.services.store import ChatStore


def get_hub(request: Request) -> RealtimeHub:
    return request.app.state.hub


def get_store(request: Request) -> ChatStore:
    return request.app.state.store


def get_delivery_bridge(request: Request) -> MessageDeliveryBridge:
    return MessageDeliveryBridge(request.app.state.store, request.app.state.hub)


def get_file_storage(request: Request) -> Optional[FileStorage]:
    return request.app.state.file_storage


__all__ = [
    "get_db",
    "get_current_user",
    "get_hub",
    "get_store",
    "get_delivery_bridge",
    "get_file_storage",
]
