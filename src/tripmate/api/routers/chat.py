"""Chat router.

HTTP side of the chat: message writes (which fan out to the thread room via
the delivery bridge), attachment uploads, thread lookup and history. Every
route requires a bearer token; the sender of a message is always the token's
user, never a body field.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from tripmate.api import deps
from tripmate.api.responses import success
from tripmate.core.auth import Identity
from tripmate.core.config import Settings, get_settings
from tripmate.core.errors import StorageError, ValidationError
from tripmate.schemas.message import FileInfo, MessageRead, SendMessageRequest
from tripmate.schemas.thread import ExistingThreadsRequest
from tripmate.services.delivery import MessageDeliveryBridge
from tripmate.services.storage import FileStorage
from tripmate.services.store import ChatStore
from tripmate.services.thread import (
    NotAParticipantError,
    ThreadNotFoundError,
    UserNotFoundError,
    existing_threads,
    get_or_create_thread,
    list_conversations,
    list_thread_messages,
)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/send", summary="Send a text message to a thread")
async def send_message_route(
    payload: SendMessageRequest,
    user: Identity = Depends(deps.get_current_user),
    bridge: MessageDeliveryBridge = Depends(deps.get_delivery_bridge),
):
    data = await bridge.deliver(
        thread_id=payload.threadId,
        sender_id=user.user_id,
        content=payload.content,
        message_type=payload.messageType,
        temp_id=payload.tempId,
    )
    return success(data, "Message sent successfully")


@router.post("/upload", summary="Upload an attachment, optionally sending it to a thread")
async def upload_file_route(
    file: Optional[UploadFile] = File(None),
    threadId: Optional[str] = Form(None),
    tempId: Optional[str] = Form(None),
    user: Identity = Depends(deps.get_current_user),
    bridge: MessageDeliveryBridge = Depends(deps.get_delivery_bridge),
    storage: Optional[FileStorage] = Depends(deps.get_file_storage),
    settings: Settings = Depends(get_settings),
):
    """Store the file in object storage; with a ``threadId`` the resulting URL
    is then sent as a ``file`` message carrying ``fileInfo``.

    Response data: ``{"url": <object url>, "message": <delivered payload or null>}``.
    """
    if file is None:
        raise ValidationError("No file uploaded", {"file": "File is required"})
    content_type = file.content_type or "application/octet-stream"
    if content_type not in settings.upload_allowed_types:
        raise ValidationError("Invalid file type", {"file": f"Unsupported type {content_type}"})
    thread_id: Optional[int] = None
    if threadId:
        if not threadId.strip().isdigit() or int(threadId) == 0:
            raise ValidationError("Invalid thread ID", {"threadId": "Thread ID must be a positive number"})
        thread_id = int(threadId)

    data = await file.read(settings.upload_max_bytes + 1)
    if len(data) > settings.upload_max_bytes:
        raise ValidationError("File too large", {"file": f"Limit is {settings.upload_max_bytes} bytes"})
    if storage is None:
        raise StorageError("File storage is not configured")

    filename = file.filename or "file"
    url = await storage.upload(data, filename, content_type, settings.chat_files_prefix)

    message = None
    if thread_id is not None:
        message = await bridge.deliver(
            thread_id=thread_id,
            sender_id=user.user_id,
            content=url,
            message_type="file",
            temp_id=tempId,
            file_info=FileInfo(name=filename, size=len(data), type=content_type),
        )
    return success({"url": url, "message": message}, "File uploaded")


@router.get("/thread/{user_id}", summary="Create or get the thread with another user")
async def thread_with_user_route(
    user_id: int,
    user: Identity = Depends(deps.get_current_user),
    session: AsyncSession = Depends(deps.get_db),
):
    try:
        thread = await get_or_create_thread(session, user_id=user.user_id, other_user_id=user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    await session.commit()
    return success({"id": thread.id}, "Thread fetched")


@router.get("/messages/{thread_id}", summary="List messages in a thread")
async def list_messages_route(
    thread_id: int,
    user: Identity = Depends(deps.get_current_user),
    session: AsyncSession = Depends(deps.get_db),
):
    try:
        rows = await list_thread_messages(session, thread_id=thread_id, user_id=user.user_id)
    except ThreadNotFoundError:
        raise HTTPException(status_code=404, detail="Thread not found")
    except NotAParticipantError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a participant of this thread")
    data = [MessageRead.model_validate(m).model_dump(mode="json") for m in rows]
    return success(data, "Messages fetched")


@router.post("/last-seen", summary="Mark the caller as online now")
async def last_seen_route(
    user: Identity = Depends(deps.get_current_user),
    store: ChatStore = Depends(deps.get_store),
):
    await store.set_presence(user.user_id, True)
    return success(None, "Last seen updated")


@router.post("/get-threads", summary="Existing threads between the caller and a list of users")
async def get_threads_route(
    payload: ExistingThreadsRequest,
    user: Identity = Depends(deps.get_current_user),
    session: AsyncSession = Depends(deps.get_db),
):
    if not isinstance(payload.userIds, list):
        raise ValidationError("userIds must be an array of user IDs", {"userIds": "Must be an array"})
    mapping = await existing_threads(session, user_id=user.user_id, other_user_ids=payload.userIds)
    return success({str(k): v for k, v in mapping.items()}, "Existing threads retrieved")


@router.get("/user-list", summary="Conversation partners with their last message")
async def user_list_route(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: Identity = Depends(deps.get_current_user),
    session: AsyncSession = Depends(deps.get_db),
):
    data = await list_conversations(session, user_id=user.user_id, page=page, limit=limit)
    return success(data, "User list fetched")
