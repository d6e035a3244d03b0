import pytest
from tripmate.core.errors import PersistenceError, ValidationError
from tripmate.schemas.message import FileInfo
from tripmate.services.delivery import MessageDeliveryBridge


@pytest.fixture()
def room(hub, make_conn, memory_store):
    """Thread 100 between users 7 and 8, both viewing it; user 9 elsewhere."""
    memory_store.add_thread(100, 7, 8)
    members = {}
    for user_id in (7, 8, 9):
        conn, transport = make_conn(user_id)
        hub.register(conn)
        if user_id != 9:
            hub.rooms.join_thread(conn, 100)
        members[user_id] = transport
    return members


@pytest.fixture()
def bridge(memory_store, hub):
    return MessageDeliveryBridge(memory_store, hub)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_payload_is_built_from_stored_row(bridge, room, memory_store):
    payload = await bridge.deliver(thread_id=100, sender_id=7, content="hi", temp_id="t1")

    stored = memory_store.messages[0]
    assert payload == {
        "id": stored.id,
        "tempId": "t1",
        "content": "hi",
        "message_type": "text",
        "sender_id": 7,
        "created_at": "2026-10-19T12:00:00Z",
        "is_read": False,
        "threadId": 100,
    }


@pytest.mark.asyncio
@pytest.mark.unit
async def test_broadcast_equals_returned_payload(bridge, room):
    payload = await bridge.deliver(thread_id=100, sender_id=7, content="hello")

    for user_id in (7, 8):
        assert room[user_id].events("message") == [{"event": "message", "data": payload}]
    assert room[9].events("message") == []
    assert "tempId" not in payload
    assert "fileInfo" not in payload


@pytest.mark.asyncio
@pytest.mark.unit
async def test_rejected_write_is_not_broadcast(bridge, room, memory_store):
    with pytest.raises(PersistenceError):
        await bridge.deliver(thread_id=100, sender_id=9, content="let me in")

    assert memory_store.messages == []
    assert all(t.events("message") == [] for t in room.values())


@pytest.mark.asyncio
@pytest.mark.unit
async def test_missing_fields_raise_validation_error(bridge, room):
    with pytest.raises(ValidationError) as exc:
        await bridge.deliver(thread_id=None, sender_id=7, content="")
    assert set(exc.value.errors) == {"threadId", "content"}

    with pytest.raises(ValidationError) as exc:
        await bridge.deliver(thread_id=100, sender_id=7, content=None)
    assert set(exc.value.errors) == {"content"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_file_info_only_for_file_messages(bridge, room):
    info = FileInfo(name="map.png", size=3, type="image/png")

    file_msg = await bridge.deliver(
        thread_id=100, sender_id=8, content="https://files.test/a.png", message_type="file", file_info=info
    )
    text_msg = await bridge.deliver(thread_id=100, sender_id=8, content="see above", file_info=info)

    assert file_msg["message_type"] == "file"
    assert file_msg["fileInfo"] == {"name": "map.png", "size": 3, "type": "image/png"}
    assert "fileInfo" not in text_msg


@pytest.mark.asyncio
@pytest.mark.unit
async def test_numeric_temp_id_and_string_thread_id(bridge, room):
    payload = await bridge.deliver(thread_id="100", sender_id=7, content="x", temp_id=42)
    assert payload["tempId"] == 42
    assert payload["threadId"] == 100
    assert room[8].events("message")[0]["data"] == payload
