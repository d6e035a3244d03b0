from datetime import datetime, timezone

import pytest
import pytest_asyncio
from tripmate.models import Message, Thread
from tripmate.repositories import user as user_repo


def _at(month, day):
	return datetime(2026, month, day, tzinfo=timezone.utc)


@pytest_asyncio.fixture()
async def conversations(db_session):
	"""User 1 talks to 2 (latest activity), 3, and has an empty thread with 4."""
	for uid in (1, 2, 3, 4, 5):
		await user_repo.create(db_session, email=f"u{uid}@example.com", id=uid)
	t12 = Thread(user_one_id=1, user_two_id=2, created_at=_at(1, 1))
	t13 = Thread(user_one_id=1, user_two_id=3, created_at=_at(1, 2))
	t14 = Thread(user_one_id=1, user_two_id=4, created_at=_at(1, 3))
	db_session.add_all([t12, t13, t14])
	await db_session.flush()
	db_session.add(Message(thread_id=t12.id, sender_id=2, content='first', created_at=_at(2, 1)))
	await db_session.flush()
	db_session.add(Message(thread_id=t13.id, sender_id=1, content='to three', created_at=_at(2, 15)))
	await db_session.flush()
	db_session.add(Message(thread_id=t12.id, sender_id=1, content='latest', created_at=_at(3, 1)))
	await db_session.commit()
	return {'t12': t12.id, 't13': t13.id, 't14': t14.id}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_user_list_orders_by_last_activity(client, conversations, auth_headers):
	resp = await client.get('/api/chat/user-list', headers=auth_headers(1))
	assert resp.status_code == 200
	body = resp.json()
	assert body['status'] == 1
	assert body['message'] == 'User list fetched'
	rows = body['data']
	assert [r['threadId'] for r in rows] == [conversations['t12'], conversations['t13'], conversations['t14']]
	assert [r['userId'] for r in rows] == [2, 3, 4]
	assert rows[0]['email'] == 'u2@example.com'
	assert rows[0]['lastMessage']['content'] == 'latest'
	assert rows[0]['lastMessage']['sender_id'] == 1
	assert rows[1]['lastMessage']['content'] == 'to three'
	assert rows[2]['lastMessage'] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_user_list_pagination_and_scope(client, conversations, auth_headers):
	resp = await client.get('/api/chat/user-list', params={'page': 2, 'limit': 2}, headers=auth_headers(1))
	assert [r['userId'] for r in resp.json()['data']] == [4]

	resp = await client.get('/api/chat/user-list', headers=auth_headers(2))
	rows = resp.json()['data']
	assert [(r['threadId'], r['userId']) for r in rows] == [(conversations['t12'], 1)]

	resp = await client.get('/api/chat/user-list', headers=auth_headers(5))
	assert resp.json()['data'] == []


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize('params', [{'page': 0}, {'limit': 0}, {'limit': 500}, {'page': 'x'}])
async def test_user_list_rejects_bad_paging(client, auth_headers, params):
	resp = await client.get('/api/chat/user-list', params=params, headers=auth_headers(1))
	assert resp.status_code == 400
	assert resp.json()['status'] == 0
