"""End-to-end socket scenario against an application wired to an in-memory store."""
import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from tripmate.api.main import create_app


@pytest.fixture()
def chat_app(memory_store):
	memory_store.add_thread(100, 7, 8)
	return create_app(store=memory_store)


@pytest.mark.integration
def test_two_users_chat_over_socket(chat_app, memory_store, make_token, auth_headers):
	with TestClient(chat_app) as client:
		with client.websocket_connect(f'/ws?token={make_token(7)}') as ws7:
			hello = ws7.receive_json()
			assert hello['event'] == 'connected'
			assert hello['data']['userId'] == 7
			assert ws7.receive_json() == {'event': 'user-online', 'data': {'userId': 7}}

			with client.websocket_connect('/ws', headers=auth_headers(8)) as ws8:
				assert ws8.receive_json()['event'] == 'connected'
				assert ws8.receive_json() == {'event': 'user-online', 'data': {'userId': 8}}
				assert ws7.receive_json() == {'event': 'user-online', 'data': {'userId': 8}}

				ws7.send_json({'event': 'joinThread', 'data': {'threadId': 100}, 'ack': 1})
				assert ws7.receive_json() == {'event': 'ack', 'ack': 1, 'data': {'status': 'success'}}
				ws8.send_json({'event': 'joinThread', 'data': {'threadId': 100}, 'ack': 1})
				assert ws8.receive_json()['data'] == {'status': 'success'}

				resp = client.post(
					'/api/chat/send',
					json={'threadId': 100, 'content': 'Boarding now', 'tempId': 't1'},
					headers=auth_headers(7),
				)
				assert resp.status_code == 200
				body = resp.json()
				assert body['status'] == 1
				sent = body['data']
				assert sent['tempId'] == 't1'
				assert sent['id'] == memory_store.messages[0].id
				assert ws8.receive_json() == {'event': 'message', 'data': sent}
				assert ws7.receive_json() == {'event': 'message', 'data': sent}

				ws8.send_json({'event': 'joinThread', 'data': {}, 'ack': 2})
				failed = ws8.receive_json()
				assert failed['ack'] == 2
				assert failed['data']['status'] == 'error'

				# still in thread-100 after the failed join
				ws8.send_json({'event': 'typing', 'data': {'threadId': 100, 'isTyping': True}})
				assert ws7.receive_json() == {
					'event': 'typing',
					'data': {'userId': 8, 'isTyping': True, 'threadId': 100},
				}

				ws8.close()
				assert ws7.receive_json() == {'event': 'user-offline', 'data': {'userId': 8}}

			assert (8, False) in memory_store.presence_calls

	assert chat_app.state.hub.connection_count == 0
	assert 7 not in chat_app.state.hub.presence


@pytest.mark.integration
@pytest.mark.parametrize('path', ['/ws', '/ws?token=garbage'])
def test_socket_rejects_bad_credentials(chat_app, path):
	with TestClient(chat_app) as client:
		with pytest.raises(WebSocketDisconnect) as exc:
			with client.websocket_connect(path):
				pass
		assert exc.value.code == 1008
	assert chat_app.state.hub.connection_count == 0


@pytest.mark.integration
def test_second_device_keeps_user_online(chat_app, make_token):
	with TestClient(chat_app) as client:
		with client.websocket_connect(f'/ws?token={make_token(1)}') as watcher:
			watcher.receive_json()
			watcher.receive_json()
			with client.websocket_connect(f'/ws?token={make_token(2)}') as phone:
				phone.receive_json()
				assert watcher.receive_json()['data'] == {'userId': 2}
				with client.websocket_connect(f'/ws?token={make_token(2)}') as laptop:
					assert laptop.receive_json()['event'] == 'connected'
					assert watcher.receive_json()['data'] == {'userId': 2}
					laptop.close()
				# laptop gone, phone still attached: no user-offline yet
				watcher.send_json({'event': 'joinThread', 'data': {'threadId': 5}, 'ack': 9})
				assert watcher.receive_json()['event'] == 'ack'
				assert chat_app.state.hub.presence.get(2) is not None
				phone.close()
				assert watcher.receive_json() == {'event': 'user-offline', 'data': {'userId': 2}}
