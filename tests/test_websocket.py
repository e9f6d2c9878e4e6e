"""End-to-end tests for the WebSocket relay endpoint."""

from fastapi.testclient import TestClient

from decibel_relay.api.app import create_app
from decibel_relay.containers import AppContainer
from tests.conftest import FakeScheduler


def test_health(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_recorder_viewer_and_late_joiner(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        with client.websocket_connect("/") as recorder:
            recorder.send_json({"type": "create_session"})
            assert recorder.receive_json() == {
                "type": "session_created",
                "sessionId": "S1",
            }

            with client.websocket_connect("/") as viewer:
                viewer.send_json({"type": "join_session", "sessionId": "S1"})
                assert viewer.receive_json() == {
                    "type": "session_joined",
                    "sessionId": "S1",
                    "isActive": True,
                    "timerData": None,
                    "sessionLog": [],
                }

                recorder.send_json({"type": "decibel_data", "data": {"db": 42}})
                update = {"type": "decibel_update", "data": {"db": 42}}
                assert recorder.receive_json() == update
                assert viewer.receive_json() == update

                recorder.send_json({"type": "stop_session"})
                assert viewer.receive_json() == {"type": "session_ended"}

                with client.websocket_connect("/ws") as late:
                    late.send_json({"type": "join_session", "sessionId": "S1"})
                    joined = late.receive_json()
                    assert joined["type"] == "session_joined"
                    assert joined["isActive"] is False
                    assert late.receive_json() == update
                    assert late.receive_json() == {"type": "session_ended"}


def test_join_unknown_session_returns_error(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        with client.websocket_connect("/") as viewer:
            viewer.send_json({"type": "join_session", "sessionId": "nope"})
            assert viewer.receive_json() == {
                "type": "error",
                "message": "Session not found",
            }

    assert len(container.session_store) == 0


def test_bad_frame_does_not_break_connection(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        with client.websocket_connect("/") as recorder:
            recorder.send_text("{definitely not json")
            recorder.send_json({"type": "unknown"})
            recorder.send_json({"type": "create_session"})
            assert recorder.receive_json()["type"] == "session_created"


def test_recorder_disconnect_notifies_viewers_and_schedules_removal(
    container: AppContainer, scheduler: FakeScheduler
) -> None:
    with TestClient(create_app(container)) as client:
        with client.websocket_connect("/") as viewer:
            with client.websocket_connect("/") as recorder:
                recorder.send_json({"type": "create_session"})
                recorder.receive_json()
                viewer.send_json({"type": "join_session", "sessionId": "S1"})
                viewer.receive_json()

            assert viewer.receive_json() == {"type": "session_ended"}

    assert [delay for delay, _ in scheduler.timers] == [3600]
    assert container.session_store.get("S1").is_active is False
    scheduler.run_all()
    assert container.session_store.get("S1") is None


def test_static_assets_are_served_when_configured(
    container: AppContainer, tmp_path
) -> None:
    (tmp_path / "index.html").write_text("<h1>meter</h1>")
    container.settings.static_dir = str(tmp_path)

    with TestClient(create_app(container)) as client:
        response = client.get("/")
        with client.websocket_connect("/") as recorder:
            recorder.send_json({"type": "create_session"})
            created = recorder.receive_json()

    assert response.status_code == 200
    assert "meter" in response.text
    assert created["type"] == "session_created"
