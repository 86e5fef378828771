import asyncio
import json
from collections.abc import Generator
from contextlib import contextmanager

from fastapi.testclient import TestClient

from botstudio.bot.manager import BotManager
from botstudio.core.config import get_settings
from botstudio.imaging.edit_client import EditResult
from botstudio.main import create_app
from tests.fakes import FakeChatApi, FakeEditor, RecordingSleep

SOURCE_IMAGE = "data:image/jpeg;base64,QUJD"


def _parked_manager(token, on_log) -> BotManager:
    api = FakeChatApi()
    api.poll_gate = asyncio.Event()
    return BotManager(token, on_log, api=api, editor=FakeEditor(), sleep=RecordingSleep())


@contextmanager
def _client(editor=None) -> Generator[TestClient, None, None]:
    with TestClient(create_app(edit_client=editor, manager_factory=_parked_manager)) as client:
        yield client


def test_healthz() -> None:
    with _client(FakeEditor()) as client:
        response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_edit_success_is_recorded_in_history() -> None:
    editor = FakeEditor(result=EditResult(image_url="data:image/png;base64,RURJVA==", text="Here you go"))
    with _client(editor) as client:
        first = client.post("/v1/edits", json={"image": SOURCE_IMAGE, "prompt": "add a hat"})
        second = client.post("/v1/edits", json={"image": SOURCE_IMAGE, "prompt": "now a scarf"})
        history = client.get("/v1/history")

    assert first.status_code == 200
    payload = first.json()
    assert payload["image_url"] == "data:image/png;base64,RURJVA=="
    assert payload["text"] == "Here you go"
    assert payload["history_id"]
    assert editor.calls[0] == (SOURCE_IMAGE, "add a hat")

    items = history.json()["items"]
    assert history.json()["count"] == 2
    assert [item["prompt"] for item in items] == ["now a scarf", "add a hat"]
    assert items[1]["id"] == payload["history_id"]
    assert items[1]["original_image"] == SOURCE_IMAGE


def test_edit_without_image_returns_explanation_and_skips_history() -> None:
    with _client(FakeEditor(result=EditResult(image_url=None, text=""))) as client:
        response = client.post("/v1/edits", json={"image": SOURCE_IMAGE, "prompt": "add a hat"})
        history = client.get("/v1/history")

    assert response.status_code == 200
    assert response.json() == {
        "image_url": None,
        "text": "No image was returned. Try a different prompt.",
        "history_id": None,
    }
    assert history.json() == {"items": [], "count": 0}


def test_edit_rejects_blank_prompt() -> None:
    editor = FakeEditor()
    with _client(editor) as client:
        response = client.post("/v1/edits", json={"image": SOURCE_IMAGE, "prompt": "   "})

    assert response.status_code == 422
    assert editor.calls == []


def test_edit_without_gemini_key_reports_configuration_error() -> None:
    with _client() as client:
        response = client.post("/v1/edits", json={"image": SOURCE_IMAGE, "prompt": "add a hat"})

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "GEMINI_NOT_CONFIGURED"


def test_edit_backend_failure_surfaces_message() -> None:
    with _client(FakeEditor(exc=RuntimeError("model overloaded"))) as client:
        response = client.post("/v1/edits", json={"image": SOURCE_IMAGE, "prompt": "add a hat"})

    assert response.status_code == 502
    assert response.json() == {"error": {"code": "IMAGE_EDIT_FAILED", "message": "model overloaded"}}


def test_bot_start_requires_token() -> None:
    with _client(FakeEditor()) as client:
        status_response = client.get("/v1/bot")
        start_response = client.post("/v1/bot/start")

    assert status_response.json() == {"state": "STOPPED", "offset": 0, "token_configured": False}
    assert start_response.status_code == 400
    assert start_response.json() == {
        "error": {"code": "BOT_TOKEN_MISSING", "message": "Please enter a Telegram Bot Token first!"}
    }


def test_bot_lifecycle_through_http() -> None:
    with _client(FakeEditor()) as client:
        token_response = client.put("/v1/bot/token", json={"token": " 123:abc "})
        started = client.post("/v1/bot/start")
        stopped = client.post("/v1/bot/stop")
        toggled = client.post("/v1/bot/toggle")
        logs = client.get("/v1/bot/logs")

    assert token_response.json()["token_configured"] is True
    stored = json.loads(get_settings().credential_store_path.read_text(encoding="utf-8"))
    assert stored == {"tg_bot_token": "123:abc"}

    assert started.json()["state"] == "RUNNING"
    assert stopped.json()["state"] == "STOPPED"
    assert toggled.json()["state"] == "RUNNING"
    assert [item["message"] for item in logs.json()["items"]] == [
        "Bot started. Listening for messages...",
        "Bot stopped.",
        "Bot started. Listening for messages...",
    ]
    assert {item["severity"] for item in logs.json()["items"]} == {"info"}
