from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from foxhound.config import Settings
from foxhound.server.app import create_app
from foxhound.tools import TOOL_SPECS, BrowserToolkit

from conftest import FakeSession


def _client(toolkit: BrowserToolkit) -> TestClient:
    return TestClient(create_app(toolkit=toolkit))


def test_healthz(toolkit: BrowserToolkit) -> None:
    response = _client(toolkit).get("/healthz")
    assert response.json() == {"status": "ok"}


def test_lists_tools(toolkit: BrowserToolkit) -> None:
    payload = _client(toolkit).get("/tools").json()

    names = [tool["name"] for tool in payload["tools"]]
    assert names == [spec.name for spec in TOOL_SPECS]
    text_input = next(tool for tool in payload["tools"] if tool["name"] == "text_input")
    assert text_input["required"] == ["url", "html", "text"]


def test_tool_call_round_trip(toolkit: BrowserToolkit, fake_session: FakeSession) -> None:
    client = _client(toolkit)

    started = client.post("/tools/start_browser")
    title = client.post("/tools/get_page_title", json={})

    assert started.status_code == 200
    assert title.status_code == 200
    assert title.json() == {
        "content": [{"type": "text", "text": "Page title: Example Domain"}],
        "needs_user_input": False,
        "wait_for_response": False,
    }


def test_errors_map_to_kind_and_status(toolkit: BrowserToolkit) -> None:
    client = _client(toolkit)

    not_active = client.post("/tools/get_page_title")
    unknown = client.post("/tools/teleport", json={})
    invalid = client.post("/tools/navigate_to", json={})

    assert not_active.status_code == 409
    assert not_active.json()["kind"] == "session_not_active"
    assert unknown.status_code == 404
    assert unknown.json()["kind"] == "unknown_tool"
    assert invalid.status_code == 400
    assert invalid.json() == {"kind": "invalid_params", "message": "Parameter url must not be empty"}


def test_second_start_conflicts(toolkit: BrowserToolkit) -> None:
    client = _client(toolkit)
    client.post("/tools/start_browser")

    response = client.post("/tools/start_browser")

    assert response.status_code == 409
    assert response.json()["kind"] == "session_already_active"


def test_captcha_is_a_normal_response(toolkit: BrowserToolkit, fake_session: FakeSession) -> None:
    fake_session.captcha_checks = [True]
    client = _client(toolkit)
    client.post("/tools/start_browser")

    response = client.post("/tools/search_to_markdown", json={"keyword": "weather"})

    assert response.status_code == 200
    assert response.json()["needs_user_input"] is True
    assert response.json()["wait_for_response"] is True


def test_shutdown_releases_session(toolkit: BrowserToolkit, fake_session: FakeSession) -> None:
    with TestClient(create_app(toolkit=toolkit)) as client:
        client.post("/tools/start_browser")
        assert toolkit.slot.active

    assert fake_session.closed
    assert not toolkit.slot.active


def test_non_string_arguments_are_invalid_params(toolkit: BrowserToolkit) -> None:
    client = _client(toolkit)
    client.post("/tools/start_browser")

    keyword = client.post("/tools/search_to_markdown", json={"keyword": 5})
    html = client.post("/tools/text_input", json={"url": "https://example.com", "html": 5, "text": "hi"})
    filename = client.post("/tools/download_page", json={"filename": 5})

    for response in (keyword, html, filename):
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_params"
    assert keyword.json()["message"] == "Parameter keyword must be a string"


def test_unexpected_failures_are_internal_errors(
    toolkit: BrowserToolkit, settings: Settings, tmp_path: Path
) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")
    settings.downloads_dir = blocker
    client = _client(toolkit)
    client.post("/tools/start_browser")

    response = client.post("/tools/download_page", json={"filename": "saved.html"})

    assert response.status_code == 500
    assert response.json()["kind"] == "internal_error"
    assert response.json()["message"].startswith("download_page failed: ")
