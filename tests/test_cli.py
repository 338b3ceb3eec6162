"""Tests for the command line entry point and logging helpers."""

import logging

import httpx
import pytest

from gemini_client import cli
from gemini_client.core.logging_utils import mask_api_key, setup_logging

from fakes import RecordingHandler, make_gemini, sse_body, text_chunk


@pytest.fixture
def fake_gemini(monkeypatch):
    """Route cli.Gemini through a MockTransport and leave logging untouched."""

    def install(response_factory):
        handler = RecordingHandler(response_factory)
        monkeypatch.setattr(cli, "Gemini", lambda model: make_gemini(handler, model=model))
        monkeypatch.setattr(cli, "setup_logging", lambda level: None)
        return handler

    return install


def test_parser_defaults():
    args = cli.build_parser().parse_args(["hello"])
    assert args.prompt == "hello"
    assert not args.stream
    assert args.temperature is None


def test_main_prints_answer(fake_gemini, capsys):
    handler = fake_gemini(lambda: httpx.Response(200, json=text_chunk("Hi there", finish_reason="STOP")))

    exit_code = cli.main(["hello", "-s", "be kind", "-t", "0.5", "--google-search", "--log-level", "WARNING"])

    assert exit_code == 0
    assert capsys.readouterr().out == "Hi there\n"
    body = handler.last_json
    assert body["systemInstruction"] == {"parts": [{"text": "be kind"}]}
    assert body["generationConfig"] == {"temperature": 0.5}
    assert body["tools"] == [{"googleSearch": {}}]


def test_main_streams_answer(fake_gemini, capsys):
    body = sse_body(text_chunk("Hello"), text_chunk(" world", finish_reason="STOP"))
    handler = fake_gemini(lambda: httpx.Response(200, content=body))

    exit_code = cli.main(["hello", "--stream", "--log-level", "WARNING"])

    assert exit_code == 0
    assert capsys.readouterr().out == "Hello world\n"
    assert str(handler.requests[0].url).endswith(":streamGenerateContent?alt=sse")


def test_main_reports_api_errors(fake_gemini, capsys):
    payload = {"error": {"code": 401, "message": "API key not valid", "status": "UNAUTHENTICATED"}}
    fake_gemini(lambda: httpx.Response(401, json=payload))

    exit_code = cli.main(["hello", "--log-level", "CRITICAL"])

    assert exit_code == 1
    assert "401 - API key not valid" in capsys.readouterr().err


def test_main_reports_truncated_stream(fake_gemini, capsys):
    fake_gemini(lambda: httpx.Response(200, content=sse_body(text_chunk("Half"))))

    exit_code = cli.main(["hello", "--stream", "--log-level", "CRITICAL"])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert captured.out == "Half\n"
    assert "Stream ended before a final fragment" in captured.err


def test_setup_logging_adds_one_console_handler():
    root = logging.getLogger()
    previous_level = root.level
    setup_logging("DEBUG")
    setup_logging("INFO")
    handlers = [h for h in root.handlers if getattr(h, "_gemini_client_console", False)]
    configured_level = root.level
    for handler in handlers:
        root.removeHandler(handler)
    root.setLevel(previous_level)

    assert len(handlers) == 1
    assert configured_level == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING


def test_mask_api_key():
    assert mask_api_key("AIzaSyABCDEFGHIJ1234") == "AIza...1234 (len=20)"
    assert mask_api_key("short") == "shor...**** (len=5)"
    assert mask_api_key("") == "(empty)"
