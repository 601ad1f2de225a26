"""CLI entrypoint and action handlers, with backends mocked out."""

from __future__ import annotations

import json

import httpx
import pytest

from answer_relay.service.answer_service import AnswerService
from answer_relay.service.cli import main
from answer_relay.service.cli.cli_actions import handle_solve, handle_verify, parse_option_images
from answer_relay.service.cli.cli_parser import build_parser
from answer_relay.service.cli.cli_utils import parse_verbosity


def _service(responder):
    client = httpx.AsyncClient(transport=httpx.MockTransport(responder))
    return AnswerService(http_client=client)


def _gemini_ok(request):
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "A: 4"}]}}]})


def test_solve_missing_key_exits_nonzero(capsys):
    code = main(["solve", "--question", "What is 2+2?"])

    captured = capsys.readouterr()
    assert code == 1  # nosec B101
    assert "error (auth)" in captured.err  # nosec B101
    assert "API key" in captured.err  # nosec B101


def test_solve_prints_answer(capsys):
    args = build_parser().parse_args(["solve", "--question", "What is 2+2?", "--key", "AIzaSy-test-key-0001"])

    code = handle_solve(args, service=_service(_gemini_ok))

    assert code == 0  # nosec B101
    assert capsys.readouterr().out.strip() == "A: 4"  # nosec B101


def test_solve_json_output_and_env_key(monkeypatch, capsys):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env-key-0001")
    seen = []

    def _respond(request):
        seen.append(request.headers["authorization"])
        return httpx.Response(200, json={"choices": [{"message": {"content": "B) 4"}}]})

    args = build_parser().parse_args(["solve", "--question", "2+2", "--provider", "chatgpt", "--json"])

    code = handle_solve(args, service=_service(_respond))

    assert code == 0  # nosec B101
    assert json.loads(capsys.readouterr().out) == {"success": True, "result": {"text": "B: 4", "mode": "qa"}}  # nosec B101
    assert seen == ["Bearer sk-env-key-0001"]  # nosec B101


def test_solve_with_option_images_puts_urls_in_prompt(capsys):
    bodies = []

    def _respond(request):
        bodies.append(json.loads(request.content))
        return _gemini_ok(request)

    args = build_parser().parse_args(
        [
            "solve",
            "--question",
            "",
            "--key",
            "AIzaSy-test-key-0001",
            "--question-image",
            "https://img.test/q.png",
            "--option-image",
            "A=https://img.test/a.png",
        ]
    )

    assert handle_solve(args, service=_service(_respond)) == 0  # nosec B101
    prompt = bodies[0]["contents"][0]["parts"][0]["text"]
    assert "A: https://img.test/a.png" in prompt  # nosec B101


def test_malformed_option_image_is_rejected(capsys):
    args = build_parser().parse_args(["solve", "--question", "q", "--option-image", "no-equals-sign"])

    assert handle_solve(args) == 1  # nosec B101
    assert "format_mismatch" in capsys.readouterr().err  # nosec B101


def test_parse_option_images():
    assert parse_option_images(["A=https://x/a.png", " 2 = https://x/2.png "]) == [  # nosec B101
        {"option": "A", "src": "https://x/a.png"},
        {"option": "2", "src": "https://x/2.png"},
    ]
    with pytest.raises(ValueError):
        parse_option_images(["=https://x"])


@pytest.mark.parametrize("status,expected_code,expected_out", [(200, 0, "ok"), (401, 1, "failed")])
def test_verify(capsys, status, expected_code, expected_out):
    def _respond(request):
        if status != 200:
            return httpx.Response(status)
        return _gemini_ok(request)

    args = build_parser().parse_args(["verify", "--key", "AIzaSy-test-key-0001"])

    assert handle_verify(args, service=_service(_respond)) == expected_code  # nosec B101
    assert capsys.readouterr().out.strip() == expected_out  # nosec B101


def test_no_command_prints_help(capsys):
    assert main([]) == 2  # nosec B101
    assert "usage" in capsys.readouterr().out  # nosec B101


def test_unknown_log_level_is_a_usage_error():
    with pytest.raises(SystemExit):
        main(["--log-level", "shouty", "solve", "--question", "q"])


def test_parse_verbosity_synonyms():
    assert parse_verbosity("verbose") == "DEBUG"  # nosec B101
    assert parse_verbosity("Quiet") == "ERROR"  # nosec B101
    assert parse_verbosity("nope") is None  # nosec B101
