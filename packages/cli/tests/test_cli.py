"""Tests for the CLI entry point."""

import json

import yaml
from click.testing import CliRunner

from codementor_cli.cli import main
from codementor_cli.commands.review import _line_cell
from codementor_core.models import ChatResponse, CodeIssue, ReviewResult


def _make_config(provider="gemini", api_key="key", language="go"):
    return {
        "provider": provider,
        "model": None,
        "max_tokens": 4000,
        "temperature": 0.3,
        "timeout": 30,
        "language": language,
        "api_key": api_key,
    }


def _patch_common(mocker, config=None):
    """Patch load_config and MentorService for most tests."""
    cfg = config or _make_config()
    mocker.patch("codementor_core.config.load_config", return_value=cfg)
    mock_service_cls = mocker.patch("codementor_cli.common.MentorService")
    return cfg, mock_service_cls


def _solution(tmp_path, name="two_sum.go", code="package main\n"):
    path = tmp_path / name
    path.write_text(code)
    return path


class TestCLIValidation:
    def test_missing_gemini_key(self, mocker, tmp_path):
        _patch_common(mocker, config=_make_config(api_key=None))

        result = CliRunner().invoke(main, ["review", str(_solution(tmp_path))])
        assert result.exit_code != 0
        assert "GEMINI_API_KEY" in result.output

    def test_missing_claude_key(self, mocker, tmp_path):
        _patch_common(mocker, config=_make_config(provider="claude", api_key=None))

        result = CliRunner().invoke(main, ["hint", str(_solution(tmp_path))])
        assert result.exit_code != 0
        assert "CLAUDE_API_KEY" in result.output

    def test_unreadable_file(self, mocker, tmp_path):
        _patch_common(mocker)

        result = CliRunner().invoke(main, ["review", str(tmp_path / "missing.go")])
        assert result.exit_code == 2
        assert "cannot read" in result.output

    def test_provider_flag_is_passed_to_config(self, mocker, tmp_path):
        cfg, _ = _patch_common(mocker)
        load = mocker.patch("codementor_core.config.load_config", return_value=cfg)

        CliRunner().invoke(main, ["--provider", "openai", "--model", "gpt-4o", "normalize", "--kind", "text"], input="x")

        overrides = load.call_args.kwargs["cli_overrides"]
        assert overrides == {"provider": "openai", "model": "gpt-4o"}

    def test_invalid_provider_rejected(self):
        result = CliRunner().invoke(main, ["--provider", "llama", "normalize"])
        assert result.exit_code == 2


class TestReviewCommand:
    def test_json_output(self, mocker, tmp_path):
        _, mock_service_cls = _patch_common(mocker)
        service = mock_service_cls.return_value
        service.review_code.return_value = ReviewResult(overall_score=77, interviewer_feedback="Decent")

        result = CliRunner().invoke(main, ["review", str(_solution(tmp_path)), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["overall_score"] == 77
        assert data["interviewer_feedback"] == "Decent"

    def test_challenge_defaults_to_file_name(self, mocker, tmp_path):
        _, mock_service_cls = _patch_common(mocker)
        service = mock_service_cls.return_value
        service.review_code.return_value = ReviewResult()

        CliRunner().invoke(main, ["review", str(_solution(tmp_path)), "--context", "use a map"])

        code, challenge, context = service.review_code.call_args.args
        assert code == "package main\n"
        assert challenge.title == "two sum"
        assert context == "use a map"

    def test_challenge_flag_wins(self, mocker, tmp_path):
        _, mock_service_cls = _patch_common(mocker)
        service = mock_service_cls.return_value
        service.review_code.return_value = ReviewResult()

        CliRunner().invoke(main, ["review", str(_solution(tmp_path)), "--challenge", "Two Sum II"])

        assert service.review_code.call_args.args[1].title == "Two Sum II"

    def test_language_detected_from_extension(self, mocker, tmp_path):
        _, mock_service_cls = _patch_common(mocker)
        mock_service_cls.return_value.review_code.return_value = ReviewResult()

        CliRunner().invoke(main, ["review", str(_solution(tmp_path, "solve.py", "pass\n"))])

        assert mock_service_cls.call_args.args[0]["language"] == "python"

    def test_reads_stdin(self, mocker):
        _, mock_service_cls = _patch_common(mocker)
        service = mock_service_cls.return_value
        service.review_code.return_value = ReviewResult()

        CliRunner().invoke(main, ["review", "-"], input="func main() {}")

        code, challenge, _ = service.review_code.call_args.args
        assert code == "func main() {}"
        assert challenge is None
        assert mock_service_cls.call_args.args[0]["language"] == "go"

    def test_table_output(self, mocker, tmp_path):
        _, mock_service_cls = _patch_common(mocker)
        mock_service_cls.return_value.review_code.return_value = ReviewResult(
            overall_score=64,
            issues=[CodeIssue("bug", "high", "Index out of [range]", "Check len first", 9)],
            interviewer_feedback="Close, but [bold]check bounds[/bold].",
            follow_up_questions=["What if nums is empty?"],
        )

        result = CliRunner().invoke(main, ["review", str(_solution(tmp_path))])

        assert result.exit_code == 0, result.output
        assert "64/100" in result.output
        assert "[bold]check bounds[/bold]" in result.output
        assert "Issues" in result.output
        assert "What if nums is empty?" in result.output

    def test_line_cell(self):
        assert _line_cell(0) == "0"
        assert _line_cell(12) == "12"
        assert _line_cell(None) == "—"


class TestQuestionsCommand:
    def test_prints_numbered_questions(self, mocker, tmp_path):
        _, mock_service_cls = _patch_common(mocker)
        service = mock_service_cls.return_value
        service.interviewer_questions.return_value = ["Why a map?", "What about [duplicates]?"]

        result = CliRunner().invoke(main, ["questions", str(_solution(tmp_path)), "--progress", "all tests pass"])

        assert result.exit_code == 0, result.output
        assert "1. Why a map?" in result.output
        assert "2. What about [duplicates]?" in result.output
        assert service.interviewer_questions.call_args.args[2] == "all tests pass"


class TestHintCommand:
    def test_passes_level_and_context(self, mocker, tmp_path):
        _, mock_service_cls = _patch_common(mocker)
        service = mock_service_cls.return_value
        service.code_hint.return_value = "Think about what you have already seen."

        result = CliRunner().invoke(main, ["hint", str(_solution(tmp_path)), "--level", "3", "--context", "Gin"])

        assert result.exit_code == 0, result.output
        assert "Think about what you have already seen." in result.output
        assert "level 3/4" in result.output
        _, _, level, context = service.code_hint.call_args.args
        assert level == 3
        assert context == "Gin"

    def test_level_out_of_range(self, mocker, tmp_path):
        _patch_common(mocker)

        result = CliRunner().invoke(main, ["hint", str(_solution(tmp_path)), "--level", "5"])
        assert result.exit_code == 2


def _reply(message="Slices share their backing array.", success=True, error=""):
    return ChatResponse(message=message, success=success, timestamp="2026-01-01T00:00:00+00:00", error=error)


class TestChatCommand:
    def test_one_shot_message(self, mocker):
        _, mock_service_cls = _patch_common(mocker)
        service = mock_service_cls.return_value
        service.chat.return_value = _reply()

        result = CliRunner().invoke(main, ["chat", "-m", "What is a slice?", "--challenge", "Two Sum"])

        assert result.exit_code == 0, result.output
        assert "Slices share their backing array." in result.output
        message, challenge, history, code_context = service.chat.call_args.args
        assert message == "What is a slice?"
        assert challenge.title == "Two Sum"
        assert list(history) == []
        assert code_context == ""

    def test_code_file_is_shared(self, mocker, tmp_path):
        _, mock_service_cls = _patch_common(mocker)
        service = mock_service_cls.return_value
        service.chat.return_value = _reply()

        CliRunner().invoke(main, ["chat", "--code", str(_solution(tmp_path)), "-m", "Is this right?"])

        assert service.chat.call_args.args[3] == "package main\n"

    def test_failure_is_shown(self, mocker):
        _, mock_service_cls = _patch_common(mocker)
        mock_service_cls.return_value.chat.return_value = _reply("Trouble connecting.", success=False, error="down")

        result = CliRunner().invoke(main, ["chat", "-m", "hi"])

        assert "Trouble connecting." in result.output
        assert "down" in result.output

    def test_interactive_session_keeps_history(self, mocker):
        _, mock_service_cls = _patch_common(mocker)
        history_sizes = []

        def _chat(message, challenge, history, code_context):
            history_sizes.append(len(history))
            return _reply()

        mock_service_cls.return_value.chat.side_effect = _chat

        result = CliRunner().invoke(main, ["chat"], input="first\nsecond\nexit\n")

        assert result.exit_code == 0, result.output
        assert history_sizes == [0, 2]

    def test_interactive_session_ends_on_eof(self, mocker):
        _, mock_service_cls = _patch_common(mocker)
        mock_service_cls.return_value.chat.return_value = _reply()

        result = CliRunner().invoke(main, ["chat"], input="only question\n")

        assert result.exit_code == 0, result.output
        assert mock_service_cls.return_value.chat.call_count == 1


class TestNormalizeCommand:
    def test_review_from_stdin(self, mocker):
        _patch_common(mocker, config=_make_config(api_key=None))

        result = CliRunner().invoke(main, ["normalize"], input='```json\n{"overall_score": 81}\n```')

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["overall_score"] == 81

    def test_truncated_review_from_file(self, mocker, tmp_path):
        _patch_common(mocker, config=_make_config(api_key=None))
        raw = tmp_path / "reply.txt"
        raw.write_text('{"overall_score": 60, "issues": [{"type":"bug","severity":"high","description":"leak"')

        result = CliRunner().invoke(main, ["normalize", str(raw)])

        data = json.loads(result.output)
        assert data["overall_score"] == 60
        assert data["issues"][0]["type"] == "parsing"

    def test_questions(self, mocker):
        _patch_common(mocker, config=_make_config(api_key=None))

        result = CliRunner().invoke(main, ["normalize", "--kind", "questions"], input='Sure: ["A?", "B?"]')

        assert json.loads(result.output) == ["A?", "B?"]

    def test_text(self, mocker):
        _patch_common(mocker, config=_make_config(api_key=None))

        result = CliRunner().invoke(main, ["normalize", "--kind", "text"], input="```\nUse two pointers.\n```")

        assert result.output.strip() == "Use two pointers."


class TestInitCommand:
    def test_writes_config(self, mocker, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _patch_common(mocker, config=_make_config(api_key=None))
        mocker.patch("codementor_cli.commands.init.resolve_api_key", return_value=None)

        result = CliRunner().invoke(main, ["init"], input="openai\ngpt-4o\npython\n")

        assert result.exit_code == 0, result.output
        written = yaml.safe_load((tmp_path / ".codementor.yml").read_text())
        assert written == {"provider": "openai", "language": "python", "model": "gpt-4o"}
        assert "OPENAI_API_KEY" in result.output

    def test_blank_model_is_omitted(self, mocker, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _patch_common(mocker, config=_make_config(api_key=None))
        mocker.patch("codementor_cli.commands.init.resolve_api_key", return_value="key")

        result = CliRunner().invoke(main, ["init"], input="claude\n\ngo\n")

        written = yaml.safe_load((tmp_path / ".codementor.yml").read_text())
        assert "model" not in written
        assert written["provider"] == "claude"
        assert "API key found" in result.output

    def test_preserves_existing_keys(self, mocker, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".codementor.yml").write_text("timeout: 60\nprovider: gemini\n")
        _patch_common(mocker, config=_make_config(api_key=None))
        mocker.patch("codementor_cli.commands.init.resolve_api_key", return_value=None)

        CliRunner().invoke(main, ["init"], input="openai\n\ngo\n")

        written = yaml.safe_load((tmp_path / ".codementor.yml").read_text())
        assert written["timeout"] == 60
        assert written["provider"] == "openai"

    def test_uses_config_path_option(self, mocker, tmp_path):
        _patch_common(mocker, config=_make_config(api_key=None))
        mocker.patch("codementor_cli.commands.init.resolve_api_key", return_value=None)
        target = tmp_path / "custom.yml"

        CliRunner().invoke(main, ["--config", str(target), "init"], input="gemini\n\ngo\n")

        assert yaml.safe_load(target.read_text())["provider"] == "gemini"
