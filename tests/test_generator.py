"""Tests for prompt assembly, input checks and the Gemini wrapper."""
from __future__ import annotations

import pytest
from google.api_core import exceptions as google_exceptions

from dailypr.errors import AuthError, ConfigError, GenerationError
from dailypr.generator import DEFAULT_MODEL, ReportGenerator, build_prompt, load_inputs


@pytest.fixture
def genai(mocker):
    mock = mocker.patch("dailypr.generator.genai")
    mock.GenerativeModel.return_value.generate_content.return_value.text = "# Daily report"
    return mock


class TestBuildPrompt:
    def test_template_then_data(self):
        prompt = build_prompt("Summarize.", '{"totalPRs": 0}')
        assert prompt == (
            "Summarize.\n\n---\n\nHere is the JSON data to transform into a report:\n\n"
            '{"totalPRs": 0}'
        )


class TestLoadInputs:
    def test_reads_both_files(self, tmp_path):
        report = tmp_path / "pr-report.json"
        prompt = tmp_path / "prompt.md"
        report.write_text('{"totalPRs": 0}')
        prompt.write_text("Summarize.")
        assert load_inputs(report, prompt) == ("Summarize.", '{"totalPRs": 0}')

    def test_missing_report(self, tmp_path):
        prompt = tmp_path / "prompt.md"
        prompt.write_text("Summarize.")
        with pytest.raises(ConfigError, match="collect"):
            load_inputs(tmp_path / "pr-report.json", prompt)

    def test_missing_prompt(self, tmp_path):
        report = tmp_path / "pr-report.json"
        report.write_text("{}")
        with pytest.raises(ConfigError, match="prompt.md"):
            load_inputs(report, tmp_path / "prompt.md")

    def test_invalid_json(self, tmp_path):
        report = tmp_path / "pr-report.json"
        prompt = tmp_path / "prompt.md"
        report.write_text("{not json")
        prompt.write_text("Summarize.")
        with pytest.raises(ConfigError, match="not valid JSON"):
            load_inputs(report, prompt)


class TestReportGenerator:
    def test_configures_api_key(self, genai):
        ReportGenerator("key-123")
        genai.configure.assert_called_once_with(api_key="key-123")

    def test_generate_returns_text(self, genai):
        assert ReportGenerator("key").generate("prompt") == "# Daily report"
        genai.GenerativeModel.assert_called_once_with(model_name=DEFAULT_MODEL)
        genai.GenerativeModel.return_value.generate_content.assert_called_once_with("prompt")

    def test_custom_model(self, genai):
        ReportGenerator("key", "models/gemini-2.5-pro").generate("prompt")
        genai.GenerativeModel.assert_called_once_with(model_name="models/gemini-2.5-pro")

    def test_unauthenticated_raises_auth_error(self, genai):
        genai.GenerativeModel.return_value.generate_content.side_effect = google_exceptions.Unauthenticated("bad")
        with pytest.raises(AuthError, match="GOOGLE_API_KEY"):
            ReportGenerator("key").generate("prompt")

    def test_invalid_api_key_raises_auth_error(self, genai):
        genai.GenerativeModel.return_value.generate_content.side_effect = google_exceptions.InvalidArgument(
            "API key not valid. Please pass a valid API key."
        )
        with pytest.raises(AuthError):
            ReportGenerator("key").generate("prompt")

    def test_other_invalid_argument_raises_generation_error(self, genai):
        genai.GenerativeModel.return_value.generate_content.side_effect = google_exceptions.InvalidArgument(
            "prompt too long"
        )
        with pytest.raises(GenerationError):
            ReportGenerator("key").generate("prompt")

    def test_server_error_raises_generation_error(self, genai):
        genai.GenerativeModel.return_value.generate_content.side_effect = google_exceptions.InternalServerError(
            "oops"
        )
        with pytest.raises(GenerationError):
            ReportGenerator("key").generate("prompt")

    def test_empty_text_raises(self, genai):
        genai.GenerativeModel.return_value.generate_content.return_value.text = "  "
        with pytest.raises(GenerationError, match="empty"):
            ReportGenerator("key").generate("prompt")

    def test_list_models(self, genai):
        genai.list_models.return_value = iter(["m1", "m2"])
        assert list(ReportGenerator("key").list_models()) == ["m1", "m2"]
