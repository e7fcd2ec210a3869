from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from .errors import AuthError, ConfigError, GenerationError

DEFAULT_MODEL = "models/gemini-2.5-flash"

_DATA_SEPARATOR = "\n\n---\n\nHere is the JSON data to transform into a report:\n\n"


def build_prompt(template: str, report_json: str) -> str:
    return f"{template}{_DATA_SEPARATOR}{report_json}"


def load_inputs(report_path: Path, prompt_path: Path) -> tuple[str, str]:
    """Read the prompt template and the serialized report, failing before any network call."""
    if not report_path.exists():
        raise ConfigError(f"{report_path} not found. Run `dailypr collect` first.")
    if not prompt_path.exists():
        raise ConfigError(f"{prompt_path} not found.")

    report_json = report_path.read_text(encoding="utf-8")
    try:
        json.loads(report_json)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{report_path} is not valid JSON: {exc}") from exc
    return prompt_path.read_text(encoding="utf-8"), report_json


class ReportGenerator:
    def __init__(self, api_key: str, model_name: str = DEFAULT_MODEL) -> None:
        genai.configure(api_key=api_key)
        self.model_name = model_name

    def generate(self, prompt: str) -> str:
        model = genai.GenerativeModel(model_name=self.model_name)
        try:
            response = model.generate_content(prompt)
            text = response.text
        except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied) as exc:
            raise AuthError(f"{exc}. Please check your GOOGLE_API_KEY is valid.") from exc
        except google_exceptions.InvalidArgument as exc:
            if "API key" in str(exc):
                raise AuthError(f"{exc}. Please check your GOOGLE_API_KEY is valid.") from exc
            raise GenerationError(str(exc)) from exc
        except google_exceptions.GoogleAPIError as exc:
            raise GenerationError(str(exc)) from exc
        except ValueError as exc:
            # response.text raises when the candidate was blocked or empty
            raise GenerationError(f"Model returned no text: {exc}") from exc

        if not text or not text.strip():
            raise GenerationError("Model returned an empty report.")
        return text

    def list_models(self) -> Iterator[Any]:
        try:
            yield from genai.list_models()
        except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied) as exc:
            raise AuthError(f"{exc}. Please check your GOOGLE_API_KEY is valid.") from exc
        except google_exceptions.GoogleAPIError as exc:
            raise GenerationError(str(exc)) from exc
