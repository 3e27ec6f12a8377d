from __future__ import annotations

import logging
import os
from typing import Any, Optional

from openai import APIConnectionError, APIError, APIStatusError, APITimeoutError, OpenAI

from .constants import MAX_ERROR_CHARS, MAX_OUTPUT_TOKENS
from .errors import InvocationError
from .prompts.evaluation import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE


logger = logging.getLogger("uvicorn.error")
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
MARKDOWN_FENCE = "```"


def truncate_text(text: str, max_chars: int = MAX_ERROR_CHARS) -> str:
    value = (text or "").strip()
    if len(value) <= max_chars:
        return value
    return value[: max_chars - 3] + "..."


def build_evaluation_prompt(transcript: str) -> str:
    # A fence inside the transcript would close the delimiter block early.
    safe_transcript = (transcript or "").replace(MARKDOWN_FENCE, "'")
    return SYSTEM_PROMPT + USER_PROMPT_TEMPLATE.replace("{transcript}", safe_transcript)


def _get_api_key() -> str:
    api_key = os.getenv("OPENROUTER_API_KEY", "").strip()
    if not api_key:
        raise RuntimeError(
            "Missing OPENROUTER_API_KEY. Set it before calling /api/evaluate "
            '(example: export OPENROUTER_API_KEY="YOUR_KEY_HERE").'
        )
    return api_key


def _get_model() -> str:
    model = os.getenv("AI_MODEL", "").strip()
    if not model:
        raise RuntimeError(
            "Missing AI_MODEL. Set it to the model identifier before calling /api/evaluate."
        )
    return model


def _get_timeout() -> Optional[float]:
    raw = os.getenv("OPENROUTER_TIMEOUT_SECONDS", "").strip()
    if not raw:
        return None
    return float(raw)


def _build_client() -> OpenAI:
    base_url = os.getenv("OPENROUTER_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL
    kwargs: dict[str, Any] = {
        "base_url": base_url,
        "api_key": _get_api_key(),
        "max_retries": 0,
    }
    timeout = _get_timeout()
    if timeout is not None:
        kwargs["timeout"] = timeout
    return OpenAI(**kwargs)


def _extract_content(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts: list[str] = []
        for item in value:
            if isinstance(item, dict):
                text = item.get("text")
                if text:
                    parts.append(str(text))
        return "\n".join(parts).strip()
    return str(value or "").strip()


class ModelInvoker:
    """Sends one prompt to the configured chat-completions backend.

    Sampling is deterministic and the output is capped, so the same prompt
    should produce the same reply on a well-behaved provider. Failures are
    raised as :class:`InvocationError`; nothing is retried.
    """

    def __init__(self, client: Optional[OpenAI] = None, model: Optional[str] = None) -> None:
        self._client = client
        self._model = model

    def invoke(self, prompt: str) -> str:
        client = self._client or _build_client()
        model = self._model or _get_model()

        try:
            response = client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0,
                max_tokens=MAX_OUTPUT_TOKENS,
            )
        except APIStatusError as exc:
            status_code = getattr(exc, "status_code", None)
            detail = truncate_text(getattr(exc, "message", None) or str(exc))
            if status_code is not None:
                raise InvocationError(f"LLM request failed ({status_code}): {detail}") from exc
            raise InvocationError(f"LLM request failed: {detail}") from exc
        except APITimeoutError as exc:
            raise InvocationError("LLM request timed out.") from exc
        except APIConnectionError as exc:
            raise InvocationError(f"Failed to connect to LLM provider: {exc}") from exc
        except APIError as exc:
            raise InvocationError(f"Unexpected LLM error: {truncate_text(str(exc))}") from exc

        choice = response.choices[0] if response.choices else None
        if choice is None:
            raise InvocationError("LLM response did not contain choices.")

        message = getattr(choice, "message", None)
        if message is None:
            raise InvocationError("LLM response choice had no message.")

        content = _extract_content(message.content)
        if not content:
            raise InvocationError("LLM returned empty assistant content.")
        logger.debug("model=%s evaluation_raw_output=%r", model, content)
        return content
