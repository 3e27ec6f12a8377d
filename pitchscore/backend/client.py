from __future__ import annotations

import json
from typing import Any, Dict, Optional

import httpx

from .errors import TransportError


DEFAULT_API_BASE = "http://127.0.0.1:8000"
EVALUATE_PATH = "/api/evaluate"


class EvaluationClient:
    """Calls the evaluation endpoint and hands back its JSON payload.

    Failure payloads (``ok: false``) are returned to the caller untouched so
    they can show the model output and schema issues. Only a broken round
    trip raises :class:`TransportError`.
    """

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def evaluate(self, transcript: str) -> Dict[str, Any]:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    f"{self._api_base}{EVALUATE_PATH}",
                    json={"transcript": transcript},
                )
        except httpx.HTTPError as exc:
            raise TransportError(str(exc)) from exc

        try:
            payload = response.json()
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"Evaluation endpoint returned a non-JSON response ({response.status_code})."
            ) from exc

        if not isinstance(payload, dict) or "ok" not in payload:
            raise TransportError(f"Unexpected response from evaluation endpoint ({response.status_code}).")
        return payload
