from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from .constants import DEFAULT_SESSION_ID
from .errors import ErrorKind, InvocationError
from .extraction import extract_json_object
from .llm_client import ModelInvoker, build_evaluation_prompt, truncate_text
from .models import EvaluationOutcome
from .prompts.evaluation import EVALUATION_VERSION
from .validation import validate_result


logger = logging.getLogger("uvicorn.error")

EXTRACTION_FAILED_MESSAGE = "Failed to parse JSON from model."
VALIDATION_FAILED_MESSAGE = "Schema validation failed"
BUSY_MESSAGE = "An evaluation is already running for this session."



class EvaluationService:
    """Runs prompt -> model -> extraction -> validation for one transcript.

    Each call is independent; the only state kept between calls is the set
    of sessions with an evaluation in flight, so a session can never have
    two requests outstanding at once.
    """

    def __init__(self, invoker: Optional[ModelInvoker] = None) -> None:
        self._invoker = invoker or ModelInvoker()
        self._active_sessions_lock = threading.Lock()
        self._active_sessions: set[str] = set()

    def is_running(self, session_id: str = DEFAULT_SESSION_ID) -> bool:
        with self._active_sessions_lock:
            return session_id in self._active_sessions

    def evaluate(self, transcript: str, session_id: str = DEFAULT_SESSION_ID) -> EvaluationOutcome:
        with self._active_sessions_lock:
            if session_id in self._active_sessions:
                logger.info("session_id=%s evaluation_already_running", session_id)
                return EvaluationOutcome.failure(ErrorKind.BUSY, BUSY_MESSAGE)
            self._active_sessions.add(session_id)

        start_ts = time.monotonic()
        try:
            return self._run(transcript, session_id)
        finally:
            elapsed_ms = int((time.monotonic() - start_ts) * 1000)
            with self._active_sessions_lock:
                self._active_sessions.discard(session_id)
            logger.info("session_id=%s evaluation_finished elapsed_ms=%s", session_id, elapsed_ms)

    def _run(self, transcript: str, session_id: str) -> EvaluationOutcome:
        prompt = build_evaluation_prompt(transcript)

        try:
            raw_output = self._invoker.invoke(prompt)
        except InvocationError as exc:
            message = truncate_text(str(exc))
            logger.warning("session_id=%s evaluation_invocation_failed error=%s", session_id, message)
            return EvaluationOutcome.failure(ErrorKind.INVOCATION, message)

        parsed = extract_json_object(raw_output)
        logger.debug("session_id=%s evaluation_parsed_json=%r", session_id, parsed)
        if parsed is None:
            logger.warning(
                "session_id=%s evaluation_extraction_failed output_chars=%s",
                session_id,
                len(raw_output),
            )
            return EvaluationOutcome.failure(
                ErrorKind.EXTRACTION,
                EXTRACTION_FAILED_MESSAGE,
                model_output=raw_output,
            )

        validation = validate_result(parsed)
        if not validation.ok:
            logger.warning(
                "session_id=%s evaluation_validation_failed issues=%s",
                session_id,
                [issue.path for issue in validation.issues],
            )
            return EvaluationOutcome.failure(
                ErrorKind.VALIDATION,
                VALIDATION_FAILED_MESSAGE,
                model_output=raw_output,
                parsed_json=parsed,
                schema_issues=validation.issues,
            )

        logger.info(
            "session_id=%s evaluation_done version=%s score=%s",
            session_id,
            EVALUATION_VERSION,
            validation.result.score,
        )
        return EvaluationOutcome.success(validation.result)
