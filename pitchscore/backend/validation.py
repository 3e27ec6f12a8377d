from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from pydantic import ValidationError

from .models import EvaluationResult, ValidationIssue


ROOT_PATH = "(root)"
EXPECTED_KINDS = {
    ROOT_PATH: "object",
    "score": "number",
    "category_scores": "object",
    "category_scores.clarity": "number",
    "category_scores.depth": "number",
    "category_scores.structure": "number",
    "insights": "array",
    "insights.*": "string",
    "verdict": "string",
}


@dataclass
class ValidationOutcome:
    result: Optional[EvaluationResult] = None
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.result is not None and not self.issues


def _format_path(loc: Sequence[Union[int, str]]) -> str:
    if not loc:
        return ROOT_PATH
    return ".".join(str(part) for part in loc)


def _expected_kind(loc: Sequence[Union[int, str]]) -> str:
    if not loc:
        return EXPECTED_KINDS[ROOT_PATH]
    key = ".".join("*" if isinstance(part, int) else str(part) for part in loc)
    return EXPECTED_KINDS.get(key, "unknown")


def validate_result(payload: Any) -> ValidationOutcome:
    """Check a parsed model reply against the evaluation schema.

    Every field is optional; only a present field of the wrong kind is a
    violation. The payload itself is never modified.
    """
    try:
        result = EvaluationResult.model_validate(payload)
    except ValidationError as exc:
        issues = [
            ValidationIssue(
                path=_format_path(error["loc"]),
                expected=_expected_kind(error["loc"]),
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        return ValidationOutcome(issues=issues)
    return ValidationOutcome(result=result)
