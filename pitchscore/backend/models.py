from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainValidator,
    StrictStr,
    field_serializer,
    field_validator,
)

from .errors import ErrorKind


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("must not be null")
    return value


def _check_number(value: Any) -> Union[int, float]:
    # JSON numbers only: bools and numeric strings are not scores.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("must be a finite number")
    return value


Number = Annotated[Union[int, float], PlainValidator(_check_number)]


class CategoryScores(BaseModel):
    clarity: Optional[Number] = None
    depth: Optional[Number] = None
    structure: Optional[Number] = None

    @field_validator("clarity", "depth", "structure", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _reject_null(value)


class EvaluationResult(BaseModel):
    score: Optional[Number] = None
    category_scores: Optional[CategoryScores] = None
    insights: Optional[List[StrictStr]] = None
    verdict: Optional[StrictStr] = None

    @field_validator("score", "category_scores", "insights", "verdict", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _reject_null(value)

    def to_payload(self) -> Dict[str, Any]:
        # Only the fields the model actually supplied.
        return self.model_dump(exclude_unset=True)


class ValidationIssue(BaseModel):
    path: str
    expected: str
    message: str


class EvaluationOutcome(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    ok: bool
    kind: Optional[ErrorKind] = None
    result: Optional[EvaluationResult] = None
    error: Optional[str] = None
    model_output: Optional[str] = None
    parsed_json: Optional[Dict[str, Any]] = None
    schema_issues: Optional[List[ValidationIssue]] = None

    @classmethod
    def success(cls, result: EvaluationResult) -> "EvaluationOutcome":
        return cls(ok=True, result=result)

    @classmethod
    def failure(cls, kind: ErrorKind, error: str, **details: Any) -> "EvaluationOutcome":
        return cls(ok=False, kind=kind, error=error, **details)

    def to_payload(self) -> Dict[str, Any]:
        if self.ok and self.result is not None:
            return {"ok": True, "result": self.result.to_payload()}

        payload: Dict[str, Any] = {"ok": False, "error": self.error or ""}
        if self.kind is not None:
            payload["kind"] = self.kind.value
        if self.model_output is not None:
            payload["modelOutput"] = self.model_output
        if self.parsed_json is not None:
            payload["parsedJSON"] = self.parsed_json
        if self.schema_issues is not None:
            payload["schemaIssues"] = [issue.model_dump() for issue in self.schema_issues]
        return payload


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    score: Optional[Number] = None
    created_at: str = Field(alias="createdAt")
    snippet: str
    transcript: str
    result: EvaluationResult

    @field_serializer("result")
    def serialize_result(self, result: EvaluationResult) -> Dict[str, Any]:
        return result.to_payload()

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class CategoryAverages(BaseModel):
    clarity: float = 0.0
    depth: float = 0.0
    structure: float = 0.0


class ScoreBucket(BaseModel):
    label: str
    lower: float
    upper: float
    count: int = 0


class AggregateStats(BaseModel):
    count: int
    average_score: float
    best_score: float
    category_averages: CategoryAverages
    buckets: List[ScoreBucket]


class EvaluateRequest(BaseModel):
    transcript: str = ""


class ThemeRequest(BaseModel):
    theme: Literal["light", "dark"]


class ThemeResponse(BaseModel):
    theme: Literal["light", "dark"]


class HistoryResponse(BaseModel):
    entries: List[Dict[str, Any]]


class StatsResponse(BaseModel):
    stats: AggregateStats
    tips: List[str]
