from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .models import AggregateStats, CategoryAverages, HistoryEntry, ScoreBucket


CATEGORIES = ("clarity", "depth", "structure")
BUCKET_UPPER_BOUNDS = (0.2, 0.4, 0.6, 0.8, 1.0)


def _score_of(entry: HistoryEntry) -> float:
    return float(entry.score) if entry.score is not None else 0.0


def _category_value(entry: HistoryEntry, category: str) -> float:
    scores = entry.result.category_scores
    if scores is None:
        return 0.0
    value: Optional[float] = getattr(scores, category)
    return float(value) if value is not None else 0.0


def _empty_buckets() -> List[ScoreBucket]:
    buckets: List[ScoreBucket] = []
    lower = 0.0
    for upper in BUCKET_UPPER_BOUNDS:
        buckets.append(ScoreBucket(label=f"{lower:.1f}-{upper:.1f}", lower=lower, upper=upper))
        lower = upper
    return buckets


def bucket_index(score: float) -> int:
    """Index of the first bucket whose upper bound is >= ``score``.

    Zero and negative scores land in the first bucket; anything above the
    last bound is clamped into the last one.
    """
    for index, upper in enumerate(BUCKET_UPPER_BOUNDS):
        if score <= upper:
            return index
    return len(BUCKET_UPPER_BOUNDS) - 1


def bucket_scores(scores: Iterable[float]) -> List[ScoreBucket]:
    buckets = _empty_buckets()
    for score in scores:
        buckets[bucket_index(score)].count += 1
    return buckets


def compute_stats(entries: Sequence[HistoryEntry]) -> AggregateStats:
    count = len(entries)
    if count == 0:
        return AggregateStats(
            count=0,
            average_score=0.0,
            best_score=0.0,
            category_averages=CategoryAverages(),
            buckets=_empty_buckets(),
        )

    scores = [_score_of(entry) for entry in entries]
    best_score = scores[0]
    for score in scores[1:]:
        if score > best_score:
            best_score = score

    category_averages = CategoryAverages(
        **{
            category: sum(_category_value(entry, category) for entry in entries) / count
            for category in CATEGORIES
        }
    )

    return AggregateStats(
        count=count,
        average_score=sum(scores) / count,
        best_score=best_score,
        category_averages=category_averages,
        buckets=bucket_scores(scores),
    )
