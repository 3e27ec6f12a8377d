import pytest

from pitchscore.backend.validation import validate_result


def _paths(outcome):
    return [issue.path for issue in outcome.issues]


def test_empty_object_is_valid():
    outcome = validate_result({})
    assert outcome.ok
    assert outcome.result.to_payload() == {}


def test_full_object_is_returned_unchanged_in_shape():
    payload = {
        "score": 0.75,
        "category_scores": {"clarity": 0.8, "depth": 0.6, "structure": 0.9},
        "insights": ["Good energy"],
        "verdict": "Strong pitch",
    }
    outcome = validate_result(payload)
    assert outcome.ok
    assert outcome.result.to_payload() == payload


def test_partial_category_scores_are_accepted():
    outcome = validate_result({"category_scores": {"depth": 1}})
    assert outcome.ok
    assert outcome.result.to_payload() == {"category_scores": {"depth": 1}}


def test_integer_score_is_numeric():
    assert validate_result({"score": 1}).ok


def test_integer_score_keeps_its_type():
    outcome = validate_result({"score": 1, "category_scores": {"depth": 0}})
    payload = outcome.result.to_payload()
    assert type(payload["score"]) is int
    assert type(payload["category_scores"]["depth"]) is int


@pytest.mark.parametrize("value", [True, False])
def test_boolean_score_is_rejected(value):
    outcome = validate_result({"score": value})
    assert _paths(outcome) == ["score"]
    assert outcome.issues[0].expected == "number"


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_score_is_rejected(value):
    outcome = validate_result({"score": value, "category_scores": {"clarity": value}})
    assert sorted(_paths(outcome)) == ["category_scores.clarity", "score"]


def test_string_score_is_rejected():
    outcome = validate_result({"score": "high"})
    assert not outcome.ok
    assert _paths(outcome) == ["score"]
    assert outcome.issues[0].expected == "number"


def test_numeric_string_is_not_coerced():
    outcome = validate_result({"score": "0.5"})
    assert _paths(outcome) == ["score"]


def test_null_field_is_a_violation():
    outcome = validate_result({"verdict": None})
    assert _paths(outcome) == ["verdict"]
    assert outcome.issues[0].expected == "string"


def test_nested_category_violation_reports_dotted_path():
    outcome = validate_result({"category_scores": {"clarity": "good", "depth": 0.4}})
    assert _paths(outcome) == ["category_scores.clarity"]
    assert outcome.issues[0].expected == "number"


def test_category_scores_must_be_an_object():
    outcome = validate_result({"category_scores": [0.1, 0.2]})
    assert _paths(outcome) == ["category_scores"]
    assert outcome.issues[0].expected == "object"


def test_insight_items_must_be_strings():
    outcome = validate_result({"insights": ["fine", 3]})
    assert _paths(outcome) == ["insights.1"]
    assert outcome.issues[0].expected == "string"


def test_insights_must_be_a_list():
    outcome = validate_result({"insights": "just one"})
    assert _paths(outcome) == ["insights"]
    assert outcome.issues[0].expected == "array"


def test_multiple_violations_are_all_reported():
    outcome = validate_result({"score": "x", "verdict": 5})
    assert sorted(_paths(outcome)) == ["score", "verdict"]


def test_unknown_keys_are_dropped():
    outcome = validate_result({"score": 0.1, "extra": True})
    assert outcome.ok
    assert outcome.result.to_payload() == {"score": 0.1}


def test_input_is_not_mutated():
    payload = {"score": "high", "insights": ["a"]}
    validate_result(payload)
    assert payload == {"score": "high", "insights": ["a"]}
