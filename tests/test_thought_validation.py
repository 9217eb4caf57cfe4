import pytest

from dialectic.session import (
    InvalidContent,
    InvalidContinuationFlag,
    InvalidRole,
    InvalidTotalTurns,
    InvalidTurnIndex,
    Role,
    ThoughtValidationError,
    TotalTurnsMustBeOdd,
    TotalTurnsTooSmall,
    validate_thought,
)


def _with(payload, **changes):
    data = dict(payload)
    data.update(changes)
    return data


def test_valid_payload_builds_thought(first_turn):
    thought = validate_thought(_with(first_turn, evidence=["benchmarks", 42]))

    assert thought.content == "x"
    assert thought.role is Role.PERFORMER
    assert thought.turn_index == 1
    assert thought.total_turns_planned == 3
    assert thought.continuation_requested is True
    assert thought.evidence == ("benchmarks", "42")
    assert thought.assumptions is None
    assert thought.standards_applied is None


@pytest.mark.parametrize(
    "changes, error",
    [
        ({"content": ""}, InvalidContent),
        ({"content": 12}, InvalidContent),
        ({"content": None}, InvalidContent),
        ({"role": "referee"}, InvalidRole),
        ({"role": "actor"}, InvalidRole),
        ({"role": None}, InvalidRole),
        ({"continuationRequested": "yes"}, InvalidContinuationFlag),
        ({"continuationRequested": 1}, InvalidContinuationFlag),
        ({"turnIndex": 0}, InvalidTurnIndex),
        ({"turnIndex": "1"}, InvalidTurnIndex),
        ({"turnIndex": True}, InvalidTurnIndex),
        ({"turnIndex": float("nan")}, InvalidTurnIndex),
        ({"totalTurnsPlanned": 0}, InvalidTotalTurns),
        ({"totalTurnsPlanned": "5"}, InvalidTotalTurns),
        ({"totalTurnsPlanned": float("inf")}, InvalidTotalTurns),
        ({"totalTurnsPlanned": 2}, TotalTurnsTooSmall),
        ({"totalTurnsPlanned": 1}, TotalTurnsTooSmall),
        ({"totalTurnsPlanned": -5}, TotalTurnsTooSmall),
        ({"totalTurnsPlanned": 4}, TotalTurnsMustBeOdd),
        ({"totalTurnsPlanned": 10}, TotalTurnsMustBeOdd),
    ],
)
def test_each_check_reports_its_own_kind(first_turn, changes, error):
    with pytest.raises(error) as excinfo:
        validate_thought(_with(first_turn, **changes))

    assert excinfo.value.kind == error.__name__
    assert isinstance(excinfo.value, ThoughtValidationError)


def test_missing_fields_fail_in_check_order(first_turn):
    for field_name, error in [
        ("content", InvalidContent),
        ("role", InvalidRole),
        ("continuationRequested", InvalidContinuationFlag),
        ("turnIndex", InvalidTurnIndex),
        ("totalTurnsPlanned", InvalidTotalTurns),
    ]:
        payload = dict(first_turn)
        del payload[field_name]
        with pytest.raises(error):
            validate_thought(payload)


def test_first_failure_wins(first_turn):
    payload = _with(first_turn, role="referee", totalTurnsPlanned=4, turnIndex=0)
    with pytest.raises(InvalidRole):
        validate_thought(payload)

    # Too small is checked before odd
    with pytest.raises(TotalTurnsTooSmall):
        validate_thought(_with(first_turn, totalTurnsPlanned=2))


@pytest.mark.parametrize("raw", [None, "content", 7, ["content"]])
def test_non_mapping_payload_is_invalid_content(raw):
    with pytest.raises(InvalidContent):
        validate_thought(raw)


@pytest.mark.parametrize("value", ["not-an-array", 3, {"a": "b"}, None])
def test_non_list_optional_fields_are_absent(first_turn, value):
    thought = validate_thought(
        _with(first_turn, assumptions=value, evidence=value, standardsApplied=value)
    )

    assert thought.assumptions is None
    assert thought.evidence is None
    assert thought.standards_applied is None


def test_empty_list_is_kept_as_supplied(first_turn):
    thought = validate_thought(_with(first_turn, assumptions=[]))
    assert thought.assumptions == ()


def test_turn_index_is_not_bounded_by_plan(first_turn):
    thought = validate_thought(_with(first_turn, turnIndex=9, totalTurnsPlanned=3))
    assert thought.turn_index == 9
    assert thought.round == 5


def test_to_dict_omits_absent_optional_fields(first_turn):
    thought = validate_thought(_with(first_turn, standardsApplied=["Logic"]))

    assert thought.to_dict() == {
        "content": "x",
        "role": "performer",
        "turnIndex": 1,
        "totalTurnsPlanned": 3,
        "continuationRequested": True,
        "standardsApplied": ["Logic"],
    }


def test_role_opposite():
    assert Role.PERFORMER.opposite is Role.EVALUATOR
    assert Role.EVALUATOR.opposite is Role.PERFORMER


def test_huge_integer_turn_index_is_accepted(first_turn):
    thought = validate_thought(_with(first_turn, turnIndex=10**400))

    assert thought.round == 5 * 10**399
    assert thought.completes_round is True


def test_round_is_exact_beyond_float_precision(first_turn):
    thought = validate_thought(_with(first_turn, turnIndex=2**60 + 1))
    assert thought.round == 2**59 + 1


def test_huge_integer_total_turns(first_turn):
    assert validate_thought(_with(first_turn, totalTurnsPlanned=10**400 + 1)).total_turns_planned == 10**400 + 1

    with pytest.raises(TotalTurnsMustBeOdd):
        validate_thought(_with(first_turn, totalTurnsPlanned=10**400))
