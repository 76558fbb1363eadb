import pytest

from flowspec.durations import (
    Duration,
    DurationExpression,
    DurationInline,
    Timeout,
    TimeoutOrReference,
)
from flowspec.validation import DecodeError, ValidationError


@pytest.mark.parametrize(
    "data, expected",
    [
        (
            {"after": {"days": 1, "hours": 2}},
            Timeout(after=Duration(DurationInline(days=1, hours=2))),
        ),
        (
            {"after": "P1Y2M3DT4H5M6S"},
            Timeout(after=Duration.from_expression("P1Y2M3DT4H5M6S")),
        ),
    ],
)
def test_timeout_from_json(data, expected):
    assert Timeout.from_json(data) == expected


@pytest.mark.parametrize("data", [{"after": {"unknown": "value"}}, {}])
def test_timeout_from_json_errors(data):
    with pytest.raises(DecodeError):
        Timeout.from_json(data)


def test_timeout_missing_after_message():
    with pytest.raises(DecodeError, match="missing 'after' key"):
        Timeout.from_json({})


def test_timeout_to_json_expression():
    timeout = Timeout(after=Duration(DurationExpression("PT1H")))
    assert timeout.to_json() == {"after": "PT1H"}


def test_timeout_to_json_inline():
    timeout = Timeout(after=Duration(DurationInline(days=1, hours=2, minutes=30)))
    assert timeout.to_json() == {"after": {"days": 1, "hours": 2, "minutes": 30}}


def test_timeout_to_json_plain_string():
    assert Timeout(after=Duration("PT2M")).to_json() == {"after": "PT2M"}


def test_timeout_to_json_unknown_type():
    with pytest.raises(TypeError):
        Timeout(after=Duration(123)).to_json()


def test_timeout_or_reference_from_timeout():
    result = TimeoutOrReference.from_json({"after": {"days": 1, "hours": 2}})
    assert result == TimeoutOrReference(
        timeout=Timeout(after=Duration(DurationInline(days=1, hours=2)))
    )


def test_timeout_or_reference_from_reference():
    result = TimeoutOrReference.from_json("some-timeout-reference")
    assert result == TimeoutOrReference(reference="some-timeout-reference")


@pytest.mark.parametrize("data", [42, {"invalid": None}, ["x"]])
def test_timeout_or_reference_invalid(data):
    with pytest.raises(DecodeError):
        TimeoutOrReference.from_json(data)


def test_timeout_or_reference_to_json():
    with_timeout = TimeoutOrReference(
        timeout=Timeout(after=Duration(DurationInline(days=1, hours=2)))
    )
    assert with_timeout.to_json() == {"after": {"days": 1, "hours": 2}}
    assert (
        TimeoutOrReference(reference="some-timeout-reference").to_json()
        == "some-timeout-reference"
    )


def test_timeout_or_reference_to_json_empty():
    with pytest.raises(ValueError):
        TimeoutOrReference().to_json()


def test_duration_accessors():
    expression = Duration.from_expression("PT5S")
    assert expression.as_expression() == "PT5S"
    assert expression.as_inline() is None
    inline = Duration(DurationInline(seconds=3))
    assert inline.as_inline().seconds == 3
    assert inline.as_expression() == ""
    assert Duration("PT7S").as_expression() == "PT7S"


def test_duration_from_json_rejects_other_types():
    with pytest.raises(DecodeError, match="valid duration"):
        Duration.from_json(12)


def test_duration_inline_rejects_non_integer():
    with pytest.raises(DecodeError):
        DurationInline.from_json({"seconds": 1.5})
    with pytest.raises(DecodeError):
        DurationInline.from_json({"seconds": 2**31})


@pytest.mark.parametrize(
    "duration",
    [
        Duration(DurationInline(days=1, milliseconds=250)),
        Duration.from_expression("P1DT1H"),
    ],
)
def test_duration_round_trip(duration):
    assert Duration.from_json(duration.to_json()) == duration


def test_duration_validate_rejects_bad_expression():
    with pytest.raises(ValidationError) as info:
        Duration.from_expression("10s").validate()
    assert info.value.tag == "iso8601_duration"


def test_duration_validate_requires_expression():
    with pytest.raises(ValidationError) as info:
        Duration.from_expression("").validate()
    assert info.value.tag == "required"


def test_timeout_validate_requires_after():
    with pytest.raises(ValidationError) as info:
        Timeout().validate()
    assert info.value.namespace == "Timeout.After"
    assert info.value.tag == "required"


def test_timeout_validate_nested_error():
    with pytest.raises(ValidationError) as info:
        Timeout(after=Duration.from_expression("1Y")).validate()
    assert info.value.namespace == "Timeout.After.Expression"


def test_timeout_or_reference_validate_requires_one():
    with pytest.raises(ValidationError) as info:
        TimeoutOrReference().validate()
    assert info.value.tag == "required_without"


def test_timeout_or_reference_validate_nested():
    invalid = TimeoutOrReference(timeout=Timeout())
    with pytest.raises(ValidationError) as info:
        invalid.validate()
    assert info.value.namespace == "TimeoutOrReference.Timeout.After"