import pytest

from flowspec.durations import Duration, DurationInline
from flowspec.raising import ErrorFilter
from flowspec.retry import (
    BackoffDefinition,
    RetryBackoff,
    RetryLimit,
    RetryLimitAttempt,
    RetryPolicy,
    RetryPolicyJitter,
    TryTaskCatch,
    resolve_retry_policies,
)
from flowspec.validation import DecodeError, ValidationError

POLICY_JSON = {
    "when": "${someCondition}",
    "exceptWhen": "${someOtherCondition}",
    "delay": "PT5S",
    "backoff": {"exponential": {"factor": 2}},
    "limit": {"attempt": {"count": 3, "duration": "PT1M"}, "duration": "PT10M"},
    "jitter": {"from": "PT1S", "to": "PT3S"},
}


def expr(value):
    return Duration.from_expression(value)


def test_retry_policy_marshal():
    policy = RetryPolicy(
        when="${someCondition}",
        except_when="${someOtherCondition}",
        delay=expr("PT5S"),
        backoff=RetryBackoff(exponential=BackoffDefinition({"factor": 2})),
        limit=RetryLimit(
            attempt=RetryLimitAttempt(count=3, duration=expr("PT1M")),
            duration=expr("PT10M"),
        ),
        jitter=RetryPolicyJitter(from_=expr("PT1S"), to=expr("PT3S")),
    )
    assert policy.to_json() == POLICY_JSON


def test_retry_policy_unmarshal():
    policy = RetryPolicy.from_json(POLICY_JSON)
    assert policy.when == "${someCondition}"
    assert policy.except_when == "${someOtherCondition}"
    assert policy.delay == expr("PT5S")
    assert policy.backoff.exponential == BackoffDefinition({"factor": 2})
    assert policy.limit.attempt.count == 3
    assert policy.limit.attempt.duration == expr("PT1M")
    assert policy.limit.duration == expr("PT10M")
    assert policy.jitter.from_ == expr("PT1S")
    assert policy.jitter.to == expr("PT3S")


def test_retry_policy_validation():
    policy = RetryPolicy(
        when="${someCondition}",
        except_when="${someOtherCondition}",
        delay=expr("PT5S"),
        backoff=RetryBackoff(constant=BackoffDefinition({"delay": 5})),
        limit=RetryLimit(
            attempt=RetryLimitAttempt(count=3, duration=expr("PT1M")),
            duration=expr("PT10M"),
        ),
        jitter=RetryPolicyJitter(from_=expr("PT1S"), to=expr("PT3S")),
    )
    policy.validate()
    invalid = RetryPolicy(jitter=RetryPolicyJitter(from_=expr("PT1S")))
    with pytest.raises(ValidationError) as info:
        invalid.validate()
    assert info.value.namespace == "RetryPolicy.Jitter.To"
    assert info.value.tag == "required"


def test_retry_policy_with_reference():
    retries = {
        "default": RetryPolicy(
            delay=Duration(DurationInline(seconds=3)),
            backoff=RetryBackoff(exponential=BackoffDefinition()),
            limit=RetryLimit(attempt=RetryLimitAttempt(count=5)),
        )
    }
    catch = TryTaskCatch.from_json({"retry": "default"})
    assert catch.retry.ref == "default"
    catch.retry.resolve_reference(retries)
    assert catch.retry.delay == retries["default"].delay
    assert catch.retry.backoff == retries["default"].backoff
    assert catch.retry.limit == retries["default"].limit
    assert catch.retry.ref == ""


def test_retry_policy_inline():
    catch = TryTaskCatch.from_json(
        {
            "retry": {
                "delay": {"seconds": 3},
                "backoff": {"exponential": {}},
                "limit": {"attempt": {"count": 5}},
            }
        }
    )
    assert catch.retry.delay.as_inline().seconds == 3
    assert catch.retry.backoff.exponential == BackoffDefinition({})
    assert catch.retry.limit.attempt.count == 5


def test_missing_reference_raises():
    policy = RetryPolicy(ref="missing")
    with pytest.raises(LookupError, match='"missing" not found'):
        policy.resolve_reference({})


def test_resolve_retry_policies_reports_task():
    catches = [TryTaskCatch(as_="first", retry=RetryPolicy(ref="nope"))]
    with pytest.raises(LookupError, match='task "first"'):
        resolve_retry_policies(catches, {})


def test_resolve_retry_policies_resolves_all():
    shared = RetryPolicy(delay=expr("PT2S"))
    catches = [
        TryTaskCatch(retry=RetryPolicy(ref="shared")),
        TryTaskCatch(),
        TryTaskCatch(retry=RetryPolicy(ref="shared")),
    ]
    resolve_retry_policies(catches, {"shared": shared})
    assert catches[0].retry.delay == expr("PT2S")
    assert catches[1].retry is None
    assert catches[2].retry.ref == ""


def test_retry_policy_rejects_invalid_type():
    with pytest.raises(DecodeError, match="invalid RetryPolicy type"):
        RetryPolicy.from_json(3)


def test_backoff_requires_a_strategy():
    with pytest.raises(DecodeError):
        RetryBackoff.from_json({"other": {}})
    with pytest.raises(ValueError):
        RetryBackoff().to_json()


def test_backoff_linear_round_trip():
    data = {"linear": {"increment": "PT1S"}}
    assert RetryBackoff.from_json(data).to_json() == data


def test_try_catch_round_trip():
    data = {
        "errors": {"with": {"type": "http://example.com/error", "status": 503}},
        "as": "err",
        "when": "${ .retry }",
        "retry": {"delay": "PT5S", "limit": {"attempt": {"count": 3}}},
    }
    catch = TryTaskCatch.from_json(data)
    assert catch.errors_with == ErrorFilter(type="http://example.com/error", status=503)
    assert catch.as_ == "err"
    assert catch.to_json() == data