"""Retry policies and the catch clause of a try task."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from flowspec.durations import Duration
from flowspec.raising import ErrorFilter
from flowspec.validation import DecodeError, ValidationError

_STRATEGIES = ("constant", "exponential", "linear")


def _object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what} must be an object")
    return data


def _optional_str(data: dict[str, Any], key: str, what: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"{what}.{key} must be a string")
    return value


def _optional_duration(data: dict[str, Any], key: str) -> Duration | None:
    value = data.get(key)
    return None if value is None else Duration.from_json(value)


def _nested(prefix: str, err: ValidationError) -> ValidationError:
    tail = err.namespace.split(".", 1)[-1]
    return ValidationError(f"{prefix}.{tail}", err.tag, err.param)


def _validate_duration(duration: Duration | None, prefix: str) -> None:
    if duration is None:
        return
    try:
        duration.validate()
    except ValidationError as err:
        raise _nested(prefix, err) from None


@dataclass
class BackoffDefinition:
    """The free-form settings of one backoff strategy."""

    definition: dict[str, Any] | None = None


@dataclass
class RetryBackoff:
    """The backoff strategy of a retry policy; one of the three is set."""

    constant: BackoffDefinition | None = None
    exponential: BackoffDefinition | None = None
    linear: BackoffDefinition | None = None

    def to_json(self) -> dict[str, Any]:
        for name in _STRATEGIES:
            strategy = getattr(self, name)
            if strategy is not None:
                return {name: strategy.definition}
        raise ValueError(
            "RetryBackoff must have one of 'constant', 'exponential', or 'linear' defined"
        )

    @classmethod
    def from_json(cls, data: Any) -> RetryBackoff:
        obj = _object(data, "RetryBackoff")
        for name in _STRATEGIES:
            if name not in obj:
                continue
            raw = obj[name]
            if raw is not None and not isinstance(raw, dict):
                raise DecodeError(f"failed to unmarshal {name} backoff: must be an object")
            return cls(**{name: BackoffDefinition(None if raw is None else dict(raw))})
        raise DecodeError(
            "RetryBackoff must have one of 'constant', 'exponential', or 'linear' defined"
        )


@dataclass
class RetryLimitAttempt:
    """The limits that apply to each retry attempt."""

    count: int = 0
    duration: Duration | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.count:
            out["count"] = self.count
        if self.duration is not None:
            out["duration"] = self.duration.to_json()
        return out

    @classmethod
    def from_json(cls, data: Any) -> RetryLimitAttempt:
        obj = _object(data, "RetryLimitAttempt")
        count = obj.get("count")
        if count is None:
            count = 0
        elif isinstance(count, bool) or not isinstance(count, int):
            raise DecodeError("RetryLimitAttempt.count must be an integer")
        return cls(count=count, duration=_optional_duration(obj, "duration"))


@dataclass
class RetryLimit:
    """The overall limits of a retry policy."""

    attempt: RetryLimitAttempt | None = None
    duration: Duration | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.attempt is not None:
            out["attempt"] = self.attempt.to_json()
        if self.duration is not None:
            out["duration"] = self.duration.to_json()
        return out

    @classmethod
    def from_json(cls, data: Any) -> RetryLimit:
        obj = _object(data, "RetryLimit")
        attempt = obj.get("attempt")
        return cls(
            attempt=None if attempt is None else RetryLimitAttempt.from_json(attempt),
            duration=_optional_duration(obj, "duration"),
        )


@dataclass
class RetryPolicyJitter:
    """The range of random variation added to retry delays."""

    from_: Duration | None = None
    to: Duration | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "from": None if self.from_ is None else self.from_.to_json(),
            "to": None if self.to is None else self.to.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> RetryPolicyJitter:
        obj = _object(data, "RetryPolicyJitter")
        return cls(from_=_optional_duration(obj, "from"), to=_optional_duration(obj, "to"))

    def validate(self) -> None:
        if self.from_ is None:
            raise ValidationError("RetryPolicyJitter.From", "required")
        if self.to is None:
            raise ValidationError("RetryPolicyJitter.To", "required")
        _validate_duration(self.from_, "RetryPolicyJitter.From")
        _validate_duration(self.to, "RetryPolicyJitter.To")


@dataclass
class RetryPolicy:
    """How and when a failed task is retried, or a reference to a named policy."""

    when: str | None = None
    except_when: str | None = None
    delay: Duration | None = None
    backoff: RetryBackoff | None = None
    limit: RetryLimit = field(default_factory=RetryLimit)
    jitter: RetryPolicyJitter | None = None
    ref: str = ""

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.when is not None:
            out["when"] = self.when
        if self.except_when is not None:
            out["exceptWhen"] = self.except_when
        if self.delay is not None:
            out["delay"] = self.delay.to_json()
        if self.backoff is not None:
            out["backoff"] = self.backoff.to_json()
        out["limit"] = self.limit.to_json()
        if self.jitter is not None:
            out["jitter"] = self.jitter.to_json()
        return out

    @classmethod
    def from_json(cls, data: Any) -> RetryPolicy:
        if isinstance(data, str):
            return cls(ref=data)
        if not isinstance(data, dict):
            kind = "<nil>" if data is None else type(data).__name__
            raise DecodeError(f"invalid RetryPolicy type: {kind}")
        backoff = data.get("backoff")
        limit = data.get("limit")
        jitter = data.get("jitter")
        return cls(
            when=_optional_str(data, "when", "RetryPolicy"),
            except_when=_optional_str(data, "exceptWhen", "RetryPolicy"),
            delay=_optional_duration(data, "delay"),
            backoff=None if backoff is None else RetryBackoff.from_json(backoff),
            limit=RetryLimit() if limit is None else RetryLimit.from_json(limit),
            jitter=None if jitter is None else RetryPolicyJitter.from_json(jitter),
        )

    def resolve_reference(self, retries: Mapping[str, RetryPolicy]) -> None:
        """Replace a reference with the fields of the named policy."""
        if not self.ref:
            return
        resolved = retries.get(self.ref)
        if resolved is None:
            raise LookupError(f'retry policy reference "{self.ref}" not found')
        for item in fields(self):
            setattr(self, item.name, getattr(resolved, item.name))
        self.ref = ""

    def validate(self) -> None:
        _validate_duration(self.delay, "RetryPolicy.Delay")
        if self.limit.attempt is not None:
            _validate_duration(self.limit.attempt.duration, "RetryPolicy.Limit.Attempt.Duration")
        _validate_duration(self.limit.duration, "RetryPolicy.Limit.Duration")
        if self.jitter is not None:
            try:
                self.jitter.validate()
            except ValidationError as err:
                raise _nested("RetryPolicy.Jitter", err) from None


@dataclass
class TryTaskCatch:
    """The catch clause of a try task."""

    errors_with: ErrorFilter | None = None
    as_: str = ""
    when: str | None = None
    except_when: str | None = None
    retry: RetryPolicy | None = None
    do: list[Any] | None = None

    def to_json(self) -> dict[str, Any]:
        errors: dict[str, Any] = {}
        if self.errors_with is not None:
            errors["with"] = self.errors_with.to_json()
        out: dict[str, Any] = {"errors": errors}
        if self.as_:
            out["as"] = self.as_
        if self.when is not None:
            out["when"] = self.when
        if self.except_when is not None:
            out["exceptWhen"] = self.except_when
        if self.retry is not None:
            out["retry"] = self.retry.to_json()
        if self.do is not None:
            out["do"] = self.do
        return out

    @classmethod
    def from_json(cls, data: Any) -> TryTaskCatch:
        obj = _object(data, "TryTaskCatch")
        errors_with = None
        errors = obj.get("errors")
        if errors is not None:
            raw_with = _object(errors, "TryTaskCatch.errors").get("with")
            if raw_with is not None:
                errors_with = ErrorFilter.from_json(raw_with)
        retry = obj.get("retry")
        do = obj.get("do")
        if do is not None and not isinstance(do, list):
            raise DecodeError("TryTaskCatch.do must be a list")
        return cls(
            errors_with=errors_with,
            as_=_optional_str(obj, "as", "TryTaskCatch") or "",
            when=_optional_str(obj, "when", "TryTaskCatch"),
            except_when=_optional_str(obj, "exceptWhen", "TryTaskCatch"),
            retry=None if retry is None else RetryPolicy.from_json(retry),
            do=do,
        )


def resolve_retry_policies(
    catches: Iterable[TryTaskCatch], retries: Mapping[str, RetryPolicy]
) -> None:
    """Resolve the retry reference of every catch clause that has one."""
    for catch in catches:
        if catch.retry is None:
            continue
        try:
            catch.retry.resolve_reference(retries)
        except LookupError as err:
            raise LookupError(
                f'failed to resolve retry policy for task "{catch.as_}": {err}'
            ) from err