"""Durations, timeouts and timeout references."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from flowspec.validation import DecodeError, ValidationError, is_iso8601_duration_valid

_INLINE_KEYS = ("days", "hours", "minutes", "seconds", "milliseconds")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


@dataclass
class DurationInline:
    """A duration given as separate day, hour, minute, second and millisecond counts."""

    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0

    def to_json(self) -> dict[str, int]:
        return {key: getattr(self, key) for key in _INLINE_KEYS if getattr(self, key)}

    @classmethod
    def from_json(cls, data: Any) -> DurationInline:
        if not isinstance(data, dict):
            raise DecodeError("inline duration must be an object")
        values: dict[str, int] = {}
        for key, value in data.items():
            if key not in _INLINE_KEYS:
                raise DecodeError(f"unexpected key '{key}' in duration object")
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise DecodeError(f"duration field '{key}' must be an integer")
            if not _INT32_MIN <= value <= _INT32_MAX:
                raise DecodeError(f"duration field '{key}' is out of range")
            values[key] = value
        return cls(**values)


@dataclass
class DurationExpression:
    """A duration given as an ISO 8601 expression."""

    expression: str = ""

    def __str__(self) -> str:
        return self.expression

    def to_json(self) -> str:
        return self.expression


@dataclass
class Duration:
    """A duration that is either inline or an ISO 8601 expression."""

    value: Union[DurationInline, DurationExpression, str, Any]

    @classmethod
    def from_expression(cls, expression: str) -> Duration:
        return cls(DurationExpression(expression))

    def as_expression(self) -> str:
        if isinstance(self.value, str):
            return self.value
        if isinstance(self.value, DurationExpression):
            return self.value.expression
        return ""

    def as_inline(self) -> DurationInline | None:
        return self.value if isinstance(self.value, DurationInline) else None

    def to_json(self) -> dict[str, int] | str:
        if isinstance(self.value, (DurationInline, DurationExpression)):
            return self.value.to_json()
        if isinstance(self.value, str):
            return self.value
        raise TypeError("unknown Duration type")

    @classmethod
    def from_json(cls, data: Any) -> Duration:
        if isinstance(data, dict):
            return cls(DurationInline.from_json(data))
        if isinstance(data, str):
            return cls(DurationExpression(data))
        raise DecodeError("data must be a valid duration string or object")

    def validate(self) -> None:
        if isinstance(self.value, DurationInline):
            return
        if isinstance(self.value, (DurationExpression, str)):
            expression = self.as_expression()
            if not expression:
                raise ValidationError("Duration.Expression", "required")
            if not is_iso8601_duration_valid(expression):
                raise ValidationError("Duration.Expression", "iso8601_duration")
            return
        raise ValidationError("Duration.Value", "unknown_duration")


def _nested(prefix: str, err: ValidationError) -> ValidationError:
    tail = err.namespace.split(".", 1)[-1]
    return ValidationError(f"{prefix}.{tail}", err.tag, err.param)


@dataclass
class Timeout:
    """A time limit for a task or a workflow."""

    after: Duration | None = None

    def to_json(self) -> dict[str, Any]:
        value = self.after.value if self.after is not None else None
        if isinstance(value, DurationInline):
            return {"after": value.to_json()}
        if isinstance(value, DurationExpression):
            return {"after": value.expression}
        if isinstance(value, str):
            return {"after": value}
        raise TypeError("unknown Duration type in Timeout")

    @classmethod
    def from_json(cls, data: Any) -> Timeout:
        if not isinstance(data, dict):
            raise DecodeError("Timeout must be an object")
        if "after" not in data:
            raise DecodeError("missing 'after' key in Timeout JSON")
        after = data["after"]
        return cls(after=None if after is None else Duration.from_json(after))

    def validate(self) -> None:
        if self.after is None:
            raise ValidationError("Timeout.After", "required")
        try:
            self.after.validate()
        except ValidationError as err:
            raise _nested("Timeout.After", err) from None


@dataclass
class TimeoutOrReference:
    """Either a timeout definition or the name of a reusable timeout."""

    timeout: Timeout | None = None
    reference: str | None = None

    def to_json(self) -> dict[str, Any] | str:
        if self.timeout is not None:
            return self.timeout.to_json()
        if self.reference is not None:
            return self.reference
        raise ValueError("invalid TimeoutOrReference: neither Timeout nor Ref is set")

    @classmethod
    def from_json(cls, data: Any) -> TimeoutOrReference:
        try:
            return cls(timeout=Timeout.from_json(data))
        except DecodeError:
            if isinstance(data, str):
                return cls(reference=data)
        raise DecodeError(
            "invalid TimeoutOrReference: must be a Timeout or a string reference"
        )

    def validate(self) -> None:
        if self.timeout is None and self.reference is None:
            raise ValidationError("TimeoutOrReference.Timeout", "required_without", "Ref")
        if self.timeout is not None:
            try:
                self.timeout.validate()
            except ValidationError as err:
                raise ValidationError(
                    f"TimeoutOrReference.{err.namespace}", err.tag, err.param
                ) from None