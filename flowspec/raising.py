"""Error definitions, error filters and the error carried by a raise task."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flowspec.validation import DecodeError, ValidationError


def _object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what} must be an object")
    return data


def _str(data: dict[str, Any], key: str, what: str, default: str | None = "") -> str | None:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise DecodeError(f"{what}.{key} must be a string")
    return value


def _int(data: dict[str, Any], key: str, what: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{what}.{key} must be an integer")
    return value


@dataclass
class ErrorDefinition:
    """A problem-details style description of an error."""

    type: str | None = None
    status: int = 0
    title: str = ""
    detail: str = ""
    instance: str | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type, "status": self.status}
        if self.title:
            out["title"] = self.title
        if self.detail:
            out["detail"] = self.detail
        if self.instance is not None:
            out["instance"] = self.instance
        return out

    @classmethod
    def from_json(cls, data: Any) -> ErrorDefinition:
        obj = _object(data, "Error")
        return cls(
            type=_str(obj, "type", "Error", None),
            status=_int(obj, "status", "Error"),
            title=_str(obj, "title", "Error") or "",
            detail=_str(obj, "detail", "Error") or "",
            instance=_str(obj, "instance", "Error", None),
        )

    def validate(self) -> None:
        if self.type is None:
            raise ValidationError("Error.Type", "required")
        if not self.status:
            raise ValidationError("Error.Status", "required")


@dataclass
class ErrorFilter:
    """Properties an error must have to be caught."""

    type: str = ""
    status: int = 0
    instance: str = ""
    title: str = ""
    details: str = ""

    def to_json(self) -> dict[str, Any]:
        pairs = (
            ("type", self.type),
            ("status", self.status),
            ("instance", self.instance),
            ("title", self.title),
            ("details", self.details),
        )
        return {key: value for key, value in pairs if value}

    @classmethod
    def from_json(cls, data: Any) -> ErrorFilter:
        obj = _object(data, "ErrorFilter")
        return cls(
            type=_str(obj, "type", "ErrorFilter") or "",
            status=_int(obj, "status", "ErrorFilter"),
            instance=_str(obj, "instance", "ErrorFilter") or "",
            title=_str(obj, "title", "ErrorFilter") or "",
            details=_str(obj, "details", "ErrorFilter") or "",
        )


@dataclass
class RaiseTaskError:
    """The error a raise task throws: an inline definition or a named reference."""

    definition: ErrorDefinition | None = None
    ref: str | None = None

    def to_json(self) -> dict[str, Any] | str:
        if self.definition is not None:
            return self.definition.to_json()
        if self.ref is not None:
            return self.ref
        raise ValueError(
            "invalid RaiseTaskError: neither 'definition' nor 'reference' is set"
        )

    @classmethod
    def from_json(cls, data: Any) -> RaiseTaskError:
        if isinstance(data, str):
            return cls(ref=data)
        try:
            return cls(definition=ErrorDefinition.from_json(data))
        except DecodeError:
            raise DecodeError(
                "invalid RaiseTaskError: data must be either a string (reference) "
                "or an object (definition)"
            ) from None