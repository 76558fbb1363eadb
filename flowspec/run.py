"""Configuration of tasks that run containers, scripts, shells or workflows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flowspec.validation import (
    DecodeError,
    ValidationError,
    is_hostname_valid,
    is_semantic_version_valid,
)

_PROCESSES = ("container", "script", "shell", "workflow")


def _object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what} must be an object")
    return data


def _str(data: dict[str, Any], key: str, what: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{what}.{key} must be a string")
    return value


def _any_map(data: dict[str, Any], key: str, what: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DecodeError(f"{what}.{key} must be an object")
    return dict(value)


def _string_map(data: dict[str, Any], key: str, what: str) -> dict[str, str] | None:
    value = _any_map(data, key, what)
    if value is not None and not all(isinstance(item, str) for item in value.values()):
        raise DecodeError(f"{what}.{key} must map names to strings")
    return value


def _put(out: dict[str, Any], key: str, value: Any) -> None:
    if value:
        out[key] = value


@dataclass
class Container:
    """A container to run."""

    image: str = ""
    command: str = ""
    ports: dict[str, Any] | None = None
    volumes: dict[str, Any] | None = None
    environment: dict[str, str] | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"image": self.image}
        _put(out, "command", self.command)
        _put(out, "ports", self.ports)
        _put(out, "volumes", self.volumes)
        _put(out, "environment", self.environment)
        return out

    @classmethod
    def from_json(cls, data: Any) -> Container:
        obj = _object(data, "Container")
        return cls(
            image=_str(obj, "image", "Container"),
            command=_str(obj, "command", "Container"),
            ports=_any_map(obj, "ports", "Container"),
            volumes=_any_map(obj, "volumes", "Container"),
            environment=_string_map(obj, "environment", "Container"),
        )


@dataclass
class Script:
    """A script to run, given inline or as an external source."""

    language: str = ""
    arguments: dict[str, Any] | None = None
    environment: dict[str, str] | None = None
    inline_code: str | None = None
    external: dict[str, Any] | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"language": self.language}
        _put(out, "arguments", self.arguments)
        _put(out, "environment", self.environment)
        if self.inline_code is not None:
            out["code"] = self.inline_code
        if self.external is not None:
            out["source"] = self.external
        return out

    @classmethod
    def from_json(cls, data: Any) -> Script:
        obj = _object(data, "Script")
        code = obj.get("code")
        if code is not None and not isinstance(code, str):
            raise DecodeError("Script.code must be a string")
        return cls(
            language=_str(obj, "language", "Script"),
            arguments=_any_map(obj, "arguments", "Script"),
            environment=_string_map(obj, "environment", "Script"),
            inline_code=code,
            external=_any_map(obj, "source", "Script"),
        )


@dataclass
class Shell:
    """A shell command to run."""

    command: str = ""
    arguments: dict[str, Any] | None = None
    environment: dict[str, str] | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"command": self.command}
        _put(out, "arguments", self.arguments)
        _put(out, "environment", self.environment)
        return out

    @classmethod
    def from_json(cls, data: Any) -> Shell:
        obj = _object(data, "Shell")
        return cls(
            command=_str(obj, "command", "Shell"),
            arguments=_any_map(obj, "arguments", "Shell"),
            environment=_string_map(obj, "environment", "Shell"),
        )


@dataclass
class RunWorkflow:
    """Another workflow to run."""

    namespace: str = ""
    name: str = ""
    version: str = ""
    input: dict[str, Any] | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "namespace": self.namespace,
            "name": self.name,
            "version": self.version,
        }
        _put(out, "input", self.input)
        return out

    @classmethod
    def from_json(cls, data: Any) -> RunWorkflow:
        obj = _object(data, "RunWorkflow")
        return cls(
            namespace=_str(obj, "namespace", "RunWorkflow"),
            name=_str(obj, "name", "RunWorkflow"),
            version=_str(obj, "version", "RunWorkflow"),
            input=_any_map(obj, "input", "RunWorkflow"),
        )

    def validate(self) -> None:
        for field_name, value in (("Namespace", self.namespace), ("Name", self.name)):
            if not value:
                raise ValidationError(f"RunWorkflow.{field_name}", "required")
            if not is_hostname_valid(value):
                raise ValidationError(f"RunWorkflow.{field_name}", "hostname_rfc1123")
        if not self.version:
            raise ValidationError("RunWorkflow.Version", "required")
        if not is_semantic_version_valid(self.version):
            raise ValidationError("RunWorkflow.Version", "semver_pattern")


@dataclass
class RunTaskConfiguration:
    """What a run task executes; exactly one kind of process is set."""

    await_: bool | None = None
    container: Container | None = None
    script: Script | None = None
    shell: Shell | None = None
    workflow: RunWorkflow | None = None

    def _processes(self) -> list[str]:
        return [name for name in _PROCESSES if getattr(self, name) is not None]

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.await_ is not None:
            out["await"] = self.await_
        for name in self._processes():
            out[name] = getattr(self, name).to_json()
        return out

    @classmethod
    def from_json(cls, data: Any) -> RunTaskConfiguration:
        obj = _object(data, "RunTaskConfiguration")
        await_ = obj.get("await")
        if await_ is not None and not isinstance(await_, bool):
            raise DecodeError("RunTaskConfiguration.await must be a boolean")
        decoders = {
            "container": Container.from_json,
            "script": Script.from_json,
            "shell": Shell.from_json,
            "workflow": RunWorkflow.from_json,
        }
        processes = {
            name: decode(obj[name])
            for name, decode in decoders.items()
            if obj.get(name) is not None
        }
        if len(processes) != 1:
            raise DecodeError(
                "invalid RunTaskConfiguration: only one of 'container', 'script', "
                "'shell', or 'workflow' must be specified"
            )
        return cls(await_=await_, **processes)

    def validate(self) -> None:
        if len(self._processes()) != 1:
            raise ValidationError("RunTaskConfiguration", "one_of")
        if self.container is not None and not self.container.image:
            raise ValidationError("RunTaskConfiguration.Container.Image", "required")
        if self.script is not None and not self.script.language:
            raise ValidationError("RunTaskConfiguration.Script.Language", "required")
        if self.shell is not None and not self.shell.command:
            raise ValidationError("RunTaskConfiguration.Shell.Command", "required")
        if self.workflow is not None:
            try:
                self.workflow.validate()
            except ValidationError as err:
                raise ValidationError(
                    f"RunTaskConfiguration.{err.namespace}", err.tag, err.param
                ) from None