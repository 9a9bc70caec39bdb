from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union


class Serializable:
    def to_dict(self) -> dict[str, Any]:
        return _jsonable(asdict(self))


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True, slots=True)
class SourceReference(Serializable):
    resolved_path: Path
    original_source: Path | None = None


@dataclass(frozen=True, slots=True)
class PlainFile:
    path: Path


@dataclass(frozen=True, slots=True)
class VirtualFileRelative:
    segments: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class VirtualFileAbsolute:
    id: str


# None means the build tool reported no origin for the unit.
ArtifactOrigin = Union[PlainFile, VirtualFileRelative, VirtualFileAbsolute, None]


@dataclass(slots=True)
class CompilationAnalysis:
    classes: Mapping[str, Sequence[ArtifactOrigin]] = field(default_factory=dict)


class Severity(str, Enum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Position(Serializable):
    source_path: str | None = None
    line: int | None = None
    pointer: int | None = None


@dataclass(frozen=True, slots=True)
class Diagnostic(Serializable):
    message: str
    severity: Severity = Severity.ERROR
    position: Position = field(default_factory=Position)


@dataclass(frozen=True, slots=True)
class AlreadyTyped:
    cause: Exception

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "already_typed", "message": str(self.cause), "cause": type(self.cause).__name__}


@dataclass(frozen=True, slots=True)
class StructuredCompileFailure:
    diagnostics: tuple[Diagnostic, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "compile_failure", "diagnostics": [item.to_dict() for item in self.diagnostics]}


@dataclass(frozen=True, slots=True)
class UnexpectedFailure:
    message: str | None = None
    cause: BaseException | None = None

    @property
    def description(self) -> str:
        if self.message:
            return self.message
        if self.cause is not None:
            return f"{type(self.cause).__name__}: {self.cause}"
        return "Unexpected failure"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "unexpected",
            "message": self.message,
            "description": self.description,
            "cause": type(self.cause).__name__ if self.cause is not None else None,
        }


ClassifiedFailure = Union[AlreadyTyped, StructuredCompileFailure, UnexpectedFailure]


@dataclass(slots=True)
class BuildFailure:
    exceptions: list[BaseException] = field(default_factory=list)
    logs: Mapping[str, Iterable[str]] = field(default_factory=dict)

    @property
    def primary(self) -> BaseException | None:
        return self.exceptions[0] if self.exceptions else None


@dataclass(slots=True)
class CompileSuccess:
    sources: dict[str, SourceReference]
    classpath: list[Path]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "success",
            "sources": {name: ref.to_dict() for name, ref in self.sources.items()},
            "classpath": [item.as_posix() for item in self.classpath],
        }


@dataclass(slots=True)
class CompileFailure:
    error: ClassifiedFailure

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "failure", "error": self.error.to_dict()}


CompileResult = Union[CompileSuccess, CompileFailure]
