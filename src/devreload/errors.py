from __future__ import annotations

from collections.abc import Iterable

from devreload.schemas import BuildFailure, Diagnostic


class ReloadError(Exception):
    """An error that is already fit to be shown to the developer as is."""


class CompileFailed(Exception):
    def __init__(self, message: str = "Compilation failed", problems: Iterable[Diagnostic] = ()) -> None:
        super().__init__(message)
        self.problems = list(problems)


class TaskFailed(Exception):
    def __init__(self, failure: BuildFailure) -> None:
        primary = failure.primary
        super().__init__(str(primary) if primary is not None else "build task failed")
        self.failure = failure


class UnrecognizedOriginError(RuntimeError):
    pass
