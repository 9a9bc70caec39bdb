from __future__ import annotations

import logging
from collections.abc import Callable

from devreload.diagnostics.log_parser import DEFAULT_GRAMMAR, LogGrammar, extract_first
from devreload.errors import CompileFailed, ReloadError
from devreload.schemas import (
    AlreadyTyped,
    BuildFailure,
    ClassifiedFailure,
    Diagnostic,
    Severity,
    StructuredCompileFailure,
    UnexpectedFailure,
)

logger = logging.getLogger(__name__)

NO_PROBLEM_MESSAGE = "The compilation failed without reporting any problem!"
NO_EXCEPTION_MESSAGE = "The compilation task failed without any exception!"

Step = Callable[[BuildFailure, LogGrammar], ClassifiedFailure | None]


def structured_problems(failure: BuildFailure) -> list[Diagnostic]:
    problems: list[Diagnostic] = []
    for exc in failure.exceptions:
        if isinstance(exc, CompileFailed):
            problems.extend(exc.problems)
    return problems


def log_diagnostics(failure: BuildFailure, grammar: LogGrammar = DEFAULT_GRAMMAR) -> list[Diagnostic]:
    """Parse each log source on its own; at most one diagnostic per source."""
    found: list[Diagnostic] = []
    for key in sorted(failure.logs):
        lines = failure.logs[key]
        try:
            diagnostic = extract_first(lines, grammar)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("could not read log output of %s: %s", key, exc)
            continue
        finally:
            # extract_first may stop early; release lazily opened logs
            close = getattr(lines, "close", None)
            if close is not None:
                close()
        if diagnostic is not None:
            found.append(diagnostic)
    return found


def _is_compile_failure(exc: BaseException | None) -> bool:
    return exc is None or isinstance(exc, CompileFailed)


def try_already_typed(failure: BuildFailure, grammar: LogGrammar) -> ClassifiedFailure | None:
    if isinstance(failure.primary, ReloadError):
        return AlreadyTyped(failure.primary)
    return None


def try_structured(failure: BuildFailure, grammar: LogGrammar) -> ClassifiedFailure | None:
    if not isinstance(failure.primary, CompileFailed):
        return None
    problems = structured_problems(failure)
    if not problems:
        return None
    error = next((item for item in problems if item.severity == Severity.ERROR), None)
    if error is None:
        return UnexpectedFailure(NO_PROBLEM_MESSAGE, failure.primary)
    return StructuredCompileFailure((error,))


def try_log_output(failure: BuildFailure, grammar: LogGrammar) -> ClassifiedFailure | None:
    if not _is_compile_failure(failure.primary) or structured_problems(failure):
        return None
    found = log_diagnostics(failure, grammar)
    if not found:
        return None
    logger.debug("recovered diagnostic from log output: %s", found[0])
    return StructuredCompileFailure((found[0],))


def unexpected(failure: BuildFailure, grammar: LogGrammar) -> ClassifiedFailure:
    primary = failure.primary
    if primary is None:
        return UnexpectedFailure(NO_EXCEPTION_MESSAGE, None)
    if isinstance(primary, CompileFailed):
        return UnexpectedFailure(NO_PROBLEM_MESSAGE, primary)
    return UnexpectedFailure(None, primary)


STEPS: tuple[Step, ...] = (try_already_typed, try_structured, try_log_output)


def classify(failure: BuildFailure, grammar: LogGrammar = DEFAULT_GRAMMAR) -> ClassifiedFailure:
    for step in STEPS:
        result = step(failure, grammar)
        if result is not None:
            return result
    return unexpected(failure, grammar)
