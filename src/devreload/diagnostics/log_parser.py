"""Recover a compile error position from plain-text build output.

Build logs report javac-style errors over several lines::

    [error] /app/Foo.java:10: incompatible types
    [error] found   : String
    [error] required: Int
    [error]     ^

The parser folds lines into a small state one at a time. The first error
that reaches its caret line is the one reported.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from devreload.config import RED, RESET, LogParserConfig
from devreload.schemas import Diagnostic, Position, Severity
from devreload.utils import strip_sequences


@dataclass(frozen=True, slots=True)
class PartialDiagnostic:
    file: str
    line: str
    message: str
    pointer: int | None = None


@dataclass(frozen=True, slots=True)
class ParserState:
    pending: PartialDiagnostic | None = None
    first: PartialDiagnostic | None = None
    # set by the first caret line, even one with no pending error
    settled: bool = False


@dataclass(frozen=True, slots=True)
class LogGrammar:
    error: re.Pattern[str]
    info: re.Pattern[str]
    pointer: re.Pattern[str]
    strip: tuple[str, ...] = (RESET, RED)

    @classmethod
    def for_suffixes(cls, suffixes: Sequence[str] = ("java",), strip: Sequence[str] = (RESET, RED)) -> LogGrammar:
        alternatives = "|".join(re.escape(item) for item in suffixes)
        return cls(
            error=re.compile(rf"\[error\]\s*(.*[.](?:{alternatives})):(\d+):\s*(.*)"),
            info=re.compile(r"\[error\]\s*([a-z ]+):(.*)"),
            pointer=re.compile(r"\[error\](\s*)\^\s*"),
            strip=tuple(strip),
        )

    @classmethod
    def from_config(cls, config: LogParserConfig) -> LogGrammar:
        return cls.for_suffixes(config.source_suffixes, config.strip_sequences)


DEFAULT_GRAMMAR = LogGrammar.for_suffixes()


def reduce_line(state: ParserState, line: str, grammar: LogGrammar = DEFAULT_GRAMMAR) -> ParserState:
    text = strip_sequences(line.rstrip("\r\n"), grammar.strip)

    match = grammar.error.fullmatch(text)
    if match:
        file, line_no, message = match.groups()
        return replace(state, pending=PartialDiagnostic(file=file, line=line_no, message=message))

    match = grammar.info.fullmatch(text)
    if match:
        if state.pending is None:
            return state
        key, detail = match.groups()
        message = f"{state.pending.message} [{key.strip()}: {detail.strip()}]"
        return replace(state, pending=replace(state.pending, message=message))

    match = grammar.pointer.fullmatch(text)
    if match:
        pending = state.pending
        if pending is not None:
            pending = replace(pending, pointer=len(match.group(1)))
        if state.settled:
            return replace(state, pending=pending)
        return ParserState(pending=pending, first=pending, settled=True)

    return state


def to_diagnostic(partial: PartialDiagnostic) -> Diagnostic:
    pointer = partial.pointer - 1 if partial.pointer is not None else None
    return Diagnostic(
        message=partial.message,
        severity=Severity.ERROR,
        position=Position(source_path=partial.file, line=int(partial.line), pointer=pointer),
    )


def extract_first(lines: Iterable[str], grammar: LogGrammar = DEFAULT_GRAMMAR) -> Diagnostic | None:
    state = ParserState()
    for line in lines:
        state = reduce_line(state, line, grammar)
        if state.settled:
            # first is never replaced once set
            break
    if state.first is None:
        return None
    return to_diagnostic(state.first)


def read_log_lines(path: Path) -> Iterator[str]:
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        for line in handle:
            yield line.rstrip("\r\n")
