from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

GENERATED_MARKER = "-- GENERATED --"


def _parse_meta(block: str) -> dict[str, str]:
    meta: dict[str, str] = {}
    for raw in block.splitlines():
        line = raw.strip()
        if not line:
            continue
        key, _, value = line.partition(":")
        meta[key.strip()] = value.strip()
    return meta


def _parse_pairs(value: str) -> list[tuple[int, int]]:
    pairs: list[tuple[int, int]] = []
    for chunk in value.split("|"):
        generated, sep, original = chunk.partition("->")
        if not sep:
            continue
        try:
            pairs.append((int(generated), int(original)))
        except ValueError:
            logger.debug("skipping malformed mapping entry %r", chunk)
    return pairs


def _map(pairs: list[tuple[int, int]], value: int) -> int:
    if not pairs:
        return 0
    index = next((idx for idx, (generated, _) in enumerate(pairs) if generated > value), -1)
    if index == 0:
        return 0
    generated, original = pairs[index - 1] if index > 0 else pairs[-1]
    return original + (value - generated)


@dataclass(slots=True)
class GeneratedSource:
    file: Path
    meta: dict[str, str] = field(default_factory=dict)

    @property
    def matrix(self) -> list[tuple[int, int]]:
        return _parse_pairs(self.meta.get("MATRIX", ""))

    @property
    def lines(self) -> list[tuple[int, int]]:
        return _parse_pairs(self.meta.get("LINES", ""))

    def source(self, project_root: Path | None = None) -> Path | None:
        value = self.meta.get("SOURCE", "")
        if not value:
            return None
        candidate = Path(value)
        if not candidate.is_absolute():
            candidate = (project_root or Path.cwd()) / candidate
        return candidate if candidate.exists() else None

    def map_position(self, generated_offset: int) -> int:
        return _map(self.matrix, generated_offset)

    def map_line(self, generated_line: int) -> int:
        return _map(self.lines, generated_line)


def read_generated_source(path: Path, marker: str = GENERATED_MARKER) -> GeneratedSource | None:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("cannot read %s for generated header: %s", path, exc)
        return None
    blocks = content.split(marker)
    if len(blocks) < 3:
        return None
    meta = _parse_meta(blocks[1])
    if "SOURCE" not in meta:
        return None
    return GeneratedSource(file=path, meta=meta)


def unwrap_generated(
    path: Path,
    project_root: Path | None = None,
    marker: str = GENERATED_MARKER,
) -> Path | None:
    generated = read_generated_source(path, marker=marker)
    if generated is None:
        return None
    original = generated.source(project_root)
    if original is None:
        logger.debug("%s names source %s which does not exist", path, generated.meta.get("SOURCE"))
    return original
