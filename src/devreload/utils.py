from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path


def strip_sequences(value: str, sequences: Iterable[str]) -> str:
    for sequence in sequences:
        value = value.replace(sequence, "")
    return value


def read_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def dump_json(payload: dict) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)
