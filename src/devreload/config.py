from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG = """project_root: "."
log_level: WARNING
log_parser:
  source_suffixes:
    - java
  strip_sequences:
    - "\\e[0m"
    - "\\e[31m"
generated:
  marker: "-- GENERATED --"
"""

RESET = "\x1b[0m"
RED = "\x1b[31m"


@dataclass(slots=True)
class LogParserConfig:
    source_suffixes: list[str] = field(default_factory=lambda: ["java"])
    strip_sequences: list[str] = field(default_factory=lambda: [RESET, RED])


@dataclass(slots=True)
class GeneratedConfig:
    marker: str = "-- GENERATED --"


@dataclass(slots=True)
class ReloadConfig:
    project_root: Path
    log_level: str
    log_parser: LogParserConfig
    generated: GeneratedConfig

    @classmethod
    def default(cls) -> ReloadConfig:
        data = yaml.safe_load(DEFAULT_CONFIG)
        return cls.from_dict(data)

    @classmethod
    def from_path(cls, path: Path) -> ReloadConfig:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReloadConfig:
        parser_data = data.get("log_parser", {}) or {}
        suffixes = [str(item).lstrip(".") for item in parser_data.get("source_suffixes", ["java"]) if str(item).strip()]
        log_parser = LogParserConfig(
            source_suffixes=suffixes or ["java"],
            strip_sequences=list(parser_data.get("strip_sequences", [RESET, RED])),
        )
        generated_data = data.get("generated", {}) or {}
        generated = GeneratedConfig(marker=generated_data.get("marker", "-- GENERATED --"))

        project_root = Path(data.get("project_root", "."))
        log_level = str(data.get("log_level", "WARNING")).upper()

        env_root = os.getenv("DEVRELOAD_PROJECT_ROOT", "").strip()
        env_level = os.getenv("DEVRELOAD_LOG_LEVEL", "").strip()
        env_suffixes = os.getenv("DEVRELOAD_SOURCE_SUFFIXES", "").strip()

        if env_root:
            project_root = Path(env_root)
        if env_level:
            log_level = env_level.upper()
        if env_suffixes:
            parsed = [item.strip().lstrip(".") for item in env_suffixes.split(",") if item.strip()]
            if parsed:
                log_parser.source_suffixes = parsed

        return cls(
            project_root=project_root,
            log_level=log_level,
            log_parser=log_parser,
            generated=generated,
        )


def ensure_config(path: Path, force: bool = False) -> None:
    if path.exists() and not force:
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG, encoding="utf-8")
