from __future__ import annotations

import logging
from pathlib import Path

from devreload.schemas import CompilationAnalysis, SourceReference
from devreload.sources.generated import GENERATED_MARKER, unwrap_generated
from devreload.sources.virtual_files import origin_from_dict, origin_to_dict, resolve_origin
from devreload.utils import read_json

logger = logging.getLogger(__name__)


def build_source_map(
    analysis: CompilationAnalysis,
    project_root: Path | None = None,
    marker: str = GENERATED_MARKER,
) -> dict[str, SourceReference]:
    """Map every compiled class name to the file it was compiled from.

    Only the first candidate of each entry is used; further candidates are
    aliases of the same origin. Names without a resolvable origin are left
    out. Origins of an unknown shape raise ``UnrecognizedOriginError``.
    """
    output: dict[str, SourceReference] = {}
    for name in sorted(analysis.classes):
        candidates = analysis.classes[name]
        if not candidates:
            continue
        resolved = resolve_origin(candidates[0])
        if resolved is None:
            logger.debug("no origin for %s", name)
            continue
        probe = resolved
        if not probe.is_absolute() and project_root is not None:
            probe = project_root / probe
        original = unwrap_generated(probe, project_root=project_root, marker=marker)
        output[name] = SourceReference(resolved_path=resolved, original_source=original)
    return output


def load_analysis(path: Path) -> CompilationAnalysis:
    data = read_json(path)
    classes = {
        str(name): [origin_from_dict(item) for item in candidates]
        for name, candidates in data.get("classes", {}).items()
    }
    return CompilationAnalysis(classes=classes)


def analysis_to_dict(analysis: CompilationAnalysis) -> dict:
    return {
        "classes": {
            name: [origin_to_dict(item) for item in candidates]
            for name, candidates in sorted(analysis.classes.items())
        }
    }
