from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from devreload.config import ReloadConfig
from devreload.diagnostics.classifier import classify
from devreload.diagnostics.log_parser import LogGrammar
from devreload.errors import TaskFailed, UnrecognizedOriginError
from devreload.schemas import CompilationAnalysis, CompileFailure, CompileResult, CompileSuccess, UnexpectedFailure
from devreload.sources.source_map import build_source_map

logger = logging.getLogger(__name__)


def compile_for_reload(
    compile_task: Callable[[], CompilationAnalysis],
    classpath_task: Callable[[], Iterable[Path]],
    config: ReloadConfig | None = None,
) -> CompileResult:
    """Run one reload compile step.

    Task failures are classified into a single error for the front-end. An
    unrecognized artifact origin is an integration bug and is re-raised.
    """
    config = config or ReloadConfig.default()
    grammar = LogGrammar.from_config(config.log_parser)
    try:
        analysis = compile_task()
        classpath = [Path(item) for item in classpath_task()]
        sources = build_source_map(
            analysis,
            project_root=config.project_root,
            marker=config.generated.marker,
        )
    except TaskFailed as exc:
        return CompileFailure(classify(exc.failure, grammar))
    except UnrecognizedOriginError:
        raise
    except Exception as exc:
        logger.warning("reload compile raised %s", type(exc).__name__, exc_info=True)
        return CompileFailure(UnexpectedFailure(None, exc))

    logger.debug("compiled %d classes, classpath has %d entries", len(sources), len(classpath))
    return CompileSuccess(sources=sources, classpath=classpath)
