from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit
from urllib.request import url2pathname

from devreload.errors import UnrecognizedOriginError
from devreload.schemas import ArtifactOrigin, PlainFile, VirtualFileAbsolute, VirtualFileRelative

BASE_MARKER_PREFIX = "${"


def _is_marker(segment: str) -> bool:
    return segment.startswith(BASE_MARKER_PREFIX)


def file_uri_for_id(virtual_id: str) -> str:
    # Windows ids come without the leading slash an absolute file URI needs.
    extra_slash = "" if virtual_id.startswith("/") else "/"
    return f"file://{extra_slash}{virtual_id}"


def path_from_file_uri(uri: str) -> Path:
    parts = urlsplit(uri)
    if parts.scheme != "file":
        raise UnrecognizedOriginError(f"Not a file URI: {uri}")
    if "?" in uri or "#" in uri:
        raise UnrecognizedOriginError(f"File URI has a query or fragment: {uri}")
    # percent escapes are decoded, as for any file URI
    return Path(url2pathname(parts.path))


def _relative_path(segments: Sequence[str]) -> Path:
    if not segments or not _is_marker(segments[0]):
        raise UnrecognizedOriginError(f"Relative virtual file without a base marker: {list(segments)}")
    rest = list(segments[1:])
    if not rest:
        raise UnrecognizedOriginError(f"Relative virtual file has no path after {segments[0]}")
    if any(_is_marker(item) for item in rest):
        raise UnrecognizedOriginError(f"Relative virtual file has more than one base marker: {list(segments)}")
    return Path(*rest)


def resolve_origin(origin: ArtifactOrigin) -> Path | None:
    if origin is None:
        return None
    if isinstance(origin, PlainFile):
        return origin.path
    if isinstance(origin, VirtualFileRelative):
        return _relative_path(origin.segments)
    if isinstance(origin, VirtualFileAbsolute):
        return path_from_file_uri(file_uri_for_id(origin.id))
    raise UnrecognizedOriginError(f"Can't handle origin of type {type(origin).__qualname__} used for source map")


def origin_from_virtual_file(names: Sequence[str], virtual_id: str) -> ArtifactOrigin:
    """Classify a build tool virtual file reference by its name segments.

    Files under the build base carry a leading ``${BASE}``-style marker and are
    relative; anything else (e.g. subprojects outside the base directory) is
    addressed by its absolute id.
    """
    if names and _is_marker(names[0]):
        return VirtualFileRelative(tuple(names))
    return VirtualFileAbsolute(virtual_id)


def origin_from_dict(data: dict[str, Any] | None) -> ArtifactOrigin:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise UnrecognizedOriginError(f"Can't handle origin of type {type(data).__name__} used for source map")
    kind = data.get("kind", "")
    if kind == "file":
        return PlainFile(Path(data["path"]))
    if kind == "virtual":
        return origin_from_virtual_file(list(data.get("names", [])), str(data.get("id", "")))
    if kind == "virtual_relative":
        return VirtualFileRelative(tuple(data.get("segments", [])))
    if kind == "virtual_absolute":
        return VirtualFileAbsolute(str(data["id"]))
    raise UnrecognizedOriginError(f"Unknown origin kind {kind!r}")


def origin_to_dict(origin: ArtifactOrigin) -> dict[str, Any] | None:
    if origin is None:
        return None
    if isinstance(origin, PlainFile):
        return {"kind": "file", "path": origin.path.as_posix()}
    if isinstance(origin, VirtualFileRelative):
        return {"kind": "virtual_relative", "segments": list(origin.segments)}
    if isinstance(origin, VirtualFileAbsolute):
        return {"kind": "virtual_absolute", "id": origin.id}
    raise UnrecognizedOriginError(f"Can't handle origin of type {type(origin).__qualname__} used for source map")
