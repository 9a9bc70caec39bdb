from __future__ import annotations

import sys
from pathlib import Path, PurePosixPath

import pytest

from devreload.errors import UnrecognizedOriginError
from devreload.schemas import PlainFile, VirtualFileAbsolute, VirtualFileRelative
from devreload.sources.virtual_files import (
    file_uri_for_id,
    origin_from_dict,
    origin_from_virtual_file,
    origin_to_dict,
    resolve_origin,
)


def test_no_origin_resolves_to_none() -> None:
    assert resolve_origin(None) is None


def test_plain_file_is_returned_unchanged() -> None:
    path = Path("/proj/app/Foo.scala")
    assert resolve_origin(PlainFile(path)) is path


def test_relative_virtual_file_drops_base_marker() -> None:
    resolved = resolve_origin(VirtualFileRelative(("${BASE}", "a", "b.scala")))
    assert resolved == Path("a") / "b.scala"
    assert not resolved.is_absolute()


@pytest.mark.parametrize(
    "segments",
    [
        ("app", "Foo.scala"),
        ("${BASE}",),
        ("${BASE}", "${SUB}", "Foo.scala"),
        (),
    ],
)
def test_relative_virtual_file_with_unexpected_markers_is_rejected(segments) -> None:
    with pytest.raises(UnrecognizedOriginError):
        resolve_origin(VirtualFileRelative(segments))


def test_absolute_id_keeps_its_leading_slash() -> None:
    assert file_uri_for_id("/home/u/p/X.scala") == "file:///home/u/p/X.scala"


def test_drive_letter_id_gets_a_leading_slash() -> None:
    assert file_uri_for_id("C:/Users/u/X.scala") == "file:///C:/Users/u/X.scala"


@pytest.mark.skipif(sys.platform == "win32", reason="posix paths")
def test_absolute_virtual_file_resolves_to_absolute_path() -> None:
    resolved = resolve_origin(VirtualFileAbsolute("/home/u/p/X.scala"))
    assert resolved == Path("/home/u/p/X.scala")
    assert resolved.is_absolute()


@pytest.mark.skipif(sys.platform == "win32", reason="posix paths")
def test_drive_letter_id_round_trips_on_posix() -> None:
    resolved = resolve_origin(VirtualFileAbsolute("C:/Users/u/X.scala"))
    assert PurePosixPath(resolved.as_posix()) == PurePosixPath("/C:/Users/u/X.scala")


@pytest.mark.skipif(sys.platform != "win32", reason="windows drive letters")
def test_drive_letter_id_round_trips_on_windows() -> None:
    resolved = resolve_origin(VirtualFileAbsolute("C:/Users/u/X.scala"))
    assert resolved == Path("C:/Users/u/X.scala")


@pytest.mark.parametrize("virtual_id", ["/home/u/C#/proj/X.scala", "/home/u/what?/X.scala"])
def test_absolute_id_with_uri_delimiters_is_rejected(virtual_id) -> None:
    with pytest.raises(UnrecognizedOriginError, match="query or fragment"):
        resolve_origin(VirtualFileAbsolute(virtual_id))


@pytest.mark.skipif(sys.platform == "win32", reason="posix paths")
def test_absolute_id_percent_escapes_are_decoded() -> None:
    assert resolve_origin(VirtualFileAbsolute("/home/u/a%41b/X.scala")) == Path("/home/u/aAb/X.scala")


def test_unknown_origin_shape_is_fatal() -> None:
    with pytest.raises(UnrecognizedOriginError, match="str"):
        resolve_origin("/proj/app/Foo.scala")  # type: ignore[arg-type]


def test_virtual_file_with_marker_is_relative() -> None:
    origin = origin_from_virtual_file(["${BASE}", "app", "Foo.scala"], "${BASE}/app/Foo.scala")
    assert origin == VirtualFileRelative(("${BASE}", "app", "Foo.scala"))


def test_virtual_file_outside_base_uses_id() -> None:
    origin = origin_from_virtual_file(["home", "u", "sub", "Foo.scala"], "/home/u/sub/Foo.scala")
    assert origin == VirtualFileAbsolute("/home/u/sub/Foo.scala")


def test_origin_dict_forms() -> None:
    assert origin_from_dict(None) is None
    assert origin_from_dict({"kind": "file", "path": "/a/B.scala"}) == PlainFile(Path("/a/B.scala"))
    assert origin_from_dict({"kind": "virtual_absolute", "id": "/a/B.scala"}) == VirtualFileAbsolute("/a/B.scala")

    relative = VirtualFileRelative(("${BASE}", "a", "B.scala"))
    assert origin_from_dict(origin_to_dict(relative)) == relative


def test_origin_dict_with_unknown_kind_is_rejected() -> None:
    with pytest.raises(UnrecognizedOriginError, match="jar"):
        origin_from_dict({"kind": "jar", "path": "lib.jar"})
