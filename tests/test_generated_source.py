from __future__ import annotations

from pathlib import Path

from devreload.sources.generated import read_generated_source, unwrap_generated

PROJECT = Path(__file__).parent / "fixtures" / "sample_project"
TEMPLATE = PROJECT / "target" / "scala-2.13" / "twirl" / "main" / "views" / "html" / "index.template.scala"


def test_generated_template_unwraps_to_authored_file() -> None:
    original = unwrap_generated(TEMPLATE, project_root=PROJECT)
    assert original == PROJECT / "app" / "views" / "index.scala.html"


def test_plain_source_is_not_generated() -> None:
    assert unwrap_generated(PROJECT / "app" / "controllers" / "HomeController.scala", project_root=PROJECT) is None


def test_missing_file_is_not_generated(tmp_path: Path) -> None:
    assert unwrap_generated(tmp_path / "Nope.scala") is None


def test_source_that_no_longer_exists_is_dropped(tmp_path: Path) -> None:
    generated = tmp_path / "gone.template.scala"
    generated.write_text(
        "object gone\n/*\n -- GENERATED --\n SOURCE: app/views/gone.scala.html\n -- GENERATED --\n*/\n",
        encoding="utf-8",
    )
    assert read_generated_source(generated) is not None
    assert unwrap_generated(generated, project_root=tmp_path) is None


def test_header_without_source_is_ignored(tmp_path: Path) -> None:
    generated = tmp_path / "x.scala"
    generated.write_text("/*\n -- GENERATED --\n HASH: abc\n -- GENERATED --\n*/\n", encoding="utf-8")
    assert read_generated_source(generated) is None


def test_meta_keeps_values_with_colons() -> None:
    generated = read_generated_source(TEMPLATE)
    assert generated is not None
    assert generated.meta["DATE"] == "2026-01-01T00:00:00"
    assert generated.meta["HASH"] == "3b8d7a1c"


def test_line_and_position_mapping() -> None:
    generated = read_generated_source(TEMPLATE)
    assert generated is not None

    assert generated.map_line(3) == 0
    assert generated.map_line(4) == 1
    assert generated.map_line(7) == 4
    assert generated.map_line(12) == 7

    assert generated.map_position(45) == 10
    assert generated.map_position(5) == 0
