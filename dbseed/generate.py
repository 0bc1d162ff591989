"""
Generate the seeding script from a properties document.
"""
from __future__ import annotations
import pathlib
import typing as t

from dbseed.assemble import build_plan
from dbseed.emit import emit
from dbseed.plan import Links
from dbseed.validate import validate


def generate(
    props: dict[str, t.Any],
    links: Links | t.Mapping[str, t.Any] | None = None,
) -> str:
    """Assemble, validate and render; nothing is returned on failure."""
    return emit(validate(build_plan(props, links)))


def write_script(
    props: dict[str, t.Any],
    path: pathlib.Path,
    *,
    links: Links | t.Mapping[str, t.Any] | None = None,
) -> pathlib.Path:
    """
    Render first, then write *path*; an invalid document leaves any
    existing file untouched.
    """
    sql = generate(props, links)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(sql, encoding="utf-8")
    return path
