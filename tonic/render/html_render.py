"""HTML template rendering backed by Jinja2."""

from __future__ import annotations

import fnmatch
import posixpath
from dataclasses import dataclass, field
from glob import glob as _glob_files
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import jinja2

from tonic.fs import FSAdapter
from tonic.render.core import Render, write_content_type

HTML_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass(frozen=True)
class Delims:
    """Left and right delimiters of template expressions."""

    left: str = "{{"
    right: str = "}}"


def _environment(
    sources: dict[str, str], delims: Delims, func_map: Mapping[str, Callable] | None
) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.DictLoader(sources),
        variable_start_string=delims.left,
        variable_end_string=delims.right,
        autoescape=True,
        keep_trailing_newline=True,
    )
    functions = dict(func_map or {})
    env.globals.update(functions)
    env.filters.update(functions)
    return env


def _read(filesystem: FSAdapter, name: str) -> str:
    handle = filesystem.open(name)
    try:
        data = handle.read()
    finally:
        close = getattr(handle, "close", None)
        if callable(close):
            close()
    return data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data


def _match(filesystem: FSAdapter, pattern: str) -> list[str]:
    if not any(char in pattern for char in "*?["):
        return [pattern]
    dirname, base = posixpath.split(pattern)
    handle = filesystem.open(dirname or ".")
    try:
        entries = handle.readdir(0)
    finally:
        close = getattr(handle, "close", None)
        if callable(close):
            close()
    names = sorted(
        name
        for name in (getattr(entry, "name", entry) for entry in entries)
        if fnmatch.fnmatchcase(name, base)
    )
    return [posixpath.join(dirname, name) if dirname else name for name in names]


def load_templates(
    files: Sequence[str] | None,
    glob: str,
    filesystem: Any,
    patterns: Sequence[str] | None,
    delims: Delims,
    func_map: Mapping[str, Callable] | None,
) -> jinja2.Environment:
    """Load templates from files, a glob pattern, or a file system with patterns.

    The first source given wins, in that order. Templates are named by the base
    name of their file. Raises ValueError when no source is given or a pattern
    matches nothing.
    """
    sources: dict[str, str] = {}
    if files:
        for file in files:
            path = Path(file)
            sources[path.name] = path.read_text(encoding="utf-8")
    elif glob:
        matches = sorted(_glob_files(glob))
        if not matches:
            raise ValueError(f"html/template: pattern matches no files: `{glob}`")
        for match in matches:
            path = Path(match)
            sources[path.name] = path.read_text(encoding="utf-8")
    elif filesystem is not None and patterns:
        adapter = FSAdapter(filesystem)
        for pattern in patterns:
            names = _match(adapter, pattern)
            if not names:
                raise ValueError(f"template: pattern matches no files: `{pattern}`")
            for name in names:
                sources[posixpath.basename(name)] = _read(adapter, name)
    else:
        raise ValueError(
            "the HTML debug render was created without files or glob pattern "
            "or file system with patterns"
        )
    return _environment(sources, delims, func_map)


def _resolve(template: jinja2.Environment | jinja2.Template, name: str) -> jinja2.Template:
    if not name:
        if isinstance(template, jinja2.Template):
            return template
        raise ValueError('template: "" is an incomplete or empty template')
    if isinstance(template, jinja2.Template):
        if template.name == name:
            return template
        return template.environment.get_template(name)
    return template.get_template(name)


@dataclass
class HTML(Render):
    """A template, the name of the template to run and its data.

    Mapping data becomes the template context; any other value is exposed as ``data``.
    """

    template: Any
    name: str
    data: Any = None

    def render(self, writer: Any) -> None:
        self.write_content_type(writer)
        compiled = _resolve(self.template, self.name)
        if self.data is None:
            context: Mapping[str, Any] = {}
        elif isinstance(self.data, Mapping):
            context = self.data
        else:
            context = {"data": self.data}
        writer.write(compiled.render(context).encode("utf-8"))

    def write_content_type(self, writer: Any) -> None:
        write_content_type(writer, HTML_CONTENT_TYPE)


@dataclass
class HTMLProduction:
    """Renders with templates loaded once."""

    template: Any
    delims: Delims = field(default_factory=Delims)

    def instance(self, name: str, data: Any) -> HTML:
        return HTML(template=self.template, name=name, data=data)


@dataclass
class HTMLDebug:
    """Reloads templates from their sources on every render."""

    files: list[str] = field(default_factory=list)
    glob: str = ""
    filesystem: Any = None
    patterns: list[str] = field(default_factory=list)
    delims: Delims = field(default_factory=Delims)
    func_map: Mapping[str, Callable] | None = None

    def instance(self, name: str, data: Any) -> HTML:
        template = load_templates(
            self.files, self.glob, self.filesystem, self.patterns, self.delims, self.func_map
        )
        return HTML(template=template, name=name, data=data)