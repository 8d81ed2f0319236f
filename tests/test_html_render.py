from datetime import datetime

import jinja2
import pytest

from tonic.fs import DirFS
from tonic.render.core import Recorder
from tonic.render.html_render import (
    Delims,
    HTMLDebug,
    HTMLProduction,
    load_templates,
)

CUSTOM = Delims(left="{[{", right="}]}")


@pytest.fixture
def template_dir(tmp_path):
    (tmp_path / "hello.tmpl").write_text("<h1>Hello {[{ name }]}</h1>", encoding="utf-8")
    (tmp_path / "raw.tmpl").write_text("Date: {[{ now | format_as_date }]}", encoding="utf-8")
    return tmp_path


def format_as_date(t):
    return f"{t.year}/{t.month:02d}/{t.day:02d}"


def test_render_html_template():
    env = jinja2.Environment(loader=jinja2.DictLoader({"t": "Hello {{ name }}"}))
    w = Recorder()
    HTMLProduction(template=env).instance("t", {"name": "alexandernyquist"}).render(w)
    assert w.text == "Hello alexandernyquist"
    assert w.header.get("Content-Type") == "text/html; charset=utf-8"


def test_render_html_template_empty_name():
    templ = jinja2.Environment().from_string("Hello {{ name }}")
    w = Recorder()
    HTMLProduction(template=templ).instance("", {"name": "alexandernyquist"}).render(w)
    assert w.text == "Hello alexandernyquist"
    assert w.header.get("Content-Type") == "text/html; charset=utf-8"


def test_render_html_debug_files(template_dir):
    w = Recorder()
    render = HTMLDebug(files=[str(template_dir / "hello.tmpl")], delims=CUSTOM)
    render.instance("hello.tmpl", {"name": "thinkerou"}).render(w)
    assert w.text == "<h1>Hello thinkerou</h1>"
    assert w.header.get("Content-Type") == "text/html; charset=utf-8"


def test_render_html_debug_glob(template_dir):
    w = Recorder()
    render = HTMLDebug(glob=str(template_dir / "hello*"), delims=CUSTOM)
    render.instance("hello.tmpl", {"name": "thinkerou"}).render(w)
    assert w.text == "<h1>Hello thinkerou</h1>"


def test_render_html_debug_fs(template_dir):
    w = Recorder()
    render = HTMLDebug(
        filesystem=DirFS(str(template_dir)), patterns=["hello.tmpl"], delims=CUSTOM
    )
    render.instance("hello.tmpl", {"name": "thinkerou"}).render(w)
    assert w.text == "<h1>Hello thinkerou</h1>"


def test_render_html_debug_fs_pattern(template_dir):
    w = Recorder()
    render = HTMLDebug(filesystem=DirFS(str(template_dir)), patterns=["*.tmpl"], delims=CUSTOM)
    render.instance("hello.tmpl", {"name": "thinkerou"}).render(w)
    assert w.text == "<h1>Hello thinkerou</h1>"


def test_render_html_debug_without_sources():
    with pytest.raises(ValueError, match="without files or glob pattern"):
        HTMLDebug().instance("", None)


def test_func_map(template_dir):
    w = Recorder()
    render = HTMLDebug(
        files=[str(template_dir / "hello.tmpl"), str(template_dir / "raw.tmpl")],
        delims=CUSTOM,
        func_map={"format_as_date": format_as_date},
    )
    render.instance("raw.tmpl", {"now": datetime(2017, 7, 1)}).render(w)
    assert w.text == "Date: 2017/07/01"


def test_production_with_loaded_templates(template_dir):
    env = load_templates(
        [str(template_dir / "hello.tmpl")], "", None, None, CUSTOM, None
    )
    w = Recorder()
    HTMLProduction(template=env).instance("hello.tmpl", {"name": "world"}).render(w)
    assert w.text == "<h1>Hello world</h1>"


def test_output_is_escaped(template_dir):
    env = load_templates([str(template_dir / "hello.tmpl")], "", None, None, CUSTOM, None)
    w = Recorder()
    HTMLProduction(template=env).instance("hello.tmpl", {"name": "<b>"}).render(w)
    assert w.text == "<h1>Hello &lt;b&gt;</h1>"


def test_glob_without_matches(tmp_path):
    with pytest.raises(ValueError, match="pattern matches no files"):
        load_templates(None, str(tmp_path / "missing*"), None, None, Delims(), None)


def test_unknown_template_name(template_dir):
    env = load_templates([str(template_dir / "hello.tmpl")], "", None, None, CUSTOM, None)
    with pytest.raises(jinja2.TemplateNotFound):
        HTMLProduction(template=env).instance("nope.tmpl", {}).render(Recorder())


def test_empty_name_on_template_set_fails(template_dir):
    env = load_templates([str(template_dir / "hello.tmpl")], "", None, None, CUSTOM, None)
    with pytest.raises(ValueError, match="incomplete or empty template"):
        HTMLProduction(template=env).instance("", {}).render(Recorder())