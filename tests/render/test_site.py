"""Tests for the HTML site renderer."""

from __future__ import annotations

from pathlib import Path

import pytest

from docmod.models import Constant, Method, Module, Package, PathPart, Type, Variable
from docmod.render import SiteRenderer, TemplateError


def _module() -> Module:
    module = Module(name="docmod", import_path="example.com/docmod", dir_name="docmod")
    package = Package(
        module_name="example.com/docmod",
        import_path="example.com/docmod/a/b",
        path="a/b",
        name="b",
        synopsis="Package b does <things>.",
        comment_html="<p>Package b does &lt;things&gt;.</p>",
        file_name="a_b.html",
        constants=[Constant(["ONE", "TWO"], "", "ONE, TWO = 1, 2")],
        types=[
            Type(
                name="Walker",
                comment_html="<p>Walker walks.</p>",
                code="class Walker(Base):\n    speed: int = 1",
                variables=[Variable(["default_walker"], "", "default_walker = Walker()")],
                methods=[Method("walk", "", "def walk(self): ...", receiver="Walker", embedded_type="Base", level=1)],
            )
        ],
        path_parts=[PathPart("docmod", "index.html"), PathPart("a", ""), PathPart("b", "a_b.html")],
    )
    module.add(package)
    return module


def test_package_page_renders_breadcrumbs_and_members() -> None:
    module = _module()
    html = SiteRenderer().render_package(module, module.packages[0])

    assert '<a href="index.html">docmod</a>' in html
    assert "<span>a</span>" in html
    assert '<a href="a_b.html">b</a>' in html
    assert "<p>Package b does &lt;things&gt;." in html
    assert '<h3 id="Walker">type Walker</h3>' in html
    assert '<h4 id="Walker.walk">method Walker.walk' in html
    assert "from Base" in html


def test_index_lists_packages_with_escaped_synopsis() -> None:
    html = SiteRenderer().render_index(_module())
    assert '<a href="a_b.html">a/b</a>' in html
    assert "Package b does &lt;things&gt;." in html


def test_write_creates_pages(tmp_path: Path) -> None:
    written = SiteRenderer().write(_module(), tmp_path / "site")
    assert [path.name for path in written] == ["a_b.html", "index.html"]
    assert all(path.exists() for path in written)


def test_custom_templates_replace_defaults(tmp_path: Path) -> None:
    package_template = tmp_path / "pkg.j2"
    package_template.write_text("{{ package.name }}|{{ package.synopsis }}", encoding="utf-8")
    index_template = tmp_path / "idx.j2"
    index_template.write_text("{% for p in packages %}{{ p.file_name }};{% endfor %}", encoding="utf-8")

    renderer = SiteRenderer(package_template=package_template, index_template=index_template)
    module = _module()
    assert renderer.render_package(module, module.packages[0]) == "b|Package b does &lt;things&gt;."
    assert renderer.render_index(module) == "a_b.html;"


def test_missing_template_raises(tmp_path: Path) -> None:
    with pytest.raises(TemplateError, match="not found"):
        SiteRenderer(package_template=tmp_path / "nope.j2")


def test_broken_template_raises(tmp_path: Path) -> None:
    broken = tmp_path / "broken.j2"
    broken.write_text("{% for x in %}", encoding="utf-8")
    with pytest.raises(TemplateError):
        SiteRenderer(index_template=broken)


def test_values_carry_anchors_for_every_name() -> None:
    module = _module()
    html = SiteRenderer().render_package(module, module.packages[0])
    assert '<pre id="ONE">ONE, TWO = 1, 2</pre>' in html
    assert '<span id="TWO"></span>' in html
    assert '<pre id="default_walker">default_walker = Walker()</pre>' in html
