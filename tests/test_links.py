"""Tests for doc link parsing and URL resolution."""

from __future__ import annotations

import pytest

from docmod.links import STDLIB_SOURCE, DocLink, LinkResolver
from docmod.naming import make_file_name


@pytest.fixture
def resolver() -> LinkResolver:
    return LinkResolver(
        "example.com/docmod",
        "mod",
        symbols={"Module", "Package", "NewModule"},
        package_names={"mod": "mod", "tmpl": "templates"},
        module_packages={"mod": "example.com/docmod/mod", "templates": "example.com/docmod/tmpl"},
    )


def test_same_module_reference_with_receiver(resolver: LinkResolver) -> None:
    link = DocLink(text="x", import_path="example.com/docmod/sub", recv="Bar", name="Foo")
    expected = make_file_name("example.com/docmod", "sub", "sub") + "#Bar.Foo"
    assert resolver.url_for(link) == expected == "sub.html#Bar.Foo"


def test_same_module_reference_uses_declared_package_name(resolver: LinkResolver) -> None:
    link = DocLink(text="x", import_path="example.com/docmod/tmpl", name="PackageTemplate")
    assert resolver.url_for(link) == "tmpl_templates.html#PackageTemplate"


def test_same_module_root_reference(resolver: LinkResolver) -> None:
    assert resolver.url_for(DocLink(text="x", import_path="example.com/docmod")) == "docmod.html"


def test_dotted_external_path_is_a_literal_url(resolver: LinkResolver) -> None:
    link = DocLink(text="x", import_path="github.com/pallets/jinja", name="Environment")
    assert resolver.url_for(link) == "https://github.com/pallets/jinja#Environment"


def test_bare_external_path_points_at_stdlib_docs(resolver: LinkResolver) -> None:
    assert resolver.url_for(DocLink(text="x", import_path="pathlib")) == STDLIB_SOURCE + "pathlib"


def test_local_symbol_is_an_in_page_anchor(resolver: LinkResolver) -> None:
    assert resolver.url_for(DocLink(text="x", name="Module")) == "#Module"
    assert resolver.url_for(DocLink(text="x", recv="Package", name="HTML")) == "#Package.HTML"


def test_empty_reference_resolves_to_no_link(resolver: LinkResolver) -> None:
    assert resolver.url_for(DocLink(text="x")) == ""


def test_custom_stdlib_host() -> None:
    resolver = LinkResolver("m", "m", stdlib_url="https://pkg.go.dev/")
    assert resolver.url_for(DocLink(text="x", import_path="fmt", name="Print")) == "https://pkg.go.dev/fmt#Print"


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("Module", DocLink(text="Module", name="Module")),
        ("*Module", DocLink(text="*Module", name="Module")),
        ("Package.HTML", DocLink(text="Package.HTML", recv="Package", name="HTML")),
        ("mod", DocLink(text="mod", import_path="example.com/docmod/mod")),
        ("mod.Module", DocLink(text="mod.Module", import_path="example.com/docmod/mod", name="Module")),
        (
            "mod.Package.HTML",
            DocLink(text="mod.Package.HTML", import_path="example.com/docmod/mod", recv="Package", name="HTML"),
        ),
        ("os", DocLink(text="os", import_path="os")),
        ("json.dumps", DocLink(text="json.dumps", import_path="json", name="dumps")),
        (
            "example.com/docmod/sub.Bar.Foo",
            DocLink(text="example.com/docmod/sub.Bar.Foo", import_path="example.com/docmod/sub", recv="Bar", name="Foo"),
        ),
        ("golang.org/x/mod", DocLink(text="golang.org/x/mod", import_path="golang.org/x/mod")),
    ],
)
def test_parse_doc_links(resolver: LinkResolver, target: str, expected: DocLink) -> None:
    assert resolver.parse(target) == expected


@pytest.mark.parametrize(
    "target",
    ["", "unknownword", "unknown.Name", "two words", "a.b.c.d", "1abc", "x/y.A.B.C", "/abs", "https://example.com/x"],
)
def test_parse_rejects_non_links(resolver: LinkResolver, target: str) -> None:
    assert resolver.parse(target) is None
