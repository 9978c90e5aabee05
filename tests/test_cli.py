"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import docmod.cli as cli
from docmod.cli import _build_parser
from tests._fixtures.tree_builder import TreeBuilder


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


def test_cli_accepts_verbose_before_command() -> None:
    args = _build_parser().parse_args(["--verbose", "build"])
    assert args.verbose is True
    assert args.command == "build"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    args = _build_parser().parse_args(["inspect", "src", "--verbose"])
    assert args.verbose is True
    assert args.command == "inspect"
    assert args.path == "src"


def test_cli_build_options() -> None:
    args = _build_parser().parse_args(
        ["build", "src", "-o", "site", "--package-template", "p.j2", "--index-template", "i.j2"]
    )
    assert (args.output, args.package_template, args.index_template) == ("site", "p.j2", "i.j2")


def test_cli_requires_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def test_main_build_writes_pages(tree_builder: TreeBuilder, tmp_path: Path, capsys) -> None:
    tree_builder.pyproject("kit")
    tree_builder.write({"__init__.py": '"""Package kit."""\n'})

    cli.main(["build", str(tree_builder.path()), "-o", str(tmp_path / "out")])

    assert "Wrote 2 pages" in capsys.readouterr().out
    assert (tmp_path / "out" / "kit.html").exists()


def test_main_inspect_prints_json(tree_builder: TreeBuilder, capsys) -> None:
    tree_builder.pyproject("kit")
    tree_builder.write({"__init__.py": '"""Package kit."""\n'})

    cli.main(["inspect", str(tree_builder.path())])

    document = json.loads(capsys.readouterr().out)
    assert document["packages"][0]["file_name"] == "kit.html"


def test_main_exits_on_fatal_errors(tree_builder: TreeBuilder, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["inspect", str(tree_builder.path())])
    assert excinfo.value.code == 1
    assert "docmod inspect failed" in capsys.readouterr().err
