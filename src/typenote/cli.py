"""typenote command line interface."""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass, replace
from pathlib import Path

import click

from typenote import __version__
from typenote.config import TypenoteConfig, find_config, load_config
from typenote.errors import CompileError, DiagnosticRenderer
from typenote.parser import parse
from typenote.renderer import TypeRenderer
from typenote.type_nodes import Node, node_kind, node_to_dict


def _parse_or_exit(annotation: str, color: bool):
    """Parse one annotation, printing diagnostics and exiting on failure."""
    try:
        return parse(annotation)
    except CompileError as e:
        renderer = DiagnosticRenderer(color=color)
        renderer.add_source("<annotation>", annotation)
        for diag in e.diagnostics:
            click.echo(renderer.render(diag), err=True)
        raise SystemExit(1)


def _load_render_config(config_path: str | None) -> TypenoteConfig:
    if config_path is not None:
        return load_config(Path(config_path))
    try:
        return load_config(find_config())
    except FileNotFoundError:
        return TypenoteConfig()


@click.group()
@click.version_option(__version__, prog_name="typenote")
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
@click.pass_context
def main(ctx: click.Context, no_color: bool) -> None:
    """Parse and render doc-comment type annotations."""
    ctx.ensure_object(dict)
    ctx.obj["color"] = not no_color


@main.command(name="parse")
@click.argument("annotation")
@click.option("--json", "as_json", is_flag=True, help="Print the tree as JSON.")
@click.pass_context
def parse_cmd(ctx: click.Context, annotation: str, as_json: bool) -> None:
    """Print the type tree of an annotation."""
    node = _parse_or_exit(annotation, ctx.obj["color"])
    if as_json:
        click.echo(json.dumps(node_to_dict(node), indent=2, ensure_ascii=False))
    else:
        _dump_tree(node, 0)


@main.command()
@click.argument("annotation")
@click.option("--name", default=None, help="Render a named declaration.")
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to typenote.toml (default: search upwards).",
)
@click.pass_context
def render(ctx: click.Context, annotation: str, name: str | None,
           config_path: str | None) -> None:
    """Render an annotation as TypeScript."""
    node = _parse_or_exit(annotation, ctx.obj["color"])
    try:
        config = _load_render_config(config_path)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    renderer = TypeRenderer.from_config(config)
    if name is not None:
        text = renderer.render_declaration(name, node)
    else:
        text = renderer.render(node)
    for line in renderer.import_lines():
        click.echo(line)
    click.echo(text)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def check(ctx: click.Context, file: str) -> None:
    """Check a file of annotations, one per line.

    Blank lines and lines starting with '#' are skipped. A bad line is
    reported and checking carries on with the next one.
    """
    path = Path(file)
    renderer = DiagnosticRenderer(color=ctx.obj["color"])
    source = path.read_text()
    renderer.add_source(str(path), source)
    checked = 0
    failed = 0

    for lineno, line in enumerate(source.splitlines(), start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        checked += 1
        offset = len(line) - len(line.lstrip())
        try:
            parse(text, str(path))
        except CompileError as e:
            failed += 1
            for diag in e.diagnostics:
                diag.labels = [
                    _relocate(label, lineno, offset) for label in diag.labels
                ]
                click.echo(renderer.render(diag), err=True)

    if failed:
        click.echo(f"checked {checked} annotations, {failed} failed", err=True)
        raise SystemExit(1)
    click.echo(f"checked {checked} annotations, no errors")


def _relocate(label, lineno: int, offset: int):
    """Move a label from annotation coordinates to file coordinates."""
    span = label.span
    return replace(label, span=replace(
        span,
        start_line=lineno,
        end_line=lineno,
        start_col=span.start_col + offset,
        end_col=span.end_col + offset,
    ))


def _dump_tree(node: Node, depth: int) -> None:
    """Print a readable tree dump."""
    indent = "  " * depth
    click.echo(f"{indent}{node_kind(node)}")
    for f in fields(node):
        if f.name == "span":
            continue
        value = getattr(node, f.name)
        if isinstance(value, tuple):
            if value:
                click.echo(f"{indent}  {f.name}:")
                for item in value:
                    _dump_tree(item, depth + 2)
            else:
                click.echo(f"{indent}  {f.name}: []")
        elif is_dataclass(value):
            click.echo(f"{indent}  {f.name}:")
            _dump_tree(value, depth + 2)
        elif value is not None and value is not False:
            click.echo(f"{indent}  {f.name}: {value!r}")
