from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from stackwalk.clouds import ARCH_MAP, name_for_arch
from stackwalk.config import merge_payload, order_defaults, trace_defaults
from stackwalk.core.passes import CloudTargetChecker, NameBinder
from stackwalk.core.trace import TraceVisitor
from stackwalk.core.visitor import walk
from stackwalk.diag import DefaultSink, Document
from stackwalk.exceptions import NeverThrown
from stackwalk.model import Stack
from stackwalk.order_contract import OrderPolicy, normalize_policy, order_policy
from stackwalk.runtime.stable_encode import stable_pretty_text
from stackwalk.schema import StackDTO, stack_from_dto

app = typer.Typer(add_completion=False)

logger = logging.getLogger(__name__)

_TRACE_FORMATS = ("text", "json")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Deterministic traversal of stack documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_stack(path: Path) -> tuple[Document, Stack]:
    try:
        body = path.read_bytes()
    except OSError as exc:
        raise typer.BadParameter(f"cannot read {path}: {exc}") from exc
    try:
        dto = StackDTO.model_validate_json(body)
    except ValidationError as exc:
        raise typer.BadParameter(f"{path} is not a stack payload: {exc}") from exc
    logger.debug("loaded %s (%d bytes)", path, len(body))
    return Document(file=str(path), body=body), stack_from_dto(dto)


def _resolve_order_policy(
    explicit: Optional[str],
    *,
    root: Path,
    config: Optional[Path],
) -> OrderPolicy:
    settings = merge_payload(
        {"policy": explicit},
        order_defaults(root=root, config_path=config),
    )
    raw = settings.get("policy", OrderPolicy.SORT.value)
    try:
        return normalize_policy(str(raw))
    except NeverThrown as exc:
        raise typer.BadParameter(f"unknown order policy {raw!r}") from exc


@app.command()
def trace(
    path: Path = typer.Argument(..., exists=True, dir_okay=False),
    output_format: Optional[str] = typer.Option(None, "--format"),
    bind_names: Optional[bool] = typer.Option(None, "--bind/--no-bind"),
    policy: Optional[str] = typer.Option(None, "--order-policy"),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Print the visit order of a stack payload."""
    settings = merge_payload(
        {"format": output_format, "bind_names": bind_names},
        trace_defaults(root=root, config_path=config),
    )
    fmt = str(settings.get("format", "text"))
    if fmt not in _TRACE_FORMATS:
        raise typer.BadParameter(f"--format must be one of {', '.join(_TRACE_FORMATS)}")
    doc, stack = _load_stack(path)
    recorder = TraceVisitor()
    post = NameBinder() if settings.get("bind_names", False) else None
    with order_policy(_resolve_order_policy(policy, root=root, config=config)):
        walk(doc, stack, recorder, post)
    if fmt == "json":
        typer.echo(stable_pretty_text(recorder.to_payload()))
        return
    for line in recorder.lines():
        typer.echo(line)


@app.command()
def check(
    path: Path = typer.Argument(..., exists=True, dir_okay=False),
    policy: Optional[str] = typer.Option(None, "--order-policy"),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Check target clouds and report diagnostics."""
    doc, stack = _load_stack(path)
    sink = DefaultSink()
    with order_policy(_resolve_order_policy(policy, root=root, config=config)):
        walk(doc, stack, CloudTargetChecker(sink), NameBinder())
    for line in sink.lines():
        typer.echo(line, err=True)
    if not sink.success():
        typer.echo(f"{sink.errors()} error(s), {sink.warnings()} warning(s)", err=True)
        raise typer.Exit(code=1)


@app.command()
def archs(
    as_json: bool = typer.Option(False, "--json"),
) -> None:
    """List the cloud architectures a target may select."""
    rows = [(int(arch), name_for_arch(arch)) for arch in sorted(ARCH_MAP.values())]
    if as_json:
        typer.echo(json.dumps([{"arch": arch, "name": name} for arch, name in rows]))
        return
    for arch, name in rows:
        typer.echo(f"{arch}\t{name or '(none)'}")


if __name__ == "__main__":  # pragma: no cover
    app()
