"""Typer CLI entrypoint for node decommissioning."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from ..config import get_settings, load_config
from ..config.schema import DecommissionConfig
from ..core.exceptions import ConfigError, InvalidInputError
from ..core.logging import configure_logging
from ..orchestration import build_decommissioner, normalize_nodes
from ..storeconfigs.database import create_db_engine, init_db

app = typer.Typer(no_args_is_help=True, help="Clean up everything the infrastructure knows about a node.")


def _load(config_path: Optional[Path], overrides: Optional[List[str]]) -> DecommissionConfig:
    path = config_path or get_settings().CONFIG_PATH
    try:
        return load_config(path, overrides=overrides or [])
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)


def _log_level(config: DecommissionConfig, verbose: bool, debug: bool) -> str:
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return get_settings().LOG_LEVEL or config.logging.level


@app.command()
def clean(
    nodes: Optional[List[str]] = typer.Argument(None, help="Names of the nodes to decommission."),
    unexport: bool = typer.Option(
        False,
        "--unexport/--no-unexport",
        "-u",
        help="Set exported resources supporting ensure to absent instead of removing the host's stored configuration.",
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="Path to YAML config"),
    override: Optional[List[str]] = typer.Option(None, "--override", help="Override key=value pairs"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each completed step."),
    debug: bool = typer.Option(False, "--debug", "-d", help="Log debugging detail."),
    trace: bool = typer.Option(False, "--trace", help="Print the traceback of a failure."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit structured JSON log lines."),
) -> None:
    """Remove certificates, cached facts and nodes, reports and stored configs of NODES.

    With --unexport the host's exported resources are forced to absent so that
    consumers drop them on their next run; clean the node again without
    --unexport once they have.
    """
    try:
        names = normalize_nodes(nodes or [])
    except InvalidInputError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    cfg = _load(config, override)
    if trace:
        cfg.logging.trace = True
    configure_logging(
        level=_log_level(cfg, verbose, debug),
        log_dir=cfg.logging.log_dir,
        json_logs=json_logs or cfg.logging.json_logs,
    )

    decommissioner = build_decommissioner(cfg)
    try:
        result = decommissioner.decommission(names, unexport=unexport)
    finally:
        decommissioner.close()

    for outcome in result.outcomes:
        if outcome.error is not None:
            typer.echo(str(outcome.error), err=True)
    if not result.success:
        raise typer.Exit(code=1)
    typer.echo(f"Cleaned {', '.join(outcome.node for outcome in result.outcomes)}")


@app.command("init-db")
def init_database(
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="Path to YAML config"),
    override: Optional[List[str]] = typer.Option(None, "--override", help="Override key=value pairs"),
) -> None:
    """Create the stored-configuration tables if they do not exist."""
    cfg = _load(config, override)
    url = cfg.storeconfigs.database_url
    init_db(create_db_engine(url))
    typer.echo(f"Stored-configuration schema ready at {url}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
