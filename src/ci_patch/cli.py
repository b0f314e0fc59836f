"""CLI commands for applying review patches inside CI jobs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from .config import (
    DEFAULT_CONFIG_NAME,
    build_request,
    load_config,
    resolve_workspace,
    write_default_config,
)
from .models import ConfigError, PatchRequest, TaskResult
from .tasks.apply_patch import ApplyPatchTask
from .tools.process import SubprocessRunner
from .tools.remote_file import LocalRemoteFile
from .utils.logger import MASK, TaskLogger

APP_HELP = "Apply code-review patches to CI working copies."

app = typer.Typer(help=APP_HELP)


def _load_request(config_path: Path, overrides: Dict[str, Any]) -> tuple[PatchRequest, Path]:
    try:
        config_data = load_config(config_path)
        request = build_request(config_data, config_path, overrides=overrides)
        workspace = resolve_workspace(config_data, config_path)
    except ConfigError as error:
        typer.echo(str(error))
        raise typer.Exit(code=2) from error
    return request, workspace


@app.command()
def init(
    config: str = typer.Option(
        DEFAULT_CONFIG_NAME,
        "--config",
        "-c",
        help="Path to the configuration file to create.",
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing configuration file."),
) -> None:
    """Write a starter configuration file."""
    config_path = Path(config)
    if config_path.exists() and not force:
        typer.echo(f"Config already exists: {config_path} (use --force to overwrite)")
        raise typer.Exit(code=1)
    write_default_config(config_path)
    typer.echo(f"Wrote {config_path}")


@app.command()
def apply(
    config: str = typer.Option(
        DEFAULT_CONFIG_NAME,
        "--config",
        "-c",
        help="Path to the configuration file.",
    ),
    diff_id: Optional[str] = typer.Option(None, "--diff-id", help="Review diff identifier."),
    raw_diff: Optional[Path] = typer.Option(None, "--raw-diff", help="Path to a unified diff to apply."),
    revision_type: Optional[str] = typer.Option(None, "--revision-type", help="'diffusion' or any other value."),
    scm_type: Optional[str] = typer.Option(None, "--scm-type", help="'git' or any other value."),
    base_commit: Optional[str] = typer.Option(None, "--base-commit", help="Ref to reset git workspaces to."),
    build_number: Optional[int] = typer.Option(None, "--build-number", help="Build number used in temp file names."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Emit telemetry events to stderr."),
) -> None:
    """Apply the configured patch and exit non-zero on failure."""
    if verbose:
        logging.basicConfig(level=logging.INFO)

    overrides: Dict[str, Any] = {
        "diff_id": diff_id,
        "raw_diff_path": raw_diff.as_posix() if raw_diff is not None else None,
        "revision_type": revision_type,
        "scm_type": scm_type,
        "base_commit": base_commit,
        "build_number": build_number,
    }
    request, workspace = _load_request(Path(config), overrides)

    logger = TaskLogger()
    task = ApplyPatchTask(
        logger,
        request,
        runner=SubprocessRunner(workspace, logger=logger),
        remote=LocalRemoteFile(),
    )
    result = task.run()
    typer.echo(f"Patch result: {result.value}")
    if result is not TaskResult.SUCCESS:
        raise typer.Exit(code=1)


@app.command()
def status(
    config: str = typer.Option(
        DEFAULT_CONFIG_NAME,
        "--config",
        "-c",
        help="Path to the configuration file.",
    )
) -> None:
    """Validate configuration and show the resolved request."""
    request, workspace = _load_request(Path(config), {})
    typer.echo(f"Workspace: {workspace}")
    typer.echo(f"Revision type: {request.revision_type.value} ({request.tag})")
    typer.echo(f"SCM type: {request.scm_type.value}")
    if request.revision_type.is_review_tool_native:
        typer.echo(f"Diff: {request.diff_id}")
    else:
        typer.echo(f"Raw diff: {len(request.raw_diff)} characters")
    typer.echo(f"Base commit: {request.base_commit or '(none)'}")
    typer.echo(f"Conduit token: {MASK if request.conduit_token else '(none)'}")
    typer.echo(f"Tools: git={request.tools.git} arc={request.tools.arc} svn={request.tools.svn}")


if __name__ == "__main__":
    app()
