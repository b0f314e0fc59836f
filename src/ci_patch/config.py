"""YAML configuration for patch runs."""

from __future__ import annotations

import copy
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from .models import ConfigError, PatchRequest, ToolPaths

DEFAULT_CONFIG_NAME = "ci-patch.yaml"

DEFAULT_CONFIG_TEMPLATE: Dict[str, Any] = {
    "patch": {
        "revision_type": "diffusion",
        "scm_type": "git",
        "base_commit": "origin/master",
        "diff_id": "",
        "raw_diff_path": "",
        "conduit_token": "",
        "create_commit": False,
        "create_branch": False,
        "patch_with_force_flag": False,
        "skip_forced_clean": False,
        "build_number": None,
    },
    "tools": {
        "git": "",
        "arc": "",
        "svn": "",
    },
    "paths": {
        "workspace": ".",
        "temp_dir": "",
    },
}

_BOOLEAN_KEYS = ("create_commit", "create_branch", "patch_with_force_flag", "skip_forced_clean")


def _copy_config_template() -> Dict[str, Any]:
    """Return a deep copy of the default configuration template."""
    return copy.deepcopy(DEFAULT_CONFIG_TEMPLATE)


def write_default_config(config_path: Path) -> Path:
    """Persist the default configuration template to ``config_path``."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(_copy_config_template(), handle, sort_keys=False)
    return config_path


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load YAML configuration from disk and return it as a dictionary."""
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse config: {error}") from error
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping at the top level.")
    return data


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = config.get(name) or {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"Config section '{name}' must be a mapping.")
    return value


def _resolve_path(value: Any, base: Path) -> Optional[Path]:
    if not isinstance(value, str) or not value.strip():
        return None
    candidate = Path(value.strip()).expanduser()
    if not candidate.is_absolute():
        candidate = (base / candidate).resolve()
    return candidate


def resolve_tool(configured: Any, name: str) -> str:
    """Return the configured binary, else the one found on ``PATH``."""
    if isinstance(configured, str) and configured.strip():
        return configured.strip()
    return shutil.which(name) or name


def resolve_tools(config: Mapping[str, Any]) -> ToolPaths:
    tools_cfg = _section(config, "tools")
    return ToolPaths(
        git=resolve_tool(tools_cfg.get("git"), "git"),
        arc=resolve_tool(tools_cfg.get("arc"), "arc"),
        svn=resolve_tool(tools_cfg.get("svn"), "svn"),
    )


def resolve_workspace(config: Mapping[str, Any], config_path: Path) -> Path:
    paths_cfg = _section(config, "paths")
    return _resolve_path(paths_cfg.get("workspace"), config_path.parent) or config_path.parent.resolve()


def build_request(
    config: Mapping[str, Any],
    config_path: Path,
    *,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> PatchRequest:
    """Construct the :class:`PatchRequest` described by ``config``.

    ``overrides`` win over the ``patch`` section; ``CONDUIT_TOKEN`` and
    ``BUILD_NUMBER`` from ``environ`` fill in values the config leaves empty.
    """

    env = os.environ if environ is None else environ
    patch_cfg: Dict[str, Any] = dict(_section(config, "patch"))
    for key, value in (overrides or {}).items():
        if value is not None:
            patch_cfg[key] = value

    base = config_path.parent
    raw_diff = patch_cfg.pop("raw_diff", None)
    raw_diff_path = _resolve_path(patch_cfg.pop("raw_diff_path", None), base)
    if raw_diff is None and raw_diff_path is not None:
        try:
            raw_diff = raw_diff_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as error:
            raise ConfigError(f"Unable to read raw diff {raw_diff_path}: {error}") from error

    token = patch_cfg.get("conduit_token") or env.get("CONDUIT_TOKEN") or None
    build_number = patch_cfg.get("build_number")
    if build_number is None:
        build_number = env.get("BUILD_NUMBER") or 0

    payload: Dict[str, Any] = {
        "revision_type": patch_cfg.get("revision_type"),
        "scm_type": patch_cfg.get("scm_type"),
        "base_commit": str(patch_cfg.get("base_commit") or ""),
        "diff_id": str(patch_cfg.get("diff_id") or ""),
        "raw_diff": raw_diff or "",
        "conduit_token": token,
        "build_number": build_number,
        "tools": resolve_tools(config),
        "temp_dir": _resolve_path(_section(config, "paths").get("temp_dir"), base),
    }
    for key in _BOOLEAN_KEYS:
        value = patch_cfg.get(key)
        if value is not None:
            payload[key] = value

    try:
        return PatchRequest(**payload)
    except ValidationError as error:
        raise ConfigError(f"Invalid patch request: {error}") from error


__all__ = [
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_CONFIG_TEMPLATE",
    "build_request",
    "load_config",
    "resolve_tool",
    "resolve_tools",
    "resolve_workspace",
    "write_default_config",
]
