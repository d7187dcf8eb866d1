"""Where config and log files live.

Portable by default: everything sits next to the checkout.

- Config: ``$CDDBP_CONFIG`` when set, else ``<repo_root>/config/config.toml``
- Logs: ``<repo_root>/logs/cddbp.log``
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Final

ENV_CONFIG_PATH: Final[str] = "CDDBP_CONFIG"
_REPO_MARKERS: Final[tuple[str, ...]] = ("pyproject.toml", ".git")


def _normalize(path: Path | str) -> Path:
    return Path(path).expanduser().resolve()


def resolve_overridable_path(
    *,
    explicit_path: Path | str | None,
    env: Mapping[str, str] | None,
    env_var: str | None,
    default_factory: Callable[[], Path],
) -> Path:
    """Pick the explicit path, then a non-blank ``env_var`` value, then the default."""

    if explicit_path is not None:
        return _normalize(explicit_path)

    from_env = (env if env is not None else os.environ).get(env_var or "", "").strip()
    return _normalize(from_env or default_factory())


def _detect_repo_root(start: Path | None = None) -> Path:
    """Walk up from ``start`` (default: this file) to the first directory with a repo marker.

    Falls back to the current working directory for installed copies.
    """

    origin = (start or Path(__file__).resolve()).parent
    for candidate in (origin, *origin.parents):
        if any((candidate / marker).exists() for marker in _REPO_MARKERS):
            return candidate
    return Path.cwd()


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the TOML config location."""

    return resolve_overridable_path(
        explicit_path=None,
        env=env,
        env_var=ENV_CONFIG_PATH,
        default_factory=lambda: _detect_repo_root() / "config" / "config.toml",
    )


def default_log_dir() -> Path:
    return _normalize(_detect_repo_root() / "logs")


def default_log_file() -> Path:
    return default_log_dir() / "cddbp.log"


__all__ = [
    "ENV_CONFIG_PATH",
    "default_config_path",
    "default_log_dir",
    "default_log_file",
    "resolve_overridable_path",
]
