from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping

from .client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

APP_DIRNAME = "royalreader"
STATE_FILENAME = "fictions"
LOG_FILENAME = "royalreader.log"


def cache_root(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    xdg = env.get("XDG_CACHE_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".cache"
    return base / APP_DIRNAME


def default_state_path(environ: Mapping[str, str] | None = None) -> Path:
    return cache_root(environ) / STATE_FILENAME


def default_log_path(environ: Mapping[str, str] | None = None) -> Path:
    return cache_root(environ) / LOG_FILENAME


@dataclass
class ReaderConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    state_path: Path = field(default_factory=default_state_path)
    log_path: Path | None = None
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ReaderConfig":
        """Defaults overridden by ``ROYALREADER_*`` environment variables."""
        env = os.environ if environ is None else environ
        config = cls(state_path=default_state_path(env))
        base_url = env.get("ROYALREADER_BASE_URL")
        if base_url:
            config.base_url = base_url
        state = env.get("ROYALREADER_STATE")
        if state:
            config.state_path = Path(state).expanduser()
        timeout = env.get("ROYALREADER_TIMEOUT")
        if timeout:
            try:
                config.timeout = float(timeout)
            except ValueError as exc:
                raise ValueError(f"ROYALREADER_TIMEOUT must be a number, got {timeout!r}") from exc
        if env.get("ROYALREADER_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}:
            config.debug = True
        return config

    def with_overrides(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        state_path: Path | None = None,
        log_path: Path | None = None,
        debug: bool | None = None,
    ) -> "ReaderConfig":
        updated = self
        if base_url:
            updated = replace(updated, base_url=base_url)
        if timeout is not None:
            updated = replace(updated, timeout=timeout)
        if state_path is not None:
            updated = replace(updated, state_path=state_path)
        if log_path is not None:
            updated = replace(updated, log_path=log_path)
        if debug:
            updated = replace(updated, debug=True)
        return updated
