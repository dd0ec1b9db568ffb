"""Store settings, read from the environment.

Every value has a default, so an empty environment yields a working
configuration that keeps the document under ``./data/store.json``.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from storefront.domain.exceptions import ConfigurationError

ENV_PREFIX = "STOREFRONT_"
DEFAULT_DATA_PATH = Path("data") / "store.json"


@dataclass(frozen=True)
class StoreSettings:
    data_path: Path = DEFAULT_DATA_PATH
    lock_timeout: float = 10.0
    poll_interval: float = 0.05
    io_retries: int = 3
    retry_delay: float = 0.05

    def __post_init__(self) -> None:
        if self.lock_timeout <= 0:
            raise ConfigurationError("lock_timeout must be positive")
        if self.poll_interval <= 0:
            raise ConfigurationError("poll_interval must be positive")
        if self.io_retries < 0:
            raise ConfigurationError("io_retries cannot be negative")
        if self.retry_delay < 0:
            raise ConfigurationError("retry_delay cannot be negative")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StoreSettings:
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            data_path=Path(env.get(ENV_PREFIX + "DATA_PATH") or defaults.data_path),
            lock_timeout=_read(env, "LOCK_TIMEOUT", float, defaults.lock_timeout),
            poll_interval=_read(env, "LOCK_POLL_INTERVAL", float, defaults.poll_interval),
            io_retries=_read(env, "IO_RETRIES", int, defaults.io_retries),
            retry_delay=_read(env, "IO_RETRY_DELAY", float, defaults.retry_delay),
        )

    def with_data_path(self, data_path: Path) -> StoreSettings:
        return replace(self, data_path=data_path)


def _read(env: Mapping[str, str], name: str, convert: Callable, default):
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return convert(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {ENV_PREFIX}{name}: {raw!r}") from exc
