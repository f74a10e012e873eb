"""TOML configuration loader for the billing counter.

Settings come from an optional TOML file with a ``[billing]`` table,
then environment variables override individual values::

    [billing]
    data_dir = "/var/lib/counter"
    log_level = "INFO"
    shop_name = "Saravana Tiffin Centre"
    footer = "Thank you for your visit!"

The tax rate and currency are fixed business rules, not settings.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

ENV_DATA_DIR = "BILLING_DATA_DIR"
ENV_LOG_LEVEL = "BILLING_LOG_LEVEL"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    log_level: str = "WARNING"
    shop_name: str = "Restaurant Billing System"
    footer: str = "Thank you for your visit!"

    def __post_init__(self) -> None:
        for name in ("log_level", "shop_name", "footer"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValueError(f"{name} must be a string, got {value!r}")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level!r}")

    @property
    def ledger_path(self) -> Path:
        return self.data_dir / "ledger.json"


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from *path* (if it exists) plus the environment.

    A missing file is not an error; the defaults apply.  Unknown keys in
    the ``[billing]`` table are rejected so typos do not go unnoticed.
    """
    values: dict[str, object] = {}

    if path is not None and Path(path).exists():
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        table = raw.get("billing", {})
        if not isinstance(table, dict):
            raise ValueError("[billing] must be a table")
        known = {f.name for f in fields(Settings)}
        unknown = set(table) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        values.update(table)

    settings = Settings()
    if "data_dir" in values:
        values["data_dir"] = Path(str(values["data_dir"])).expanduser()
    settings = replace(settings, **values)

    if os.environ.get(ENV_DATA_DIR):
        settings = replace(settings, data_dir=Path(os.environ[ENV_DATA_DIR]).expanduser())
    if os.environ.get(ENV_LOG_LEVEL):
        settings = replace(settings, log_level=os.environ[ENV_LOG_LEVEL])

    return settings
