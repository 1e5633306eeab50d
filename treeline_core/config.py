from __future__ import annotations

from dataclasses import dataclass, fields, replace
import math
import os
from pathlib import Path
import tomllib
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_FEED_URL = "https://public.offset.earth/trees"

ENV_FEED_URL = "TREELINE_FEED_URL"
ENV_TIMEZONE = "TREELINE_TIMEZONE"
ENV_TIMEOUT_S = "TREELINE_TIMEOUT_S"


@dataclass(frozen=True)
class TreelineConfig:
    feed_url: str = DEFAULT_FEED_URL
    timezone: str = "UTC"
    request_timeout_s: float = 30.0
    axis_height: float = 30.0
    initial_width: float = 10_000.0
    initial_height: float = 300.0

    def __post_init__(self) -> None:
        if not self.feed_url:
            raise ValueError("feed_url must be a non-empty string")
        if not math.isfinite(self.request_timeout_s) or self.request_timeout_s <= 0:
            raise ValueError("request_timeout_s must be > 0")
        if self.axis_height < 0:
            raise ValueError("axis_height must be >= 0")
        if self.initial_width < 0 or self.initial_height < 0:
            raise ValueError("initial_width/initial_height must be >= 0")
        self.tzinfo()

    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError, TypeError) as exc:
            raise ValueError(f"unknown timezone: {self.timezone!r}") from exc


def load_config(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> TreelineConfig:
    """Resolve configuration: defaults, then TOML file, then environment, then overrides."""
    values: dict[str, Any] = {}
    if path is not None:
        values.update(_read_toml(path))
    env = os.environ if environ is None else environ
    if env.get(ENV_FEED_URL):
        values["feed_url"] = env[ENV_FEED_URL]
    if env.get(ENV_TIMEZONE):
        values["timezone"] = env[ENV_TIMEZONE]
    if env.get(ENV_TIMEOUT_S):
        values["request_timeout_s"] = _parse_float(env[ENV_TIMEOUT_S], ENV_TIMEOUT_S)
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value
    return replace(TreelineConfig(), **values)


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        raw = tomllib.load(f)
    section = raw.get("treeline", raw)
    if not isinstance(section, dict):
        raise ValueError(f"`treeline` in {path} must be a table")
    known = {f.name for f in fields(TreelineConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"unknown config keys in {path}: {', '.join(unknown)}")
    defaults = TreelineConfig()
    values: dict[str, Any] = {}
    for key, value in section.items():
        if isinstance(getattr(defaults, key), str):
            if not isinstance(value, str):
                raise ValueError(f"`{key}` in {path} must be a string, got {value!r}")
            values[key] = value
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"`{key}` in {path} must be a number, got {value!r}")
            values[key] = float(value)
    return values


def _parse_float(raw: str, name: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
