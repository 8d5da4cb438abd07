"""Router configuration loaded from a JSON (or YAML) file."""

import json
import logging
import re
from dataclasses import dataclass, field

import yaml

logger = logging.getLogger(__name__)

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


class ConfigError(Exception):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(frozen=True)
class RouterConfig:
    log_file_path: str = ""
    output_files: dict[str, str] = field(default_factory=dict)
    event_filters: dict[str, object] = field(default_factory=dict)
    batch_interval: str = ""
    monitor_period: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "RouterConfig":
        return cls(
            log_file_path=_expect(d, "logFilePath", str, ""),
            output_files=_string_map(_expect(d, "outputFiles", dict, {}), "outputFiles"),
            event_filters=_expect(d, "eventFilters", dict, {}),
            batch_interval=_expect(d, "batchInterval", str, ""),
            monitor_period=_expect(d, "monitorPeriod", str, ""),
        )

    def monitor_interval(self) -> float:
        """Polling interval in seconds. Raises ConfigError if unusable."""
        seconds = parse_duration(self.monitor_period)
        if seconds <= 0:
            raise ConfigError(f"monitor period must be positive: {self.monitor_period!r}")
        return seconds


def _expect(d: dict, key: str, kind: type, empty):
    value = d.get(key)
    if value is None:
        return empty
    if not isinstance(value, kind):
        raise ConfigError(
            f"field {key!r} must be a {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _string_map(d: dict, key: str) -> dict[str, str]:
    for name, value in d.items():
        if not isinstance(value, str):
            raise ConfigError(f"field {key!r}: value for {name!r} must be a string")
    return d


def parse_duration(text: str) -> float:
    """Convert a duration string like '5m', '1h30m' or '250ms' to seconds."""
    raw = text.strip()
    if raw in ("0", "+0", "-0"):
        return 0.0

    sign = 1.0
    if raw[:1] in ("+", "-"):
        sign = -1.0 if raw[0] == "-" else 1.0
        raw = raw[1:]

    if not raw:
        raise ConfigError(f"invalid duration: {text!r}")

    total = 0.0
    pos = 0
    while pos < len(raw):
        m = _DURATION_PART_RE.match(raw, pos)
        if not m:
            raise ConfigError(f"invalid duration: {text!r}")
        total += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()
    return sign * total


def _read_document(path: str) -> object:
    with open(path, "r", encoding="utf-8") as f:
        if path.endswith((".yml", ".yaml")):
            return yaml.safe_load(f)
        return json.load(f)


def load_config(path: str) -> RouterConfig:
    """Load and decode the router configuration at *path*."""
    try:
        data = _read_document(path)
    except OSError as e:
        raise ConfigError(f"error opening config file: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"error decoding config file: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("error decoding config file: top level must be an object")

    config = RouterConfig.from_dict(data)
    logger.debug(
        "Loaded config from %s: %d output file(s), %d filter(s)",
        path, len(config.output_files), len(config.event_filters),
    )
    return config
