"""Runtime flags.

Flags are registered with a default and may be overridden from the
``TENSORCORE_FLAGS`` environment variable, e.g.::

    TENSORCORE_FLAGS="DEBUG:true,TENSORLIKE_CHECK_SHAPE_CONSISTENCY:false"

"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

FLAGS_ENV_VAR = "TENSORCORE_FLAGS"


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    raise ValueError(f"Expected 'true' or 'false', got {raw!r}")


_PARSERS: Dict[type, Callable[[str], Any]] = {
    bool: _parse_bool,
    int: int,
    float: float,
}


@dataclass
class Flag:
    """A registered flag with its default and value type."""

    name: str
    default: Any
    kind: type = bool

    def parse(self, raw: str) -> Any:  # noqa: D102
        try:
            return _PARSERS[self.kind](raw)
        except ValueError as e:
            raise ValueError(f"Bad value for flag {self.name}: {e}") from e

    def coerce(self, value: Any) -> Any:
        """Check a value set from code against the flag's type."""
        if isinstance(value, str):
            return self.parse(value)
        if isinstance(value, bool):
            if self.kind is bool:
                return value
        elif self.kind is not bool and isinstance(value, (int, float)):
            return self.kind(value)
        raise TypeError(
            f"Flag {self.name} expects a {self.kind.__name__}, got {type(value).__name__}"
        )


class Environment:
    """Holds flag values for the running process."""

    def __init__(self, overrides: Optional[Mapping[str, str]] = None) -> None:
        self._registry: Dict[str, Flag] = {}
        self._values: Dict[str, Any] = {}
        self._overrides = overrides

    def register_flag(self, name: str, default: Any, kind: type = bool) -> None:
        """Register `name` and apply any override from the environment.

        Args:
        ----
            name: flag name
            default: value used when nothing overrides it
            kind: type the flag holds (bool, int or float)

        """
        if name in self._registry:
            logger.warning("Flag %s is being registered twice", name)
        self._registry[name] = Flag(name, default, kind)
        self._values.pop(name, None)

    def _env_overrides(self) -> Dict[str, str]:
        if self._overrides is not None:
            return dict(self._overrides)
        return parse_flags_string(os.environ.get(FLAGS_ENV_VAR, ""))

    def _evaluate(self, name: str) -> Any:
        flag = self._registry[name]
        raw = self._env_overrides().get(name)
        if raw is None:
            return flag.default
        value = flag.parse(raw)
        logger.debug("Flag %s overridden to %r", name, value)
        return value

    def get(self, name: str) -> Any:
        """Current value of flag `name`."""
        if name not in self._registry:
            raise KeyError(f"Cannot evaluate flag '{name}': no registered flag")
        if name not in self._values:
            self._values[name] = self._evaluate(name)
        return self._values[name]

    def get_bool(self, name: str) -> bool:  # noqa: D102
        return bool(self.get(name))

    def get_number(self, name: str) -> float:  # noqa: D102
        return self.get(name)

    def set(self, name: str, value: Any) -> None:
        """Set flag `name` for the rest of the process (or until reset).

        Strings are parsed the same way as environment overrides.
        """
        if name not in self._registry:
            raise KeyError(f"Cannot set flag '{name}': no registered flag")
        self._values[name] = self._registry[name].coerce(value)

    @property
    def flags(self) -> Dict[str, Any]:
        """All flags with their current values."""
        return {name: self.get(name) for name in self._registry}

    def reset(self) -> None:
        """Drop set values. Flags are re-read on next access."""
        self._values = {}
        unknown = set(self._env_overrides()) - set(self._registry)
        for name in sorted(unknown):
            logger.warning("Unknown flag %s in %s is ignored", name, FLAGS_ENV_VAR)


def parse_flags_string(raw: str) -> Dict[str, str]:
    """Split ``NAME:value,NAME:value`` into a dict.

    Args:
    ----
        raw: the flag string, possibly empty

    Returns:
    -------
        Mapping of flag name to its unparsed value.

    """
    result: Dict[str, str] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, sep, value = entry.partition(":")
        if not sep or not name.strip():
            raise ValueError(
                f"Malformed flag entry {entry!r} in {FLAGS_ENV_VAR}, expected NAME:value"
            )
        result[name.strip()] = value.strip()
    return result


_ENV = Environment()
_ENV.register_flag("DEBUG", False)
_ENV.register_flag("TENSORLIKE_CHECK_SHAPE_CONSISTENCY", True)


def env() -> Environment:
    """The process-wide environment."""
    return _ENV
