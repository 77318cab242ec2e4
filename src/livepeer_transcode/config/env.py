"""Typed access to LIVEPEER_* environment variables.

EnvReader takes an optional mapping in place of os.environ so tests can
inject values without touching the process environment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EnvReader:
    """Read and convert environment variables.

    Unset and empty variables yield the default. A value that fails
    conversion is logged and also yields the default.

    Example:
        reader = EnvReader(env={"LIVEPEER_API_TIMEOUT": "30"})
        reader.get_float("LIVEPEER_API_TIMEOUT", 120.0)  # 30.0
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = os.environ if env is None else env

    def _read(
        self, var: str, convert: Callable[[str], T], default: T | None, kind: str
    ) -> T | None:
        raw = self._env.get(var)
        if not raw:
            return default
        try:
            return convert(raw)
        except ValueError:
            logger.warning("Invalid %s value for %s: %s", kind, var, raw)
            return default

    def get_str(self, var: str, default: str | None = None) -> str | None:
        return self._read(var, str, default, "string")

    def get_int(self, var: str, default: int | None = None) -> int | None:
        return self._read(var, int, default, "integer")

    def get_float(self, var: str, default: float | None = None) -> float | None:
        return self._read(var, float, default, "float")

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Path value with ~ expanded."""
        return self._read(
            var, lambda raw: Path(raw).expanduser(), default, "path"
        )
