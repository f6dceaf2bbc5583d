"""
===============================================================================
ROTMATH - Command-Line Configuration
===============================================================================
Settings consumed by the ``rotmath`` command-line front end. The numeric
core (Vector, Quaternion) holds no global state and never reads these.

Example YAML (see config/rotmath.yaml):

    display_digits: 4
    angle_units: deg
    canonical_sign: true
    unit_tolerance: 1.0e-8
    log_level: DEBUG
    log_file: null
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from rotmath.constants import DEFAULT_DIGITS, UNIT_TOLERANCE

logger = logging.getLogger(__name__)

VALID_ANGLE_UNITS = ('rad', 'deg')
VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class RotmathConfig:
    """
    Front-end settings.

    Attributes:
        display_digits: Decimals printed by to_string() in CLI output.
        angle_units: Units of angles given on the command line ('rad' or 'deg').
        canonical_sign: Normalize quaternions with sign=True (w >= 0).
        unit_tolerance: Tolerance for the unit-norm check reported by the CLI.
        log_level: Name of the logging level for the 'rotmath' logger.
        log_file: Optional path of a log file, in addition to stdout.
    """
    display_digits: int = DEFAULT_DIGITS
    angle_units: str = 'rad'
    canonical_sign: bool = False
    unit_tolerance: float = UNIT_TOLERANCE
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.display_digits, bool) or not isinstance(self.display_digits, int) \
                or self.display_digits < 0:
            raise ValueError(f"display_digits must be a non-negative integer, got {self.display_digits!r}")
        if self.angle_units not in VALID_ANGLE_UNITS:
            raise ValueError(f"angle_units must be one of {VALID_ANGLE_UNITS}, got {self.angle_units!r}")
        if not isinstance(self.canonical_sign, bool):
            raise ValueError(f"canonical_sign must be a boolean, got {self.canonical_sign!r}")
        if not isinstance(self.unit_tolerance, (int, float)) or self.unit_tolerance <= 0.0:
            raise ValueError(f"unit_tolerance must be positive, got {self.unit_tolerance!r}")
        self.log_level = str(self.log_level).upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got {self.log_level!r}")

    @property
    def level(self) -> int:
        """Numeric logging level for ``log_level``."""
        return getattr(logging, self.log_level)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RotmathConfig:
        """
        Build a config from a mapping, rejecting unknown keys.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {unknown}. Valid: {sorted(known)}")
        return cls(**data)


def load_config(config_path: Optional[Union[str, Path]] = None) -> RotmathConfig:
    """
    Load front-end configuration from a YAML file.

    Args:
        config_path: Path to a YAML file. None returns the defaults.

    Returns:
        RotmathConfig populated from the file.

    Raises:
        ValueError: If the file does not hold a mapping or has invalid entries.
    """
    if config_path is None:
        return RotmathConfig()

    logger.info(f"Loading configuration from: {config_path}")
    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    if data is None:
        return RotmathConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {config_path} must contain a mapping")

    return RotmathConfig.from_dict(data)
