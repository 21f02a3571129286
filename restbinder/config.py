"""Runtime configuration for restbinder."""

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Optional

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


@dataclass(frozen=True)
class BinderConfig:
    """Configuration for a RestBinder.

    Attributes:
        allow_mock_response: Mock the response when a handler returns None.

        force_mock_response: Always mock the response; handlers are not called.

        max_mock_items: Upper bound of the element count drawn for mocked arrays.

        max_mock_depth: How deep the value faker descends into nested object types.
                        Beyond it, optional fields keep their defaults and
                        collections are empty.

        mock_seed: Seed for the random source used by mock synthesis.
                   None means a fresh, unseeded source.

    Examples:
        BinderConfig(force_mock_response=True, mock_seed=42)

        # Environment first, explicit values win
        BinderConfig.from_env(max_mock_items=3)
    """

    allow_mock_response: bool = True
    force_mock_response: bool = False
    max_mock_items: int = 10
    max_mock_depth: int = 3
    mock_seed: Optional[int] = None

    def __post_init__(self):
        if self.max_mock_items < 0:
            raise ValueError("max_mock_items must not be negative")
        if self.max_mock_depth < 0:
            raise ValueError("max_mock_depth must not be negative")

    @classmethod
    def from_env(cls, **overrides: Any) -> "BinderConfig":
        """Build a configuration from RESTBINDER_* environment variables.

        Priority:
        1. Explicit keyword arguments
        2. Environment variables
        3. Defaults
        """
        defaults = {f.name: f.default for f in fields(cls)}
        values = {
            "allow_mock_response": _env_bool("RESTBINDER_ALLOW_MOCK", defaults["allow_mock_response"]),
            "force_mock_response": _env_bool("RESTBINDER_FORCE_MOCK", defaults["force_mock_response"]),
            "max_mock_items": _env_int("RESTBINDER_MOCK_MAX_ITEMS", defaults["max_mock_items"]),
            "max_mock_depth": _env_int("RESTBINDER_MOCK_MAX_DEPTH", defaults["max_mock_depth"]),
            "mock_seed": _env_int("RESTBINDER_MOCK_SEED", defaults["mock_seed"]),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


def _env_bool(name: str, default: bool) -> bool:
    env_value = os.environ.get(name, "").strip().lower()
    if env_value in _TRUE_VALUES:
        return True
    elif env_value in _FALSE_VALUES:
        return False
    elif env_value:
        logger.warning(f"Ignoring invalid boolean {name}={env_value!r}")
    return default


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    env_value = os.environ.get(name, "").strip()
    if not env_value:
        return default
    try:
        return int(env_value)
    except ValueError:
        logger.warning(f"Ignoring invalid integer {name}={env_value!r}")
        return default
