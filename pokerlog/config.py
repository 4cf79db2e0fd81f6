"""
Runtime settings for pokerlog.

Values come from environment variables, falling back to defaults:

    POKERLOG_HISTORY     Path of the hand history JSON file
    POKERLOG_STACK_SIZE  Default starting stack, in big blinds
    POKERLOG_LOG_LEVEL   Logging level name (DEBUG, INFO, ...)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from pokerlog.core.rules import DEFAULT_STACK_SIZE

DEFAULT_HISTORY_PATH = Path.home() / ".pokerlog" / "hand_history.json"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    history_path: Path = DEFAULT_HISTORY_PATH
    stack_size: float = DEFAULT_STACK_SIZE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the environment.

        Raises:
            ValueError: If POKERLOG_STACK_SIZE is not a number.
        """
        env = os.environ if environ is None else environ

        history = env.get("POKERLOG_HISTORY")
        stack = env.get("POKERLOG_STACK_SIZE")
        try:
            stack_size = float(stack) if stack else DEFAULT_STACK_SIZE
        except ValueError:
            raise ValueError(f"POKERLOG_STACK_SIZE must be a number, got {stack!r}") from None

        return cls(
            history_path=Path(history).expanduser() if history else DEFAULT_HISTORY_PATH,
            stack_size=stack_size,
            log_level=env.get("POKERLOG_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )
