"""Core types shared by every layer."""

from .config import ActionEnv, ConfigError, load_action_env
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ActionEnv",
    "ConfigError",
    "load_action_env",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
