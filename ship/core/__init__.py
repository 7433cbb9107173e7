"""Core domain types and logic."""

from .config import ConfigError, ShipConfig, load_config, load_config_or_default
from .errors import ErrorCode
from .intent import IntentSet, parse_intent
from .result import Err, Ok, Result
from .run_context import FLOATING_TAG, RunContext, resolve_run_id

__all__ = [
    # config
    "ConfigError",
    "ShipConfig",
    "load_config",
    "load_config_or_default",
    # errors
    "ErrorCode",
    # intent
    "IntentSet",
    "parse_intent",
    # result
    "Err",
    "Ok",
    "Result",
    # run context
    "FLOATING_TAG",
    "RunContext",
    "resolve_run_id",
]
