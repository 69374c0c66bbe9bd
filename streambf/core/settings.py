"""Interpreter settings: environment (and .env), then an optional JSON/YAML file, then explicit overrides."""
import json
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from streambf.brainfuck import INITIAL_TAPE_SIZE
from streambf.brainfuck_debugger import DEFAULT_DUMP_WIDTH

ENV_VARS = {
    "initial_tape_size": "BF_TAPE_SIZE",
    "tape_limit": "BF_TAPE_LIMIT",
    "stack_limit": "BF_STACK_LIMIT",
    "debug": "BF_DEBUG",
    "dump_width": "BF_DUMP_WIDTH",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass
class InterpreterConfig:
    initial_tape_size: int = INITIAL_TAPE_SIZE
    tape_limit: Optional[int] = None  # None = grow until the host runs out of memory
    stack_limit: Optional[int] = None
    debug: bool = False
    dump_width: int = DEFAULT_DUMP_WIDTH

    def __post_init__(self):
        if self.initial_tape_size < 1:
            raise ValueError("initial_tape_size must be at least 1")
        if self.tape_limit is not None and self.tape_limit < self.initial_tape_size:
            raise ValueError("tape_limit must not be smaller than initial_tape_size")
        if self.stack_limit is not None and self.stack_limit < 0:
            raise ValueError("stack_limit must not be negative")
        if self.dump_width < 1:
            raise ValueError("dump_width must be at least 1")


def _coerce(name: str, value: Any) -> Any:
    if name == "debug":
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(f"{name}: expected a boolean, got {value!r}")

    if name in ("tape_limit", "stack_limit") and (value is None or str(value).strip().lower() in ("", "none")):
        return None
    if isinstance(value, bool):
        raise ValueError(f"{name}: expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name}: expected an integer, got {value!r}") from e


def config_from_mapping(data: Mapping[str, Any], base: Optional[InterpreterConfig] = None) -> InterpreterConfig:
    """Apply known keys from `data` on top of `base`. Unknown keys are rejected."""
    known = {f.name for f in fields(InterpreterConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
    values = {k: _coerce(k, v) for k, v in data.items()}
    return replace(base or InterpreterConfig(), **values)


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> InterpreterConfig:
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ
    data = {name: environ[var] for name, var in ENV_VARS.items() if var in environ}
    return config_from_mapping(data)


def load_config_file(path: str) -> Dict[str, Any]:
    with open(path, 'r') as f:
        if path.endswith(('.yml', '.yaml')):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None,
                environ: Optional[Mapping[str, str]] = None) -> InterpreterConfig:
    """Environment first, then the config file at `path`, then `overrides` (None values ignored)."""
    cfg = config_from_env(environ)
    if path:
        cfg = config_from_mapping(load_config_file(path), cfg)
    if overrides:
        cfg = config_from_mapping({k: v for k, v in overrides.items() if v is not None}, cfg)
    return cfg
