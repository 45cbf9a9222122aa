"""Generator configuration loading and validation helpers.

Provides strict/non-strict parsing of the optional YAML configuration file
and the environment-variable switches read by the command line pipeline.
Environment variables are loaded from a .env file via python-dotenv.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "DTSGEN_CONFIG"
EMIT_AS_MODULE_ENV = "DTSGEN_EMIT_AS_MODULE"
STRICT_CONFIG_ENV = "STRICT_CONFIG_VALIDATION"

CONFIG_SECTIONS: tuple[str, ...] = ("extraction", "emission", "prelude")

# Allowed keys per section and the types their values must have
_SECTION_SCHEMA: dict[str, dict[str, tuple[type, ...]]] = {
    "extraction": {
        "section_start": (str,),
        "section_end": (str,),
        "private_prefix": (str,),
    },
    "emission": {
        "emit_as_module": (bool,),
        "indent": (str, int),
    },
    "prelude": {
        "type_aliases": (dict,),
        "opaque_interfaces": (list,),
        "namespaces": (dict,),
        "constants": (dict,),
        "capability_interfaces": (bool,),
    },
}


class ConfigValidationError(RuntimeError):
    """Raised when strict configuration validation fails."""


def load_environment(dotenv_path: Optional[str] = None) -> bool:
    """Load a .env file into the process environment (existing values win)."""
    return load_dotenv(dotenv_path=dotenv_path, override=False)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag(STRICT_CONFIG_ENV, default=default)


def resolve_emit_as_module(default: bool = False) -> bool:
    """Resolve module-mode emission from ``DTSGEN_EMIT_AS_MODULE`` env."""
    return _env_flag(EMIT_AS_MODULE_ENV, default=default)


def resolve_config_path(explicit: Optional[str] = None) -> Optional[str]:
    """Return the explicit config path, else ``DTSGEN_CONFIG``, else None."""
    if explicit:
        return explicit
    raw = os.getenv(CONFIG_PATH_ENV, "").strip()
    return raw or None


def _fail(msg: str, strict: bool, exc: Optional[BaseException] = None) -> None:
    if strict:
        raise ConfigValidationError(msg) from exc
    logger.warning("%s; continuing with defaults", msg)


def validate_section(
    name: str,
    payload: Any,
    strict: bool = False,
) -> dict[str, Any]:
    """Validate one config section and return its accepted keys.

    Unknown keys and values of the wrong type are rejected in strict mode and
    dropped (with a warning) otherwise.
    """
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        _fail(f"Config section '{name}' must be a mapping, got {type(payload).__name__}", strict)
        return {}

    schema = _SECTION_SCHEMA[name]
    accepted: dict[str, Any] = {}
    for key, value in payload.items():
        if key not in schema:
            _fail(f"Unknown key '{name}.{key}'", strict)
            continue
        expected = schema[key]
        # bool is an int subclass; only accept it where bool is expected
        if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
            names = " or ".join(t.__name__ for t in expected)
            _fail(f"'{name}.{key}' must be {names}, got {type(value).__name__}", strict)
            continue
        accepted[key] = value

    if name == "emission" and isinstance(accepted.get("indent"), int):
        width = accepted["indent"]
        if width < 0:
            _fail(f"'emission.indent' must not be negative, got {width}", strict)
            del accepted["indent"]
        else:
            accepted["indent"] = " " * width

    return accepted


def load_generator_config(
    config_path: str,
    strict: bool = False,
) -> dict[str, dict[str, Any]]:
    """Load and validate the generator configuration file.

    In non-strict mode unreadable or invalid content is logged and replaced by
    empty sections. In strict mode this raises ``ConfigValidationError``.

    Returns:
        Mapping with one (possibly empty) dict per section in ``CONFIG_SECTIONS``.
    """
    sections: dict[str, dict[str, Any]] = {name: {} for name in CONFIG_SECTIONS}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        _fail(f"Config file not found: {config_path}", strict, exc)
        return sections
    except yaml.YAMLError as exc:
        _fail(f"Failed to parse config YAML at {config_path}: {exc}", strict, exc)
        return sections

    if payload is None:
        _fail(f"Config file is empty: {config_path}", strict)
        return sections

    if not isinstance(payload, dict):
        _fail(f"Unexpected config payload type: {type(payload).__name__}", strict)
        return sections

    for key in payload:
        if key not in CONFIG_SECTIONS:
            _fail(f"Unknown config section '{key}'", strict)

    for name in CONFIG_SECTIONS:
        sections[name] = validate_section(name, payload.get(name), strict=strict)

    logger.info("Loaded generator config from %s", config_path)
    return sections
