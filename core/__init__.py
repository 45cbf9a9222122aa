"""Core shared configuration and run utilities."""

from core.structured_logging import (
    configure_structured_logging,
    get_run_id,
    get_section,
    phase_scope,
    section_scope,
    set_run_id,
)
from core.generator_config import (
    ConfigValidationError,
    load_environment,
    load_generator_config,
    resolve_config_path,
    resolve_emit_as_module,
    resolve_strict_config_validation,
    validate_section,
)
from core.run_artifacts import write_outline, write_run_report

__all__ = [
    "configure_structured_logging",
    "get_run_id",
    "get_section",
    "phase_scope",
    "section_scope",
    "set_run_id",
    "ConfigValidationError",
    "load_environment",
    "load_generator_config",
    "resolve_config_path",
    "resolve_emit_as_module",
    "resolve_strict_config_validation",
    "validate_section",
    "write_outline",
    "write_run_report",
]
