"""Core shared contracts and utilities."""

from core.errors import (
    BindgenError,
    ConfigValidationError,
    MappingError,
    OutputIOError,
    ParseError,
    RenderError,
    ResolutionError,
)
from core.structured_logging import (
    configure_structured_logging,
    get_run_id,
    phase_scope,
    set_run_id,
)
from core.bindgen_config import (
    DEFAULT_CONFIG_PATH,
    GenerateConfig,
    InputConfig,
    OutputConfig,
    load_config,
    parse_config,
    write_config_template,
)
from core.run_artifacts import write_run_report

__all__ = [
    "BindgenError",
    "ConfigValidationError",
    "MappingError",
    "OutputIOError",
    "ParseError",
    "RenderError",
    "ResolutionError",
    "configure_structured_logging",
    "get_run_id",
    "phase_scope",
    "set_run_id",
    "DEFAULT_CONFIG_PATH",
    "GenerateConfig",
    "InputConfig",
    "OutputConfig",
    "load_config",
    "parse_config",
    "write_config_template",
    "write_run_report",
]
