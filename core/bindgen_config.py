"""Generator configuration loading and validation.

The configuration supplies exactly what the pipeline needs from the outside
world: the entry ``.ts`` file, the output directory, and optional extra
type mappings. It is read from YAML (or JSON, by suffix), with environment
overrides loaded from a ``.env`` file.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from core.errors import ConfigValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH: str = "bindgen.yml"
DEFAULT_INDEX_FILE: str = "ts/index.ts"
DEFAULT_OUTPUT_DIRECTORY: str = "output"

ENV_INDEX_FILE: str = "TSBINDGEN_INDEX_FILE"
ENV_OUTPUT_DIR: str = "TSBINDGEN_OUTPUT_DIR"

_KNOWN_SECTIONS = frozenset({"input", "output", "types"})

CONFIG_TEMPLATE: str = f"""\
# tsbindgen configuration.

input:
  # The index.ts file to use as the input.
  # Everything is resolved relative to this file.
  index_file: {DEFAULT_INDEX_FILE}

output:
  # The output directory to use. Its previous contents are replaced.
  directory: {DEFAULT_OUTPUT_DIRECTORY}

# Extra TypeScript keyword -> Rust type mappings, e.g.
#   bigint: u64
types: {{}}
"""


@dataclass(frozen=True)
class InputConfig:
    """Where module discovery starts."""

    index_file: Path = Path(DEFAULT_INDEX_FILE)


@dataclass(frozen=True)
class OutputConfig:
    """Where rendered bindings are written."""

    directory: Path = Path(DEFAULT_OUTPUT_DIRECTORY)


@dataclass(frozen=True)
class GenerateConfig:
    """Top-level configuration payload."""

    input: InputConfig = field(default_factory=InputConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    types: dict[str, str] = field(default_factory=dict)


def _expect_dict(payload: Any, ctx: str, path: str) -> dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigValidationError(
            f"{ctx} must be a mapping, got {type(payload).__name__}",
            path=path,
            operation="config",
        )
    return payload


def _expect_path(raw: Any, ctx: str, path: str) -> Path:
    text = str(raw).strip() if raw is not None else ""
    if not text:
        raise ConfigValidationError(f"{ctx} must be a non-empty path", path=path, operation="config")
    return Path(text)


def _parse_types(payload: Any, path: str) -> dict[str, str]:
    types = _expect_dict(payload, "types", path)
    parsed: dict[str, str] = {}
    for keyword, rust_type in types.items():
        key = str(keyword).strip()
        value = str(rust_type).strip() if rust_type is not None else ""
        if not key or not value:
            raise ConfigValidationError(
                f"types entry {keyword!r} must map a keyword to a non-empty Rust type",
                path=path,
                operation="config",
            )
        parsed[key] = value
    return parsed


def _load_payload(config_path: Path) -> dict[str, Any]:
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigValidationError(
            f"cannot read config file: {exc}", path=config_path, operation="config"
        ) from exc

    try:
        if config_path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigValidationError(
            f"cannot parse config file: {exc}", path=config_path, operation="config"
        ) from exc
    return _expect_dict(payload, "config", str(config_path))


def parse_config(payload: dict[str, Any], source: str = "<memory>") -> GenerateConfig:
    """Validate a raw config mapping and build a ``GenerateConfig``."""
    unknown = sorted(set(payload) - _KNOWN_SECTIONS)
    if unknown:
        raise ConfigValidationError(
            "unknown config section(s): " + ", ".join(unknown),
            path=source,
            operation="config",
        )

    input_payload = _expect_dict(payload.get("input"), "input", source)
    output_payload = _expect_dict(payload.get("output"), "output", source)

    index_file = _expect_path(
        input_payload.get("index_file", DEFAULT_INDEX_FILE), "input.index_file", source
    )
    directory = _expect_path(
        output_payload.get("directory", DEFAULT_OUTPUT_DIRECTORY), "output.directory", source
    )

    return GenerateConfig(
        input=InputConfig(index_file=index_file),
        output=OutputConfig(directory=directory),
        types=_parse_types(payload.get("types"), source),
    )


def apply_env_overrides(config: GenerateConfig) -> GenerateConfig:
    """Apply ``TSBINDGEN_*`` environment overrides (``.env`` is loaded first)."""
    load_dotenv()
    index_file = os.getenv(ENV_INDEX_FILE)
    output_dir = os.getenv(ENV_OUTPUT_DIR)
    if not index_file and not output_dir:
        return config

    if index_file:
        logger.info("Using %s from environment: %s", ENV_INDEX_FILE, index_file)
    if output_dir:
        logger.info("Using %s from environment: %s", ENV_OUTPUT_DIR, output_dir)
    return GenerateConfig(
        input=InputConfig(index_file=Path(index_file)) if index_file else config.input,
        output=OutputConfig(directory=Path(output_dir)) if output_dir else config.output,
        types=dict(config.types),
    )


def write_config_template(location: str | Path) -> Path:
    """Write the commented default configuration to ``location``."""
    path = Path(location)
    try:
        if path.parent != Path("."):
            path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    except OSError as exc:
        raise ConfigValidationError(
            f"failed to write config file: {exc}", path=path, operation="config"
        ) from exc
    return path


def load_config(
    location: str | Path = DEFAULT_CONFIG_PATH,
    regenerate: bool = False,
    use_env: bool = True,
) -> GenerateConfig:
    """Load the generator config, creating the default template when needed.

    Args:
        location: YAML or JSON config path.
        regenerate: Rewrite the template before loading.
        use_env: Apply ``TSBINDGEN_*`` environment overrides.

    Returns:
        The validated configuration.

    Raises:
        ConfigValidationError: If the file cannot be read, parsed, or validated.
    """
    config_path = Path(location)
    if regenerate:
        logger.info("Regenerating config file.")
        write_config_template(config_path)
        logger.info("Config file regenerated at %s.", config_path)
    elif config_path.exists():
        logger.info("Loading config from %s", config_path)
    else:
        logger.warning("Config file not found. Generating default config.")
        write_config_template(config_path)
        logger.info("Config file generated at %s.", config_path)

    config = parse_config(_load_payload(config_path), source=str(config_path))
    if use_env:
        config = apply_env_overrides(config)
    logger.debug("Config: %s", config)
    return config
