"""Configuration loader for the command documentation generator.

Loads settings from cmddoc/configs/config.yaml and provides typed access
to each configuration section via dataclasses.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "configs" / "config.yaml"

LINK_STYLES = ("file", "anchor", "url")


@dataclass
class OutputConfig:
    """Configuration for generated documentation files."""

    output_dir: str = "docs/commands"
    tool_name: str = "cmddoc"
    link_style: str = "file"
    base_url: str = ""
    front_matter: bool = False


@dataclass
class TemplateConfig:
    """Configuration for template-based rendering."""

    templates_dir: Optional[str] = None
    default_template: str = "command.md.j2"
    strict: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class AppConfig:
    """Top-level application configuration."""

    output: OutputConfig = field(default_factory=OutputConfig)
    templates: TemplateConfig = field(default_factory=TemplateConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _build_output_config(data: dict) -> OutputConfig:
    """Build an OutputConfig from a dictionary.

    Unknown link styles fall back to ``file`` with a warning.

    Args:
        data: Dictionary with output settings.

    Returns:
        A configured OutputConfig instance.
    """
    link_style = data.get("link_style", "file")
    if link_style not in LINK_STYLES:
        logger.warning("Unknown link_style %r, using 'file'", link_style)
        link_style = "file"

    return OutputConfig(
        output_dir=data.get("output_dir", "docs/commands"),
        tool_name=data.get("tool_name", "cmddoc"),
        link_style=link_style,
        base_url=data.get("base_url") or "",
        front_matter=bool(data.get("front_matter", False)),
    )


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load application configuration from a YAML file.

    Reads the YAML config file and constructs a fully typed AppConfig
    object. Falls back to defaults for any missing values.

    Args:
        config_path: Path to the YAML config file. If None, uses the
            bundled cmddoc/configs/config.yaml.

    Returns:
        A fully populated AppConfig instance.

    Raises:
        yaml.YAMLError: If the config file contains invalid YAML.
    """
    path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.warning("Config file not found at %s, using defaults", path)
        return AppConfig()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    logger.info("Loaded configuration from %s", path)

    templates_data = raw.get("templates") or {}
    templates_config = TemplateConfig(
        templates_dir=templates_data.get("templates_dir"),
        default_template=templates_data.get("default_template", "command.md.j2"),
        strict=bool(templates_data.get("strict", False)),
    )

    logging_data = raw.get("logging") or {}
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        format=logging_data.get(
            "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ),
        file=logging_data.get("file"),
    )

    return AppConfig(
        output=_build_output_config(raw.get("output") or {}),
        templates=templates_config,
        logging=logging_config,
    )
