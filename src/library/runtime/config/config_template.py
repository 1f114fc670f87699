"""Load config.yaml, resolving ``${...}`` placeholders from the environment."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.library.runtime.config.config_data import ConfigData

# ${NAME}, ${NAME:-default} or ${NAME:?message}
_PLACEHOLDER = re.compile(r"\$\{(?P<name>[^}:]+)(?::(?P<op>[-?])(?P<arg>[^}]*))?\}")


def _resolve(match: re.Match[str]) -> str:
    name, op, arg = match.group("name"), match.group("op"), match.group("arg")
    value = os.getenv(name)
    if op == "-":
        return arg if value is None else value
    if value is not None:
        return value
    if op == "?":
        raise ValueError(f"Required environment variable {name}: {arg}")
    raise ValueError(f"Required environment variable {name} not set")


def substitute_env_vars(text: str) -> str:
    """Replace every placeholder in ``text``.

    ``${NAME}`` and ``${NAME:?message}`` must be set; ``${NAME:-default}``
    falls back to ``default`` (possibly empty).
    """
    return _PLACEHOLDER.sub(_resolve, text)


def apply_environment_overrides(env_mode: str) -> None:
    """Promote ``<ENV>_FOO`` variables to ``FOO`` for the active environment.

    ``PRODUCTION_DATABASE_URL`` becomes ``DATABASE_URL`` when running in
    production, so a single .env file can carry several environments.
    """
    prefix = f"{env_mode.upper()}_"
    promoted = {
        name[len(prefix):]: value
        for name, value in os.environ.items()
        if name.startswith(prefix) and len(name) > len(prefix)
    }
    if promoted:
        logger.info("Applying {} overrides: {}", env_mode, sorted(promoted))
        os.environ.update(promoted)


def load_templated_yaml(file_path: Path, env_mode: str = "development") -> ConfigData:
    """Read ``file_path`` and parse its ``config:`` document into ConfigData.

    Raises:
        FileNotFoundError: the file does not exist.
        ValueError: a required variable is missing, the YAML is malformed or
            the values fail validation.
    """
    text = Path(file_path).read_text()

    logger.info("Loading configuration from {} ({})", file_path, env_mode)
    apply_environment_overrides(env_mode)

    try:
        loaded = yaml.safe_load(substitute_env_vars(text))
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not loaded:
        raise ValueError("Failed to parse YAML: the document is empty")

    try:
        return ConfigData(**(loaded.get("config") or {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
