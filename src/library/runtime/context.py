"""Process-wide configuration, scoped per execution context.

The active ``ConfigData`` lives in a ContextVar so tests, CLI commands and
worker threads can run against a different database or lending rules
without touching global state.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel

from src.library.runtime.config.config_data import ConfigData
from src.library.runtime.config.config_template import load_templated_yaml
from src.library.runtime.settings import EnvironmentVariables


@dataclass
class AppContext:
    config: ConfigData


def load_default_config() -> ConfigData:
    """Load config.yaml (or the file named by APP_CONFIG_FILE).

    Falls back to the built-in defaults when the file is absent so the
    package can be imported from any working directory.
    """
    env = EnvironmentVariables()
    config_path = Path(env.config_file)
    if not config_path.exists():
        logger.warning(
            "Configuration file {} not found; using built-in defaults", config_path
        )
        return ConfigData()
    return load_templated_yaml(config_path, env_mode=env.environment)


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=AppContext(config=load_default_config())
)


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    return _app_context.set(context)


def _explicit_values(model: BaseModel) -> dict[str, Any]:
    """Collect the fields that were set on ``model``, descending into sections.

    ``ConfigData()`` followed by ``config.library.loan_period_days = 7`` yields
    ``{"library": {"loan_period_days": 7}}``.
    """
    values: dict[str, Any] = {}
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            nested = _explicit_values(value)
            if nested:
                values[name] = nested
            elif name in model.model_fields_set:
                values[name] = value.model_dump()
        elif name in model.model_fields_set:
            values[name] = value
    return values


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _merge_configs(base_config: ConfigData, override_config: ConfigData) -> ConfigData:
    merged = _deep_merge(base_config.model_dump(), _explicit_values(override_config))
    return ConfigData.model_validate(merged)


@contextmanager
def with_context(config_override: ConfigData | None = None) -> Iterator[None]:
    """Temporarily layer ``config_override`` over the active configuration.

    Only values explicitly set on the override win; everything else is
    inherited. The previous configuration is restored on exit, even when the
    block raises.

    Example:
        override = ConfigData()
        override.library.loan_period_days = 7
        with with_context(override):
            assert get_config().library.loan_period_days == 7
    """
    if config_override is None:
        yield
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    current = get_context()
    token = set_context(
        replace(current, config=_merge_configs(current.config, config_override))
    )
    try:
        yield
    finally:
        _app_context.reset(token)


def get_config() -> ConfigData:
    return get_context().config
