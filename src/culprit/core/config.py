"""Application state and configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from culprit.core.base import BaseConfig, BaseState
from culprit.core.log import Logger
from culprit.core.yaml_settings import YamlWithIncludesSettingsSource

# Modules usable in YAML templates, e.g. {platformdirs.user_log_dir}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class HostConfig(BaseConfig):
    """How units are listed and toggled."""

    workdir: Path | None = Field(
        default=None,
        description=(
            "Directory host commands run in (e.g. the WordPress root). "
            "Defaults to the current directory"
        ),
    )
    timeout: int = Field(
        default=120,
        description="Seconds before a host command is considered hung",
    )
    commands: dict[str, str] = Field(
        default_factory=dict,
        description=(
            "Command templates: list, disable, enable, name. "
            "{unit} and {slug} are substituted, shell-quoted"
        ),
    )


class ProtectedConfig(BaseConfig):
    """Units that are never offered to the search."""

    path_fragments: list[str] = Field(
        default_factory=list,
        description="Skip units whose identifier contains any of these",
    )
    names: list[str] = Field(
        default_factory=list,
        description="Skip units whose file name is one of these",
    )


class DisplayConfig(BaseConfig):
    """Terminal presentation."""

    clear_screen: bool = Field(
        default=True,
        description="Clear the terminal before each step",
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance"
    )
    host: HostConfig = Field(
        default_factory=HostConfig,
        description="Host command settings"
    )
    protected: ProtectedConfig = Field(
        default_factory=ProtectedConfig,
        description="Units excluded from every session"
    )
    display: DisplayConfig = Field(
        default_factory=DisplayConfig,
        description="Terminal presentation settings"
    )
    log_level: str = Field(
        default="warn",
        alias="log-level",
        description=(
            "Console log level: 'spew', 'trace', 'debug', 'info', "
            "'warn', 'error', 'fatal'"
        ),
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "culprit"
        ),
        description=(
            "Root directory for log files "
            "(supports {platformdirs.*} templates)"
        ),
    )
    session_name: str = Field(
        default="session",
        description="Name used for this session's log directory",
    )

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode='after')
    def _setup_logger(self) -> 'Config':
        """Point the global logger at the configured sinks."""
        from culprit.core.log import setup_logger
        from culprit.core.yaml_settings import _cleanup_bootstrap_logger

        if self.logger is None:
            self.logger = Logger(level=self.log_level)

        setup_logger(
            log_root=self.log_root,
            session_name=self.session_name,
            console=self.logger.console,
            file=self.logger.file,
            logfire=self.logger.logfire,
            level=self.logger.level,
        )

        _cleanup_bootstrap_logger()
        return self

    def close(self):
        """Close the global logger as well as the children."""
        from culprit.core.log import logger
        logger.close()
        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable during a session)
# ============================================================

class SessionState(BaseState):
    """Runtime state of one scan or search session."""

    strategy: str = Field(
        default="search",
        description="Strategy to run: scan or search",
    )
    host: Any = Field(
        default=None,
        description="Host the units live in",
    )
    oracle: Any = Field(
        default=None,
        description="Oracle answering the operator questions",
    )
    renderer: Any = Field(
        default=None,
        description="Renderer for operator output",
    )
    gateway: Any = Field(
        default=None,
        description="Toggle gateway owning the toggle state",
    )
    pool: list = Field(
        default_factory=list,
        description="Candidate pool built by discovery",
    )
    outcome: Any = Field(
        default=None,
        description="Outcome of the strategy run",
    )
    status: str = Field(
        default="pending",
        description=(
            "Session status: pending, running, declined, complete, "
            "aborted, failed"
        ),
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Runtime(BaseModel):
    """All runtime state, grouped by workflow."""

    session: SessionState = Field(
        default_factory=SessionState,
        description="Scan/search session runtime state"
    )


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Complete application state - configuration and runtime.

    This is the object that flows through the workflow nodes.
    - config: loaded from YAML/env/CLI and treated as read-only
    - runtime: mutated while the session runs
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)"
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during the session)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge. "
            "Use --include on CLI or include: in YAML files."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file="culprit.yaml",
        env_file=".env",
        env_prefix="CULPRIT_",
        env_nested_delimiter="__",
        cli_parse_args=True,
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore'
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Init arguments > YAML (with includes) > .env > environment >
        secrets."""
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> "State":
        """Replace {config.*} and {platformdirs.*} templates in every
        string and Path field.

        Placeholders that do not resolve, such as the {unit} and {slug}
        of host command templates, are left for runtime formatting.
        """
        self._substitute(self)
        return self

    def _substitute(self, obj: Any) -> Any:
        if isinstance(obj, str):
            return re.sub(r'\{([a-z._]+)\}', self._resolve, obj)
        if isinstance(obj, Path):
            return Path(self._substitute(str(obj)))
        if isinstance(obj, BaseModel):
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute(value)
                if new_value is not value and new_value != value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute(obj[key])
        elif isinstance(obj, list):
            for i, item in enumerate(obj):
                obj[i] = self._substitute(item)
        return obj

    def _resolve(self, match: re.Match) -> str:
        parts = match.group(1).split(".")
        if parts[0] in TEMPLATE_NAMESPACE:
            obj = TEMPLATE_NAMESPACE[parts[0]]
            parts = parts[1:]
        else:
            obj = self

        try:
            for part in parts:
                obj = getattr(obj, part)
            if callable(obj):
                obj = obj('culprit', appauthor=False)
            return str(obj)
        except (AttributeError, TypeError):
            return match.group(0)


__all__ = ["State", "Config", "BaseConfig", "BaseState"]
