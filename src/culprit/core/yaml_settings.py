"""YAML configuration loading with include directive support."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

# Logger used while configuration loads, before the real one exists.
# Created lazily to avoid importing log.py at module load time.
_bootstrap_logger = None


def _get_bootstrap_logger():
    global _bootstrap_logger
    if _bootstrap_logger is None:
        from culprit.core.log import ConsoleSink, Logger
        _bootstrap_logger = Logger(console=ConsoleSink(level="warn"))
        _bootstrap_logger.setup(log_root=Path.home(), session_name="bootstrap")
    return _bootstrap_logger


def _cleanup_bootstrap_logger():
    """Close the bootstrap logger once Config has set up the real one."""
    global _bootstrap_logger
    if _bootstrap_logger:
        _bootstrap_logger.close()
        _bootstrap_logger = None


def default_config_path() -> Path:
    return Path(__file__).parent.parent / "defaults" / "default.yaml"


def user_config_path() -> Path:
    return Path(user_config_dir("culprit", appauthor=False)) / "culprit.yaml"


def _cli_includes(argv: list[str]) -> list[str]:
    """Values of every `--include FILE` pair in argv."""
    includes = []
    args = iter(argv[1:])
    for arg in args:
        if arg == "--include":
            value = next(args, None)
            if value is not None:
                includes.append(value)
    return includes


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """YAML settings source with `include:` and `--include` support.

    Files are deep-merged, later ones winning:
        package defaults < user config < ./culprit.yaml < --include files
    `include:` inside a file is resolved relative to that file and
    merged underneath it.
    """

    def __init__(self, settings_cls: type[BaseSettings], yaml_file=None):
        """
        Args:
            settings_cls: The settings class being initialized
            yaml_file: Override for the project config file path
        """
        includes = _cli_includes(sys.argv)
        base = yaml_file or settings_cls.model_config.get("yaml_file")
        self.project_files = (
            [base] if isinstance(base, (str, os.PathLike)) else list(base or [])
        )
        super().__init__(settings_cls, includes or None)

    def _read_files(self, files, deep_merge: bool = True):
        """Load defaults, user config, project config and CLI includes.

        Args:
            files: --include file path(s), or None

        Returns:
            Deep-merged dictionary of everything that exists
        """
        candidates = [default_config_path(), user_config_path()]
        candidates.extend(Path(f).expanduser() for f in self.project_files)
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            candidates.extend(Path(f).expanduser() for f in files)

        result: dict = {}
        for file_path in candidates:
            if not file_path.is_file():
                _get_bootstrap_logger().debug(
                    "Configuration file not found (skipping)",
                    file=str(file_path),
                )
                continue
            with _get_bootstrap_logger().span(
                "Configuration loading", file=str(file_path)
            ):
                data = self._load_file_recursive(file_path, set())
                result = self._deep_merge(result, data)
        return result

    def _load_file_recursive(self, filepath: Path, visited: set[Path]) -> dict:
        """Load a file, merging its include: files underneath it.

        Raises:
            ValueError: If an include cycle is found
        """
        filepath = filepath.resolve()
        if filepath in visited:
            raise ValueError(f"Circular include: {filepath}")
        visited.add(filepath)

        with open(filepath, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        includes = data.pop("include", None) or []
        if isinstance(includes, str):
            includes = [includes]

        for inc in includes:
            inc_path = self._resolve_path(inc, filepath)
            inc_data = self._load_file_recursive(inc_path, visited.copy())
            data = self._deep_merge(inc_data, data)
        return data

    def _resolve_path(self, include_path: str, relative_to: Path) -> Path:
        path = Path(include_path).expanduser()
        if path.is_absolute():
            return path
        return (relative_to.parent / path).resolve()

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Merge override into a copy of base; override wins."""
        result = base.copy()
        for key, value in override.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
