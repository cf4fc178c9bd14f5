"""
Configuration management for job-runner.

Loads runner settings from an optional JSON file, then applies
environment overrides (a .env file is loaded first when present).
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from job_runner.models import JobParams, RunnerSettings


logger = logging.getLogger(__name__)

# Default configuration paths
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "job-runner"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"
DEFAULT_ENV_FILE = Path.cwd() / ".env"

# Environment variable -> settings field
ENV_PREFIX = "JOB_RUNNER_"
ENV_OVERRIDES = {
    f"{ENV_PREFIX}LOG_LEVEL": "log_level",
    f"{ENV_PREFIX}LOG_FORMAT": "log_format",
    f"{ENV_PREFIX}KEEP_RUNS": "keep_runs",
    f"{ENV_PREFIX}EXEC_ASYNC": "exec_async",
}


class ConfigManager:
    """
    Manages job-runner settings.

    Handles loading settings from disk and environment, making updates,
    and persisting changes atomically.
    """

    def __init__(self, config_file: Optional[Path] = None, env_file: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to JSON settings file. Defaults to ~/.config/job-runner/config.json
            env_file: Path to .env file. Defaults to .env in the working directory
        """
        self.config_file = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
        self.env_file = Path(env_file) if env_file else DEFAULT_ENV_FILE

        # Load or create default settings
        self.settings = self._load_settings()

    def _read_file(self) -> Dict[str, Any]:
        """Read the JSON settings file, or return {} if missing or unreadable."""
        if not self.config_file.exists():
            return {}

        try:
            data = json.loads(self.config_file.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read config file {self.config_file}, using defaults: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Config file {self.config_file} is not a JSON object, using defaults")
            return {}
        return data

    def _read_env(self) -> Dict[str, str]:
        """Collect settings overrides from the environment."""
        if self.env_file.exists():
            load_dotenv(self.env_file)

        overrides = {}
        for env_name, field in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None and value != "":
                overrides[field] = value
        return overrides

    def _load_settings(self) -> RunnerSettings:
        """Load settings from file and environment, falling back to defaults."""
        data = self._read_file()
        data.update(self._read_env())

        try:
            return RunnerSettings(**data)
        except ValidationError as e:
            logger.warning(f"Invalid job-runner settings, using defaults: {e}")
            return RunnerSettings()

    def reload(self) -> None:
        """Reload settings from disk and environment."""
        self.settings = self._load_settings()

    def save_config(self) -> None:
        """Save settings atomically (temp file + os.replace)."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='w',
                dir=self.config_file.parent,
                prefix=f".{self.config_file.name}.",
                suffix='.tmp',
                delete=False
            ) as tmp_file:
                temp_path = Path(tmp_file.name)
                json.dump(self.settings.model_dump(), tmp_file, indent=2)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())

            os.replace(temp_path, self.config_file)
        except OSError:
            if temp_path and temp_path.exists():
                temp_path.unlink()
            raise

    # Settings management

    def update_settings(self, **kwargs) -> None:
        """
        Update runner settings.

        Args:
            **kwargs: Settings to update (log_level, keep_runs, etc.)

        Raises:
            ValueError: If a setting name is unknown or a value is invalid
        """
        for key in kwargs:
            if key not in RunnerSettings.model_fields:
                raise ValueError(f"Unknown setting: {key}")

        # Re-validate the merged settings
        self.settings = RunnerSettings(**{**self.settings.model_dump(), **kwargs})

    def job_params(self, **overrides) -> JobParams:
        """
        Build JobParams with defaults taken from the settings.

        Args:
            **overrides: JobParams fields (name, queue_name, logger, ...)

        Returns:
            Validated JobParams
        """
        values = {
            "keep_runs": self.settings.keep_runs,
            "exec_async": self.settings.exec_async,
        }
        values.update(overrides)
        return JobParams(**values)


def get_default_config_manager() -> ConfigManager:
    """Get the default configuration manager."""
    return ConfigManager(DEFAULT_CONFIG_FILE)
