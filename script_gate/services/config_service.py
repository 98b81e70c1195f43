"""
Configuration service for loading and validating gate settings.
"""
import os
import shlex
import shutil
import configparser
from typing import Dict, Any
import logging

from ..models.config import Config, ConfigValidationError, ConfigValidationResult


class ConfigService:
    """Service for loading and validating application configuration."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def load_config(self, config_path: str, **overrides) -> Config:
        """
        Load configuration from a property file.

        Args:
            config_path: Path to the configuration file
            **overrides: Config fields that take precedence over the file
                (command line values); None values are ignored

        Returns:
            Config object with loaded settings

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid or has validation errors
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        config_data = self._load_config_file(config_path)
        config_kwargs = self._map_config_data(config_data)
        config_kwargs.update(self._overrides(overrides))
        return self.build_config(**config_kwargs)

    def build_config(self, **settings) -> Config:
        """
        Create and validate a Config from explicit settings.

        Raises:
            ValueError: If a setting is invalid or validation finds errors
        """
        config = Config(**settings)

        validation_result = self.validate_config(config)

        if validation_result.has_errors():
            error_summary = validation_result.get_error_summary()
            raise ValueError(f"Configuration validation failed:\n{error_summary}")

        if validation_result.has_warnings():
            warning_summary = validation_result.get_error_summary()
            self.logger.warning(f"Configuration warnings:\n{warning_summary}")

        return config

    def _overrides(self, overrides: Dict[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in overrides.items() if value is not None}

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """Load configuration data from file."""
        config_parser = configparser.ConfigParser()

        try:
            config_parser.read(config_path)
        except configparser.Error as e:
            raise ValueError(f"Failed to parse configuration file: {e}")

        # Flatten to section.key
        config_data = {}
        for section in config_parser.sections():
            for key, value in config_parser.items(section):
                config_data[f"{section}.{key}"] = value

        for key, value in config_parser.defaults().items():
            config_data.setdefault(key, value)

        return config_data

    def _map_config_data(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Map configuration keys to typed Config fields."""
        config_mapping = {
            # Server settings
            "server.certs_path": ("certs_path", str),
            "certs_path": ("certs_path", str),
            "server.debug": ("debug", bool),
            "debug": ("debug", bool),
            "server.pipe_path": ("pipe_path", str),
            "pipe_path": ("pipe_path", str),

            # Execution settings
            "execution.shell_command": ("shell_command", str),
            "shell_command": ("shell_command", str),
            "execution.timeout_seconds": ("execution_timeout_seconds", int),
            "execution_timeout_seconds": ("execution_timeout_seconds", int),

            # Application settings
            "app.log_level": ("log_level", str),
            "log_level": ("log_level", str),
            "app.log_file_path": ("log_file_path", str),
            "log_file_path": ("log_file_path", str),
        }

        config_kwargs = {}

        for config_key, raw_value in config_data.items():
            if config_key not in config_mapping:
                continue
            field_name, field_type = config_mapping[config_key]
            try:
                if field_type == bool:
                    value = self._parse_bool(raw_value)
                elif field_type == int:
                    value = int(raw_value)
                else:
                    value = str(raw_value).strip()
            except (ValueError, TypeError) as e:
                raise ValueError(f"Invalid value for {config_key}: {raw_value} ({e})")

            if field_name == "log_level":
                value = value.upper()
            config_kwargs[field_name] = value

        return config_kwargs

    def _parse_bool(self, value: Any) -> bool:
        """Parse boolean value from string."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "1", "on", "enabled")
        return bool(value)

    def validate_config(self, config: Config) -> ConfigValidationResult:
        """
        Validate configuration settings against the environment.

        A missing certificate directory is only a warning here; loading the
        trust store reports it as fatal.
        """
        errors = []

        if not os.path.isdir(config.certs_path):
            errors.append(ConfigValidationError(
                "certs_path",
                f"Certificates directory does not exist: {config.certs_path}",
                "warning"
            ))

        pipe_dir = os.path.dirname(config.pipe_path)
        if pipe_dir and not os.path.isdir(pipe_dir):
            errors.append(ConfigValidationError(
                "pipe_path",
                f"Directory for the named pipe does not exist: {pipe_dir}"
            ))

        shell = shlex.split(config.shell_command)[0]
        if shutil.which(shell) is None:
            errors.append(ConfigValidationError(
                "shell_command",
                f"Shell not found on PATH: {shell}",
                "warning"
            ))

        if config.log_file_path:
            log_dir = os.path.dirname(config.log_file_path)
            if log_dir and not os.path.exists(log_dir):
                errors.append(ConfigValidationError(
                    "log_file_path",
                    f"Log directory does not exist: {log_dir}",
                    "warning"
                ))

        return ConfigValidationResult(
            is_valid=not any(e.severity == "error" for e in errors),
            errors=errors,
            warnings=[]
        )

    def create_default_config_file(self, config_path: str) -> None:
        """
        Create a default configuration file with example settings.

        Args:
            config_path: Path where to create the config file
        """
        config_content = """# Script Gate Configuration File

[server]
# Directory of self-signed code-signing certificates (PEM or DER)
certs_path = ./certificates
debug = false
pipe_path = ./fifo

[execution]
shell_command = bash
# 0 waits for the script forever
timeout_seconds = 0

[app]
log_level = INFO
log_file_path = logs/script_gate.log
"""

        config_dir = os.path.dirname(config_path)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(config_path, 'w') as f:
            f.write(config_content)

        self.logger.info(f"Created default configuration file: {config_path}")
