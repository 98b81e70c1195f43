"""
Configuration data models for the script verification gate.
"""
from dataclasses import dataclass


DEFAULT_CERTS_PATH = "./certificates"
DEFAULT_PIPE_PATH = "./fifo"


@dataclass
class Config:
    """Main configuration class containing all application settings."""

    # Server settings
    certs_path: str = DEFAULT_CERTS_PATH
    debug: bool = False
    pipe_path: str = DEFAULT_PIPE_PATH

    # Execution settings
    shell_command: str = "bash"
    execution_timeout_seconds: int = 0  # 0 disables the timeout

    # Application settings
    log_level: str = "INFO"
    log_file_path: str = "logs/script_gate.log"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_types()

    def _validate_types(self):
        """Ensure all configuration values have correct types."""
        if not isinstance(self.certs_path, str) or not self.certs_path:
            raise ValueError("certs_path must be a non-empty string")

        if not isinstance(self.pipe_path, str) or not self.pipe_path:
            raise ValueError("pipe_path must be a non-empty string")

        if not isinstance(self.shell_command, str) or not self.shell_command.strip():
            raise ValueError("shell_command must be a non-empty string")

        if not isinstance(self.execution_timeout_seconds, int) or self.execution_timeout_seconds < 0:
            raise ValueError("execution_timeout_seconds must be a non-negative integer")

        if self.log_level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("log_level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug toggle."""
        return "DEBUG" if self.debug else self.log_level


@dataclass
class ConfigValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    severity: str = "error"  # error, warning

    def __str__(self):
        return f"{self.severity.upper()}: {self.field} - {self.message}"


@dataclass
class ConfigValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: list[ConfigValidationError]
    warnings: list[ConfigValidationError]

    def __post_init__(self):
        """Separate errors and warnings."""
        all_issues = self.errors + self.warnings
        self.errors = [e for e in all_issues if e.severity == "error"]
        self.warnings = [e for e in all_issues if e.severity == "warning"]

    def has_errors(self) -> bool:
        """Check if there are any validation errors."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if there are any validation warnings."""
        return len(self.warnings) > 0

    def get_error_summary(self) -> str:
        """Get a formatted summary of all errors and warnings."""
        lines = []

        if self.errors:
            lines.append("Configuration Errors:")
            for error in self.errors:
                lines.append(f"  - {error}")

        if self.warnings:
            lines.append("Configuration Warnings:")
            for warning in self.warnings:
                lines.append(f"  - {warning}")

        return "\n".join(lines) if lines else "Configuration is valid"
