"""
Script executor: runs verified scripts in a shell and captures their output.
"""
import shlex
import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from ..models.request import SignedScript


@dataclass
class ExecutionResult:
    """Result of running a script."""
    success: bool
    exit_code: Optional[int] = None
    output: str = ""
    error_message: Optional[str] = None


class ScriptExecutor:
    """Feeds verified scripts to a shell process."""

    def __init__(self, shell_command: str = "bash", timeout_seconds: int = 0):
        """
        Initialize the executor.

        Args:
            shell_command: Shell to start; the script is written to its stdin
            timeout_seconds: Kill the shell after this long, 0 to wait forever
        """
        self.shell_command = shlex.split(shell_command)
        self.timeout_seconds = timeout_seconds or None
        self.logger = logging.getLogger(__name__)

    def run(self, signed_script: SignedScript) -> ExecutionResult:
        """Run the script, provided the verifier marked this request as valid."""
        # The gate already branched on the outcome; check again right before running.
        if not signed_script.is_verified:
            self.logger.error(f"An attempt to run an unverified script (#{signed_script.sequence})")
            return ExecutionResult(
                success=False,
                error_message="An attempt to run an unverified script"
            )

        try:
            completed = subprocess.run(
                self.shell_command,
                input=signed_script.script,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self.timeout_seconds,
                check=False
            )
        except subprocess.TimeoutExpired:
            self.logger.error(f"Script #{signed_script.sequence} timed out after {self.timeout_seconds}s")
            return ExecutionResult(
                success=False,
                error_message=f"Script timed out after {self.timeout_seconds} seconds"
            )
        except OSError as e:
            self.logger.error(f"Error opening pipe to {self.shell_command[0]}: {e}")
            return ExecutionResult(success=False, error_message=str(e))

        output = completed.stdout.decode("utf-8", errors="replace")

        self.logger.info("++++++++++++ SCRIPT OUTPUT ++++++++++++++++")
        self.logger.info("++++++++++++++++ START ++++++++++++++++++++")
        for line in output.splitlines():
            self.logger.info(line)
        self.logger.info("+++++++++++++++++ END +++++++++++++++++++++")

        return ExecutionResult(
            success=True,
            exit_code=completed.returncode,
            output=output
        )
