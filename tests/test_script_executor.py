"""
Tests for the script executor.
"""
import subprocess
import unittest
from unittest.mock import patch

from script_gate.models.request import SignedScript, VerificationOutcome
from script_gate.services.script_executor import ExecutionResult, ScriptExecutor


def verified_script(script: bytes) -> SignedScript:
    return SignedScript(sequence=1, signature=b"A" * 40, script=script,
                        outcome=VerificationOutcome.VALID)


class TestScriptExecutor(unittest.TestCase):
    """Test cases for ScriptExecutor."""

    def setUp(self):
        self.executor = ScriptExecutor(shell_command="sh")

    def test_runs_verified_script(self):
        result = self.executor.run(verified_script(b"echo hello\necho world 1>&2\n"))

        self.assertTrue(result.success)
        self.assertEqual(result.exit_code, 0)
        self.assertIn("hello", result.output)
        self.assertIn("world", result.output)

    def test_reports_exit_code(self):
        result = self.executor.run(verified_script(b"exit 3\n"))
        self.assertTrue(result.success)
        self.assertEqual(result.exit_code, 3)

    def test_logs_output(self):
        with self.assertLogs('script_gate.services.script_executor', level='INFO') as logs:
            self.executor.run(verified_script(b"echo from-script\n"))
        self.assertTrue(any("from-script" in line for line in logs.output))

    def test_refuses_unverified_script(self):
        for outcome in (VerificationOutcome.INVALID, VerificationOutcome.ERROR,
                        VerificationOutcome.BAD_CERTIFICATE):
            with self.subTest(outcome=outcome):
                signed_script = verified_script(b"echo should-not-run\n")
                signed_script.outcome = outcome
                with patch('script_gate.services.script_executor.subprocess.run') as run:
                    result = self.executor.run(signed_script)
                self.assertFalse(result.success)
                self.assertIn("unverified", result.error_message)
                run.assert_not_called()

    def test_timeout(self):
        executor = ScriptExecutor(shell_command="sh", timeout_seconds=1)
        with patch('script_gate.services.script_executor.subprocess.run',
                   side_effect=subprocess.TimeoutExpired(cmd="sh", timeout=1)):
            result = executor.run(verified_script(b"sleep 10\n"))
        self.assertFalse(result.success)
        self.assertIn("timed out", result.error_message)

    def test_missing_shell(self):
        executor = ScriptExecutor(shell_command="/nonexistent/shell")
        result = executor.run(verified_script(b"echo hi\n"))
        self.assertEqual(result.success, False)
        self.assertIsInstance(result, ExecutionResult)

    def test_shell_command_with_arguments(self):
        executor = ScriptExecutor(shell_command="sh -s")
        self.assertEqual(executor.shell_command, ["sh", "-s"])
        self.assertIsNone(executor.timeout_seconds)


if __name__ == '__main__':
    unittest.main()
