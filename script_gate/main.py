"""
Main application entry point for the script verification gate.
Builds the trust store, listens on the named pipe, and only runs scripts
whose signature verifies under a trusted code-signing certificate.
"""

import os
import sys
import signal
import logging
import threading
from typing import Optional

from .models.config import Config
from .models.request import FramingError, VerificationOutcome
from .models.trust import TrustStore
from .security.certificate_store import load_trust_store
from .security.signature_verifier import SignatureVerifier
from .services.config_service import ConfigService
from .services.logging_service import CONSOLE_FORMAT, LoggingService
from .services.message_framer import MessageFramer, RequestBuffer
from .services.pipe_transport import PipeTransport, TransportError
from .services.script_executor import ScriptExecutor


class ScriptGateApplication:
    """Main application class for the script verification gate."""

    def __init__(self, config_path: Optional[str] = None, certs_path: Optional[str] = None,
                 debug: bool = False, pipe_path: Optional[str] = None):
        """
        Initialize the application.

        Args:
            config_path: Path to configuration file (optional)
            certs_path: Trust anchor directory, overrides the config file
            debug: Enable debug logging, overrides the config file
            pipe_path: Named pipe path, overrides the config file
        """
        self.config_path = config_path or self._get_default_config_path()
        self.overrides = {
            'certs_path': certs_path,
            'debug': True if debug else None,
            'pipe_path': pipe_path,
        }
        self.logger = None
        self.config_service = None
        self.config: Optional[Config] = None
        self.logging_service = None
        self.trust_store: Optional[TrustStore] = None
        self.verifier = None
        self.request_buffer = None
        self.transport = None
        self.executor = None

        self._shutdown_event = threading.Event()
        self._is_running = False

    def _get_default_config_path(self) -> Optional[str]:
        """Get the default configuration file path, if one exists."""
        possible_paths = [
            "config/script_gate.properties",
            "script_gate.properties",
            "/etc/script_gate/script_gate.properties"
        ]

        for path in possible_paths:
            if os.path.exists(path):
                return path

        return None

    def _setup_signal_handlers(self):
        """Setup signal handlers for graceful shutdown."""
        def signal_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            self.logger.info(f"Received {signal_name} signal, initiating graceful shutdown...")
            self.shutdown()
            # Interrupts the blocking pipe open
            raise SystemExit(0)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def initialize(self) -> bool:
        """
        Initialize all application components.

        Returns:
            True if initialization successful, False otherwise
        """
        try:
            self._setup_bootstrap_logging()

            if not self._load_configuration():
                return False

            self.logging_service = LoggingService(self.config)
            self.logger.info("Starting script gate initialization...")

            if not self._load_trust_store():
                return False

            self._initialize_services()

            if not self._open_transport():
                return False

            self.logger.info("Script gate initialized successfully")
            self._is_running = True
            return True

        except Exception as e:
            self.logger.error(f"Failed to initialize application: {str(e)}")
            return False

    def _setup_bootstrap_logging(self):
        """Console logging until the configuration is known."""
        logging.basicConfig(
            level=logging.DEBUG if self.overrides['debug'] else logging.INFO,
            format=CONSOLE_FORMAT,
            handlers=[logging.StreamHandler(sys.stdout)]
        )
        self.logger = logging.getLogger(__name__)

    def _load_configuration(self) -> bool:
        """Load configuration from file, falling back to defaults."""
        try:
            self.config_service = ConfigService()

            if self.config_path and not os.path.exists(self.config_path):
                self.logger.warning(f"Configuration file not found: {self.config_path}")
                self.config_service.create_default_config_file(self.config_path)
                self.logger.info("Please edit the configuration file and restart the application")
                return False

            if self.config_path:
                self.logger.info(f"Loading configuration from: {self.config_path}")
                self.config = self.config_service.load_config(self.config_path, **self.overrides)
            else:
                self.logger.info("No configuration file found, using defaults")
                self.config = self.config_service.build_config(
                    **{key: value for key, value in self.overrides.items() if value is not None}
                )

            self.logger.info("Configuration loaded successfully")
            return True

        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to load configuration: {str(e)}")
            return False

    def _load_trust_store(self) -> bool:
        """Build the trust store; an unreadable directory or zero anchors is fatal."""
        self.logger.info(f"Loading certificates from: {self.config.certs_path}")
        try:
            trust_store = load_trust_store(self.config.certs_path)
        except OSError:
            self.logger.error("Cannot load any certificate")
            return False

        if trust_store.is_empty():
            self.logger.error("Cannot load any certificate")
            return False

        self.trust_store = trust_store
        return True

    def _initialize_services(self):
        """Wire the per-request services around the trust store."""
        self.verifier = SignatureVerifier(self.trust_store)
        self.request_buffer = RequestBuffer(MessageFramer())
        self.executor = ScriptExecutor(
            shell_command=self.config.shell_command,
            timeout_seconds=self.config.execution_timeout_seconds
        )
        self.transport = PipeTransport(self.config.pipe_path)
        self.logger.debug("Services initialized")

    def _open_transport(self) -> bool:
        try:
            self.transport.open()
            return True
        except TransportError as e:
            self.logger.error(f"Cannot open a fifo named pipe: {e}")
            return False

    def process_message(self, raw: bytes, sequence: int) -> Optional[VerificationOutcome]:
        """
        Frame, verify and, when valid, execute one raw message.

        Returns:
            The verification outcome, or None if the message could not be framed
        """
        self.logger.info(f"========== Received script #{sequence} ==========")

        try:
            with self.request_buffer.acquire(raw, sequence) as signed_script:
                outcome = self.verifier.verify(signed_script)

                self.logging_service.log_with_context(
                    'debug',
                    f"Verification of script #{sequence} finished",
                    sequence=sequence,
                    outcome=outcome.value,
                    signature_size=signed_script.signature_size,
                    script_size=signed_script.script_size
                )

                if outcome is VerificationOutcome.VALID:
                    self.logger.info(f"Script #{sequence} has VALID signature, executing...")
                    result = self.executor.run(signed_script)
                    if not result.success:
                        self.logger.error(f"Failed to execute the script: {result.error_message}")
                elif outcome is VerificationOutcome.INVALID:
                    self.logger.info(f"Script #{sequence} has INVALID signature, skipping...")
                else:
                    self.logger.error(f"Error occurred while verifying the signature of script #{sequence}")

                return outcome

        except FramingError as e:
            self.logger.error(f"Error occurred while parsing script #{sequence}: {e}. Skipping...")
            return None

    def process_next(self, sequence: int) -> Optional[VerificationOutcome]:
        """Block for the next message on the pipe and process it."""
        try:
            raw = self.transport.receive()
        except TransportError as e:
            self.logger.error(f"Error occurred while receiving script #{sequence}: {e}. Skipping...")
            return None

        return self.process_message(raw, sequence)

    def run(self):
        """Serve requests until shutdown."""
        if not self._is_running:
            self.logger.error("Application not initialized. Call initialize() first.")
            return

        self._setup_signal_handlers()
        sequence = 0
        try:
            while not self._shutdown_event.is_set():
                sequence += 1
                self.process_next(sequence)
        except KeyboardInterrupt:
            self.logger.info("Received keyboard interrupt")
        finally:
            self.shutdown()

    def shutdown(self):
        """Perform graceful shutdown of the application."""
        if not self._is_running:
            return

        self.logger.info("Initiating graceful shutdown...")
        self._shutdown_event.set()
        self._is_running = False

        if self.transport:
            self.transport.close()

        # Releases all anchors
        self.trust_store = None
        self.verifier = None

        self.logger.info("Graceful shutdown completed")

        if self.logging_service:
            self.logging_service.close()

    def is_running(self) -> bool:
        """Check if the application is running."""
        return self._is_running

    def get_status(self) -> dict:
        """Get application status information."""
        return {
            'running': self._is_running,
            'config_path': self.config_path,
            'certs_path': self.config.certs_path if self.config else None,
            'pipe_path': self.config.pipe_path if self.config else None,
            'debug': self.config.debug if self.config else False,
            'trust_anchors': list(self.trust_store.labels()) if self.trust_store else []
        }


def main():
    """Main entry point for the application."""
    import argparse

    parser = argparse.ArgumentParser(description='Signed script verification gate')
    parser.add_argument('--debug', '-d', action='store_true', help='Enable debug logging')
    parser.add_argument('--certs-path', '-c', help='Directory of trusted code-signing certificates')
    parser.add_argument('--config', help='Configuration file path')
    parser.add_argument('--pipe', help='Named pipe path (default: ./fifo)')
    parser.add_argument('--check-config', action='store_true',
                        help='Load configuration and certificates, print status and exit')

    args = parser.parse_args()

    app = ScriptGateApplication(
        config_path=args.config,
        certs_path=args.certs_path,
        debug=args.debug,
        pipe_path=args.pipe
    )

    if not app.initialize():
        print("Failed to initialize application")
        sys.exit(1)

    if args.check_config:
        status = app.get_status()
        print("Configuration check passed")
        print(f"Certificates path: {status['certs_path']}")
        print(f"Trust anchors: {', '.join(status['trust_anchors'])}")
        print(f"Pipe path: {status['pipe_path']}")
        app.shutdown()
        sys.exit(0)

    app.run()


if __name__ == '__main__':
    main()
