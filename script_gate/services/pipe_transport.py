"""
Named pipe transport delivering signed scripts to the gate.
"""
import os
import logging

from ..models.request import MAX_MESSAGE_SIZE


class TransportError(Exception):
    """Raised when the named pipe cannot be created, opened or closed."""


class PipeTransport:
    """Receives one message per writer connection on a FIFO."""

    def __init__(self, pipe_path: str, max_message_size: int = MAX_MESSAGE_SIZE):
        self.pipe_path = pipe_path
        self.max_message_size = max_message_size
        self.logger = logging.getLogger(__name__)
        self._is_open = False

    def open(self) -> None:
        """
        Create the FIFO, replacing whatever is at the path.

        Raises:
            TransportError: If the FIFO cannot be created
        """
        try:
            os.remove(self.pipe_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise TransportError(f"Cannot remove existing file at {self.pipe_path}: {e}") from e

        try:
            os.mkfifo(self.pipe_path, 0o666)
        except OSError as e:
            raise TransportError(f"Cannot create a fifo named pipe at {self.pipe_path}: {e}") from e

        self._is_open = True
        self.logger.info(f"Listening on named pipe {self.pipe_path}")

    def receive(self) -> bytes:
        """
        Block until a writer connects, then read one message.

        Only a single read is performed; the message is at most
        max_message_size bytes.

        Raises:
            TransportError: If the FIFO cannot be opened or closed
        """
        try:
            fd = os.open(self.pipe_path, os.O_RDONLY)
        except OSError as e:
            raise TransportError(f"Cannot open the fifo named pipe: {e}") from e

        try:
            data = os.read(fd, self.max_message_size)
        except OSError as e:
            os.close(fd)
            raise TransportError(f"Cannot read from the fifo named pipe: {e}") from e

        try:
            os.close(fd)
        except OSError as e:
            raise TransportError(f"Cannot close the fifo named pipe: {e}") from e

        return data

    def close(self) -> None:
        """Remove the FIFO."""
        if not self._is_open:
            return
        self._is_open = False
        try:
            os.remove(self.pipe_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Failed to remove named pipe {self.pipe_path}: {e}")

    def is_open(self) -> bool:
        return self._is_open
