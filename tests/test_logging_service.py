"""
Tests for the logging service.
"""
import json
import logging
import logging.handlers
import os
import tempfile
import unittest

from script_gate.models.config import Config
from script_gate.services.logging_service import JSONFormatter, LoggingService


class TestJSONFormatter(unittest.TestCase):
    """Test JSON formatter for structured logging."""

    def setUp(self):
        self.formatter = JSONFormatter()
        self.logger = logging.getLogger('test')

    def test_format_basic_log_record(self):
        record = self.logger.makeRecord(
            name='test.module',
            level=logging.INFO,
            fn='test_file.py',
            lno=42,
            msg='Loaded %d certificates',
            args=(3,),
            exc_info=None
        )

        log_data = json.loads(self.formatter.format(record))

        self.assertIn('timestamp', log_data)
        self.assertEqual(log_data['level'], 'INFO')
        self.assertEqual(log_data['logger_name'], 'test.module')
        self.assertEqual(log_data['message'], 'Loaded 3 certificates')
        self.assertEqual(log_data['line_number'], 42)
        self.assertIsNone(log_data['extra_data'])
        self.assertIsNone(log_data['exception_info'])

    def test_format_with_extra_data(self):
        record = self.logger.makeRecord(
            name='test', level=logging.DEBUG, fn='f.py', lno=1,
            msg='Verification finished', args=(), exc_info=None,
            extra={'extra_data': {'sequence': 5, 'outcome': 'valid'}}
        )
        log_data = json.loads(self.formatter.format(record))
        self.assertEqual(log_data['extra_data'], {'sequence': 5, 'outcome': 'valid'})

    def test_format_with_exception(self):
        try:
            raise ValueError("bad certificate")
        except ValueError:
            import sys
            exc_info = sys.exc_info()

        record = self.logger.makeRecord(
            name='test', level=logging.ERROR, fn='f.py', lno=1,
            msg='failure', args=(), exc_info=exc_info
        )
        log_data = json.loads(self.formatter.format(record))
        self.assertEqual(log_data['exception_info']['type'], 'ValueError')
        self.assertEqual(log_data['exception_info']['message'], 'bad certificate')


class TestLoggingService(unittest.TestCase):
    """Test cases for LoggingService."""

    def setUp(self):
        self._temp_dir = tempfile.TemporaryDirectory()
        self.log_path = os.path.join(self._temp_dir.name, "logs", "gate.log")
        self.root_logger = logging.getLogger()
        self._saved_handlers = self.root_logger.handlers[:]
        self._saved_level = self.root_logger.level
        self.service = None

    def tearDown(self):
        if self.service:
            self.service.close()
        for handler in self._saved_handlers:
            self.root_logger.addHandler(handler)
        self.root_logger.setLevel(self._saved_level)
        self._temp_dir.cleanup()

    def test_console_only_without_log_file(self):
        self.service = LoggingService(Config(log_file_path=""))

        self.assertEqual(len(self.service.handlers), 1)
        self.assertIsInstance(self.service.handlers[0], logging.StreamHandler)
        self.assertEqual(self.root_logger.level, logging.INFO)

    def test_debug_toggle_sets_debug_level(self):
        self.service = LoggingService(Config(log_file_path="", debug=True))
        self.assertEqual(self.root_logger.level, logging.DEBUG)

    def test_file_handlers_write_json(self):
        self.service = LoggingService(Config(log_file_path=self.log_path))

        file_handlers = [h for h in self.service.handlers
                         if isinstance(h, logging.handlers.RotatingFileHandler)]
        self.assertEqual(len(file_handlers), 2)

        logging.getLogger('script_gate.test').error("Cannot load any certificate")
        for handler in self.service.handlers:
            handler.flush()

        with open(self.log_path) as f:
            entry = json.loads(f.readline())
        self.assertEqual(entry['message'], "Cannot load any certificate")

        errors_path = os.path.join(self._temp_dir.name, "logs", "gate.errors.log")
        self.assertTrue(os.path.exists(errors_path))

    def test_log_with_context(self):
        self.service = LoggingService(Config(log_file_path=""))
        with self.assertLogs('script_gate', level='INFO') as logs:
            self.service.log_with_context('info', 'Verification finished', sequence=2, outcome='invalid')

        self.assertEqual(logs.records[0].extra_data, {'sequence': 2, 'outcome': 'invalid'})

    def test_close_detaches_handlers(self):
        self.service = LoggingService(Config(log_file_path=""))
        handlers = self.service.handlers[:]
        self.service.close()
        for handler in handlers:
            self.assertNotIn(handler, self.root_logger.handlers)


if __name__ == '__main__':
    unittest.main()
