import io
import logging

from matching_service.logging_config import ThreadSafeLoggingConfig


class TestThreadSafeLoggingConfig:

    def setup_method(self):
        self.root = logging.getLogger()
        self.saved_handlers = list(self.root.handlers)
        self.saved_level = self.root.level
        self.config = ThreadSafeLoggingConfig()
        self.stream = io.StringIO()

    def teardown_method(self):
        self.config.stop()
        self.root.handlers[:] = self.saved_handlers
        self.root.setLevel(self.saved_level)
        logging.getLogger("werkzeug").setLevel(logging.NOTSET)

    def test_records_reach_stream_after_stop(self):
        self.config.setup_logging(stream=self.stream)
        assert self.config.running

        logging.getLogger("matching_service.test").info("hello from a test")
        self.config.stop()

        output = self.stream.getvalue()
        assert "hello from a test" in output
        assert "INFO" in output
        assert not self.config.running

    def test_access_lines_are_muted_outside_debug(self):
        self.config.setup_logging(stream=self.stream)

        werkzeug = logging.getLogger("werkzeug")
        werkzeug.warning('127.0.0.1 - - "GET /matching/recommendations HTTP/1.1" 200 -')
        werkzeug.warning("Debugger is active")
        self.config.stop()

        output = self.stream.getvalue()
        assert "Debugger is active" in output
        assert "/matching/recommendations" not in output

    def test_debug_level(self):
        self.config.setup_logging(debug=True, stream=self.stream)

        logging.getLogger("matching_service.test").debug("fine grained")
        self.config.stop()

        assert "fine grained" in self.stream.getvalue()
        assert logging.getLogger().level == logging.DEBUG
