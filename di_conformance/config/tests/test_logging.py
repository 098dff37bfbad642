import json
import logging
from io import StringIO
from tempfile import NamedTemporaryFile
from unittest import TestCase, mock

from ..base import ConfigurationError
from .. import logging as test_module


class TestLoggingConfigurator(TestCase):
    def setUp(self):
        self.stream = StringIO()
        self.handler = logging.StreamHandler(self.stream)
        patcher = mock.patch.object(logging.root, "handlers", [self.handler])
        patcher.start()
        self.addCleanup(patcher.stop)
        level = logging.root.level
        self.addCleanup(logging.root.setLevel, level)

    @mock.patch.object(test_module, "load_resource", autospec=True)
    @mock.patch.object(test_module, "fileConfig", autospec=True)
    def test_configure_default(self, mock_file_config, mock_load_resource):
        test_module.LoggingConfigurator.configure()

        mock_load_resource.assert_called_once_with(
            test_module.DEFAULT_LOGGING_CONFIG_PATH_INI, "utf-8"
        )
        mock_file_config.assert_called_once_with(
            mock_load_resource.return_value, disable_existing_loggers=False
        )
        assert any(
            isinstance(log_filter, test_module.ContextFilter)
            for log_filter in self.handler.filters
        )

    @mock.patch.object(test_module, "load_resource", autospec=True)
    @mock.patch.object(test_module, "fileConfig", autospec=True)
    def test_configure_with_path(self, mock_file_config, mock_load_resource):
        test_module.LoggingConfigurator.configure("a path")
        mock_load_resource.assert_called_once_with("a path", "utf-8")

    def test_configure_not_found(self):
        with mock.patch.object(
            test_module, "load_resource", mock.MagicMock(return_value=None)
        ), mock.patch.object(test_module.logging, "basicConfig") as mock_basic:
            test_module.LoggingConfigurator.configure("missing.ini")
        mock_basic.assert_called_once_with(level=logging.WARNING)
        assert "Logging config file not found: missing.ini" in self.stream.getvalue()

    @mock.patch.object(test_module, "load_resource", autospec=True)
    @mock.patch.object(test_module, "fileConfig", autospec=True)
    def test_configure_level(self, mock_file_config, mock_load_resource):
        test_module.LoggingConfigurator.configure(log_level="debug")
        assert logging.root.level == logging.DEBUG
        with self.assertRaises(ConfigurationError):
            test_module.LoggingConfigurator.configure(log_level="loud")

    @mock.patch.object(test_module, "load_resource", autospec=True)
    @mock.patch.object(test_module, "fileConfig", autospec=True)
    def test_configure_json(self, mock_file_config, mock_load_resource):
        test_module.LoggingConfigurator.configure(log_json=True)
        token = test_module.context_vendor.set("Vendor A")
        try:
            logging.getLogger("di_conformance.tests").warning("checked proof")
        finally:
            test_module.context_vendor.reset(token)
        record = json.loads(self.stream.getvalue().splitlines()[-1])
        assert record["message"] == "checked proof"
        assert record["vendor"] == "Vendor A"

    @mock.patch.object(test_module, "load_resource", autospec=True)
    @mock.patch.object(test_module, "fileConfig", autospec=True)
    def test_configure_log_file(self, mock_file_config, mock_load_resource):
        with NamedTemporaryFile("r", suffix=".log") as log_file:
            test_module.LoggingConfigurator.configure(log_file=log_file.name)
            file_handler = logging.root.handlers[-1]
            try:
                assert isinstance(file_handler, logging.FileHandler)
                logging.getLogger("di_conformance.tests").warning("to file")
                file_handler.flush()
                assert "None WARNING di_conformance.tests" in log_file.read()
            finally:
                file_handler.close()


class TestContextFilter(TestCase):
    def test_filter(self):
        log_filter = test_module.ContextFilter()
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert log_filter.filter(record)
        assert record.vendor is None

        token = test_module.context_vendor.set("Vendor B")
        try:
            assert log_filter.filter(record)
        finally:
            test_module.context_vendor.reset(token)
        assert record.vendor == "Vendor B"


class TestResources(TestCase):
    def test_load_resource(self):
        with test_module.load_resource(
            test_module.DEFAULT_LOGGING_CONFIG_PATH_INI, "utf-8"
        ) as stream:
            assert "[loggers]" in stream.read()
        assert test_module.load_resource("/nonexistent/logging.ini") is None

    def test_file_config_errors(self):
        with self.assertRaises(FileNotFoundError):
            test_module.fileConfig("/nonexistent/logging.ini")
        with NamedTemporaryFile("w", suffix=".ini") as empty:
            with self.assertRaises(RuntimeError):
                test_module.fileConfig(empty.name)
