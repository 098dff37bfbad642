"""Utilities related to logging."""

import configparser
import io
import logging
import os
from contextvars import ContextVar
from importlib import resources
from logging.config import (
    _clearExistingHandlers,
    _create_formatters,
    _install_handlers,
    _install_loggers,
)
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from .base import ConfigurationError

LOGGER = logging.getLogger(__name__)

DEFAULT_LOGGING_CONFIG_PATH_INI = "di_conformance.config:default_logging_config.ini"
LOG_FORMAT_VENDOR_PATTERN = (
    "%(asctime)s %(vendor)s %(levelname)s %(name)s:%(lineno)d %(message)s"
)

context_vendor: ContextVar[str] = ContextVar("context_vendor")


class ContextFilter(logging.Filter):
    """Logging filter stamping records with the vendor under test."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add the current vendor to the record."""
        record.vendor = context_vendor.get(None)
        return True


def load_resource(path: str, encoding: Optional[str] = None):
    """Open a resource file located in a python package or the local filesystem.

    Args:
        path (str): The resource path in the form of `dir/file` or `package:dir/file`
        encoding (str, optional): The encoding to use when reading the resource file.
            Defaults to None.

    Returns:
        file-like object: A file-like object representing the resource

    """
    components = path.rsplit(":", 1)
    try:
        if len(components) == 1:
            return open(components[0], encoding=encoding)
        else:
            package, resource = components
            bstream = resources.files(package).joinpath(resource).open("rb")
            if encoding:
                return io.TextIOWrapper(bstream, encoding=encoding)
            return bstream
    except IOError:
        LOGGER.warning("Resource not found: %s", path)
        return None


def fileConfig(fname, defaults=None, disable_existing_loggers=True):
    """Configure logging from an INI file name, file object or parser."""
    if isinstance(fname, str):
        if not os.path.exists(fname):
            raise FileNotFoundError(f"{fname} doesn't exist")
        elif not os.path.getsize(fname):
            raise RuntimeError(f"{fname} is an empty file")

    if isinstance(fname, configparser.RawConfigParser):
        cp = fname
    else:
        try:
            cp = configparser.ConfigParser(defaults)
            if hasattr(fname, "readline"):
                cp.read_file(fname)
            else:
                cp.read(fname, encoding="utf-8")
        except configparser.ParsingError as e:
            raise RuntimeError(f"{fname} is invalid: {e}")

    formatters = _create_formatters(cp)
    with logging._lock:
        _clearExistingHandlers()
        handlers = _install_handlers(cp, formatters)
        _install_loggers(cp, handlers, disable_existing_loggers)


class LoggingConfigurator:
    """Utility class used to configure logging for a conformance run."""

    default_config_path_ini = DEFAULT_LOGGING_CONFIG_PATH_INI

    @classmethod
    def configure(
        cls,
        log_config_path: Optional[str] = None,
        log_level: Optional[str] = None,
        log_file: Optional[str] = None,
        log_json: bool = False,
    ):
        """Configure logger.

        :param log_config_path: str: (Default value = None) Optional path to
            custom logging config

        :param log_level: str: (Default value = None)

        :param log_file: str: (Default value = None) Optional file name to write logs to

        :param log_json: bool: (Default value = False) Format records as JSON
        """
        log_config = load_resource(
            log_config_path or cls.default_config_path_ini, "utf-8"
        )
        if not log_config:
            logging.basicConfig(level=logging.WARNING)
            logging.root.warning(
                "Logging config file not found: %s", log_config_path
            )
        else:
            with log_config:
                fileConfig(log_config, disable_existing_loggers=False)

        if log_file:
            logging.root.handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

        log_filter = ContextFilter()
        for handler in logging.root.handlers:
            handler.addFilter(log_filter)
            if log_json:
                handler.setFormatter(JsonFormatter(LOG_FORMAT_VENDOR_PATTERN))
            elif log_file and handler.formatter is None:
                handler.setFormatter(logging.Formatter(LOG_FORMAT_VENDOR_PATTERN))

        if log_level:
            try:
                logging.root.setLevel(log_level.upper())
            except ValueError as err:
                raise ConfigurationError(f"Unknown log level: {log_level}") from err
