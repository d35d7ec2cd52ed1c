"""Unit tests for logging setup."""

import logging

from lazyauction.utils.logger import get_logger, setup_logging


class TestLogging:

    def test_console_only(self, tmp_path, monkeypatch):
        """Setup attaches one stderr handler and writes nothing to disk."""
        monkeypatch.chdir(tmp_path)
        setup_logging(level=logging.DEBUG)
        try:
            root = logging.getLogger("lazyauction")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert not isinstance(root.handlers[0], logging.FileHandler)
            assert list(tmp_path.iterdir()) == []
        finally:
            setup_logging(level=logging.INFO)

    def test_reconfigure_replaces_handler(self):
        setup_logging(level=logging.WARNING)
        setup_logging(level=logging.INFO)
        assert len(logging.getLogger("lazyauction").handlers) == 1

    def test_subsystem_names(self):
        assert get_logger("auction").name == "lazyauction.auction"
