import logging
from contextlib import contextmanager

from relief.utils.logging_config import setup_logging


@contextmanager
def bare_root_logger():
    # pytest attaches its capture handlers per test phase, so clear them here
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        yield root
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_creates_log_file_once(tmp_path):
    with bare_root_logger() as root:
        setup_logging(tmp_path / "logs", "relief")
        setup_logging(tmp_path / "logs", "relief")

        assert len(root.handlers) == 2
        assert (tmp_path / "logs" / "relief.log").exists()


def test_leaves_existing_configuration(tmp_path):
    with bare_root_logger() as root:
        existing = logging.NullHandler()
        root.addHandler(existing)

        setup_logging(tmp_path / "logs")

        assert root.handlers == [existing]
        assert not (tmp_path / "logs").exists()
