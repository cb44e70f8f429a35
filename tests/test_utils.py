import logging

from login_portal.utils import ensure_directory, setup_logging


def test_setup_logging_adds_console_handler():
    root = logging.getLogger()
    before_handlers = list(root.handlers)
    before_level = root.level
    try:
        setup_logging(level="DEBUG")
        added = [h for h in root.handlers if h not in before_handlers]
        assert len(added) == 1
        assert isinstance(added[0], logging.StreamHandler)
        assert added[0].level == logging.DEBUG
    finally:
        for handler in root.handlers[:]:
            if handler not in before_handlers:
                root.removeHandler(handler)
        root.setLevel(before_level)


def test_ensure_directory(tmp_path):
    target = tmp_path / "a" / "b"
    ensure_directory(target)
    ensure_directory(target)
    assert target.is_dir()


def test_unknown_log_level_falls_back_to_info():
    root = logging.getLogger()
    before_handlers = list(root.handlers)
    before_level = root.level
    try:
        setup_logging(level="VERBOSE")
        added = [h for h in root.handlers if h not in before_handlers]
        assert added[0].level == logging.INFO
    finally:
        for handler in root.handlers[:]:
            if handler not in before_handlers:
                root.removeHandler(handler)
        root.setLevel(before_level)
