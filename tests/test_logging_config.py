"""Tests for logging configuration"""
import logging
import pytest

from git_subrepo_keeper.logging_config import LOG_FILE_NAME, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestGetLogger:

    def test_strips_package_prefix(self):
        assert get_logger("git_subrepo_keeper.services.subtree_sync").name == "subtree_sync"
        assert get_logger("git_subrepo_keeper.core.subrepo_keeper").name == "core.subrepo_keeper"

    def test_other_names_untouched(self):
        assert get_logger("somewhere.else").name == "somewhere.else"


class TestSetupLogging:

    @pytest.mark.parametrize(
        "verbose,debug,level",
        [(False, False, logging.WARNING), (True, False, logging.INFO), (False, True, logging.DEBUG)],
    )
    def test_levels(self, restore_root_logger, temp_dir, verbose, debug, level):
        setup_logging(verbose=verbose, debug=debug, log_dir=temp_dir)
        assert restore_root_logger.level == level

    def test_debug_writes_log_file(self, restore_root_logger, temp_dir):
        setup_logging(debug=True, log_dir=temp_dir)

        get_logger("git_subrepo_keeper.services.marker_store").debug("marker saved")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert "marker saved" in (temp_dir / LOG_FILE_NAME).read_text()

    def test_no_log_file_without_debug(self, restore_root_logger, temp_dir):
        setup_logging(verbose=True, log_dir=temp_dir)
        assert not (temp_dir / LOG_FILE_NAME).exists()
