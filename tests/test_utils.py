# pylint: disable=missing-function-docstring
# ruff: noqa: D102

"""Tests the logging utilities shared among snapshare modules."""

import logging

import pytest

from snapshare.utils.logging import setup_loggers


@pytest.fixture
def restore_log_levels():
    """Put the snapshare logger levels back after a test changes them."""
    names = [
        name
        for name in logging.root.manager.loggerDict
        if name.startswith("snapshare")
    ]
    levels = {name: logging.getLogger(name).level for name in names}
    levels.setdefault("snapshare", logging.getLogger("snapshare").level)
    yield
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


@pytest.mark.usefixtures("restore_log_levels")
class TestSetupLoggers:
    """Test setup_loggers()."""

    def test_setup_loggers(self):
        # make sure a nested module logger exists before setup
        import snapshare.exporters.orchestrator  # noqa: F401

        setup_loggers(logging.DEBUG)
        assert logging.getLogger("snapshare").getEffectiveLevel() == logging.DEBUG
        assert (
            logging.getLogger("snapshare.exporters.orchestrator").level
            == logging.DEBUG
        )

    def test_setup_loggers_warning(self):
        setup_loggers(logging.WARNING)
        assert logging.getLogger("snapshare").level == logging.WARNING
        assert (
            logging.getLogger("snapshare.exporters").getEffectiveLevel()
            == logging.WARNING
        )

    def test_other_loggers_untouched(self):
        other = logging.getLogger("not_snapshare_related")
        other.setLevel(logging.ERROR)
        setup_loggers(logging.DEBUG)
        assert other.level == logging.ERROR
