import logging

from berry.logging import setup_logging


def _berry_handlers():
    return [
        h for h in logging.getLogger().handlers
        if getattr(h, "_berry_handler", False)
    ]


def test_repeated_setup_does_not_stack_handlers():
    setup_logging("INFO")
    setup_logging("DEBUG")

    assert len(_berry_handlers()) == 1
    assert logging.getLogger().level == logging.DEBUG


def test_unknown_level_falls_back_to_info():
    setup_logging("chatty")
    assert logging.getLogger().level == logging.INFO


def test_sqlalchemy_engine_is_quieted():
    setup_logging("DEBUG")
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
