"""Contract tests for the package's public surface."""

import logging

import pytest

import composegen

pytestmark = pytest.mark.unit


def test_all_exports_resolve():
    missing = [name for name in composegen.__all__ if not hasattr(composegen, name)]
    assert missing == []


def test_library_logger_has_null_handler():
    handlers = logging.getLogger("composegen").handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_version_is_a_string():
    assert isinstance(composegen.__version__, str)
