"""Tests for logging levels module."""

import logging

import pytest

from bbr.observability.logging.levels import (
    DEBUG,
    DEBUG_LEVEL,
    DEFAULT,
    ERROR_LEVEL,
    INFO_LEVEL,
    PANIC_LEVEL,
    TRACE,
    VERBOSE,
    WARN_LEVEL,
    backend_level_for_verbosity,
    from_stdlib_level,
    level_name,
    parse_backend_level,
    to_stdlib_level,
    v_level,
)


class TestBackendLevelForVerbosity:
    """Tests for the verbosity -> backend level rule."""

    @pytest.mark.parametrize("verbosity,level", [(0, 0), (1, -1), (3, -3), (5, -5)])
    def test_negated(self, verbosity, level):
        assert backend_level_for_verbosity(verbosity) == level

    def test_higher_verbosity_is_more_permissive(self):
        levels = [to_stdlib_level(backend_level_for_verbosity(v)) for v in range(0, 12)]
        assert levels == sorted(levels, reverse=True)
        assert levels[0] == logging.INFO
        assert levels[1] == logging.DEBUG

    def test_verbosity_constants_ordered(self):
        assert DEFAULT < VERBOSE < DEBUG < TRACE


class TestStdlibMapping:
    """Tests for to_stdlib_level / from_stdlib_level."""

    @pytest.mark.parametrize("level,expected", [
        (DEBUG_LEVEL, logging.DEBUG),
        (INFO_LEVEL, logging.INFO),
        (WARN_LEVEL, logging.WARNING),
        (ERROR_LEVEL, logging.ERROR),
        (PANIC_LEVEL, logging.CRITICAL),
        (-2, 9),
        (-5, 6),
        (-100, 1),
    ])
    def test_to_stdlib(self, level, expected):
        assert to_stdlib_level(level) == expected

    @pytest.mark.parametrize("level", [-4, -3, -2, -1, 0, 1, 2])
    def test_round_trip(self, level):
        assert from_stdlib_level(to_stdlib_level(level)) == level

    def test_v_level(self):
        assert v_level(0) == logging.INFO
        assert v_level(1) == logging.DEBUG
        assert v_level(TRACE) < v_level(VERBOSE) < logging.DEBUG


class TestParseBackendLevel:
    """Tests for parse_backend_level."""

    @pytest.mark.parametrize("raw,level", [
        ("debug", DEBUG_LEVEL),
        ("info", INFO_LEVEL),
        ("INFO", INFO_LEVEL),
        ("warn", WARN_LEVEL),
        ("error", ERROR_LEVEL),
        ("panic", PANIC_LEVEL),
        ("1", -1),
        ("7", -7),
    ])
    def test_valid(self, raw, level):
        assert parse_backend_level(raw) == level

    @pytest.mark.parametrize("raw", ["0", "-2", "loud", ""])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_backend_level(raw)


def test_level_name():
    assert level_name(INFO_LEVEL) == "info"
    assert level_name(-3) == "Level(-3)"
