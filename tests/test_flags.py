"""Tests for flags module."""

from types import SimpleNamespace

import pytest

from bbr.config.plugin_spec import PluginSpecs
from bbr.flags import FlagParseError, FlagSet, FlagValue, parse_bool


class TestParseBool:
    """Tests for parse_bool function."""

    @pytest.mark.parametrize("raw", ["1", "t", "true", "TRUE", "True"])
    def test_true(self, raw):
        assert parse_bool(raw) is True

    @pytest.mark.parametrize("raw", ["0", "f", "false", "FALSE"])
    def test_false(self, raw):
        assert parse_bool(raw) is False

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_bool("maybe")


class TestFlagSet:
    """Tests for FlagSet binding and parsing."""

    def setup_method(self):
        self.target = SimpleNamespace()
        self.fs = FlagSet("test")

    def test_defaults_written_to_target(self):
        self.fs.int_var(self.target, "port", "port", 8080, "port")
        self.fs.bool_var(self.target, "secure", "secure", True, "secure")
        self.fs.string_var(self.target, "mode", "mode", "fast", "mode")
        assert self.target.port == 8080
        assert self.target.secure is True
        assert self.target.mode == "fast"

    def test_parse_sets_values_and_changed(self):
        self.fs.int_var(self.target, "port", "port", 8080, "port")
        self.fs.int_var(self.target, "other", "other", 1, "other")
        self.fs.parse(["--port", "9000"])
        assert self.target.port == 9000
        assert self.target.other == 1
        assert self.fs.changed("port")
        assert not self.fs.changed("other")
        assert self.fs.changed_names() == ["port"]
        assert self.fs.parsed

    def test_equals_syntax(self):
        self.fs.int_var(self.target, "port", "port", 8080, "port")
        self.fs.parse(["--port=9001"])
        assert self.target.port == 9001

    @pytest.mark.parametrize("args", [["-v=3"], ["-v", "3"], ["--v=3"]])
    def test_shorthand(self, args):
        self.fs.int_var(self.target, "verbosity", "v", 2, "verbosity", shorthand="v")
        self.fs.parse(args)
        assert self.target.verbosity == 3

    def test_negative_int(self):
        self.fs.int_var(self.target, "verbosity", "v", 2, "verbosity", shorthand="v")
        self.fs.parse(["-v=-1"])
        assert self.target.verbosity == -1

    def test_bool_forms(self):
        self.fs.bool_var(self.target, "a", "a", False, "a")
        self.fs.bool_var(self.target, "b", "b", True, "b")
        self.fs.parse(["--a", "--b=false"])
        assert self.target.a is True
        assert self.target.b is False

    def test_invalid_int(self):
        self.fs.int_var(self.target, "port", "port", 8080, "port")
        with pytest.raises(FlagParseError, match='invalid argument "abc" for "--port" flag'):
            self.fs.parse(["--port", "abc"])
        assert not self.fs.changed("port")

    def test_invalid_bool(self):
        self.fs.bool_var(self.target, "a", "a", False, "a")
        with pytest.raises(FlagParseError, match='invalid argument "nope" for "--a" flag'):
            self.fs.parse(["--a=nope"])

    def test_unknown_flag(self):
        with pytest.raises(FlagParseError):
            self.fs.parse(["--does-not-exist"])

    def test_redefined_flag(self):
        self.fs.int_var(self.target, "port", "port", 8080, "port")
        with pytest.raises(ValueError, match="flag redefined: port"):
            self.fs.int_var(self.target, "port2", "port", 1, "port")

    def test_lookup(self):
        flag = self.fs.int_var(self.target, "port", "port", 8080, "The port.")
        assert self.fs.lookup("port") is flag
        assert flag.default == "8080"
        assert flag.usage == "The port."
        assert self.fs.lookup("missing") is None
        assert "port" in self.fs
        assert [f.name for f in self.fs] == ["port"]

    def test_repeatable_value(self):
        specs = PluginSpecs()
        self.fs.var(specs, "plugin", "plugins")
        self.fs.parse(["--plugin", "a:b", "--plugin=c:d:{\"x\":1}"])
        assert [(s.type, s.name) for s in specs] == [("a", "b"), ("c", "d")]
        assert specs[1].parameters == {"x": 1}
        assert self.fs.changed("plugin")

    def test_repeatable_value_error_echoes_raw(self):
        specs = PluginSpecs()
        self.fs.var(specs, "plugin", "plugins")
        with pytest.raises(FlagParseError) as excinfo:
            self.fs.parse(["--plugin", "a:b", "--plugin", "broken"])
        message = str(excinfo.value)
        assert 'invalid argument "broken" for "--plugin" flag' in message
        assert "missing name" in message
        assert len(specs) == 1

    def test_var_requires_flag_value(self):
        with pytest.raises(TypeError):
            self.fs.var(object(), "bad", "bad")

    def test_plugin_specs_is_flag_value(self):
        assert isinstance(PluginSpecs(), FlagValue)

    def test_help_mentions_flags(self):
        self.fs.int_var(self.target, "port", "port", 8080, "The port (100% local).")
        help_text = self.fs.format_help()
        assert "--port" in help_text
        assert "100% local" in help_text
