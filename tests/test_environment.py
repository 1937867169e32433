"""
Tests for Environment and Template: compile once, render many times.
"""

import pytest

from pyliquid import EngineConfig, Environment, Template, Value
from pyliquid.errors import LiquidError, ParseError, UndefinedError

from tests.infrastructure import write


class TestTemplate:
    def setup_method(self):
        self.env = Environment()

    def test_parse_returns_template(self):
        template = self.env.parse("Hello {{ name }}")

        assert isinstance(template, Template)
        assert template.render({"name": "Bob"}) == "Hello Bob"

    def test_render_many_times(self):
        template = self.env.parse("{{ a }}")

        assert [template.render({"a": i}) for i in range(3)] == ["0", "1", "2"]

    def test_render_without_data(self):
        assert self.env.parse("x{{ y }}").render() == "x"

    def test_render_with_value_scope(self):
        scope = Value.from_native({"a": "b"})

        assert self.env.parse("{{ a }}").render(scope) == "b"

    def test_templates_compare_structurally(self):
        assert self.env.parse("a {{ b }}") == Environment().parse("a {{ b }}")
        assert self.env.parse("a {{ b }}") != self.env.parse("a {{ c }}")

    @pytest.mark.parametrize("data", [[1, 2], "text", Value.integer(1)])
    def test_non_mapping_scope_rejected(self, data):
        with pytest.raises(TypeError, match="mapping"):
            self.env.parse("x").render(data)

    def test_parse_error_returns_no_template(self):
        with pytest.raises(ParseError):
            self.env.parse("ok {{ a b }}")

    def test_render_source(self):
        assert self.env.render_source("{{ 1 | append: 2 }}") == "12"

    def test_errors_share_base_class(self):
        with pytest.raises(LiquidError):
            self.env.parse("{% nope %}")


class TestEnvironmentConfig:
    def test_strict_variables(self):
        env = Environment(EngineConfig(strict_variables=True))

        with pytest.raises(UndefinedError):
            env.parse("{{ missing }}").render()

    def test_from_config_file(self, tmp_path):
        cfg = write(tmp_path / "liquid.yaml", "strict_variables: true\ndisabled_filters: [upcase]\n")

        env = Environment.from_config_file(cfg)

        assert env.config.strict_variables is True
        assert "upcase" not in env.filters
        assert "downcase" in env.filters

    def test_default_config(self):
        env = Environment()

        assert env.config == EngineConfig()
