"""
Тесты для узлов AST и рендеринга выражений.
"""

import pytest

from pyliquid import Context, Environment, Value
from pyliquid.errors import UndefinedError, UnknownFilterError
from pyliquid.expression import Expression
from pyliquid.nodes import ObjectNode, TextNode, render_nodes

from tests.infrastructure import make_env


class TestNodes:
    def setup_method(self):
        self.env = Environment()

    def context(self, data=None):
        return Context(Value.from_native(data or {}), self.env.filters)

    def test_text_node_renders_verbatim(self):
        assert TextNode("a {b} c").render(self.context()) == "a {b} c"

    def test_object_node_renders_string_conversion(self):
        node = ObjectNode(Expression.parse("n"))

        assert node.render(self.context({"n": 32})) == "32"

    def test_render_nodes_preserves_order(self):
        nodes = (TextNode("a"), ObjectNode(Expression.string("b")), TextNode("c"))

        assert render_nodes(nodes, self.context()) == "abc"

    def test_nodes_are_immutable(self):
        node = TextNode("x")

        with pytest.raises(AttributeError):
            node.text = "y"


class TestExpressionEvaluation:
    def setup_method(self):
        self.env = Environment()

    def evaluate(self, markup, data):
        context = Context(Value.from_native(data), self.env.filters)
        return Expression.parse(markup).evaluate(context)

    def test_dynamic_bracket_key(self):
        data = {"a": {"b": 1}, "c": "b"}

        assert self.evaluate("a[c]", data) == Value.integer(1)

    def test_nested_dynamic_key(self):
        data = {"a": {"x": 5}, "k": {"name": "x"}}

        assert self.evaluate("a[k.name]", data) == Value.integer(5)

    def test_array_index_and_pseudo_properties(self):
        data = {"items": [1, 2, 3]}

        assert self.evaluate("items[0]", data) == Value.integer(1)
        assert self.evaluate("items[-1]", data) == Value.integer(3)
        assert self.evaluate("items.first", data) == Value.integer(1)
        assert self.evaluate("items.last", data) == Value.integer(3)
        assert self.evaluate("items.size", data) == Value.integer(3)

    def test_missing_key_is_nil(self):
        assert self.evaluate("a.b.c", {"a": {}}).is_nil

    def test_literal_ignores_scope(self):
        assert self.evaluate('"x"', {"x": "y"}) == Value.string("x")


class TestObjectRendering:
    def test_literal(self, render):
        assert render('a{{ "b" }}c') == "abc"

    def test_filter_chain_left_to_right(self, render):
        assert render('{{ "ab" | upcase | append: "!" }}') == "AB!"

    def test_value_conversions(self, render):
        assert render("{{ nil }}|{{ false }}|{{ true }}|{{ 1.5 }}|{{ -3 }}") == "||true|1.5|-3"

    def test_array_renders_concatenated(self, render):
        assert render("{{ items }}", {"items": [1, "a", None, 2.5]}) == "1a2.5"

    def test_mapping_renders_empty(self, render):
        assert render("[{{ m }}]", {"m": {"k": "v"}}) == "[]"

    def test_missing_variable_renders_empty(self, render):
        assert render("[{{ missing }}][{{ a.b }}]", {"a": 1}) == "[][]"

    def test_unknown_filter_fails_at_render(self, env):
        template = env.parse("{{ a | nope }}")

        with pytest.raises(UnknownFilterError) as exc_info:
            template.render({"a": 1})

        assert exc_info.value.filter_name == "nope"

    def test_filter_arguments_are_evaluated(self, render):
        assert render("{{ a | append: b.c }}", {"a": "x", "b": {"c": "y"}}) == "xy"


class TestStrictVariables:
    def setup_method(self):
        self.env = make_env(strict_variables=True)

    def test_missing_root(self):
        with pytest.raises(UndefinedError, match="Undefined variable 'missing'"):
            self.env.parse("{{ missing }}").render({})

    def test_missing_nested_names_partial_path(self):
        with pytest.raises(UndefinedError) as exc_info:
            self.env.parse("{{ a.b.c }}").render({"a": {}})

        assert exc_info.value.name == "a.b"

    def test_missing_bracket_key_expression(self):
        with pytest.raises(UndefinedError) as exc_info:
            self.env.parse("{{ a[k] }}").render({"a": {}})

        assert exc_info.value.name == "k"

    def test_present_values_render(self):
        assert self.env.parse("{{ a.b }}").render({"a": {"b": None}}) == ""


class TestContext:
    def test_requires_mapping_scope(self):
        with pytest.raises(TypeError, match="mapping"):
            Context(Value.integer(1), Environment().filters)

    def test_set_mutates_scope_in_place(self):
        scope = Value.mapping()
        context = Context(scope, Environment().filters)

        context.set("x", Value.integer(3))

        assert scope.payload["x"] == Value.integer(3)
        assert context.get("x") == Value.integer(3)
        assert context.get("y") is None
