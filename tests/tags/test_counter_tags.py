"""
Тесты для тегов-счётчиков decrement и increment.
"""

import pytest

from pyliquid import Environment, Value
from pyliquid.errors import ParseError
from pyliquid.tags import DecrementTag


class TestDecrement:
    def setup_method(self):
        self.env = Environment()

    def test_state_carries_over_with_same_scope(self):
        """Повторные рендеринги с тем же Value продолжают счёт."""
        template = self.env.parse("{% decrement x %}")
        scope = Value.mapping()

        assert [template.render(scope) for _ in range(3)] == ["-1", "-2", "-3"]

    def test_fresh_scope_restarts(self):
        template = self.env.parse("{% decrement x %}")
        scope = Value.mapping()
        template.render(scope)
        template.render(scope)

        assert template.render(Value.mapping()) == "-1"

    def test_dict_data_is_converted_each_time(self):
        template = self.env.parse("{% decrement x %}")
        data = {}

        assert template.render(data) == "-1"
        assert template.render(data) == "-1"
        assert data == {}

    def test_within_one_render(self):
        source = "{% decrement x %} {% decrement x %} {{ x }}"

        assert self.env.parse(source).render() == "-1 -2 -2"

    def test_counters_are_independent(self):
        source = "{% decrement a %}{% decrement a %}{% decrement b %}"

        assert self.env.parse(source).render() == "-1-2-1"

    @pytest.mark.parametrize("initial,expected", [
        (10, "9"),
        ("5", "4"),
        (2.7, "1"),
    ])
    def test_starts_from_existing_value(self, initial, expected):
        assert self.env.parse("{% decrement x %}").render({"x": initial}) == expected

    def test_counter_stored_in_scope(self):
        scope = Value.mapping()
        self.env.parse("{% decrement x %}").render(scope)

        assert scope.payload["x"] == Value.integer(-1)

    def test_tree_is_not_mutated_by_rendering(self):
        template = self.env.parse("{% decrement x %}")
        before = template.nodes
        template.render(Value.mapping())

        assert template.nodes == before == (DecrementTag(tag_name="decrement", variable="x"),)


class TestIncrement:
    def setup_method(self):
        self.env = Environment()

    def test_outputs_then_increments(self):
        source = "{% increment c %}{% increment c %}{% increment c %} {{ c }}"

        assert self.env.parse(source).render() == "012 3"

    def test_shares_counter_with_decrement(self):
        source = "{% increment n %}{% decrement n %}"

        assert self.env.parse(source).render() == "00"


class TestCounterParsing:
    def setup_method(self):
        self.env = Environment()

    @pytest.mark.parametrize("tag", ["decrement", "increment"])
    def test_variable_required(self, tag):
        with pytest.raises(ParseError, match=f"Expected variable name after '{tag}'"):
            self.env.parse("{%% %s %%}" % tag)

    def test_single_variable(self):
        with pytest.raises(ParseError, match="Unexpected token 'b'"):
            self.env.parse("{% decrement a b %}")

    def test_parse_classmethod(self):
        assert DecrementTag.parse("decrement", " x ") == DecrementTag(tag_name="decrement", variable="x")
