import pytest

from pyliquid import Environment

from tests.infrastructure import render as _render


@pytest.fixture
def env() -> Environment:
    """Свежее окружение со стандартными фильтрами и тегами."""
    return Environment()


@pytest.fixture
def render(env):
    """Компилирует и рендерит шаблон в окружении из фикстуры env."""
    def _do(source: str, data=None) -> str:
        return _render(source, data, env=env)
    return _do
