"""
Tests for the pyliquid command line interface.
"""

import io

import pytest

from pyliquid.cli import main

from tests.infrastructure import jload, run_cli, write


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch):
    monkeypatch.delenv("PYLIQUID_CONFIG", raising=False)


class TestRenderCommand:
    def test_render_with_data_file(self, tmp_path, capsys):
        tpl = write(tmp_path / "hello.liquid", "Hello {{ name | upcase }}!")
        data = write(tmp_path / "data.yaml", "name: world\n")

        rc = main(["render", str(tpl), "--data", str(data)])

        assert rc == 0
        assert capsys.readouterr().out == "Hello WORLD!"

    def test_render_with_json_data(self, tmp_path, capsys):
        tpl = write(tmp_path / "t.liquid", "{{ items | join: ',' }}")
        data = write(tmp_path / "data.json", '{"items": [1, 2, 3]}')

        assert main(["render", str(tpl), "--data", str(data)]) == 0
        assert capsys.readouterr().out == "1,2,3"

    def test_vars_override_data(self, tmp_path, capsys):
        tpl = write(tmp_path / "t.liquid", "{{ a }}-{{ b }}")
        data = write(tmp_path / "data.yaml", "a: 1\nb: 2\n")

        rc = main(["render", str(tpl), "--data", str(data), "--var", "b=x=y"])

        assert rc == 0
        assert capsys.readouterr().out == "1-x=y"

    def test_render_from_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("{% decrement n %}{% decrement n %}"))

        assert main(["render", "-"]) == 0
        assert capsys.readouterr().out == "-1-2"

    def test_strict_flag(self, tmp_path, capsys):
        tpl = write(tmp_path / "t.liquid", "{{ missing }}")

        rc = main(["render", str(tpl), "--strict"])

        assert rc == 2
        assert "Undefined variable 'missing'" in capsys.readouterr().err

    def test_parse_error_exit_code(self, tmp_path, capsys):
        tpl = write(tmp_path / "t.liquid", "line\n{{ a b }}")

        rc = main(["render", str(tpl)])

        assert rc == 2
        assert "Unexpected token 'b' at 2:6" in capsys.readouterr().err

    def test_missing_template(self, tmp_path, capsys):
        assert main(["render", str(tmp_path / "absent.liquid")]) == 2
        assert "Template file not found" in capsys.readouterr().err

    def test_invalid_var(self, tmp_path, capsys):
        tpl = write(tmp_path / "t.liquid", "x")

        assert main(["render", str(tpl), "--var", "novalue"]) == 2
        assert "Expected 'NAME=VALUE'" in capsys.readouterr().err

    def test_data_must_be_mapping(self, tmp_path, capsys):
        tpl = write(tmp_path / "t.liquid", "x")
        data = write(tmp_path / "data.yaml", "- 1\n")

        assert main(["render", str(tpl), "--data", str(data)]) == 2
        assert "must contain a mapping" in capsys.readouterr().err

    def test_config_from_environment(self, tmp_path, monkeypatch, capsys):
        cfg = write(tmp_path / "liquid.yaml", "disabled_filters: [upcase]\n")
        tpl = write(tmp_path / "t.liquid", "{{ 'a' | upcase }}")
        monkeypatch.setenv("PYLIQUID_CONFIG", str(cfg))

        assert main(["render", str(tpl)]) == 2
        assert "Unknown filter 'upcase'" in capsys.readouterr().err

    def test_bad_config(self, tmp_path, capsys):
        cfg = write(tmp_path / "liquid.yaml", "bogus: 1\n")
        tpl = write(tmp_path / "t.liquid", "x")

        assert main(["render", str(tpl), "--config", str(cfg)]) == 2
        assert "unknown key 'bogus'" in capsys.readouterr().err


class TestListCommands:
    def test_filters(self, capsys):
        assert main(["filters"]) == 0
        names = jload(capsys.readouterr().out)["filters"]

        assert "truncate" in names
        assert names == sorted(names)

    def test_tags(self, capsys):
        assert main(["tags"]) == 0

        assert jload(capsys.readouterr().out)["tags"] == [
            "assign", "capture", "comment", "decrement", "increment",
        ]

    def test_filters_respect_config(self, tmp_path, capsys):
        cfg = write(tmp_path / "liquid.yaml", "disabled_filters: [escape]\n")

        assert main(["filters", "--config", str(cfg)]) == 0
        assert "escape" not in jload(capsys.readouterr().out)["filters"]


class TestModuleEntryPoint:
    def test_render_subprocess(self, tmp_path):
        write(tmp_path / "t.liquid", "{{ greeting | append: ', ' | append: who }}")

        cp = run_cli(tmp_path, "render", "t.liquid", "--var", "greeting=Hi", "--var", "who=you")

        assert cp.returncode == 0, cp.stderr
        assert cp.stdout == "Hi, you"

    def test_stdin_subprocess(self, tmp_path):
        cp = run_cli(tmp_path, "render", "-", stdin="{{ 'x' | upcase }}")

        assert cp.returncode == 0, cp.stderr
        assert cp.stdout == "X"

    def test_error_subprocess(self, tmp_path):
        cp = run_cli(tmp_path, "render", "-", stdin="{% endcapture %}")

        assert cp.returncode == 2
        assert "no matching opener" in cp.stderr
