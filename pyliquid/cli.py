from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .config import EngineConfig, default_config_path, load_config
from .environment import Environment
from .errors import LiquidError
from .values import Value
from .version import tool_version

logger = logging.getLogger("pyliquid")

_yaml = YAML(typ="safe")


def _setup_logging() -> None:
    level = logging.DEBUG if os.environ.get("PYLIQUID_DEBUG") else logging.WARNING
    logger.setLevel(level)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pyliquid",
        description="Liquid template renderer",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Render a template to stdout")
    sp_render.add_argument("template", help="template file, or - to read from stdin")
    sp_render.add_argument(
        "--data",
        metavar="FILE",
        help="YAML or JSON file with the data scope (a mapping at top level)",
    )
    sp_render.add_argument(
        "--var",
        action="append",
        metavar="NAME=VALUE",
        help="additional string variable (can be given several times)",
    )
    sp_render.add_argument(
        "--config",
        metavar="FILE",
        help="engine config (YAML); defaults to $PYLIQUID_CONFIG",
    )
    sp_render.add_argument(
        "--strict",
        action="store_true",
        help="fail on undefined variables instead of rendering them empty",
    )

    sp_filters = sub.add_parser("filters", help="List registered filters (JSON)")
    sp_filters.add_argument("--config", metavar="FILE", help="engine config (YAML)")

    sp_tags = sub.add_parser("tags", help="List registered tags (JSON)")
    sp_tags.add_argument("--config", metavar="FILE", help="engine config (YAML)")

    return p


def _load_engine_config(config_arg: Optional[str]) -> EngineConfig:
    path = Path(config_arg) if config_arg else default_config_path()
    if path is None:
        return EngineConfig()
    return load_config(path)


def _read_template(arg: str) -> str:
    """Читает шаблон из файла или из stdin ("-")."""
    if arg == "-":
        return sys.stdin.read()
    path = Path(arg)
    if not path.is_file():
        raise ValueError(f"Template file not found: {path}")
    return path.read_text(encoding="utf-8")


def _load_data(data_arg: Optional[str], variables: Optional[List[str]]) -> Value:
    """
    Собирает область данных из файла --data и пар --var NAME=VALUE.

    Raises:
        ValueError: Файл не найден, не разбирается или содержит не словарь
    """
    data: Dict[str, Any] = {}
    if data_arg:
        path = Path(data_arg)
        if not path.is_file():
            raise ValueError(f"Data file not found: {path}")
        try:
            loaded = _yaml.load(path.read_text(encoding="utf-8"))
        except YAMLError as e:
            raise ValueError(f"Failed to parse data file {path}: {e}")
        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ValueError(f"Data file {path} must contain a mapping at top level")
            data.update(loaded)

    for spec in variables or []:
        if "=" not in spec:
            raise ValueError(f"Invalid variable format '{spec}'. Expected 'NAME=VALUE'")
        name, value = spec.split("=", 1)
        data[name.strip()] = value

    try:
        return Value.from_native(data)
    except TypeError as e:
        raise ValueError(str(e))


def main(argv: list[str] | None = None) -> int:
    _setup_logging()
    ns = _build_parser().parse_args(argv)

    try:
        config = _load_engine_config(getattr(ns, "config", None))

        if ns.cmd == "render":
            if ns.strict:
                config.strict_variables = True
            env = Environment(config)
            template = env.parse(_read_template(ns.template))
            sys.stdout.write(template.render(_load_data(ns.data, ns.var)))
            return 0

        if ns.cmd == "filters":
            sys.stdout.write(json.dumps({"filters": Environment(config).filters.names()}, indent=2) + "\n")
            return 0

        if ns.cmd == "tags":
            sys.stdout.write(json.dumps({"tags": Environment(config).tags.names()}, indent=2) + "\n")
            return 0

    except LiquidError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        # ConfigLoadError — подкласс ValueError
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
