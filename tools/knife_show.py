#!/usr/bin/env python3
# tools/knife_show.py

"""
Inspect a knife.rb the way the library sees it.

Examples:
  Dump every setting as YAML (discovers .chef/knife.rb or ~/.chef/knife.rb):
    python tools/knife_show.py

  Dump a specific file as JSON:
    python tools/knife_show.py --config tests/support/knife.rb --format json

  Print a single (possibly nested) setting:
    python tools/knife_show.py --key chef_zero.port

  Show the typed view, including derived host/port and split no_proxy:
    python tools/knife_show.py --typed

  Verify that client_key and validation_key load as RSA keys:
    python tools/knife_show.py --check-keys
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from config.config_loader import find_config_path, load_settings
from config.knife_config import KnifeConfig
from config.settings import Settings
from helpers.atomic_write import (
    AtomicWriteError,
    atomic_write_json,
    atomic_write_yaml,
    dump_json,
    dump_yaml,
)
from utils.errors import ConfigError, KnifeError
from utils.logging import get_logger, setup_logging, shutdown_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="knife-show",
        description="Parse a knife.rb and print its settings.",
    )
    parser.add_argument("--config", "-c", help="Path to knife.rb (default: discovered)")
    parser.add_argument(
        "--format", "-f", choices=("yaml", "json"), default="yaml", help="Dump format"
    )
    parser.add_argument("--key", "-k", help="Print one setting, e.g. chef_zero.port")
    parser.add_argument(
        "--typed", action="store_true", help="Dump the typed knife config view"
    )
    parser.add_argument(
        "--check-keys",
        action="store_true",
        help="Load client_key and validation_key and report the result",
    )
    parser.add_argument("--output", "-o", help="Write the dump to a file instead of stdout")
    parser.add_argument(
        "--log-level", default="warn", help="knife-style log level (debug, info, warn...)"
    )
    return parser


def render(data: Any, fmt: str) -> str:
    if isinstance(data, (dict, list)):
        return dump_json(data) if fmt == "json" else dump_yaml(data)
    if isinstance(data, bool):
        return ("true" if data else "false") + "\n"
    return f"{data}\n"


def check_keys(knife_config: KnifeConfig) -> bool:
    """Try each configured key; print one status line per key."""
    ok = True
    for label, path, loader in (
        ("client_key", knife_config.client_key_path, knife_config.load_client_key),
        ("validation_key", knife_config.validation_key_path, knife_config.load_validation_key),
    ):
        if not path:
            print(f"{label}: not set")
            continue
        try:
            key = loader()
        except KnifeError as e:
            print(f"{label}: FAILED ({e})")
            ok = False
        else:
            print(f"{label}: ok ({key.key_size}-bit RSA, {path})")
    return ok


def select(settings: Settings, args: argparse.Namespace) -> Any:
    """Pick what to dump; raises KeyError for an unknown --key."""
    if args.typed:
        return KnifeConfig.from_settings(settings).as_dict()
    if args.key:
        value = settings[args.key]
        if isinstance(value, Settings):
            return value.to_dict()
        if isinstance(value, tuple):
            return list(value)
        return value
    return settings.to_dict()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, "STDERR")

    try:
        path = find_config_path(args.config)
        settings = load_settings(path)

        if args.check_keys:
            return 0 if check_keys(KnifeConfig.from_settings(settings)) else 1

        try:
            data = select(settings, args)
        except KeyError:
            print(f"Setting not found: {args.key}", file=sys.stderr)
            return 1

        if args.output:
            if not isinstance(data, dict):
                data = {args.key: data}
            writer = atomic_write_json if args.format == "json" else atomic_write_yaml
            writer(args.output, data)
            logger.info("Wrote settings from %s to %s", path, args.output)
        else:
            sys.stdout.write(render(data, args.format))
    except (ConfigError, AtomicWriteError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        shutdown_logging()

    return 0


if __name__ == "__main__":
    sys.exit(main())
