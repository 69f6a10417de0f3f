from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .errors import SewerUserError
from .patch import OneOrMoreRulesFailedError, Rule, apply_rules, load_rules
from .version import tool_version

_LOG = logging.getLogger("sewer")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sewer",
        description="Patch a file in place with regex find rules and replacement templates",
        add_help=True,
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("file", type=Path, help="файл для патча")
    p.add_argument(
        "--backup",
        type=Path,
        metavar="PATH",
        help="перед записью переместить оригинальный файл по указанному пути",
    )
    p.add_argument(
        "-n", "--dry-run",
        action="store_true",
        help="ничего не записывать (включает --verbose)",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="печатать найденные совпадения и результат замены",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_single = sub.add_parser("single", help="заменить единственное вхождение")
    sp_single.add_argument("find", help="регулярное выражение для поиска")
    sp_single.add_argument("replace", help="шаблон замены ($1, $<name>, (a|b), (?x)...)")

    sp_patch = sub.add_parser("patch-file", help="применить правила из патч-файла или YAML")
    sp_patch.add_argument("rules", type=Path, help="патч-файл (#/-/+) или .yaml с ключом rules")
    sp_patch.add_argument(
        "--partial",
        action="store_true",
        help="продолжать, если одно из правил не применилось",
    )

    return p


def _setup_logging(verbose: bool) -> None:
    """Один обработчик на логгер sewer; пересоздаётся на каждый запуск main()."""
    for handler in list(_LOG.handlers):
        if getattr(handler, "_sewer_cli", False):
            _LOG.removeHandler(handler)

    if os.environ.get("SEWER_DEBUG"):
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    _LOG.setLevel(level)

    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    h._sewer_cli = True  # type: ignore[attr-defined]
    _LOG.addHandler(h)


def _write_atomic(path: Path, data: bytes) -> None:
    tmp = path.with_name(f".{path.name}.sewer-tmp")
    try:
        tmp.write_bytes(data)
        tmp.replace(path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def _run(ns: argparse.Namespace) -> None:
    path: Path = ns.file
    data = path.read_bytes()

    if ns.cmd == "single":
        rule = Rule.compile("single", ns.find, ns.replace)
        outcome = apply_rules(data, [rule])
    else:
        rules = load_rules(ns.rules)
        outcome = apply_rules(data, rules, partial=ns.partial)

    if not ns.dry_run and outcome.applied:
        if ns.backup is not None:
            path.replace(ns.backup)
            _LOG.info("Original moved to %s", ns.backup)
        _write_atomic(path, outcome.data)
        _LOG.info("Wrote %s (%d rule(s) applied)", path, len(outcome.applied))

    if outcome.failures:
        raise OneOrMoreRulesFailedError(len(outcome.failures))


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    if ns.dry_run:
        ns.verbose = True
    _setup_logging(ns.verbose)

    try:
        _run(ns)
    except SewerUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 1
    except OSError as e:
        sys.stderr.write(f"io: {e}\n")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
