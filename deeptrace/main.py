"""
deeptrace - Command line entry point.

Traces a YAML or JSON document, applies mutations by dotted path and prints
every event the listeners receive:

    deeptrace state.yaml --set server.port=8080 --delete server.debug
"""

import argparse
import logging
import sys
from collections.abc import Mapping, MutableSequence
from pathlib import Path
from typing import Any, Optional

import yaml

from deeptrace import __version__
from deeptrace.config.settings import get_settings
from deeptrace.errors import NotAnObjectError
from deeptrace.proxies import create, unwrap
from deeptrace.proxies.paths import Paths
from deeptrace.tracing import MutationRecorder
from deeptrace.ui import ConsoleTraceListener

logger = logging.getLogger("deeptrace.main")


def setup_logging(level: Optional[str] = None):
    """Configure logging."""
    settings = get_settings()
    level = level or settings.get("logging.level", "INFO")
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    log_format = settings.get("logging.format", "%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_file = settings.get("logging.file")
    if log_file:
        log_path = settings.resolve_path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(level=log_level, format=log_format, handlers=handlers)


def load_document(path: Path) -> Any:
    """YAML loader; JSON documents are valid YAML."""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _child(container: Any, segment: str) -> Any:
    if isinstance(container, Mapping):
        return container[segment]
    if isinstance(container, MutableSequence):
        return container[int(segment)]
    return getattr(container, segment)


def resolve(root: Any, dotpath: str) -> tuple[Any, Any]:
    """Return (container, key) addressed by a dotted path."""
    segments = Paths.split(dotpath)
    if not segments:
        raise KeyError("An empty path addresses the root, not a property")

    container = root
    for segment in segments[:-1]:
        container = _child(container, segment)

    key: Any = segments[-1]
    if isinstance(container, MutableSequence):
        key = int(key)
    return container, key


def apply_set(root: Any, dotpath: str, raw_value: str):
    container, key = resolve(root, dotpath)
    container[key] = yaml.safe_load(raw_value)


def apply_delete(root: Any, dotpath: str):
    container, key = resolve(root, dotpath)
    del container[key]


def to_plain(value: Any) -> Any:
    """Copy a traced graph back into plain dicts and lists for dumping."""
    value = unwrap(value)
    if isinstance(value, Mapping):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, MutableSequence):
        return [to_plain(v) for v in value]
    return value


def _set_operation(text: str) -> tuple[str, str, str]:
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected PATH=VALUE, got {text!r}")
    path, value = text.split("=", 1)
    return ("set", path, value)


def _delete_operation(text: str) -> tuple[str, str, str]:
    return ("delete", text, "")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deeptrace",
        description="Trace a YAML/JSON document and report every mutation applied to it.",
    )
    parser.add_argument("file", type=Path, help="YAML or JSON document")
    parser.add_argument("--prefix", default=None, help="Path prefix for every reported path")
    parser.add_argument(
        "--set", dest="operations", action="append", type=_set_operation, default=[],
        metavar="PATH=VALUE", help="Assign a YAML value at a dotted path (repeatable)",
    )
    parser.add_argument(
        "--delete", dest="operations", action="append", type=_delete_operation,
        metavar="PATH", help="Delete the property at a dotted path (repeatable)",
    )
    parser.add_argument("--quiet", action="store_true", help="Do not echo events as they happen")
    parser.add_argument("--summary", action="store_true", help="Print a table of all events at the end")
    parser.add_argument("--log-level", default=None, help="Logging level (default from config)")
    parser.add_argument("--version", action="version", version=f"deeptrace {__version__}")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    console = ConsoleTraceListener()
    recorder = MutationRecorder()
    listeners = [recorder] if args.quiet else [recorder, console]

    try:
        document = load_document(args.file)
        root = create(document, listeners, {"path_prefix": args.prefix})
    except (OSError, yaml.YAMLError, NotAnObjectError) as e:
        logger.error(f"Cannot trace {args.file}: {e}")
        return 1

    for operation, dotpath, raw_value in args.operations:
        try:
            if operation == "set":
                apply_set(root, dotpath, raw_value)
            else:
                apply_delete(root, dotpath)
        except (KeyError, IndexError, AttributeError, ValueError, TypeError) as e:
            logger.error(f"Cannot {operation} {dotpath!r}: {e}")
            return 1

    if args.summary:
        console.print_summary(recorder.events)

    console.console.print(
        yaml.safe_dump(to_plain(root), default_flow_style=False, sort_keys=False),
        end="", markup=False, highlight=False,
    )
    logger.info(f"Applied {len(args.operations)} operation(s), recorded {len(recorder)} event(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
