from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any, Sequence

from .config import DEFAULT_CONFIG, EngineConfig, load_engine_config
from .dom_extractor import capture_snapshot, fingerprints_from_payload
from .models import ResolvedElement
from .probe import build_probe_script
from .resolver import process_snapshot_elements
from .walker import get_walker_source

LOGGER = logging.getLogger("stableselector")

EXIT_OK = 0
EXIT_BAD_INPUT = 2


class InputFileError(Exception):
    pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stableselector",
        description="Generate stable Playwright selectors from page snapshots.",
    )
    parser.add_argument("--config", type=Path, help="engine config JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("walker", help="print the in-page fingerprint walker script")

    probe = commands.add_parser("probe", help="print the uniqueness probe for a saved snapshot")
    probe.add_argument("snapshot", type=Path)

    resolve = commands.add_parser("resolve", help="resolve selectors for a saved snapshot")
    resolve.add_argument("snapshot", type=Path)
    resolve.add_argument("--counts", type=Path, help="match counts JSON returned by the probe")

    capture = commands.add_parser("capture", help="open a URL in Chromium and resolve its elements")
    capture.add_argument("url")
    capture.add_argument("--headed", action="store_true", help="show the browser window")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    handler = _configure_logging(args.verbose)

    try:
        config = _load_config(args.config)
        if args.command == "walker":
            print(get_walker_source().strip())
        elif args.command == "probe":
            fingerprints = fingerprints_from_payload(_read_json(args.snapshot))
            print(build_probe_script(fingerprints, config).strip())
        elif args.command == "resolve":
            fingerprints = fingerprints_from_payload(_read_json(args.snapshot))
            counts = _read_json(args.counts) if args.counts else {}
            if not isinstance(counts, dict):
                raise InputFileError(f"{args.counts}: match counts must be a JSON object")
            _print_elements(process_snapshot_elements(fingerprints, counts, config=config))
        elif args.command == "capture":
            _run_capture(args.url, headed=args.headed, config=config)
    except InputFileError as exc:
        print(f"stableselector: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT
    finally:
        LOGGER.removeHandler(handler)
    return EXIT_OK


def _run_capture(url: str, *, headed: bool, config: EngineConfig) -> None:
    from playwright.sync_api import sync_playwright

    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=not headed)
        try:
            page = browser.new_page()
            page.goto(url, wait_until="domcontentloaded")
            capture = capture_snapshot(page, config=config)
        finally:
            browser.close()
    LOGGER.info("Resolved %d element(s) on %s", len(capture.elements), capture.title or capture.url)
    _print_elements(list(capture.elements))


def _print_elements(elements: list[ResolvedElement]) -> None:
    payload = [{"ref": item.fingerprint.ref, "tag": item.fingerprint.tag, **item.selector.to_dict()} for item in elements]
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _load_config(path: Path | None) -> EngineConfig:
    if path is None:
        return DEFAULT_CONFIG
    config = load_engine_config(path)
    if config is None:
        raise InputFileError(f"{path}: cannot read engine config")
    return config


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise InputFileError(f"{path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputFileError(f"{path}: invalid JSON ({exc.msg})") from exc


def _configure_logging(verbose: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    LOGGER.addHandler(handler)
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handler


if __name__ == "__main__":
    raise SystemExit(main())
