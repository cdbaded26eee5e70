"""Scan a local checkout for string resources and report per-locale coverage."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Iterable, Sequence

from l10nbot.core.config import get_settings
from l10nbot.core.errors import NoResourceFilesFound
from l10nbot.integrations.local_tree import LocalSourceTree
from l10nbot.models.resources import ScanResult
from l10nbot.services.scanner import RepositoryScanner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="l10nbot-scan",
        description=(
            "Scan a local repository checkout for Android/Compose string resources and "
            "report how many default strings each locale is missing."
        ),
    )
    parser.add_argument("root", help="Path to the repository checkout.")
    parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format for the coverage report (default: table).",
    )
    parser.add_argument(
        "--default-locale",
        default=None,
        help="Locale code the default `values/` files are reported under.",
    )
    parser.add_argument(
        "--show-missing",
        action="store_true",
        help="List missing keys below each locale row in table output.",
    )
    return parser


def coverage_rows(result: ScanResult) -> list[tuple[str, int, int, float]]:
    rows: list[tuple[str, int, int, float]] = []
    total = len({entry.key for entry in result.default_strings})
    for locale in result.available_locales:
        missing = len(result.missing_by_locale.get(locale, ()))
        present = total - missing
        coverage = (present / total * 100.0) if total else 100.0
        rows.append((locale, present, missing, coverage))
    return rows


def render_table(result: ScanResult, *, show_missing: bool = False) -> str:
    """Render locale coverage in a simple fixed-width table."""
    headers = ("Locale", "Translated", "Missing", "Coverage")
    rows: list[tuple[str, ...]] = []
    for locale, present, missing, coverage in coverage_rows(result):
        rows.append((locale, str(present), str(missing), f"{coverage:.1f}%"))
        if show_missing:
            for key in result.missing_by_locale.get(locale, ()):
                rows.append(("", "", "", f"- {key}"))

    widths: list[int] = []
    for index, header in enumerate(headers):
        candidates = [len(header)]
        candidates.extend(len(row[index]) for row in rows)
        widths.append(max(candidates))

    def format_row(values: Iterable[str]) -> str:
        return "  ".join(value.ljust(width) for value, width in zip(values, widths)).rstrip()

    lines = [format_row(headers)]
    lines.append("  ".join("-" * width for width in widths))
    lines.extend(format_row(row) for row in rows)
    lines.append("")
    lines.append(f"Default strings: {result.total_strings}")
    return "\n".join(lines)


def render_json(result: ScanResult) -> str:
    payload = {
        "totalStrings": result.total_strings,
        "defaultPaths": list(result.default_paths),
        "locales": [
            {
                "locale": locale,
                "translated": present,
                "missing": missing,
                "coverage": round(coverage, 2),
                "missingKeys": list(result.missing_by_locale.get(locale, ())),
            }
            for locale, present, missing, coverage in coverage_rows(result)
        ],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


async def _run(root: str, format_name: str, default_locale: str | None, show_missing: bool) -> int:
    settings = get_settings()
    provider = LocalSourceTree(root)
    scanner = RepositoryScanner(default_locale=default_locale or settings.default_locale)
    try:
        result = await scanner.scan_repository(provider, "HEAD", include_branches=False)
    except NoResourceFilesFound as exc:
        print(f"error: {exc}")
        return 1

    if format_name == "json":
        print(render_json(result))
    else:
        print(render_table(result, show_missing=show_missing))
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s - %(message)s")
    try:
        exit_code = asyncio.run(_run(args.root, args.format, args.default_locale, args.show_missing))
    except ValueError as exc:
        parser.error(str(exc))
    raise SystemExit(exit_code)


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()
