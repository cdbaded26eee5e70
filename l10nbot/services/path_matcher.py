from __future__ import annotations

import re
from typing import Final, Sequence


DEFAULT_RESOURCE_PATTERNS: Final[tuple[str, ...]] = (
    # Mifos KMP feature modules
    "feature/*/src/commonMain/composeResources/values/strings.xml",
    "feature/*/src/*/composeResources/values/strings.xml",
    "feature/*/src/*/resources/values/strings.xml",
    # Compose Multiplatform / KMM
    "*/src/commonMain/composeResources/values/strings.xml",
    "*/*/src/commonMain/composeResources/values/strings.xml",
    "*/src/commonMain/resources/MR/base/strings.xml",
    "*/*/src/commonMain/resources/MR/base/strings.xml",
    # Android modules
    "*/src/main/res/values/strings.xml",
    "*/*/src/main/res/values/strings.xml",
    "feature/*/src/main/res/values/strings.xml",
    # Generic fallbacks
    "**/values/strings.xml",
    "**/values-*/strings.xml",
)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Translate a glob where `*` spans one segment and `**` spans any number."""
    segments = pattern.strip("/").split("/")
    parts: list[str] = []
    for index, segment in enumerate(segments):
        is_last = index == len(segments) - 1
        if segment == "**":
            parts.append("(?:[^/]+/)*")
            continue
        piece = "[^/]*".join(re.escape(chunk) for chunk in segment.split("*"))
        parts.append(piece if is_last else f"{piece}/")
    return re.compile("^" + "".join(parts) + "$")


class PathMatcher:
    """Recognise string resource files and the locale encoded in their path."""

    _LOCALE_PATTERN: Final[re.Pattern[str]] = re.compile(
        r"(?:^|/)values-([a-z]{2,3}(?:-r[A-Z]{2})?)/"
    )
    _QUALIFIED_DIR_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?:^|/)values-[^/]+/")

    def __init__(self, patterns: Sequence[str] | None = None) -> None:
        self._patterns = tuple(patterns) if patterns else DEFAULT_RESOURCE_PATTERNS
        self._compiled = tuple(compile_pattern(pattern) for pattern in self._patterns)

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    def is_resource_file(self, path: str) -> bool:
        if not path:
            return False
        normalized = "/" + path.lstrip("/")
        if "/values/strings.xml" in normalized:
            return True
        if "/values-" in normalized and normalized.endswith("/strings.xml"):
            return True
        relative = path.lstrip("/")
        return any(regex.match(relative) for regex in self._compiled)

    def locale_of(self, path: str) -> str | None:
        """Return `xx` or `xx-rYY` from a `values-*` directory, else None."""
        match = self._LOCALE_PATTERN.search(path or "")
        if match:
            return match.group(1)
        return None

    def is_non_locale_variant(self, path: str) -> bool:
        """True for qualifier directories such as `values-night` or `values-v21`."""
        if self.locale_of(path) is not None:
            return False
        return bool(self._QUALIFIED_DIR_PATTERN.search(path or ""))


_default_matcher = PathMatcher()


def is_resource_file(path: str) -> bool:
    return _default_matcher.is_resource_file(path)


def locale_of(path: str) -> str | None:
    return _default_matcher.locale_of(path)
