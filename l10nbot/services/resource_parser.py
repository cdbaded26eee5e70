from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Final, Union
from xml.sax.saxutils import unescape

from l10nbot.core.errors import ResourceParseError
from l10nbot.models.resources import StringEntry


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Text:
    value: str


@dataclass(frozen=True, slots=True)
class Node:
    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: tuple["Element", ...] = ()


Element = Union[Text, Node]

_ENTITY_MAP: Final[dict[str, str]] = {
    "&quot;": '"',
    "&apos;": "'",
    "&#39;": "'",
    "&#13;": "\r",
}
_STRING_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"<string\b([^>]*?)>([^<]*?)</string>", re.DOTALL
)
_ATTRIBUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r'([\w:.-]+)\s*=\s*"([^"]*)"')


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag


def _convert(element: ET.Element) -> Node:
    children: list[Element] = []
    if element.text:
        children.append(Text(element.text))
    for child in element:
        children.append(_convert(child))
        if child.tail:
            children.append(Text(child.tail))
    attributes = {_local_name(name): value for name, value in element.attrib.items()}
    return Node(name=_local_name(element.tag), attributes=attributes, children=tuple(children))


def build_tree(content: str) -> Node:
    """Parse markup into the tagged element tree."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise ResourceParseError(f"Malformed resource markup: {exc}") from exc
    return _convert(root)


def text_content(element: Element) -> str:
    if isinstance(element, Text):
        return element.value
    return "".join(text_content(child) for child in element.children)


def extract_entries(root: Node) -> list[StringEntry]:
    """Read `resources/string` children; raise when the shape does not match."""
    if root.name != "resources":
        raise ResourceParseError(f"Unexpected root element <{root.name}>")

    string_nodes = [
        child for child in root.children if isinstance(child, Node) and child.name == "string"
    ]
    if not string_nodes:
        raise ResourceParseError("Resource document holds no <string> elements")

    entries: list[StringEntry] = []
    for node in string_nodes:
        key = node.attributes.get("name", "")
        value = text_content(node)
        if not key or not value:
            continue
        entries.append(
            StringEntry(
                key=key,
                value=value,
                translatable=node.attributes.get("translatable") != "false",
            )
        )
    return entries


def parse_with_regex(content: str) -> list[StringEntry]:
    """Lossy extraction used when structured parsing fails.

    Elements whose value contains nested tags are not matched.
    """
    entries: list[StringEntry] = []
    for match in _STRING_PATTERN.finditer(content or ""):
        attributes = dict(_ATTRIBUTE_PATTERN.findall(match.group(1)))
        key = attributes.get("name", "")
        value = unescape(match.group(2), _ENTITY_MAP)
        if not key or not value:
            continue
        entries.append(
            StringEntry(
                key=key,
                value=value,
                translatable=attributes.get("translatable") != "false",
            )
        )
    return entries


class ResourceParser:
    """Convert resource file content into string entries, never raising."""

    def parse(self, content: str, *, source: str | None = None) -> list[StringEntry]:
        if not isinstance(content, str) or not content.strip():
            return []
        try:
            return extract_entries(build_tree(content))
        except ResourceParseError as exc:
            logger.debug(
                "Structured parse failed for %s (%s); using regex fallback.",
                source or "<content>",
                exc,
            )
        return parse_with_regex(content)


def parse(content: str) -> list[StringEntry]:
    return ResourceParser().parse(content)
