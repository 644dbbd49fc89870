"""Frontmatter extraction.

Splits a content file into its YAML metadata block and markdown body:

    ---
    title: Setup
    draft: false
    ---
    # Body starts here
"""

import datetime
import logging
import re
from dataclasses import dataclass, field
from typing import TypeAlias

import yaml

logger = logging.getLogger(__name__)

BOM = "\ufeff"

FrontmatterValue: TypeAlias = (
    str | bool | int | float | None | list["FrontmatterValue"] | dict[str, "FrontmatterValue"]
)
Frontmatter: TypeAlias = dict[str, FrontmatterValue]

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<meta>.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


@dataclass(frozen=True)
class ParsedContent:
    """Metadata and markdown body of a content file."""

    metadata: Frontmatter = field(default_factory=dict)
    body: str = ""


class MalformedMetadataError(ValueError):
    """Raised when a metadata block cannot be parsed into a mapping."""


def decode_content(raw: bytes | str) -> str:
    """Decode raw file content and strip a leading byte-order mark."""
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    return text.removeprefix(BOM)


def parse_frontmatter(raw: bytes | str, *, source: str = "<string>") -> ParsedContent:
    """Split content into metadata and body.

    Malformed metadata never aborts resolution: the whole content becomes
    the body and metadata is empty.

    Args:
        raw: File content, optionally BOM-prefixed
        source: Name used in log messages (usually the file path)

    Returns:
        ParsedContent with metadata mapping and markdown body
    """
    text = decode_content(raw)
    if not _opens_metadata_block(text):
        return ParsedContent(metadata={}, body=text)

    try:
        metadata, body = _split(text)
    except MalformedMetadataError as e:
        logger.warning(f"Ignoring malformed frontmatter in {source}: {e}")
        return ParsedContent(metadata={}, body=text)

    return ParsedContent(metadata=metadata, body=body)


def get_str(metadata: Frontmatter, key: str) -> str | None:
    """Return a non-blank string value, or None for any other shape."""
    value = metadata.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def get_bool(metadata: Frontmatter, key: str, default: bool = False) -> bool:
    """Return a boolean value, or default for any other shape."""
    value = metadata.get(key)
    return value if isinstance(value, bool) else default


def _opens_metadata_block(text: str) -> bool:
    first_line = text.split("\n", 1)[0].rstrip("\r")
    return first_line.rstrip(" \t") == "---"


def _split(text: str) -> tuple[Frontmatter, str]:
    match = _FRONTMATTER_RE.match(text)
    if match is None:
        raise MalformedMetadataError("metadata block is not terminated")

    try:
        data = yaml.safe_load(match.group("meta"))
    except yaml.YAMLError as e:
        raise MalformedMetadataError(f"invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedMetadataError(f"expected a mapping, got {type(data).__name__}")

    return _coerce_mapping(data), text[match.end() :]


def _coerce_mapping(data: dict[object, object]) -> Frontmatter:
    return {str(key): _coerce(value) for key, value in data.items()}


def _coerce(value: object) -> FrontmatterValue:
    if value is None or isinstance(value, str | bool | int | float):
        return value
    if isinstance(value, dict):
        return _coerce_mapping(value)
    if isinstance(value, list | tuple):
        return [_coerce(item) for item in value]
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)
