# sass_importer/core/specifier.py
"""
Splits a raw `@use`/`@import`/`@forward` url into a package identifier and
an optional sub-path. Pure string handling, no filesystem access.
"""
from dataclasses import dataclass
from typing import Any, Optional

import structlog

log = structlog.get_logger(__name__)

SCOPE_MARKER = "@"
CURRENT_DIR_MARKER = "."


@dataclass(frozen=True)
class ParsedSpecifier:
    id: Optional[str] = None
    path_name: Optional[str] = None

    def __bool__(self) -> bool:
        return self.id is not None


def is_scoped_package(url: str = "") -> bool:
    return url.startswith(SCOPE_MARKER)


def normalize_package_url(url: str, package_prefix: Any = "") -> str:
    # strips the legacy prefix (e.g. "~") from the front of the url, once.
    if not isinstance(package_prefix, str) or package_prefix == "":
        return url
    return url[len(package_prefix):] if url.startswith(package_prefix) else url


def parse_specifier(url: Any = "", package_prefix: Any = "") -> ParsedSpecifier:
    """Parse a stylesheet import url.

    Args:
        url: The url as written in the rule, e.g. "~@scope/pkg/sub/path".
        package_prefix: Legacy prefix to strip. Empty or non-string disables it.

    Returns:
        ParsedSpecifier with `id` set for anything that names a package, and
        `path_name` set only when segments follow the package identifier.
        Malformed input gives an empty ParsedSpecifier instead of raising.
    """
    if not isinstance(url, str) or url == "":
        return ParsedSpecifier()

    normalized = normalize_package_url(url, package_prefix)
    id_segment_count = 2 if is_scoped_package(normalized) else 1
    segments = normalized.split("/")
    id_segments = segments[:id_segment_count]
    package_id = "/".join(id_segments)

    if not package_id or len(id_segments) < id_segment_count or not all(id_segments):
        log.debug("specifier_has_no_package_id", url=url)
        return ParsedSpecifier()

    path_name = "/".join(segments[id_segment_count:])
    return ParsedSpecifier(id=package_id, path_name=path_name or None)
