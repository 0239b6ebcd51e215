"""Brewfile manifest parsing and serialization.

A Brewfile lists one package declaration per line::

    # Command-line search tool
    brew "ripgrep"
    cask "firefox"
    mas "Xcode", id: 497799835

A comment line directly above a declaration becomes that package's
description. Blank lines (and any other non-declaration line) clear the
pending comment. Lines that are not declarations are skipped rather than
rejected; they are returned as warnings so callers can surface typos.

Names, option keys and option values may be double-quoted with
backslash escapes, so anything the writer emits parses back to the same
package IDs.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from tempfile import NamedTemporaryFile

from brewsync.models.package import Package, PackageCollection, PackageType

logger = logging.getLogger(__name__)

# A double-quoted string; backslash escapes \", \\ and \n
_QUOTED = r'"(?:[^"\\]|\\.)*"'
# <type> "<name>" followed by optional ", key: value" pairs
_DECLARATION = re.compile(rf"^(?P<type>[a-z]+)\s+(?P<name>{_QUOTED})(?P<rest>.*)$")
_OPTION = re.compile(
    rf"\s*,\s*(?P<key>[A-Za-z_][\w-]*|{_QUOTED}):\s*(?P<value>{_QUOTED}|[^,\s]+)"
)
_BARE_KEY = re.compile(r"^[A-Za-z_][\w-]*$")
_ESCAPE = re.compile(r"\\(.)")


class BrewfileError(Exception):
    """Base exception for Brewfile-related errors."""


class BrewfileNotFoundError(BrewfileError):
    """Raised when a Brewfile does not exist."""


@dataclass(frozen=True, slots=True)
class ParseWarning:
    """A line the parser skipped.

    Attributes:
        line_number: 1-based line number.
        line: The skipped line, stripped.
        reason: Why the line was skipped.
    """

    line_number: int
    line: str
    reason: str


@dataclass(slots=True)
class ParseResult:
    """Output of parsing a Brewfile.

    Attributes:
        packages: Parsed packages in file order, deduplicated by ID.
        warnings: Lines that were skipped.
    """

    packages: PackageCollection = field(default_factory=PackageCollection)
    warnings: list[ParseWarning] = field(default_factory=list)


def parse_brewfile(text: str) -> ParseResult:
    """Parse Brewfile text into packages.

    Args:
        text: Brewfile contents.

    Returns:
        ParseResult with the packages and any skipped lines.
    """
    result = ParseResult()
    pending: str | None = None

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()

        if not line:
            pending = None
            continue

        if line.startswith("#"):
            pending = line.lstrip("#").strip() or None
            continue

        package, reason = _parse_declaration(line)
        if package is None:
            result.warnings.append(ParseWarning(line_number, line, reason))
            logger.warning("Skipping Brewfile line %d (%s): %s", line_number, reason, line)
            pending = None
            continue

        if pending is not None:
            package = package.with_description(pending)
        pending = None

        if package in result.packages:
            logger.debug("Ignoring duplicate declaration of %s on line %d", package.id, line_number)
        result.packages.add_unique(package)

    return result


def _parse_declaration(line: str) -> tuple[Package | None, str]:
    """Parse one declaration line.

    Returns:
        Tuple of (package, reason); package is None when the line is
        not a valid declaration, with reason explaining why.
    """
    match = _DECLARATION.match(line)
    if match is None:
        return None, "not a declaration"

    try:
        package_type = PackageType.parse(match["type"])
    except ValueError:
        return None, f"unknown type '{match['type']}'"

    options: dict[str, str] = {}
    rest = match["rest"]
    pos = 0
    while pos < len(rest):
        option = _OPTION.match(rest, pos)
        if option is None:
            remainder = rest[pos:].strip()
            if remainder and not remainder.startswith("#"):
                return None, "malformed options"
            break
        options[_unquote(option["key"])] = _unquote(option["value"])
        pos = option.end()

    name = _unquote(match["name"])
    if not name:
        return None, "empty name"
    full_name: str | None = None
    if package_type == PackageType.MAS:
        app_id = options.get("id")
        if app_id is None:
            return None, "mas entry without id"
        full_name, name = name, app_id

    return Package(type=package_type, name=name, full_name=full_name, options=options), ""


def write_brewfile(packages: PackageCollection) -> str:
    """Serialize packages to Brewfile text.

    Packages are grouped by type in PackageType order; items keep their
    collection order within a group. Groups are separated by a blank line.

    Args:
        packages: Packages to write.

    Returns:
        Brewfile contents ending in a newline (empty string if no packages).
    """
    groups = packages.by_type()
    blocks: list[str] = []

    for package_type in PackageType:
        group = groups.get(package_type)
        if not group:
            continue
        lines: list[str] = []
        for package in group:
            if package.description:
                lines.append(f"# {_single_line(package.description)}")
            lines.append(_format_declaration(package))
        blocks.append("\n".join(lines))

    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def _format_declaration(package: Package) -> str:
    """Format one package as a declaration line.

    ``mas`` entries are written as ``mas "<full name>", id: <name>`` so
    the package name, which is its identity, is what the parser reads back.
    """
    options = dict(package.options)
    if package.type == PackageType.MAS:
        options.pop("id", None)
        head = f"mas {_quote(package.display_name)}, id: {_format_value(package.name)}"
    else:
        head = f"{package.type.value} {_quote(package.name)}"

    parts = [head]
    for key, value in options.items():
        key_text = key if _BARE_KEY.match(key) else _quote(key)
        parts.append(f"{key_text}: {_format_value(value)}")
    return ", ".join(parts)


def _format_value(value: str) -> str:
    """Quote option values unless they are bare numbers or booleans."""
    if value in ("true", "false") or value.isdigit():
        return value
    return _quote(value)


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _unquote(text: str) -> str:
    """Strip quotes and resolve escapes; bare words are returned as-is."""
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        return text
    return _ESCAPE.sub(lambda m: "\n" if m[1] == "n" else m[1], text[1:-1])


def _single_line(description: str) -> str:
    """Collapse a description onto one comment line."""
    return " ".join(description.split())


def load_brewfile(path: Path) -> ParseResult:
    """Load and parse a Brewfile.

    Args:
        path: Path to the Brewfile.

    Returns:
        ParseResult for the file contents.

    Raises:
        BrewfileNotFoundError: If the file doesn't exist.
        BrewfileError: If the file cannot be read.
    """
    if not path.exists():
        raise BrewfileNotFoundError(f"Brewfile not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise BrewfileError(f"Failed to read Brewfile: {e}") from e

    return parse_brewfile(text)


def save_brewfile(packages: PackageCollection, path: Path) -> Path:
    """Write packages to a Brewfile atomically.

    The content is written to a temporary file in the same directory and
    moved into place with os.replace().

    Args:
        packages: Packages to write.
        path: Destination path.

    Returns:
        Path where the Brewfile was saved.

    Raises:
        BrewfileError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = write_brewfile(packages)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write(content)
        os.replace(str(tmp_path), str(path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise BrewfileError(f"Failed to write Brewfile: {e}") from e

    return path
