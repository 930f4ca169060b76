"""Pure helpers over colon-delimited hierarchical volume paths.

The root is the sentinel ``":"``; a child of the root is ``":name"`` and
deeper entries append ``":name"`` to their parent. Nothing here does I/O.
"""

from __future__ import annotations

from ..errors import InvalidArgumentError

SEPARATOR = ":"
ROOT_PATH = ":"
SEPARATOR_SUBSTITUTE = "-"
PLACEHOLDER_NAME = "Untitled"
MAX_NAME_LENGTH = 31
HOST_SEPARATOR_SUBSTITUTE = "-"


def join_path(parent: str, name: str) -> str:
    """Return the path of ``name`` inside directory ``parent``."""
    if parent == ROOT_PATH:
        return f"{ROOT_PATH}{name}"
    return f"{parent}{SEPARATOR}{name}"


def parent_path(path: str) -> str:
    """Strip the last segment of ``path``; the root is its own parent."""
    if path == ROOT_PATH:
        return ROOT_PATH
    last = path.rfind(SEPARATOR)
    if last <= 0:
        return ROOT_PATH
    return path[:last]


def name_of(path: str) -> str:
    """Return the last segment of ``path`` (empty for the root)."""
    if path == ROOT_PATH:
        return ""
    return path[path.rfind(SEPARATOR) + 1 :]


def sanitize_name(host_name: str) -> str:
    """Map a host file name to a volume-safe name."""
    cleaned = host_name.replace(SEPARATOR, SEPARATOR_SUBSTITUTE)
    return cleaned if cleaned else PLACEHOLDER_NAME


def host_name_for(name: str) -> str:
    """Map a volume entry name to a name the host filesystem accepts."""
    cleaned = name.replace("/", HOST_SEPARATOR_SUBSTITUTE).replace("\x00", "")
    if cleaned in {"", ".", ".."}:
        return PLACEHOLDER_NAME
    return cleaned


def paths_match(left: str, right: str) -> bool:
    """Case-insensitive path equality; volume names ignore case."""
    return left.casefold() == right.casefold()


def is_descendant_or_same(path: str, ancestor: str) -> bool:
    """Return whether ``path`` equals ``ancestor`` or lies beneath it, ignoring case."""
    if ancestor == ROOT_PATH:
        return True
    folded = path.casefold()
    folded_ancestor = ancestor.casefold()
    return folded == folded_ancestor or folded.startswith(folded_ancestor + SEPARATOR)


def names_match(left: str, right: str) -> bool:
    """Case-insensitive name equality used for conflict detection."""
    return left.casefold() == right.casefold()


def validate_entry_name(raw_name: str) -> str:
    """Return a trimmed entry name or raise ``InvalidArgumentError``."""
    name = raw_name.strip()
    if not name:
        raise InvalidArgumentError("name must not be empty")
    if SEPARATOR in name:
        raise InvalidArgumentError(f"name must not contain {SEPARATOR!r}: {name!r}")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidArgumentError(f"name longer than {MAX_NAME_LENGTH} characters: {name!r}")
    return name


__all__ = [
    "SEPARATOR",
    "ROOT_PATH",
    "PLACEHOLDER_NAME",
    "MAX_NAME_LENGTH",
    "join_path",
    "parent_path",
    "name_of",
    "sanitize_name",
    "host_name_for",
    "is_descendant_or_same",
    "names_match",
    "paths_match",
    "validate_entry_name",
]
