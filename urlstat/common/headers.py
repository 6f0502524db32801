"""
Header Helpers

Splits raw ``Key: Value`` header lines and renders response header blocks.
"""

from collections.abc import Iterable

from urlstat.common.errors import InvalidHeaderError

# RFC 7230 token characters, as accepted by Go's net/textproto
_TOKEN_CHARS = frozenset(
    "!#$%&'*+-.^_`|~0123456789"
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
)


def header_key_value(line: str) -> tuple[str, str]:
    """
    Split a raw header line at the first ``:``

    Args:
        line: Header line such as ``"Accept: text/html"``

    Returns:
        tuple[str, str]: Key and value with surrounding blanks trimmed

    Raises:
        InvalidHeaderError: If the line has no ``:``
    """
    index = line.find(":")
    if index == -1:
        raise InvalidHeaderError(
            f"Header '{line}' has invalid format, missing ':'",
            details={"header": line},
        )
    return line[:index].rstrip(" "), line[index + 1:].lstrip(" ")


def is_token(value: str) -> bool:
    """Whether value is a non-empty RFC 7230 token."""
    return bool(value) and all(c in _TOKEN_CHARS for c in value)


def canonical_header_key(name: str) -> str:
    """
    Canonical MIME header form: first letter and letters after ``-`` upper-cased

    ``content-type`` -> ``Content-Type``. Names that are not valid tokens are
    returned unchanged.
    """
    if not is_token(name):
        return name
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


def sorted_header_lines(headers: Iterable[tuple[str, str]]) -> list[str]:
    """
    Render response headers as ``Name: v1,v2`` lines

    Header names are canonicalised and repeated names are merged, keeping
    value order. Lines are sorted case-insensitively by name, ties broken by
    the original bytes.

    Args:
        headers: (name, value) pairs in wire order

    Returns:
        list[str]: One line per distinct header name
    """
    merged: dict[str, list[str]] = {}
    for name, value in headers:
        merged.setdefault(canonical_header_key(name), []).append(value)

    names = sorted(merged, key=lambda n: (n.lower(), n))
    return [f"{name}: {','.join(merged[name])}" for name in names]
