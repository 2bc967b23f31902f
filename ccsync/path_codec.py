"""Conversion between absolute directory paths and session identifiers.

Claude Code stores the sessions of a project in a directory named after the
project path, flattened into a single token:

    /Users/dev/github.com/project  ->  -Users-dev-github.com-project

The encoding is lossy. A hyphen inside a directory name and a hyphen that
stands for a path separator look the same, so decoding can only produce
candidates.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Iterable, Optional, Union

from .exceptions import CcsyncInvalidInputError

# =============================================================================
# Constants
# =============================================================================

# Domain-like suffixes that are kept intact when splitting a segment on hyphens
DEFAULT_DOMAIN_SUFFIXES: tuple[str, ...] = (
    ".com",
    ".org",
    ".net",
    ".io",
    ".dev",
    ".ai",
)

SEPARATOR = "/"
IDENTIFIER_SEPARATOR = "-"

# NUL cannot appear in a file name, so it never collides with path content
_DOT_SENTINEL = "\x00"


# =============================================================================
# Encoding
# =============================================================================


def encode_path(
    path: Union[str, PurePosixPath],
    domain_suffixes: Iterable[str] = DEFAULT_DOMAIN_SUFFIXES,
) -> str:
    """Encode an absolute directory path as a session identifier.

    Separators become hyphens and a leading hyphen is added. Dots are kept
    as they are.

    Args:
        path: Absolute directory path
        domain_suffixes: Suffixes that are allowed on the last component
            even though they look like a file extension

    Returns:
        Identifier token, always starting with ``-``

    Raises:
        CcsyncInvalidInputError: If the path is relative or looks like a file

    Examples:
        >>> encode_path("/Users/dev/project")
        '-Users-dev-project'
        >>> encode_path("/Users/dev/github.com/project")
        '-Users-dev-github.com-project'
    """
    pure_path = PurePosixPath(str(path))
    if not pure_path.is_absolute():
        raise CcsyncInvalidInputError(f"Path must be absolute: {path}")

    suffix = pure_path.suffix
    if suffix and suffix not in tuple(domain_suffixes):
        raise CcsyncInvalidInputError(
            f"Path must be a directory, not a file: {path}"
        )

    without_leading_separator = str(pure_path).lstrip(SEPARATOR)
    return IDENTIFIER_SEPARATOR + without_leading_separator.replace(
        SEPARATOR, IDENTIFIER_SEPARATOR
    )


# =============================================================================
# Decoding
# =============================================================================


@dataclass(frozen=True)
class UniquePath:
    """Decode result with exactly one plausible original path."""

    path: PurePosixPath


@dataclass(frozen=True)
class AmbiguousPath:
    """Decode result with several plausible original paths."""

    candidates: tuple[PurePosixPath, ...]
    """Sorted, de-duplicated candidate paths"""


DecodeResult = Union[UniquePath, AmbiguousPath]


def decode_path(identifier: str) -> PurePosixPath:
    """Decode an identifier into a single best-effort path.

    Every hyphen is read as a separator. Paths whose directory names
    contained hyphens are not restored.

    Examples:
        >>> decode_path("-Users-dev-project")
        PurePosixPath('/Users/dev/project')
    """
    body = identifier
    if body.startswith(IDENTIFIER_SEPARATOR):
        body = body[1:]
    return PurePosixPath(SEPARATOR + body.replace(IDENTIFIER_SEPARATOR, SEPARATOR))


def decode_candidates(identifier: str) -> tuple[PurePosixPath, ...]:
    """Decode an identifier into all plausible original paths.

    Only the default reading is produced for now; hyphen-in-name variants
    are not enumerated.

    Returns:
        Sorted tuple of unique candidate paths
    """
    candidates = {decode_path(identifier)}
    return tuple(sorted(candidates))


def decode(identifier: str) -> DecodeResult:
    """Decode an identifier into a tagged result.

    Returns:
        UniquePath when a single candidate exists, AmbiguousPath otherwise
    """
    candidates = decode_candidates(identifier)
    if len(candidates) == 1:
        return UniquePath(candidates[0])
    return AmbiguousPath(candidates)


# =============================================================================
# Segment conversion
# =============================================================================


def _normalize_suffixes(suffixes: Iterable[str]) -> tuple[str, ...]:
    normalized: list[str] = []
    for suffix in suffixes:
        if (
            not isinstance(suffix, str)
            or not suffix.startswith(".")
            or len(suffix) < 2
            or IDENTIFIER_SEPARATOR in suffix
            or SEPARATOR in suffix
        ):
            raise CcsyncInvalidInputError(f"Invalid domain suffix: {suffix!r}")
        if suffix not in normalized:
            normalized.append(suffix)
    return tuple(normalized)


class DomainSuffixConverter:
    """Turns a flattened directory name back into a relative path.

    Hyphens become separators, except that a dot followed by one of the
    configured domain suffixes is never split. Suffix literals are matched
    anywhere in the segment, so ``-a-x.community`` keeps ``.com`` protected
    as well.

    Examples:
        >>> converter = DomainSuffixConverter()
        >>> converter.convert("-Users-dev-github.com-project")
        'Users/dev/github.com/project'
        >>> converter.convert("-Users-example.org-test.io-project")
        'Users/example.org/test.io/project'
    """

    def __init__(self, suffixes: Iterable[str] = DEFAULT_DOMAIN_SUFFIXES):
        """Initialize converter.

        Args:
            suffixes: Ordered domain suffixes, each starting with a dot

        Raises:
            CcsyncInvalidInputError: If a suffix is malformed
        """
        self.suffixes = _normalize_suffixes(suffixes)

    def convert(self, segment: str) -> str:
        """Convert one flattened segment into a relative path string."""
        result = segment
        for suffix in self.suffixes:
            if suffix in result:
                result = result.replace(suffix, suffix.replace(".", _DOT_SENTINEL))

        result = result.replace(IDENTIFIER_SEPARATOR, SEPARATOR)
        result = result.replace(_DOT_SENTINEL, ".")

        if result.startswith(SEPARATOR):
            result = result[1:]
        return result


def convert_segment(segment: str, suffixes: Optional[Iterable[str]] = None) -> str:
    """Convert a flattened segment using the given or default suffixes."""
    converter = DomainSuffixConverter(
        DEFAULT_DOMAIN_SUFFIXES if suffixes is None else suffixes
    )
    return converter.convert(segment)
