"""ccsync - Sync Claude Code session files into a project repository."""

from .exceptions import (
    CcsyncConfigError,
    CcsyncError,
    CcsyncInvalidInputError,
    CcsyncIOError,
    CcsyncNotFoundError,
    CcsyncPathError,
    CcsyncStorageError,
)
from .path_codec import (
    DEFAULT_DOMAIN_SUFFIXES,
    AmbiguousPath,
    DomainSuffixConverter,
    UniquePath,
    convert_segment,
    decode,
    decode_candidates,
    decode_path,
    encode_path,
)

__all__ = [
    "CcsyncError",
    "CcsyncConfigError",
    "CcsyncInvalidInputError",
    "CcsyncIOError",
    "CcsyncNotFoundError",
    "CcsyncPathError",
    "CcsyncStorageError",
    "DEFAULT_DOMAIN_SUFFIXES",
    "AmbiguousPath",
    "DomainSuffixConverter",
    "UniquePath",
    "convert_segment",
    "decode",
    "decode_candidates",
    "decode_path",
    "encode_path",
]
