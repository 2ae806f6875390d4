"""Core domain objects: category codes and tag parsing."""

from engine.core.codes import (
    ParsedTag,
    ancestor_codes,
    code_level,
    is_mapped_prefix,
    is_valid_code,
    normalize_code,
    parent_code,
    parse_tag,
    root_for_code,
)

__all__ = [
    "ParsedTag",
    "ancestor_codes",
    "code_level",
    "is_mapped_prefix",
    "is_valid_code",
    "normalize_code",
    "parent_code",
    "parse_tag",
    "root_for_code",
]
