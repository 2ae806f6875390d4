"""Category code arithmetic: normalization, ancestry and root class."""

from __future__ import annotations

import re
from dataclasses import dataclass

from engine.config.statement import PREFIX_ROOT, UNMAPPED_PREFIX_ROOT


_CODE_RE = re.compile(r"^\d+(?:\.\d+)*$")
_TAG_RE = re.compile(r"^\s*(\d+(?:\.\d+)*)\s+(\S.*?)\s*$")


@dataclass(frozen=True)
class ParsedTag:
    """A ``"<code> <name>"`` tag split into its normalized code and raw name."""
    code: str
    name: str


def is_valid_code(code: str) -> bool:
    return bool(_CODE_RE.match(str(code).strip()))


def normalize_code(code: str) -> str:
    """
    Zero-pad every dot segment to two digits: ``6.1.10`` -> ``06.01.10``.

    Idempotent. Segments wider than two digits are kept (leading zeros
    are dropped first, so ``006`` becomes ``06``).
    """
    s = str(code).strip()
    if not _CODE_RE.match(s):
        raise ValueError(f"Invalid category code: {code!r}")
    return ".".join(str(int(seg)).zfill(2) for seg in s.split("."))


def code_segments(code: str) -> list[str]:
    return normalize_code(code).split(".")


def code_level(code: str) -> int:
    """Number of segments; roots are level 0 and never pass through here."""
    return len(code_segments(code))


def parent_code(code: str) -> str | None:
    """Immediate parent code, or None for a single-segment code."""
    segs = code_segments(code)
    if len(segs) == 1:
        return None
    return ".".join(segs[:-1])


def ancestor_codes(code: str) -> list[str]:
    """Every non-empty proper prefix, nearest first: ``06.11.01`` -> ``[06.11, 06]``."""
    segs = code_segments(code)
    return [".".join(segs[:i]) for i in range(len(segs) - 1, 0, -1)]


def leading_segment(code: str) -> str:
    return code_segments(code)[0]


def is_mapped_prefix(code: str) -> bool:
    return leading_segment(code) in PREFIX_ROOT


def root_for_code(code: str) -> str:
    """Root id by leading segment; unknown prefixes go to UNMAPPED_PREFIX_ROOT."""
    return PREFIX_ROOT.get(leading_segment(code), UNMAPPED_PREFIX_ROOT)


def parse_tag(tag: str) -> ParsedTag | None:
    """
    Parse ``"06.10 Administrative"`` into ``ParsedTag("06.10", "Administrative")``.

    Returns None when the tag does not have the ``<code><whitespace><name>``
    shape.
    """
    if tag is None:
        return None
    m = _TAG_RE.match(str(tag))
    if m is None:
        return None
    return ParsedTag(code=normalize_code(m.group(1)), name=m.group(2))
