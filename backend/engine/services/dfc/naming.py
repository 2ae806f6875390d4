"""
Display-name resolution for statement nodes.

Priority (first match wins):
  1. catalog name for the exact code
  2. name observed on ledger tags for the exact code
  3. inferred from descendant leaf names (first token, then common prefix)
  4. standard statement-line table
  5. the normalized code itself
"""

from __future__ import annotations

import os
import re
from typing import Mapping, Sequence

from engine.config.statement import MIN_INFERRED_NAME_LENGTH

_TRAILING_PARTIAL_WORD = re.compile(r"\s+\S*$")
_TRAILING_SEPARATORS = " \t-–:/,;&"


def common_name_prefix(names: Sequence[str]) -> str:
    """
    Longest common prefix of ``names`` with any trailing partial word removed.

    A multi-word prefix that stops inside a word is cut back to the last
    whole word (``"Office ren"`` -> ``"Office"``). A single-word prefix is
    kept as is (``"Computer"`` from ``"Computers"``/``"Computer accessories"``).
    """
    cleaned = [n.strip() for n in names if n and n.strip()]
    if not cleaned:
        return ""
    prefix = os.path.commonprefix(cleaned)
    if not prefix:
        return ""

    ends_mid_word = any(
        len(n) > len(prefix) and not n[len(prefix)].isspace() for n in cleaned
    ) and not prefix[-1].isspace()
    if ends_mid_word and re.search(r"\s", prefix):
        prefix = _TRAILING_PARTIAL_WORD.sub("", prefix)

    return prefix.rstrip(_TRAILING_SEPARATORS)


def infer_name_from_children(
    child_names: Sequence[str],
    *,
    min_length: int = MIN_INFERRED_NAME_LENGTH,
) -> str | None:
    """Guess an ancestor's name from the names observed below it.

    First token of the first name wins when it is longer than
    ``min_length``; otherwise the common prefix of all names is used under
    the same length rule.
    """
    names = [n.strip() for n in child_names if n and n.strip()]
    if not names:
        return None

    first_token = names[0].split()[0].rstrip(_TRAILING_SEPARATORS)
    if len(first_token) > min_length:
        return first_token

    prefix = common_name_prefix(names)
    if len(prefix) > min_length:
        return prefix
    return None


def resolve_display_name(
    code: str,
    *,
    catalog: Mapping[str, str] | None = None,
    observed_name: str | None = None,
    child_names: Sequence[str] = (),
    standard_names: Mapping[str, str] | None = None,
) -> str:
    """Walk the priority cascade for ``code``; always returns a name."""
    if catalog:
        name = catalog.get(code)
        if name and str(name).strip():
            return str(name).strip()

    if observed_name and observed_name.strip():
        return observed_name.strip()

    inferred = infer_name_from_children(child_names)
    if inferred:
        return inferred

    if standard_names:
        name = standard_names.get(code)
        if name:
            return name

    return code
