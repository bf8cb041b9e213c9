# ============================================
# tracker/utils/normalize.py
# ============================================
"""
Relational list fields (assignees) arrive from multipart forms in
several shapes:

- absent
- a single scalar string                ("u1")
- a JSON-encoded array inside a string  ('["u1","u2"]')
- a real list from repeated form fields (["u1", "u2"])

`classify` tags the raw value, `decode` turns any tag into one
canonical ordered list of string ids. Order and duplicates are kept.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class Scalar:
    value: str


@dataclass(frozen=True)
class Sequence:
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class RawJson:
    text: str


RawIds = Union[Absent, Scalar, Sequence, RawJson]

ABSENT = Absent()


def classify(raw: Any) -> RawIds:
    if raw is None or isinstance(raw, Absent):
        return ABSENT
    if isinstance(raw, (list, tuple)):
        return Sequence(tuple(raw))
    text = str(raw)
    if text.strip().startswith('['):
        return RawJson(text)
    return Scalar(text)


def decode(tagged: RawIds) -> Optional[List[str]]:
    """
    Canonical list for a tagged value; None for Absent so that
    partial updates can leave the field untouched.
    """
    if isinstance(tagged, Absent):
        return None
    if isinstance(tagged, Sequence):
        return [str(v) for v in tagged.values]
    if isinstance(tagged, RawJson):
        try:
            parsed = json.loads(tagged.text)
        except ValueError:
            logger.warning("[normalize] malformed JSON list, kept as single id: %r", tagged.text)
            return [tagged.text]
        if isinstance(parsed, list):
            return [str(v) for v in parsed]
        return [tagged.text]
    return [tagged.value]


def normalize_ids(raw: Any) -> List[str]:
    """normalize_ids("u1") -> ["u1"]; absent input -> []"""
    return decode(classify(raw)) or []


def raw_field(data, name: str) -> Any:
    """
    Pull a possibly-repeated field out of request data.
    QueryDict: one occurrence gives the scalar, several give a list.
    """
    if name not in data:
        return ABSENT
    if hasattr(data, 'getlist'):
        values = data.getlist(name)
        if len(values) == 1:
            return values[0]
        return values
    return data.get(name)


def unique_ids(ids: List[str]) -> List[str]:
    """Drop blanks and repeats; first occurrence wins"""
    seen = set()
    out = []
    for uid in ids:
        if uid and uid not in seen:
            seen.add(uid)
            out.append(uid)
    return out
