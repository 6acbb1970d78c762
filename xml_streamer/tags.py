"""
Tag classification rules.

A markup fragment such as ``<item id="1">`` or ``<!-- note -->`` is classified
by walking an ordered rule table: the first rule whose opening marker is a
prefix of the fragment and whose closing marker is a suffix wins. Each rule
carries the depth delta the fragment applies (+1 opening, -1 closing, 0 for
everything else) and the kind of markup it represents.

Order matters: ``<![CDATA[`` must be tried before the generic ``<!``
declaration, and ``</`` and ``/>`` before the bare ``<`` ... ``>`` opening tag.
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class TagKind(Enum):
    """Kinds of markup the classifier can recognize."""
    PROCESSING_INSTRUCTION = "processing_instruction"
    COMMENT = "comment"
    CDATA = "cdata"
    DECLARATION = "declaration"
    CLOSING = "closing"
    SELF_CLOSING = "self_closing"
    OPENING = "opening"
    OTHER = "other"


def _infer_kind(closing, depth: int) -> TagKind:
    """Guess the kind of a rule given in the compact (opening, closing, depth) form."""
    if depth > 0:
        return TagKind.OPENING
    if depth < 0:
        return TagKind.CLOSING
    if closing in ("/>", b"/>"):
        return TagKind.SELF_CLOSING
    return TagKind.OTHER


class MarkerPair(BaseModel):
    """Opening/closing markers of a markup kind whose content may contain '>'."""
    model_config = ConfigDict(frozen=True)

    opening: bytes
    closing: bytes

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data):
        if isinstance(data, (tuple, list)):
            opening, closing = data
            return {"opening": opening, "closing": closing}
        return data


class TagRule(BaseModel):
    """
    One row of the classification table.

    Accepts either keyword fields or the compact tuple form used in option
    dicts: ``("<!--", "-->", 0)`` or ``("<!--", "-->", 0, TagKind.COMMENT)``.
    Markers given as str are UTF-8 encoded.
    """
    model_config = ConfigDict(frozen=True)

    opening: bytes
    closing: bytes
    depth: int
    kind: TagKind = TagKind.OTHER

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data):
        if isinstance(data, (tuple, list)):
            if len(data) == 4:
                opening, closing, depth, kind = data
            else:
                opening, closing, depth = data
                kind = _infer_kind(closing, depth)
            return {"opening": opening, "closing": closing, "depth": depth, "kind": kind}
        if isinstance(data, dict) and "kind" not in data and "depth" in data:
            data = dict(data)
            data["kind"] = _infer_kind(data.get("closing"), data["depth"])
        return data

    def matches(self, fragment: bytes) -> bool:
        return fragment.startswith(self.opening) and fragment.endswith(self.closing)


DEFAULT_TAGS = (
    TagRule(opening=b"<?", closing=b"?>", depth=0, kind=TagKind.PROCESSING_INSTRUCTION),
    TagRule(opening=b"<!--", closing=b"-->", depth=0, kind=TagKind.COMMENT),
    TagRule(opening=b"<![CDATA[", closing=b"]]>", depth=0, kind=TagKind.CDATA),
    TagRule(opening=b"<!", closing=b">", depth=0, kind=TagKind.DECLARATION),
    TagRule(opening=b"</", closing=b">", depth=-1, kind=TagKind.CLOSING),
    TagRule(opening=b"<", closing=b"/>", depth=0, kind=TagKind.SELF_CLOSING),
    TagRule(opening=b"<", closing=b">", depth=1, kind=TagKind.OPENING),
)

# Comments and CDATA sections may legally contain '>'
DEFAULT_TAGS_WITH_ALLOWED_GT = (
    MarkerPair(opening=b"<!--", closing=b"-->"),
    MarkerPair(opening=b"<![CDATA[", closing=b"]]>"),
)


def classify(fragment: bytes, rules: Iterable[TagRule] = DEFAULT_TAGS) -> Optional[TagRule]:
    """
    Return the first rule matching the fragment, or None if it is unclassified.

    Unclassified fragments are depth-neutral: callers treat them as delta 0.
    """
    for rule in rules:
        if rule.matches(fragment):
            return rule
    return None
