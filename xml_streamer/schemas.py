"""
Pydantic schemas for parser configuration and parser state.

ParserOptions: immutable configuration, validated once at construction.
ParserState:   the mutable working state of one parser instance. Only the
               shaver, the capture engine and the driver touch it, and
               reset() replaces it wholesale with a fresh default instance.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .tags import DEFAULT_TAGS, DEFAULT_TAGS_WITH_ALLOWED_GT, MarkerPair, TagRule


class ParserOptions(BaseModel):
    """Configuration of a string walker parser. Every field has a default."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Nesting level whose elements are emitted as nodes (2 = children of the root)
    capture_depth: int = Field(default=2, ge=0)
    # Extend the tag lookahead for markup that may contain '>' (comments, CDATA)
    expect_gt: bool = False
    tags: tuple[TagRule, ...] = DEFAULT_TAGS
    tags_with_allowed_gt: tuple[MarkerPair, ...] = DEFAULT_TAGS_WITH_ALLOWED_GT
    # Collect the markup outside the capture window for later reattachment
    extract_container: bool = False


class ParserState(BaseModel):
    """
    Working state of a single parser.

    Invariants:
      depth        = sum of all depth deltas applied since construction/reset
      buffer       = unconsumed tail of everything pulled from the stream
      pending_node = None exactly when no node is being built
    """
    depth: int = 0
    buffer: bytes = b""
    # Buffer seen at the last exhausted-stream check, used to detect stalls
    last_buffer: Optional[bytes] = None
    capturing: bool = False
    pending_node: Optional[bytes] = None
    container: bytes = b""
    first_pull: bool = True
