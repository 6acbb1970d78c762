"""
Chunk buffer shaving.

The shaver removes the next markup fragment, together with any free text in
front of it, from the head of the parser's unconsumed buffer. It never
consumes a fragment it cannot see the end of: if the buffer ends inside a tag
the shaver reports "need more input" and leaves the buffer untouched.
"""

import re
from typing import Optional

from .schemas import ParserOptions, ParserState

# Shortest "<...>" run without a '>' inside
TAG_PATTERN = re.compile(rb"<[^>]+>")


class Shaver:
    """Locates and cuts markup fragments out of ParserState.buffer."""

    def __init__(self, options: ParserOptions):
        self.options = options

    def _extend_for_gt(self, buffer: bytes, captured: bytes, offset: int) -> Optional[bytes]:
        """
        Grow a short match up to the real closing marker for markup that may contain '>'.

        Returns the (possibly extended) fragment, or None if the closing marker
        has not arrived yet.
        """
        for pair in self.options.tags_with_allowed_gt:
            if not captured.startswith(pair.opening):
                continue
            if captured.endswith(pair.closing):
                return captured

            # The short match stopped at a '>' inside the content; find the true end
            position = buffer.find(pair.closing, offset + len(pair.opening))
            if position == -1:
                return None
            return buffer[offset:position + len(pair.closing)]

        return captured

    def shave(self, state: ParserState) -> Optional[tuple[bytes, bytes]]:
        """
        Shave the next fragment off the buffer.

        Returns:
            (fragment, preceding text + fragment), or None if more input is needed
        """
        match = TAG_PATTERN.search(state.buffer)
        if match is None:
            return None

        captured = match.group(0)
        offset = match.start()

        if self.options.expect_gt:
            captured = self._extend_for_gt(state.buffer, captured, offset)
            if captured is None:
                return None

        end = offset + len(captured)
        data = state.buffer[:end]
        state.buffer = state.buffer[end:]

        return captured, data
