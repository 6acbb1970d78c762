"""
Depth/capture state machine.

Every shaved fragment moves the parser's depth by the delta of its tag rule.
Crossing into ``capture_depth`` starts a node, crossing back out of it
completes the node. Self-closing elements sitting directly at the capture
boundary never change depth, so they get a one-shot capture of their own.

The engine is stateless itself: all state lives in the ParserState passed to
process(), which makes it possible to drive it with synthetic fragments.
"""

from typing import Optional

from .schemas import ParserOptions, ParserState
from .tags import TagKind, classify
from .logger import get_module_logger

logger = get_module_logger("engine")


class CaptureEngine:
    """Decides, fragment by fragment, what belongs to the node being built."""

    def __init__(self, options: ParserOptions):
        self.options = options

    @staticmethod
    def _append(state: ParserState, data: bytes) -> None:
        state.pending_node = (state.pending_node or b"") + data

    def process(self, state: ParserState, fragment: bytes, data: bytes) -> Optional[bytes]:
        """
        Route one fragment through the state machine.

        Args:
            state: Parser state to update
            fragment: The bare markup fragment, e.g. b"<item>"
            data: Free text preceding the fragment plus the fragment itself

        Returns:
            The completed node if this fragment finished one, else None
        """
        capture_depth = self.options.capture_depth

        rule = classify(fragment, self.options.tags)
        delta = rule.depth if rule is not None else 0
        state.depth += delta

        flush = False
        capture_once = False

        if state.depth == capture_depth and delta > 0:
            # Just entered the capture depth
            state.capturing = True
        elif state.depth == capture_depth - 1 and delta < 0:
            # Just left it; the closing tag belongs to the node being closed
            flush = True
            state.capturing = False
            self._append(state, data)
        elif self.options.extract_container and state.depth < capture_depth:
            state.container += fragment
        elif (
            delta == 0
            and state.depth + 1 == capture_depth
            and rule is not None
            and rule.kind is TagKind.SELF_CLOSING
        ):
            # Childless element at the boundary: capture it alone, don't start capturing
            capture_once = True
            flush = True

        if state.capturing or capture_once:
            self._append(state, data)

        if flush:
            node = state.pending_node
            state.pending_node = None
            logger.debug(f"Flushed node of {len(node)} bytes at depth {state.depth}")
            return node

        return None
