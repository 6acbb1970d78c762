"""
Node extraction driver.

The string walker pulls chunks from a byte source, shaves markup fragments off
its buffer and routes them through the capture engine until a node is
complete. It holds at most the unconsumed tail of the input in memory, so
arbitrarily large documents can be walked one record at a time.

Pipeline per call of get_node_from():
  stream.get_chunk() → Shaver.shave() → CaptureEngine.process() → node or keep going
"""

from abc import ABC, abstractmethod
from typing import Optional, Union

from pydantic import ValidationError

from .engine import CaptureEngine
from .exceptions import ConfigurationError
from .schemas import ParserOptions, ParserState
from .shaver import Shaver
from .streams import BaseStream
from .logger import get_module_logger

logger = get_module_logger("parser")


class BaseParser(ABC):
    """Contract shared by every node extraction strategy."""

    @abstractmethod
    def get_node_from(self, stream: BaseStream) -> Optional[bytes]:
        """
        Retrieve the next node from the stream.

        Args:
            stream: The byte source to pull from

        Returns:
            The next node, or None if no further node can be produced
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Forget all parsing progress, leaving the stream position alone."""
        pass


class StringWalker(BaseParser):
    """
    Builds nodes by walking tags one at a time until the capture depth is re-reached.

    Not thread-safe: one instance must not serve concurrent get_node_from() calls.
    """

    def __init__(self, options: Union[ParserOptions, dict, None] = None):
        """
        Initialize the parser.

        Args:
            options: ParserOptions, or a dict of option fields merged over the defaults
        """
        if options is None:
            options = ParserOptions()
        elif isinstance(options, dict):
            try:
                options = ParserOptions(**options)
            except ValidationError as e:
                raise ConfigurationError(
                    f"Invalid parser options: {e.error_count()} error(s)",
                    details={"errors": e.errors(include_url=False)}
                ) from e

        self.options = options
        self.shaver = Shaver(options)
        self.engine = CaptureEngine(options)
        self.state = ParserState()

    def _prepare_chunk(self, stream: BaseStream) -> bool:
        """
        Make sure there is something worth shaving.

        Returns True while there may still be XML to process. After an
        exhausted stream, leftover buffer content gets exactly one more
        chance per distinct value, so a truncated trailing tag cannot make
        the walker spin forever.
        """
        state = self.state

        if not state.first_pull and state.pending_node is None:
            # Starting again right after a flush; drain the buffer before pulling
            state.pending_node = b""
            return True

        if state.pending_node is None:
            state.pending_node = b""

        chunk = stream.get_chunk()
        if chunk is not None:
            state.buffer += chunk
            return True

        if state.buffer.strip() and state.buffer != state.last_buffer:
            state.last_buffer = state.buffer
            return True

        if state.buffer.strip():
            logger.debug(f"Stream exhausted with {len(state.buffer)} unparseable bytes left")
        return False

    def get_node_from(self, stream: BaseStream) -> Optional[bytes]:
        """Retrieve the next node from the stream, or None once nothing more can be produced."""
        while self._prepare_chunk(stream):
            self.state.first_pull = False

            while True:
                shaved = self.shaver.shave(self.state)
                if shaved is None:
                    break

                fragment, data = shaved
                node = self.engine.process(self.state, fragment, data)
                if node is not None:
                    return node

        return None

    def get_extracted_container(self) -> bytes:
        """
        Get the markup collected outside the capture depth.

        Only complete once get_node_from() has returned None; before that the
        container usually lacks closing tags.

        Only the markup fragments are kept: free text outside the capture
        depth, such as the indentation between container tags, is dropped.

        Raises:
            ConfigurationError: if extract_container is off
        """
        if not self.options.extract_container:
            raise ConfigurationError(
                "get_extracted_container() requires the 'extract_container' option to be true",
                details={"extract_container": False}
            )
        return self.state.container

    def reset(self) -> None:
        """Replace the parser state with a fresh one; the stream position is untouched."""
        self.state = ParserState()
        logger.debug("Parser state reset")
