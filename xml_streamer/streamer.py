"""
Streamer facade.

Pairs a parser with a byte source so callers only deal with one object:

    with XMLStringStreamer.create_string_walker_parser("huge.xml") as streamer:
        for node in streamer:
            handle(node)
"""

import os
from typing import BinaryIO, Iterator, Optional, Union

from lxml import etree

from .elements import node_to_element
from .parser import BaseParser, StringWalker
from .schemas import ParserOptions
from .streams import DEFAULT_CHUNK_SIZE, BaseStream, FileStream
from .logger import get_module_logger

logger = get_module_logger("streamer")


class XMLStringStreamer:
    """A parser bound to the stream it reads from."""

    def __init__(self, parser: BaseParser, stream: BaseStream):
        self.parser = parser
        self.stream = stream

    @classmethod
    def create_string_walker_parser(
        cls,
        file: Union[str, os.PathLike, BinaryIO],
        options: Union[ParserOptions, dict, None] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> "XMLStringStreamer":
        """
        Create a string walker reading from a file.

        Args:
            file: File path or binary handle
            options: Parser options (ParserOptions or dict)
            chunk_size: Bytes per chunk

        Returns:
            A streamer ready for use
        """
        parser = StringWalker(options)
        stream = FileStream(file, chunk_size)
        logger.info(f"String walker streamer created (capture depth {parser.options.capture_depth})")
        return cls(parser, stream)

    def get_node(self) -> Optional[bytes]:
        """Get the next node, or None when the stream has no more nodes."""
        return self.parser.get_node_from(self.stream)

    def __iter__(self) -> Iterator[bytes]:
        while True:
            node = self.get_node()
            if node is None:
                return
            yield node

    def iter_elements(self, recover: bool = True) -> Iterator[etree._Element]:
        """Yield the remaining nodes parsed as lxml elements, skipping unsalvageable ones."""
        for node in self:
            element = node_to_element(node, recover=recover)
            if element is not None:
                yield element

    def restart(self) -> None:
        """
        Rewind the stream and reset the parser so nodes are produced again from the top.

        Raises:
            UnsupportedOperationError: if the stream isn't seekable
        """
        self.stream.rewind()
        self.parser.reset()

    def close(self) -> None:
        self.stream.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def stream_nodes(
    file: Union[str, os.PathLike, BinaryIO],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    **options
) -> Iterator[bytes]:
    """Convenience generator yielding every node of a file."""
    with XMLStringStreamer.create_string_walker_parser(file, options, chunk_size) as streamer:
        yield from streamer
