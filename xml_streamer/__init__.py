"""
XML String Streamer

Incrementally extracts XML nodes from arbitrarily large files and streams
without loading the whole document into memory.
- Streams:  byte sources handing out chunks (file, stdin, HTTP)
- Parser:   string walker tokenizing tags and tracking depth
- Streamer: facade pairing one parser with one stream

Public API surface:
  Facade      : XMLStringStreamer, stream_nodes
  Parsers     : BaseParser, StringWalker
  Streams     : BaseStream, FileStream, StdinStream, HTTPStream, open_stream
  Configuration: ParserOptions, TagRule, TagKind, MarkerPair
  Error types : SourceError, ConfigurationError, UnsupportedOperationError
"""

# --- Facade ---
from .streamer import XMLStringStreamer, stream_nodes

# --- Parsing ---
from .parser import BaseParser, StringWalker
from .schemas import ParserOptions, ParserState
from .tags import TagRule, TagKind, MarkerPair, DEFAULT_TAGS, classify

# --- Byte sources ---
from .streams import BaseStream, FileStream, StdinStream, HTTPStream, open_stream

# --- Optional lxml conversion ---
from .elements import node_to_element

# --- Exceptions ---
from .exceptions import (
    XMLStreamerError,
    SourceError,
    ConfigurationError,
    UnsupportedOperationError,
    NodeParseError,
)

__version__ = "0.1.0"
__all__ = [
    "XMLStringStreamer",
    "stream_nodes",
    "BaseParser",
    "StringWalker",
    "ParserOptions",
    "ParserState",
    "TagRule",
    "TagKind",
    "MarkerPair",
    "DEFAULT_TAGS",
    "classify",
    "BaseStream",
    "FileStream",
    "StdinStream",
    "HTTPStream",
    "open_stream",
    "node_to_element",
    "XMLStreamerError",
    "SourceError",
    "ConfigurationError",
    "UnsupportedOperationError",
    "NodeParseError",
]
