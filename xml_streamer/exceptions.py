"""
Custom exceptions for the XML string streamer.

Error philosophy:
  - SourceError               → FAIL HARD at construction: no usable stream object.
  - ConfigurationError        → FAIL HARD on the offending call (bad options,
                                container requested without extract_container).
  - UnsupportedOperationError → FAIL HARD on the offending call (rewinding a pipe).
  - NodeParseError            → only from strict node-to-element conversion.

Malformed or truncated XML is NOT an error: the parser simply yields fewer
nodes and eventually reports exhaustion.
"""

from typing import Optional


class XMLStreamerError(Exception):
    """Base exception for all XML string streamer errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SourceError(XMLStreamerError):
    """Raised when a byte source cannot be constructed (missing file, bad handle, failed request)."""
    pass


class ConfigurationError(XMLStreamerError):
    """Raised when parser options are invalid or an operation needs an option that is off."""
    pass


class UnsupportedOperationError(XMLStreamerError):
    """Raised when an operation is not supported by the stream, e.g. rewinding stdin."""

    def __init__(
        self,
        message: str,
        operation: str,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.operation = operation


class NodeParseError(XMLStreamerError):
    """Raised when an extracted node cannot be turned into an element in strict mode."""

    def __init__(
        self,
        message: str,
        node: bytes,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        # Keep the offending bytes so callers can log or skip them
        self.node = node
