"""
Byte sources the parser pulls chunks from.

Every source implements BaseStream so the parser doesn't need to know where
the bytes come from:
  FileStream : local path or an already open binary handle (seekable if the handle is)
  StdinStream: the process's standard input (never seekable)
  HTTPStream : a network resource streamed with requests (never seekable)

open_stream() picks the right one for a path, URL or "-".
"""

import io
import os
import re
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

import requests

from .exceptions import SourceError, UnsupportedOperationError
from .logger import get_module_logger

logger = get_module_logger("streams")

DEFAULT_CHUNK_SIZE = 16384
STDIN_CHUNK_SIZE = 1024

# Called as chunk_callback(chunk, read_bytes) after every successful pull
ChunkCallback = Callable[[bytes, int], None]

URL_SCHEME_PATTERN = re.compile(r"^([\w.+-]+)://")


class BaseStream(ABC):
    """Abstract byte source handing out chunks on demand."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE,
                 chunk_callback: Optional[ChunkCallback] = None):
        if chunk_size <= 0:
            raise SourceError(
                f"Chunk size must be positive, got {chunk_size}",
                details={"chunk_size": chunk_size}
            )
        self.chunk_size = chunk_size
        self.chunk_callback = chunk_callback
        self.read_bytes = 0

    def _record_chunk(self, chunk: bytes) -> bytes:
        """Update the byte counter and notify the observer."""
        self.read_bytes += len(chunk)
        if self.chunk_callback is not None:
            self.chunk_callback(chunk, self.read_bytes)
        return chunk

    @abstractmethod
    def get_chunk(self) -> Optional[bytes]:
        """
        Get the next chunk from the stream.

        Returns:
            The next chunk, or None once the stream is exhausted. Keeps
            returning None on later calls.
        """
        pass

    @abstractmethod
    def is_seekable(self) -> bool:
        pass

    @abstractmethod
    def rewind(self) -> None:
        """
        Move back to the start of the stream.

        Raises:
            UnsupportedOperationError: if the stream isn't seekable
        """
        pass

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class FileStream(BaseStream):
    """Reads chunks from a file path or an open binary handle."""

    def __init__(
        self,
        source: Union[str, os.PathLike, BinaryIO],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_callback: Optional[ChunkCallback] = None
    ):
        """
        Initialize file stream.

        Args:
            source: Path to a local file (optionally file:// prefixed) or a
                    readable binary handle. Handles are not closed by the stream.
            chunk_size: Bytes per pulled chunk
            chunk_callback: Optional observer called with (chunk, read_bytes)
        """
        super().__init__(chunk_size, chunk_callback)
        self._exhausted = False

        if isinstance(source, (str, os.PathLike)):
            path = os.fspath(source)
            matched = URL_SCHEME_PATTERN.match(path)
            if matched:
                if matched.group(1) != "file":
                    raise SourceError(
                        f"FileStream can't open '{path}', use open_stream() for URLs",
                        details={"source": path}
                    )
                path = path[len(matched.group(0)):]

            if not Path(path).is_file():
                raise SourceError(f"File '{path}' doesn't exist", details={"source": path})

            try:
                self.handle = open(path, "rb")
            except OSError as e:
                raise SourceError(f"Couldn't open '{path}': {e}", details={"source": path}) from e
            self._owns_handle = True
            logger.info(f"Opened file stream: {path}")

        elif hasattr(source, "read"):
            if isinstance(source, io.TextIOBase):
                raise SourceError(
                    "File handle must be opened in binary mode",
                    details={"handle": repr(source)}
                )
            if getattr(source, "closed", False):
                raise SourceError("File handle is closed", details={"handle": repr(source)})
            self.handle = source
            self._owns_handle = False

        else:
            raise SourceError(
                "Source must be either a filename or a binary file handle",
                details={"type": type(source).__name__}
            )

    def get_chunk(self) -> Optional[bytes]:
        if self._exhausted or getattr(self.handle, "closed", False):
            return None

        chunk = self.handle.read(self.chunk_size)
        if not chunk:
            self._exhausted = True
            return None

        return self._record_chunk(chunk)

    def is_seekable(self) -> bool:
        if getattr(self.handle, "closed", False):
            return False
        seekable = getattr(self.handle, "seekable", None)
        return bool(seekable and seekable())

    def rewind(self) -> None:
        if not self.is_seekable():
            raise UnsupportedOperationError(
                "Attempted to rewind an unseekable stream",
                operation="rewind"
            )
        self.handle.seek(0)
        self.read_bytes = 0
        self._exhausted = False

    def close(self) -> None:
        if self._owns_handle and not getattr(self.handle, "closed", False):
            self.handle.close()


class StdinStream(BaseStream):
    """Reads chunks from standard input, through a FileStream over its binary buffer."""

    def __init__(self, chunk_size: int = STDIN_CHUNK_SIZE,
                 chunk_callback: Optional[ChunkCallback] = None):
        super().__init__(chunk_size, chunk_callback)
        handle = getattr(sys.stdin, "buffer", sys.stdin)
        # No observer on the inner stream; chunks are recorded on this object
        self._file = FileStream(handle, chunk_size=chunk_size)

    def get_chunk(self) -> Optional[bytes]:
        chunk = self._file.get_chunk()
        if chunk is None:
            return None
        return self._record_chunk(chunk)

    def is_seekable(self) -> bool:
        return False

    def rewind(self) -> None:
        raise UnsupportedOperationError(
            "Attempted to rewind standard input",
            operation="rewind"
        )


class HTTPStream(BaseStream):
    """Streams a network resource chunk by chunk."""

    def __init__(
        self,
        url: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_callback: Optional[ChunkCallback] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize HTTP stream and start the request.

        Args:
            url: http:// or https:// URL
            chunk_size: Bytes per pulled chunk
            chunk_callback: Optional observer called with (chunk, read_bytes)
            timeout: Connect/read timeout in seconds
            session: Optional requests session (connection pooling, custom headers)

        Raises:
            SourceError: if the request fails or returns an HTTP error status
        """
        super().__init__(chunk_size, chunk_callback)
        self.url = url
        self._owns_session = session is None
        self.session = session or requests.Session()
        self._exhausted = False
        self.response = None

        try:
            self.response = self.session.get(
                url,
                stream=True,
                timeout=timeout,
                headers={"Accept": "application/xml, text/xml, */*"}
            )
            self.response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self.close()
            raise SourceError(f"Couldn't open '{url}': {e}", details={"url": url}) from e

        self._chunks = self.response.iter_content(chunk_size=chunk_size)
        logger.info(f"Opened HTTP stream: {url}")

    def get_chunk(self) -> Optional[bytes]:
        if self._exhausted:
            return None

        for chunk in self._chunks:
            # Skip keep-alive chunks
            if chunk:
                return self._record_chunk(chunk)

        self._exhausted = True
        self.response.close()
        return None

    def is_seekable(self) -> bool:
        return False

    def rewind(self) -> None:
        raise UnsupportedOperationError(
            "Attempted to rewind an HTTP stream",
            operation="rewind",
            details={"url": self.url}
        )

    def close(self) -> None:
        if self.response is not None:
            self.response.close()
        if self._owns_session:
            self.session.close()


def open_stream(
    target: Union[str, os.PathLike, BinaryIO],
    chunk_size: Optional[int] = None,
    chunk_callback: Optional[ChunkCallback] = None
) -> BaseStream:
    """
    Open the right stream for a path, URL, handle or "-" (stdin).

    Args:
        target: File path, http(s) URL, binary handle or "-"
        chunk_size: Bytes per chunk; defaults depend on the stream type
        chunk_callback: Optional observer called with (chunk, read_bytes)

    Returns:
        A ready to use stream
    """
    if isinstance(target, str):
        if target == "-":
            return StdinStream(chunk_size or STDIN_CHUNK_SIZE, chunk_callback)
        if target.startswith(("http://", "https://")):
            return HTTPStream(target, chunk_size or DEFAULT_CHUNK_SIZE, chunk_callback)

    return FileStream(target, chunk_size or DEFAULT_CHUNK_SIZE, chunk_callback)
