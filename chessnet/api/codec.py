"""
Message codec: JSON records written back-to-back on a stream socket.

There is no length prefix and no separator. A record ends where its own syntax closes it: the bracket that
balances the opening one (or the closing quote of a bare string). Decoding reads exactly one record per call and keeps
whatever followed it in the buffer for the next call.

Anything that goes wrong here is fatal for the session, no attempt is made to resynchronize:
* ProtocolError: not JSON, not the expected variant, too large, or the stream closed halfway through a record.
* PeerConnectionError: socket errors, timeouts, and the peer closing the stream in between records.
"""

import logging
import re
import socket
from contextlib import suppress
from types import TracebackType
from typing import Optional, Self, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from chessnet.core.exceptions import PeerConnectionError, ProtocolError

log = logging.getLogger(__name__)

T = TypeVar("T")

RECV_CHUNK_SIZE = 4096
DEFAULT_MAX_RECORD_BYTES = 1 << 20

QUOTE = ord('"')
BACKSLASH = ord("\\")
OPENERS = frozenset(b"{[")
CLOSERS = frozenset(b"}]")
WHITESPACE = b" \t\r\n"
# next byte that can change the scan state, inside and outside of a string
STRING_STOPS = re.compile(rb'["\\]')
STRUCTURE_STOPS = re.compile(rb'["{}\[\]]')


class RecordScanner:
    """
    Finds where the record that starts at buffer[0] ends, across calls.
    ---

    The buffer may only grow between calls: scanning resumes at the first byte not seen yet, so a record that
    arrives in many chunks is scanned once in total. Call reset() when the record is taken off the buffer.

    Brackets inside strings do not count, and neither do escaped quotes.
    Scanning raw bytes is safe for UTF-8 text: multi-byte sequences never contain ASCII bytes.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.position = 0
        self.depth = 0
        self.in_string = False
        self.escaped = False

    def scan(self, buffer: bytes | bytearray) -> Optional[int]:
        """Position right after the record, or None if the record is not complete yet."""
        if self.position == 0 and buffer[0] not in OPENERS and buffer[0] != QUOTE:
            raise ProtocolError(
                f"Record must start with '{{', '[' or '\"', got {bytes(buffer[:1])!r}"
            )

        position = self.position
        size = len(buffer)
        while position < size:
            if self.escaped:
                self.escaped = False
                position += 1
                continue

            stop = (STRING_STOPS if self.in_string else STRUCTURE_STOPS).search(buffer, position)
            if stop is None:
                position = size
                break
            position = stop.start()
            byte = buffer[position]

            if self.in_string:
                if byte == BACKSLASH:
                    self.escaped = True
                else:
                    self.in_string = False
                    if self.depth == 0:
                        return position + 1
            elif byte == QUOTE:
                self.in_string = True
            elif byte in OPENERS:
                self.depth += 1
            else:
                self.depth -= 1
                if self.depth == 0:
                    return position + 1
            position += 1

        self.position = position
        return None


def find_record_end(buffer: bytes | bytearray) -> Optional[int]:
    """One-shot scan of a buffer that starts with a record."""
    return RecordScanner().scan(buffer)


class RecordStream:
    """
    Reads and writes records on one connected socket.

    `timeout` is the default for every operation (None blocks forever). Individual calls may pass their own.
    """

    def __init__(
        self,
        sock: socket.socket,
        timeout: Optional[float] = None,
        max_record_bytes: int = DEFAULT_MAX_RECORD_BYTES,
    ) -> None:
        self._sock = sock
        self._buffer = bytearray()
        self._scanner = RecordScanner()
        self._cancelled = False
        self.timeout = timeout
        self.max_record_bytes = max_record_bytes

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    # --- WRITING ---
    def send(self, record: BaseModel, timeout: Optional[float] = None) -> None:
        """Serialize and send a record in full."""
        data = record.model_dump_json(by_alias=True).encode("utf-8")
        self._set_timeout(timeout)
        try:
            self._sock.sendall(data)
        except TimeoutError as err:
            raise PeerConnectionError(f"Timed out sending a record: {err}") from err
        except OSError as err:
            raise PeerConnectionError(f"Could not send record: {err}") from err
        log.debug("sent %s", data)

    # --- READING ---
    def receive(self, schema: TypeAdapter[T], timeout: Optional[float] = None) -> T:
        """Read exactly one record and validate it against the expected schema."""
        raw = self._read_record(timeout)
        log.debug("received %s", raw)
        try:
            return schema.validate_json(raw)
        except ValidationError as err:
            raise ProtocolError(f"Unexpected record {raw[:200]!r}: {err}") from err

    def _read_record(self, timeout: Optional[float]) -> bytes:
        while True:
            if self._scanner.position == 0:
                self._discard_leading_whitespace()
            if self._buffer:
                end = self._scanner.scan(self._buffer)
                if end is not None:
                    if end > self.max_record_bytes:
                        raise ProtocolError(f"Record of {end} bytes exceeds the limit of {self.max_record_bytes}")
                    record = bytes(self._buffer[:end])
                    del self._buffer[:end]
                    self._scanner.reset()
                    return record
                if len(self._buffer) > self.max_record_bytes:
                    raise ProtocolError(f"Record exceeds the limit of {self.max_record_bytes} bytes")

            chunk = self._recv(timeout)
            if not chunk:
                if self._cancelled:
                    raise PeerConnectionError("Session was cancelled")
                if self._buffer:
                    raise ProtocolError("Stream closed in the middle of a record")
                raise PeerConnectionError("Peer closed the connection")
            self._buffer.extend(chunk)

    def _recv(self, timeout: Optional[float]) -> bytes:
        self._set_timeout(timeout)
        try:
            return self._sock.recv(RECV_CHUNK_SIZE)
        except TimeoutError as err:
            raise PeerConnectionError(f"Timed out waiting for a record: {err}") from err
        except OSError as err:
            if self._cancelled:
                raise PeerConnectionError("Session was cancelled") from err
            raise PeerConnectionError(f"Could not read from peer: {err}") from err

    def _discard_leading_whitespace(self) -> None:
        start = len(self._buffer) - len(self._buffer.lstrip(WHITESPACE))
        if start:
            del self._buffer[:start]

    def _set_timeout(self, timeout: Optional[float]) -> None:
        try:
            self._sock.settimeout(timeout if timeout is not None else self.timeout)
        except OSError as err:
            raise PeerConnectionError(f"Socket is not usable: {err}") from err

    # --- LIFECYCLE ---
    def cancel(self) -> None:
        """
        Unblock a pending read or write from any thread.
        The blocked call (and every later one) raises PeerConnectionError.
        """
        self._cancelled = True
        with suppress(OSError):
            self._sock.shutdown(socket.SHUT_RDWR)

    def close(self) -> None:
        with suppress(OSError):
            self._sock.shutdown(socket.SHUT_RDWR)
        self._sock.close()
