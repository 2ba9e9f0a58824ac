"""Robust byte I/O on file descriptors and simple socket helpers."""

from __future__ import annotations

import os
import socket
from collections.abc import Iterator

RIO_BUFSIZE = 8192
MAXLINE = 8192
LISTENQ = 1024

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_NUMERICSERV = getattr(socket, "AI_NUMERICSERV", 0)
_ADDRCONFIG = getattr(socket, "AI_ADDRCONFIG", 0)


def read_n(fd: int, n: int) -> bytes:
    """Read up to ``n`` bytes from ``fd``, stopping early only at end of file."""
    chunks: list[bytes] = []
    left = n
    while left > 0:
        chunk = os.read(fd, left)
        if not chunk:
            break
        chunks.append(chunk)
        left -= len(chunk)
    return b"".join(chunks)


def write_n(fd: int, data: bytes) -> int:
    """Write all of ``data`` to ``fd`` and return the number of bytes written."""
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]
    return len(data)


def to_base(value: int, base: int = 10) -> str:
    """Render a non-negative integer in ``base`` using lower-case digits."""
    if not 2 <= base <= len(_DIGITS):
        raise ValueError(f"base must be between 2 and {len(_DIGITS)}, got {base}")
    if value < 0:
        raise ValueError("value must not be negative")
    digits = []
    while True:
        value, rem = divmod(value, base)
        digits.append(_DIGITS[rem])
        if value == 0:
            break
    return "".join(reversed(digits))


class RioReader:
    """Buffered reader over a file descriptor."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._buf = b""
        self._pos = 0

    def _fill(self) -> bool:
        """Refill the internal buffer if empty; return False at end of file."""
        if self._pos < len(self._buf):
            return True
        chunk = os.read(self.fd, RIO_BUFSIZE)
        if not chunk:
            return False
        self._buf, self._pos = chunk, 0
        return True

    def read(self, n: int) -> bytes:
        """Return at most ``n`` bytes from a single buffer fill; empty at EOF."""
        if n <= 0 or not self._fill():
            return b""
        end = min(self._pos + n, len(self._buf))
        data = self._buf[self._pos:end]
        self._pos = end
        return data

    def read_n(self, n: int) -> bytes:
        """Read up to ``n`` bytes, stopping early only at end of file."""
        chunks: list[bytes] = []
        left = n
        while left > 0:
            chunk = self.read(left)
            if not chunk:
                break
            chunks.append(chunk)
            left -= len(chunk)
        return b"".join(chunks)

    def read_line(self, maxlen: int = MAXLINE) -> bytes:
        """Read one line of at most ``maxlen - 1`` bytes, newline included."""
        left = maxlen - 1
        parts: list[bytes] = []
        while left > 0 and self._fill():
            newline = self._buf.find(b"\n", self._pos, self._pos + left)
            end = newline + 1 if newline >= 0 else min(self._pos + left, len(self._buf))
            parts.append(self._buf[self._pos:end])
            left -= end - self._pos
            self._pos = end
            if newline >= 0:
                break
        return b"".join(parts)

    def __iter__(self) -> Iterator[bytes]:
        while True:
            line = self.read_line()
            if not line:
                return
            yield line


def open_client(hostname: str, port: str | int) -> socket.socket:
    """Connect to ``hostname:port`` trying each resolved address in turn."""
    infos = socket.getaddrinfo(
        hostname, str(port), type=socket.SOCK_STREAM, flags=_NUMERICSERV | _ADDRCONFIG
    )
    for family, socktype, proto, _, address in infos:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError:
            continue
        try:
            sock.connect(address)
        except OSError:
            sock.close()
            continue
        return sock
    raise ConnectionError(f"could not connect to {hostname}:{port}")


def open_listener(port: str | int) -> socket.socket:
    """Open a socket listening on ``port`` on any local address."""
    infos = socket.getaddrinfo(
        None,
        str(port),
        type=socket.SOCK_STREAM,
        flags=socket.AI_PASSIVE | _ADDRCONFIG | _NUMERICSERV,
    )
    for family, socktype, proto, _, address in infos:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError:
            continue
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind(address)
        except OSError:
            sock.close()
            continue
        try:
            sock.listen(LISTENQ)
        except OSError:
            sock.close()
            raise
        return sock
    raise OSError(f"could not listen on port {port}")