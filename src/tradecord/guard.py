"""Single-instance guard based on binding a loopback port."""

from __future__ import annotations

import logging
import socket

from tradecord.errors import AnotherInstanceRunning

logger = logging.getLogger(__name__)


class SocketInstanceGuard:
    """``ISingleInstanceGuard`` that holds a bound TCP socket for the process lifetime.

    A second process binding the same port fails, which is taken as proof that
    another engine already owns the store.
    """

    def __init__(self, port: int, host: str = "127.0.0.1") -> None:
        self._address = (host, port)
        self._socket: socket.socket | None = None

    def acquire(self) -> None:
        if self._socket is not None:
            return
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind(self._address)
            sock.listen(1)
        except OSError as exc:
            sock.close()
            raise AnotherInstanceRunning(
                f"another instance already holds {self._address[0]}:{self._address[1]}"
            ) from exc
        self._socket = sock
        logger.debug("instance guard bound to %s:%s", *self._address)

    def release(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def __enter__(self) -> SocketInstanceGuard:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
