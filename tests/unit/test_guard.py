"""Tests for the loopback single-instance guard."""

from __future__ import annotations

import socket

import pytest

from tradecord.errors import AnotherInstanceRunning
from tradecord.guard import SocketInstanceGuard


@pytest.fixture
def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def test_second_guard_on_the_same_port_is_refused(free_port):
    with SocketInstanceGuard(free_port):
        with pytest.raises(AnotherInstanceRunning, match=str(free_port)):
            SocketInstanceGuard(free_port).acquire()


def test_release_frees_the_port(free_port):
    first = SocketInstanceGuard(free_port)
    first.acquire()
    first.acquire()
    first.release()
    with SocketInstanceGuard(free_port):
        pass
