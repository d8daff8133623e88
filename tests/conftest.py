# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import socket
import threading
import time

import httpx
import pytest

from streamprobe.config import ProbeSettings
from streamprobe.http.adapters import StubHttpClient
from streamprobe.http.httpx_client import HttpxClient


@pytest.fixture
def settings():
    return ProbeSettings(timeout=2.0, segment_timeout=1.0, workers=4)


@pytest.fixture
def mock_client(settings):
    """Build an HttpxClient whose transport is a request handler."""
    created = []

    def _build(handler):
        client = HttpxClient(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))
        created.append(client)
        return client

    yield _build
    for client in created:
        client.close()


@pytest.fixture
def stub_factory():
    """Client factory handing every worker its own StubHttpClient over shared responses."""

    class Factory:
        def __init__(self):
            self.responses = {}
            self.clients = []

        def __call__(self, settings):  # noqa: ARG002
            client = StubHttpClient(self.responses)
            self.clients.append(client)
            return client

    return Factory()


@pytest.fixture
def silent_server():
    """A TCP server that accepts connections and never answers."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(64)
    server.settimeout(0.1)
    stop = threading.Event()
    held = []

    def _accept():
        while not stop.is_set():
            try:
                conn, _ = server.accept()
            except OSError:
                continue
            held.append(conn)

    thread = threading.Thread(target=_accept, daemon=True)
    thread.start()
    host, port = server.getsockname()
    yield f"http://{host}:{port}"
    stop.set()
    thread.join(timeout=1)
    for conn in held:
        conn.close()
    server.close()


@pytest.fixture
def trickle_server():
    """Start local HTTP servers that send a prefix at once, then the remaining pieces one by one."""
    stop = threading.Event()
    sockets = []
    threads = []

    def _serve(conn, prefix, pieces, interval):
        try:
            conn.recv(65536)
            conn.sendall(prefix)
            for piece in pieces:
                if stop.wait(interval):
                    return
                conn.sendall(piece)
        except OSError:
            return
        finally:
            conn.close()

    def _accept(server, prefix, pieces, interval):
        while not stop.is_set():
            try:
                conn, _ = server.accept()
            except OSError:
                continue
            handler = threading.Thread(target=_serve, args=(conn, prefix, pieces, interval), daemon=True)
            handler.start()
            threads.append(handler)

    def _start(prefix: bytes, pieces: list[bytes], interval: float) -> str:
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.bind(("127.0.0.1", 0))
        server.listen(16)
        server.settimeout(0.1)
        sockets.append(server)
        acceptor = threading.Thread(target=_accept, args=(server, prefix, pieces, interval), daemon=True)
        acceptor.start()
        threads.append(acceptor)
        host, port = server.getsockname()
        return f"http://{host}:{port}/live"

    yield _start
    stop.set()
    deadline = time.monotonic() + 2
    for thread in threads:
        thread.join(timeout=max(0.0, deadline - time.monotonic()))
    for server in sockets:
        server.close()
