"""Test that network access is properly blocked in tests."""

import socket

import pytest
import requests

from tests.support.errors import NetworkIsolationError


class TestNetworkBlocking:
    """Verify that the network blocking fixture works."""

    def test_socket_connect_is_blocked(self) -> None:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            with pytest.raises(NetworkIsolationError) as exc_info:
                sock.connect(("127.0.0.1", 80))
            assert "Tests must not make network connections" in str(exc_info.value)
        finally:
            sock.close()

    def test_requests_fail_without_a_fake(self) -> None:
        with pytest.raises(NetworkIsolationError):
            requests.get("http://127.0.0.1:9/public-profile", timeout=1)
