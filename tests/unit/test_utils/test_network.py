"""Tests for local address lookup and URL building."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from qrshare.utils import network
from qrshare.utils.network import build_share_url, get_local_ip


def _probe_socket(ip: str) -> MagicMock:
    sock = MagicMock()
    sock.getsockname.return_value = (ip, 54321)
    return sock


class TestGetLocalIp:
    def test_uses_outbound_interface(self) -> None:
        with patch.object(network.socket, "socket", return_value=_probe_socket("192.168.1.5")):
            assert get_local_ip() == "192.168.1.5"

    def test_falls_back_to_host_addresses(self) -> None:
        with patch.object(network.socket, "socket", return_value=_probe_socket("127.0.0.1")), \
                patch.object(
                    network.socket, "gethostbyname_ex",
                    return_value=("host", [], ["127.0.1.1", "169.254.3.3", "10.0.0.7"]),
                ):
            assert get_local_ip() == "10.0.0.7"

    def test_loopback_when_nothing_found(self) -> None:
        with patch.object(network.socket, "socket", side_effect=OSError("no network")), \
                patch.object(network.socket, "gethostbyname_ex", side_effect=OSError("no dns")):
            assert get_local_ip() == "127.0.0.1"

    def test_probe_socket_is_closed(self) -> None:
        sock = _probe_socket("192.168.1.5")
        with patch.object(network.socket, "socket", return_value=sock):
            get_local_ip()
        sock.close.assert_called_once()


class TestBuildShareUrl:
    def test_plain_name(self) -> None:
        assert build_share_url("10.0.0.2", 3000, "notes.txt") == "http://10.0.0.2:3000/notes.txt"

    def test_name_is_percent_encoded(self) -> None:
        url = build_share_url("10.0.0.2", 3000, "my report #1/2.pdf")
        assert url == "http://10.0.0.2:3000/my%20report%20%231%2F2.pdf"

    def test_https_scheme(self) -> None:
        assert build_share_url("h", 443, "a", scheme="https") == "https://h:443/a"
