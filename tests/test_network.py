# tests/test_network.py
import io
import socket
from unittest.mock import MagicMock, patch

import pytest

from beanstalk_core.network import NetworkError, SocketConnection


def _connected(data: bytes = b""):
    """返回一个已连接的 SocketConnection，读取端为内存缓冲。"""
    with patch("socket.create_connection") as mock_create:
        mock_sock = MagicMock()
        mock_sock.makefile.return_value = io.BufferedReader(io.BytesIO(data))
        mock_create.return_value = mock_sock

        conn = SocketConnection("127.0.0.1", 11300, connect_timeout=1.0, read_timeout=2.0)
        conn.connect()

        mock_create.assert_called_with(("127.0.0.1", 11300), timeout=1.0)
        mock_sock.settimeout.assert_called_with(2.0)
    return conn, mock_sock


def test_connect_failure():
    with patch("socket.create_connection", side_effect=ConnectionRefusedError("refused")):
        conn = SocketConnection()
        with pytest.raises(NetworkError, match="连接失败"):
            conn.connect()
        assert not conn.is_active()


def test_write_sends_all():
    conn, sock = _connected()
    assert conn.is_active()

    conn.write(b"stats\r\n")
    sock.sendall.assert_called_with(b"stats\r\n")


def test_write_error():
    conn, sock = _connected()
    sock.sendall.side_effect = OSError("Mock Error")

    with pytest.raises(NetworkError, match="发送失败"):
        conn.write(b"data")


def test_write_not_connected():
    with pytest.raises(NetworkError, match="未建立"):
        SocketConnection().write(b"data")


def test_readline_and_read():
    conn, _ = _connected(b"RESERVED 1 5\r\nhello\r\n")

    assert conn.readline() == "RESERVED 1 5"
    assert conn.read(5) == b"hello"
    assert conn.read(2) == b"\r\n"


def test_readline_eof():
    conn, _ = _connected(b"")
    with pytest.raises(NetworkError, match="EOF"):
        conn.readline()


def test_short_read():
    conn, _ = _connected(b"abc")
    with pytest.raises(NetworkError, match="读取长度不足"):
        conn.read(10)


def test_receive_timeout():
    conn, _ = _connected()
    conn._reader = MagicMock()
    conn._reader.readline.side_effect = socket.timeout

    with pytest.raises(NetworkError, match="超时"):
        conn.readline()


def test_close():
    conn, sock = _connected()
    conn.close()

    sock.close.assert_called_once()
    assert not conn.is_active()
    # 重复关闭无副作用
    conn.close()
