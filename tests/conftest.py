# tests/conftest.py
import sys
from pathlib import Path

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from beanstalk_core.core import BeansClient
from beanstalk_core.exceptions import NetworkError


class FakeConnection:
    """
    内存中的连接替身。

    每次 write 时取出下一段预设的响应字节；
    如果上一段响应还没有被完整读完就发生了新的 write，则视为帧失步并直接失败。
    """

    def __init__(self, *responses: bytes, active: bool = True):
        self.responses = list(responses)
        self.writes: list[bytes] = []
        self.active = active
        self._buffer = b""

    def queue(self, *responses: bytes) -> None:
        self.responses.extend(responses)

    def is_active(self) -> bool:
        return self.active

    def write(self, data: bytes) -> None:
        assert self._buffer == b"", f"上一条响应未读完: {self._buffer!r}"
        self.writes.append(data)
        if self.responses:
            self._buffer = self.responses.pop(0)

    def readline(self) -> str:
        idx = self._buffer.find(b"\r\n")
        if idx < 0:
            raise NetworkError("连接已被服务器关闭 (EOF)")
        line, self._buffer = self._buffer[:idx], self._buffer[idx + 2 :]
        return line.decode("ascii")

    def read(self, n: int) -> bytes:
        if len(self._buffer) < n:
            raise NetworkError(f"读取长度不足: 期望 {n} 字节")
        data, self._buffer = self._buffer[:n], self._buffer[n:]
        return data

    @property
    def unread(self) -> bytes:
        return self._buffer


@pytest.fixture
def conn():
    """[Fixture] 空的内存连接，测试中用 conn.queue(...) 预设响应。"""
    return FakeConnection()


@pytest.fixture
def client(conn):
    """[Fixture] 未启用编码器的客户端。"""
    return BeansClient(conn)
