# src/beanstalk_core/network.py
"""
Beanstalk 核心库 - 网络模块 (Network)

封装 TCP Socket 的创建、发送和接收逻辑。
该模块屏蔽了底层 Socket 的复杂性，向协议引擎提供纯粹的行/字节读写接口。

协议引擎只依赖 Connection 能力 (is_active/write/readline/read)，
从不自行打开 Socket。SocketConnection 是默认实现，调用者也可以注入自己的实现。
"""

import logging
import socket
from typing import BinaryIO, Optional, Protocol

from .exceptions import NetworkError

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """协议引擎消费的连接能力。

    实现必须保证:
    - write 失败时抛出异常 (推荐 NetworkError)。
    - readline 返回去掉结尾 CRLF 的一行文本；EOF 时抛出异常。
    - read(n) 恰好返回 n 字节；读取不足时抛出异常。
    """

    def is_active(self) -> bool: ...

    def write(self, data: bytes) -> None: ...

    def readline(self) -> str: ...

    def read(self, n: int) -> bytes: ...


class SocketConnection:
    """
    基于阻塞式 TCP Socket 的连接实现。

    一个实例同一时刻只允许一个在途命令；多线程并发请为每个线程创建独立连接。
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 11300,
        connect_timeout: float = 5.0,
        read_timeout: Optional[float] = None,
    ):
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.sock: Optional[socket.socket] = None
        self._reader: Optional[BinaryIO] = None

    def connect(self) -> None:
        """
        建立 TCP 连接。
        """
        if self.sock is not None:
            return

        address = (self.host, self.port)
        try:
            sock = socket.create_connection(address, timeout=self.connect_timeout)
        except OSError as e:
            raise NetworkError(f"连接失败 {address}: {e}") from e

        # 连接建立后切换为读超时 (None 表示阻塞，reserve 可能长时间等待)
        sock.settimeout(self.read_timeout)
        self.sock = sock
        self._reader = sock.makefile("rb")
        logger.debug(f"TCP 连接已建立: {address}")

    def is_active(self) -> bool:
        return self.sock is not None

    def write(self, data: bytes) -> None:
        """
        发送完整的请求字节。
        """
        if self.sock is None:
            raise NetworkError("连接未建立")

        try:
            self.sock.sendall(data)
        except socket.timeout:
            raise NetworkError(f"发送超时 ({self.read_timeout}s)") from None
        except OSError as e:
            raise NetworkError(f"发送失败: {e}") from e

    def readline(self) -> str:
        """
        读取一行响应，返回去掉 CRLF 的文本。
        """
        reader = self._require_reader()
        try:
            line = reader.readline()
        except socket.timeout:
            raise NetworkError(f"接收超时 ({self.read_timeout}s)") from None
        except OSError as e:
            raise NetworkError(f"接收错误: {e}") from e

        if not line:
            raise NetworkError("连接已被服务器关闭 (EOF)")

        return line.rstrip(b"\r\n").decode("ascii", errors="replace")

    def read(self, n: int) -> bytes:
        """
        精确读取 n 字节。
        """
        reader = self._require_reader()
        try:
            data = reader.read(n)
        except socket.timeout:
            raise NetworkError(f"接收超时 ({self.read_timeout}s)") from None
        except OSError as e:
            raise NetworkError(f"接收错误: {e}") from e

        if len(data) != n:
            raise NetworkError(f"读取长度不足: 期望 {n} 字节，实际 {len(data)} 字节")

        return data

    def close(self) -> None:
        """关闭连接"""
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        if self.sock is not None:
            self.sock.close()
            self.sock = None
            logger.debug("TCP 连接已关闭")

    def _require_reader(self) -> BinaryIO:
        if self._reader is None:
            raise NetworkError("连接未建立")
        return self._reader

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
