# File: src/beanstalk_core/core.py
"""
Beanstalk 核心引擎 (Core Engine)

职责：
1. 资源组装：Connection + Encoder。
2. 命令分发：渲染请求 -> 写入 -> 读状态行 -> 分类 -> 读数据体 -> 校验 CRLF -> 解析。
3. 门面方法：每个协议操作一个方法，仅负责构造对应的命令对象。

同一个连接上同一时刻只能有一个在途命令 (协议没有请求 ID)。
需要并发时，请为每个线程/Worker 分别创建 Connection 与 BeansClient。
"""

import logging
from typing import Any, Optional

from .config import BeansConfig
from .encoders import Encoder, get_encoder
from .exceptions import ClientError, NetworkError, ServerError
from .models import Job, ReserveTimeout
from .network import Connection, SocketConnection
from .protocols import (
    BaseCommand,
    Bury,
    Delete,
    IgnoreTube,
    Kick,
    KickJob,
    ListTubes,
    ListTubesWatched,
    ListTubeUsed,
    PauseTube,
    Peek,
    PeekBuried,
    PeekDelayed,
    PeekReady,
    Put,
    Release,
    Reserve,
    ReserveJob,
    Stats,
    StatsJob,
    StatsTube,
    Touch,
    UseTube,
    WatchTube,
)
from .protocols.constants import (
    CRLF,
    CRLF_LEN,
    DATA_RESPONSES,
    ERROR_RESPONSES,
    Defaults,
)
from .utils import escape_crlf

logger = logging.getLogger(__name__)


class BeansClient:
    """Beanstalk 协议客户端 (同步)。"""

    def __init__(
        self,
        connection: Connection,
        encoder: Optional[Encoder] = None,
    ) -> None:
        """初始化客户端。

        Args:
            connection: 已建立的连接。客户端不会自行打开 Socket。
            encoder: 可选的 payload 编码器。为 None 时 payload 必须是字符串或数字。

        Raises:
            ClientError: 连接未处于活动状态。
        """
        self.connection = connection
        self.encoder = encoder
        # 仅 from_config 创建的连接由客户端负责关闭
        self._owned_connection: Optional[SocketConnection] = None

    @property
    def connection(self) -> Connection:
        return self._connection

    @connection.setter
    def connection(self, connection: Connection) -> None:
        if not connection.is_active():
            raise ClientError("Given connection is not active")
        self._connection = connection

    @property
    def encoder(self) -> Optional[Encoder]:
        return self._encoder

    @encoder.setter
    def encoder(self, encoder: Optional[Encoder]) -> None:
        self._encoder = encoder

    @classmethod
    def from_config(cls, config: BeansConfig) -> "BeansClient":
        """根据配置建立连接，并执行 use / watch 初始化。

        Args:
            config: 全局配置对象。

        Returns:
            BeansClient: 持有连接所有权的客户端，使用完毕请调用 close()。

        Raises:
            NetworkError: 建连失败。
            ConfigError: 编码器名称无效。
        """
        connection = SocketConnection(
            host=config.host,
            port=config.port,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )
        connection.connect()

        try:
            client = cls(connection, get_encoder(config.encoder))
            client._owned_connection = connection

            if config.default_tube != Defaults.TUBE:
                client.use_tube(config.default_tube)

            if config.watch:
                for tube in config.watch:
                    client.watch_tube(tube)
                if Defaults.TUBE not in config.watch:
                    client.ignore_tube(Defaults.TUBE)
        except Exception:
            connection.close()
            raise

        logger.info(
            f"已连接 {config.host}:{config.port} "
            f"(use={config.default_tube}, watch={list(config.watch) or [Defaults.TUBE]})"
        )
        return client

    def close(self) -> None:
        """关闭由客户端创建的连接；外部注入的连接由调用者自行管理。"""
        if self._owned_connection is not None:
            self._owned_connection.close()
            self._owned_connection = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # =====================================================================
    # 分发器
    # =====================================================================

    def dispatch(self, cmd: BaseCommand) -> Any:
        """发送一条命令并解析其响应。

        Args:
            cmd: 已完成参数校验的命令对象。

        Returns:
            Any: 命令特定的结果。

        Raises:
            ClientError: 写入/读取失败或响应帧格式错误 (连接已不可用)。
            ServerError: 服务器返回全局错误状态。
            CommandError: 服务器返回该命令定义内的否定结果。
        """
        request = cmd.command_line()

        # 1. 发送请求
        payload = cmd.render_request()
        try:
            self._connection.write(payload)
        except ClientError:
            raise
        except Exception as e:
            raise NetworkError(f"发送失败: {e}", request=request) from e

        # 2. 读取状态行
        try:
            line = self._connection.readline()
        except ClientError:
            raise
        except Exception as e:
            raise NetworkError(f"接收失败: {e}", request=request) from e

        header = line.split(" ")
        status = header[0]
        if not status:
            raise ClientError(f"响应状态行为空，请求: {request}", request=request)

        logger.debug(f"dispatch: {request} -> {line}")

        # 3. 全局错误
        if status in ERROR_RESPONSES:
            raise ServerError(status, request=request)

        # 4. 携带数据体的响应
        body: Optional[bytes] = None
        if status in DATA_RESPONSES:
            body = self._read_body(header, request)

        # 5. 交给命令解析
        return cmd.parse_response(header, body)

    def _read_body(self, header: list[str], request: str) -> bytes:
        """按状态行末尾声明的长度读取数据体，并校验结尾 CRLF。"""
        if len(header) < 2:
            raise ClientError(
                f"响应缺少数据长度，请求: {request} [{' '.join(header)}]",
                request=request,
            )

        try:
            length = int(header[-1])
        except ValueError:
            length = -1
        if length < 0:
            raise ClientError(
                f"响应中的数据长度无效，请求: {request} [{' '.join(header)}]",
                request=request,
            )

        try:
            data = self._connection.read(length)
            crlf = self._connection.read(CRLF_LEN)
        except ClientError:
            raise
        except Exception as e:
            raise NetworkError(f"接收数据体失败: {e}", request=request) from e

        if crlf != CRLF:
            raise ClientError(
                f"Expected CRLF[{escape_crlf(CRLF)}] after {length} byte(s) of data, "
                f"got {escape_crlf(crlf)}",
                request=request,
            )
        return data

    # =====================================================================
    # 任务命令
    # =====================================================================

    def put(
        self,
        payload: Any,
        priority: Any = Defaults.PRIORITY,
        delay: int = Defaults.DELAY,
        ttr: int = Defaults.TTR,
    ) -> Job:
        """向当前使用的 tube 投递任务。

        Returns:
            Job: id 为服务器分配的任务 ID，status 为 INSERTED 或 BURIED。
        """
        return self.dispatch(Put(payload, priority, delay, ttr, self._encoder))

    def reserve(self, timeout: Optional[int] = None) -> Job | ReserveTimeout:
        """从关注的 tube 中保留一个任务。

        Args:
            timeout: 等待秒数；None 表示一直阻塞。

        Returns:
            Job | ReserveTimeout: 保留到的任务，或 DEADLINE_SOON / TIMED_OUT。
        """
        return self.dispatch(Reserve(timeout, self._encoder))

    def reserve_job(self, job_id: int) -> Job:
        return self.dispatch(ReserveJob(job_id, self._encoder))

    def delete(self, job_id: int) -> bool:
        return self.dispatch(Delete(job_id))

    def release(
        self,
        job_id: int,
        priority: Any = Defaults.PRIORITY,
        delay: int = Defaults.DELAY,
    ) -> str:
        """Returns: RELEASED 或 BURIED。"""
        return self.dispatch(Release(job_id, priority, delay))

    def bury(self, job_id: int, priority: Any = Defaults.PRIORITY) -> bool:
        return self.dispatch(Bury(job_id, priority))

    def touch(self, job_id: int) -> bool:
        return self.dispatch(Touch(job_id))

    def kick(self, count: int) -> int:
        """Returns: 实际被踢回 ready 队列的任务数。"""
        return self.dispatch(Kick(count))

    def kick_job(self, job_id: int) -> bool:
        return self.dispatch(KickJob(job_id))

    def peek(self, job_id: int) -> Optional[Job]:
        return self.dispatch(Peek(job_id, self._encoder))

    def peek_ready(self) -> Optional[Job]:
        return self.dispatch(PeekReady(self._encoder))

    def peek_delayed(self) -> Optional[Job]:
        return self.dispatch(PeekDelayed(self._encoder))

    def peek_buried(self) -> Optional[Job]:
        return self.dispatch(PeekBuried(self._encoder))

    # =====================================================================
    # 统计命令
    # =====================================================================

    def stats(self) -> dict[str, int | str]:
        return self.dispatch(Stats())

    def stats_job(self, job_id: int) -> Optional[dict[str, int | str]]:
        """Returns: 任务统计；任务不存在时为 None。"""
        return self.dispatch(StatsJob(job_id))

    def stats_tube(self, tube: str) -> Optional[dict[str, int | str]]:
        """Returns: tube 统计；tube 不存在时为 None。"""
        return self.dispatch(StatsTube(tube))

    # =====================================================================
    # tube 命令
    # =====================================================================

    def use_tube(self, tube: str) -> str:
        """切换 put 使用的 tube。

        Raises:
            CommandError: 服务器确认的 tube 与请求不一致。
        """
        return self.dispatch(UseTube(tube))

    def watch_tube(self, tube: str) -> int:
        """Returns: 当前关注的 tube 数量。"""
        return self.dispatch(WatchTube(tube))

    def ignore_tube(self, tube: str) -> int:
        """Returns: 剩余关注的 tube 数量。

        Raises:
            CommandError: 试图取消关注最后一个 tube (NOT_IGNORED)。
        """
        return self.dispatch(IgnoreTube(tube))

    def list_tube_used(self) -> str:
        return self.dispatch(ListTubeUsed())

    def list_tubes(self) -> list[str]:
        return self.dispatch(ListTubes())

    def list_tubes_watched(self) -> list[str]:
        return self.dispatch(ListTubesWatched())

    def pause_tube(self, tube: str, delay: int) -> bool:
        return self.dispatch(PauseTube(tube, delay))
