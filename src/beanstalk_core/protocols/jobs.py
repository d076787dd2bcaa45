# src/beanstalk_core/protocols/jobs.py
"""
Beanstalk 任务命令 (Job Commands)

负责 put / reserve / delete / release / bury / touch / kick / peek 系列命令的
请求构建与响应解析。本模块不包含任何 socket 操作。
"""

from typing import Any, Optional

from ..encoders import Encoder, bytes_to_payload, payload_to_bytes
from ..exceptions import ClientError, CommandError
from ..models import Job, ReserveTimeout
from .base import (
    BaseCommand,
    validate_job_id,
    validate_non_negative,
    validate_priority,
)
from .constants import CRLF, CommandName, Defaults, Limits, Response


class JobCommand(BaseCommand):
    """作用于单个任务 ID 的命令基类。"""

    def __init__(self, job_id: int) -> None:
        super().__init__()
        self.job_id = validate_job_id(job_id)

    def arguments(self) -> list[Any]:
        return [self.job_id]

    def not_found(self, header: list[str]) -> CommandError:
        return CommandError(
            f"任务 {self.job_id} 不存在或不属于当前连接",
            status=header[0],
            request=self.command_line(),
            job_id=self.job_id,
        )

    def expect(self, header: list[str], *accepted: str) -> str:
        """状态属于 accepted 时返回状态字；NOT_FOUND 与其他状态抛出 CommandError。"""
        status = header[0]
        if status in accepted:
            return status
        if status == Response.NOT_FOUND:
            raise self.not_found(header)
        raise self.unexpected(header)


def _parse_job_body(
    cmd: BaseCommand, header: list[str], body: Optional[bytes], encoder
) -> Job:
    """解析 `RESERVED <id> <bytes>` / `FOUND <id> <bytes>` 响应。"""
    job_id = cmd.require_int(header, 1, "任务 ID")
    if body is None:
        raise ClientError(
            f"响应缺少任务数据体 [{' '.join(header)}]", request=cmd.command_line()
        )
    try:
        payload = bytes_to_payload(body, encoder)
    except ClientError as e:
        # 任务仍被当前连接持有，带上 ID 以便调用者埋葬或删除
        raise ClientError(
            f"任务 {job_id} 的数据体无法解码: {e}",
            request=cmd.command_line(),
            job_id=job_id,
        ) from e
    return Job(id=job_id, payload=payload, status=header[0])


def _parse_peek(
    cmd: BaseCommand, header: list[str], body: Optional[bytes], encoder
) -> Optional[Job]:
    """peek 系列: FOUND 返回任务，NOT_FOUND 是正常结果 (返回 None)。"""
    if header[0] == Response.NOT_FOUND:
        return None
    if header[0] != Response.FOUND:
        raise cmd.unexpected(header)
    return _parse_job_body(cmd, header, body, encoder)


# =========================================================================
# Put
# =========================================================================


class Put(BaseCommand):
    """`put <pri> <delay> <ttr> <bytes>\\r\\n<data>\\r\\n`"""

    name = CommandName.PUT

    def __init__(
        self,
        payload: Any,
        priority: Any = Defaults.PRIORITY,
        delay: int = Defaults.DELAY,
        ttr: int = Defaults.TTR,
        encoder: Optional[Encoder] = None,
    ) -> None:
        """构造 put 命令并完成全部校验。

        Args:
            payload: 任务数据。
            priority: 优先级，[0, 2^32-1]，数值越小越优先。
            delay: 延迟就绪的秒数 (>= 0)。
            ttr: 任务被保留后允许运行的秒数 (> 0)。
            encoder: 可选的 payload 编码器。

        Raises:
            ClientError: 参数越界、payload 类型不受支持或序列化后超过 65536 字节。
        """
        super().__init__()
        self.priority = validate_priority(priority)
        self.delay = validate_non_negative(delay, "任务延迟")
        if isinstance(ttr, bool) or not isinstance(ttr, int) or ttr <= 0:
            raise ClientError(f"任务 ttr 必须大于 0，实际为 {ttr!r}")
        self.ttr = ttr
        self.payload = payload

        self.body = payload_to_bytes(payload, encoder)
        if not isinstance(self.body, bytes):
            raise ClientError(
                f"编码器必须返回 bytes，实际为 {type(self.body).__name__}"
            )
        if len(self.body) > Limits.MAX_PAYLOAD_SIZE:
            raise ClientError(
                f"任务序列化后的 payload 超过上限: {len(self.body)} > {Limits.MAX_PAYLOAD_SIZE}"
            )

    def arguments(self) -> list[Any]:
        return [self.priority, self.delay, self.ttr, len(self.body)]

    def render_request(self) -> bytes:
        return self.command_line().encode("ascii") + CRLF + self.body + CRLF

    def parse_response(self, header: list[str], body: Optional[bytes]) -> Job:
        status = header[0]
        if status == Response.JOB_TOO_BIG:
            raise CommandError(
                "任务 payload 超过服务器 max-job-size 配置",
                status=status,
                request=self.command_line(),
            )
        if status == Response.EXPECTED_CRLF:
            raise CommandError(
                "服务器未在任务数据后读到 CRLF",
                status=status,
                request=self.command_line(),
            )
        if status not in (Response.INSERTED, Response.BURIED):
            raise self.unexpected(header)

        job_id = self.require_int(header, 1, "任务 ID")
        if status == Response.BURIED:
            self.logger.warning(f"任务 {job_id} 因服务器内存不足被直接埋葬 (BURIED)")
        return Job(id=job_id, payload=self.payload, status=status)


# =========================================================================
# Reserve
# =========================================================================


class Reserve(BaseCommand):
    """`reserve` 或 `reserve-with-timeout <seconds>`"""

    def __init__(
        self, timeout: Optional[int] = None, encoder: Optional[Encoder] = None
    ) -> None:
        super().__init__()
        if timeout is not None:
            timeout = validate_non_negative(timeout, "reserve 超时")
        self.timeout = timeout
        self.encoder = encoder
        self.name = (
            CommandName.RESERVE if timeout is None else CommandName.RESERVE_WITH_TIMEOUT
        )

    def arguments(self) -> list[Any]:
        return [] if self.timeout is None else [self.timeout]

    def parse_response(
        self, header: list[str], body: Optional[bytes]
    ) -> Job | ReserveTimeout:
        status = header[0]
        if status == Response.RESERVED:
            return _parse_job_body(self, header, body, self.encoder)
        if status in (Response.DEADLINE_SOON, Response.TIMED_OUT):
            return ReserveTimeout(status=status)
        raise self.unexpected(header)


class ReserveJob(JobCommand):
    """`reserve-job <id>`"""

    name = CommandName.RESERVE_JOB

    def __init__(self, job_id: int, encoder: Optional[Encoder] = None) -> None:
        super().__init__(job_id)
        self.encoder = encoder

    def parse_response(self, header: list[str], body: Optional[bytes]) -> Job:
        self.expect(header, Response.RESERVED)
        return _parse_job_body(self, header, body, self.encoder)


# =========================================================================
# Delete / Release / Bury / Touch
# =========================================================================


class Delete(JobCommand):
    """`delete <id>`"""

    name = CommandName.DELETE

    def parse_response(self, header: list[str], body: Optional[bytes]) -> bool:
        self.expect(header, Response.DELETED)
        return True


class Release(JobCommand):
    """`release <id> <pri> <delay>`"""

    name = CommandName.RELEASE

    def __init__(
        self,
        job_id: int,
        priority: Any = Defaults.PRIORITY,
        delay: int = Defaults.DELAY,
    ) -> None:
        super().__init__(job_id)
        self.priority = validate_priority(priority)
        self.delay = validate_non_negative(delay, "任务延迟")

    def arguments(self) -> list[Any]:
        return [self.job_id, self.priority, self.delay]

    def parse_response(self, header: list[str], body: Optional[bytes]) -> str:
        """Returns: RELEASED 或 BURIED (服务器内存不足时直接埋葬)。"""
        return self.expect(header, Response.RELEASED, Response.BURIED)


class Bury(JobCommand):
    """`bury <id> <pri>`"""

    name = CommandName.BURY

    def __init__(self, job_id: int, priority: Any = Defaults.PRIORITY) -> None:
        super().__init__(job_id)
        self.priority = validate_priority(priority)

    def arguments(self) -> list[Any]:
        return [self.job_id, self.priority]

    def parse_response(self, header: list[str], body: Optional[bytes]) -> bool:
        self.expect(header, Response.BURIED)
        return True


class Touch(JobCommand):
    """`touch <id>`"""

    name = CommandName.TOUCH

    def parse_response(self, header: list[str], body: Optional[bytes]) -> bool:
        self.expect(header, Response.TOUCHED)
        return True


# =========================================================================
# Kick
# =========================================================================


class Kick(BaseCommand):
    """`kick <bound>`，返回实际被踢回 ready 队列的任务数。"""

    name = CommandName.KICK

    def __init__(self, bound: int) -> None:
        super().__init__()
        self.bound = validate_non_negative(bound, "kick 数量")

    def arguments(self) -> list[Any]:
        return [self.bound]

    def parse_response(self, header: list[str], body: Optional[bytes]) -> int:
        if header[0] != Response.KICKED:
            raise self.unexpected(header)
        return self.require_int(header, 1, "kick 数量")


class KickJob(JobCommand):
    """`kick-job <id>`"""

    name = CommandName.KICK_JOB

    def parse_response(self, header: list[str], body: Optional[bytes]) -> bool:
        self.expect(header, Response.KICKED)
        return True


# =========================================================================
# Peek
# =========================================================================


class Peek(JobCommand):
    """`peek <id>`，任务不存在时返回 None。"""

    name = CommandName.PEEK

    def __init__(self, job_id: int, encoder: Optional[Encoder] = None) -> None:
        super().__init__(job_id)
        self.encoder = encoder

    def parse_response(self, header: list[str], body: Optional[bytes]) -> Optional[Job]:
        return _parse_peek(self, header, body, self.encoder)


class PeekFirst(BaseCommand):
    """查看当前使用的 tube 中某一状态的首个任务，不存在时返回 None。"""

    def __init__(self, encoder: Optional[Encoder] = None) -> None:
        super().__init__()
        self.encoder = encoder

    def parse_response(self, header: list[str], body: Optional[bytes]) -> Optional[Job]:
        return _parse_peek(self, header, body, self.encoder)


class PeekReady(PeekFirst):
    name = CommandName.PEEK_READY


class PeekDelayed(PeekFirst):
    name = CommandName.PEEK_DELAYED


class PeekBuried(PeekFirst):
    name = CommandName.PEEK_BURIED
