"""
Beanstalk 命令基类 (Base Command)

定义所有命令变体必须实现的抽象接口。
"""

import abc
import logging
import math
import re
from typing import Any, Optional

from ..exceptions import ClientError, CommandError
from .constants import CRLF, Limits

_TUBE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9+/;.$_()][A-Za-z0-9\-+/;.$_()]*$")


class BaseCommand(abc.ABC):
    """命令抽象基类。

    每个协议操作对应一个子类。子类在构造时完成参数校验 (失败即抛 ClientError，
    此时尚未发生任何 I/O)，并负责:
    1. 渲染请求字节 (render_request)。
    2. 解释响应状态与数据体 (parse_response)。

    命令对象不可复用，每次调用都应重新构造。
    """

    name: str = ""

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

    def arguments(self) -> list[Any]:
        """请求行中命令关键字之后的参数。"""
        return []

    def command_line(self) -> str:
        """请求行文本 (不含 CRLF)，同时用于错误诊断。"""
        return " ".join([self.name, *(str(arg) for arg in self.arguments())])

    def render_request(self) -> bytes:
        """渲染完整的请求字节。

        Returns:
            bytes: `<name> [<arg> ...]\\r\\n`。携带数据体的命令需覆盖此方法。
        """
        return self.command_line().encode("ascii") + CRLF

    @abc.abstractmethod
    def parse_response(self, header: list[str], body: Optional[bytes]) -> Any:
        """[Abstract] 解释响应。

        Args:
            header: 按空格切分后的响应状态行，header[0] 为状态字。
            body: 数据体 (仅当状态属于携带数据体的集合时非 None)。

        Returns:
            Any: 命令特定的结果。

        Raises:
            CommandError: 状态是该命令定义内的否定结果，或不被该命令识别。
            ClientError: 响应缺少必须的参数。
        """
        raise NotImplementedError

    # --- 子类共用的辅助方法 ---

    def unexpected(self, header: list[str]) -> CommandError:
        """构造"非预期状态"的命令错误。"""
        status = header[0] if header else None
        return CommandError(
            f"收到非预期的响应状态 [{status}]，请求: {self.command_line()}",
            status=status,
            request=self.command_line(),
        )

    def require_int(self, header: list[str], index: int, what: str) -> int:
        """从状态行中取出第 index 个整数参数。"""
        if len(header) <= index:
            raise ClientError(
                f"响应缺少{what} [{' '.join(header)}]", request=self.command_line()
            )
        try:
            return int(header[index])
        except ValueError:
            raise ClientError(
                f"响应中的{what}不是整数 [{' '.join(header)}]",
                request=self.command_line(),
            ) from None


# =========================================================================
# 参数校验
# =========================================================================


def validate_job_id(job_id: Any) -> int:
    """任务 ID 必须是 [0, 2^64-1] 内的整数。"""
    if isinstance(job_id, bool) or not isinstance(job_id, int) or job_id < 0:
        raise ClientError(f"任务 ID 必须是非负整数，实际为 {job_id!r}")
    if job_id > Limits.MAX_JOB_ID:
        raise ClientError(f"任务 ID 超出 64 位无符号整数范围: {job_id}")
    return job_id


def validate_priority(priority: Any) -> int:
    """优先级必须是 [0, 2^32-1] 内的数字，小数部分向下取整。"""
    if isinstance(priority, bool) or not isinstance(priority, (int, float)):
        raise ClientError(f"任务优先级必须是数字，实际为 {type(priority).__name__}")
    if isinstance(priority, float) and not math.isfinite(priority):
        raise ClientError(f"任务优先级必须是有限数值，实际为 {priority!r}")
    if priority < 0 or priority > Limits.MAX_PRIORITY:
        raise ClientError(f"任务优先级必须是 0 到 {Limits.MAX_PRIORITY} 之间的整数")
    return int(priority)


def validate_non_negative(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ClientError(f"{what}必须是非负整数，实际为 {value!r}")
    return value


def validate_tube_name(tube: Any) -> str:
    """tube 名由字母、数字和 `-+/;.$_()` 组成，不能以 `-` 开头，最长 200 字节。"""
    if not isinstance(tube, str) or not tube:
        raise ClientError(f"tube 名必须是非空字符串，实际为 {tube!r}")
    if len(tube) > Limits.MAX_TUBE_NAME_LEN:
        raise ClientError(f"tube 名长度不能超过 {Limits.MAX_TUBE_NAME_LEN} 字节")
    if not _TUBE_NAME_PATTERN.match(tube):
        raise ClientError(f"tube 名包含非法字符: {tube!r}")
    return tube
