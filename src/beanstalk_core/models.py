# File: src/beanstalk_core/models.py
"""
Beanstalk 核心库 - 结果模型

定义命令执行后返回给调用者的强类型结果。
这些对象是瞬时的，每次响应重新构建，客户端不缓存任何任务或 tube 状态。
"""

from dataclasses import dataclass
from typing import Any

from .protocols.constants import Response


@dataclass(frozen=True)
class Job:
    """服务器上的一个任务 (Job)。

    Attributes:
        id: 服务器分配的任务 ID (无符号 64 位)。
        payload: 解码后的任务数据。未设置 Encoder 时为原始 bytes；
            put 返回的 Job 中为调用者传入的原始 payload。
        status: 产生该结果的响应状态字 (如 INSERTED, BURIED, RESERVED, FOUND)。
    """

    id: int
    payload: Any = None
    status: str = Response.RESERVED

    @property
    def is_buried(self) -> bool:
        """put/release 时服务器因内存不足直接将任务埋葬。"""
        return self.status == Response.BURIED


@dataclass(frozen=True)
class ReserveTimeout:
    """reserve 的非错误终止结果：没有拿到任务，但服务器也没有出错。

    Attributes:
        status: DEADLINE_SOON 或 TIMED_OUT。
    """

    status: str

    @property
    def deadline_soon(self) -> bool:
        """已保留的某个任务即将到达 TTR，需要尽快 touch/delete。"""
        return self.status == Response.DEADLINE_SOON

    @property
    def timed_out(self) -> bool:
        return self.status == Response.TIMED_OUT
