# src/beanstalk_core/protocols/__init__.py
"""
Beanstalk 协议层 (Protocol Layer)

本包负责每条命令的请求构建 (Render) 与响应解析 (Parse)。

- 不包含任何 socket 操作或网络 I/O。
- 不持有任何会话状态 (used tube / watched tubes 以服务器为准)。
- 不依赖于 core 或 network 层。
"""

from . import constants
from .base import BaseCommand
from .jobs import (
    Bury,
    Delete,
    Kick,
    KickJob,
    Peek,
    PeekBuried,
    PeekDelayed,
    PeekReady,
    Put,
    Release,
    Reserve,
    ReserveJob,
    Touch,
)
from .stats import Stats, StatsJob, StatsTube
from .tubes import (
    IgnoreTube,
    ListTubes,
    ListTubesWatched,
    ListTubeUsed,
    PauseTube,
    UseTube,
    WatchTube,
)

# 公共 API
__all__ = [
    "constants",
    "BaseCommand",
    "Put",
    "Reserve",
    "ReserveJob",
    "Delete",
    "Release",
    "Bury",
    "Touch",
    "Kick",
    "KickJob",
    "Peek",
    "PeekReady",
    "PeekDelayed",
    "PeekBuried",
    "Stats",
    "StatsJob",
    "StatsTube",
    "UseTube",
    "WatchTube",
    "IgnoreTube",
    "ListTubeUsed",
    "ListTubes",
    "ListTubesWatched",
    "PauseTube",
]
