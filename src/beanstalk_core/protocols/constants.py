# src/beanstalk_core/protocols/constants.py
"""
Beanstalk 协议层 - 常量定义

本模块定义了所有协议相关的命令关键字、响应状态字、默认值与上限。
采用命名空间 (Class Namespace) 组织，不使用扁平全局变量散落各处。
"""

from enum import StrEnum

# =========================================================================
# 1. 帧格式 (Framing)
# =========================================================================

CRLF = b"\r\n"
CRLF_LEN = 2


# =========================================================================
# 2. 默认值与上限 (Limits)
# =========================================================================


class Defaults:
    PRIORITY = 2048
    DELAY = 0
    TTR = 30
    TUBE = "default"


class Limits:
    MAX_PRIORITY = 4294967295  # 2^32 - 1
    MAX_JOB_ID = 18446744073709551615  # 2^64 - 1
    MAX_PAYLOAD_SIZE = 65536
    MAX_TUBE_NAME_LEN = 200


# =========================================================================
# 3. 命令关键字 (Command Keywords)
# =========================================================================


class CommandName:
    """请求行中的命令关键字"""

    # 生产者
    PUT = "put"
    USE = "use"

    # 消费者
    RESERVE = "reserve"
    RESERVE_WITH_TIMEOUT = "reserve-with-timeout"
    RESERVE_JOB = "reserve-job"
    DELETE = "delete"
    RELEASE = "release"
    BURY = "bury"
    TOUCH = "touch"
    WATCH = "watch"
    IGNORE = "ignore"

    # 其他
    PEEK = "peek"
    PEEK_READY = "peek-ready"
    PEEK_DELAYED = "peek-delayed"
    PEEK_BURIED = "peek-buried"
    KICK = "kick"
    KICK_JOB = "kick-job"
    STATS = "stats"
    STATS_JOB = "stats-job"
    STATS_TUBE = "stats-tube"
    LIST_TUBES = "list-tubes"
    LIST_TUBE_USED = "list-tube-used"
    LIST_TUBES_WATCHED = "list-tubes-watched"
    PAUSE_TUBE = "pause-tube"


# =========================================================================
# 4. 响应状态字 (Response Status)
# =========================================================================


class Response(StrEnum):
    """服务器响应行的第一个 token"""

    INSERTED = "INSERTED"
    BURIED = "BURIED"
    EXPECTED_CRLF = "EXPECTED_CRLF"
    JOB_TOO_BIG = "JOB_TOO_BIG"
    DRAINING = "DRAINING"
    USING = "USING"
    RESERVED = "RESERVED"
    DEADLINE_SOON = "DEADLINE_SOON"
    TIMED_OUT = "TIMED_OUT"
    DELETED = "DELETED"
    NOT_FOUND = "NOT_FOUND"
    RELEASED = "RELEASED"
    TOUCHED = "TOUCHED"
    WATCHING = "WATCHING"
    NOT_IGNORED = "NOT_IGNORED"
    FOUND = "FOUND"
    KICKED = "KICKED"
    OK = "OK"
    PAUSED = "PAUSED"

    # 全局错误
    OUT_OF_MEMORY = "OUT_OF_MEMORY"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_FORMAT = "BAD_FORMAT"
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"


# 可能出现在任意命令响应中的全局错误
ERROR_RESPONSES = frozenset(
    status.value
    for status in (
        Response.OUT_OF_MEMORY,
        Response.INTERNAL_ERROR,
        Response.BAD_FORMAT,
        Response.UNKNOWN_COMMAND,
        Response.DRAINING,
    )
)

# 状态行末尾携带 <bytes>，其后紧跟数据体 + CRLF
DATA_RESPONSES = frozenset(
    status.value
    for status in (
        Response.RESERVED,
        Response.FOUND,
        Response.OK,
    )
)
