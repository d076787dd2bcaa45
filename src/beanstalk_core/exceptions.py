# File: src/beanstalk_core/exceptions.py
"""
Beanstalk 核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 Worker/CLI）能进行精细的错误处理。

三类失败互不混淆:
- ClientError: 本地可检测的错误 (参数越界、帧格式破坏、I/O 异常)。
- CommandError: 某条命令被服务器以"已定义的否定结果"拒绝 (如 NOT_FOUND)。
- ServerError: 服务器全局错误 (如 OUT_OF_MEMORY)，与具体命令无关。
"""

from enum import StrEnum


class BeansError(Exception):
    """Beanstalk 核心库的所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 beanstalk-core 抛出的已知错误。
    """

    pass


class ConfigError(BeansError):
    """配置加载或校验失败。

    触发场景:
    1. 字段格式错误 (如端口不是整数、超时为负数)。
    2. 找不到配置文件、Profile 或环境变量。
    """

    pass


class ClientError(BeansError):
    """客户端错误 (本地可检测)。

    触发场景:
    1. 参数校验失败 (priority 越界、ttr <= 0、tube 名非法)。
    2. 序列化后的 payload 超过 65536 字节。
    3. 响应帧格式不符合预期 (缺少数据长度、结尾不是 CRLF)。
    4. 已保留/已找到任务的数据体无法被编码器解码 (此时 job_id 非空)。

    注意: 帧格式错误意味着连接已失去同步，上层应丢弃该连接并重连。
    解码失败则不同: 连接仍然同步，调用者可凭 job_id 埋葬或删除该任务。
    """

    def __init__(
        self,
        message: str,
        request: str | None = None,
        job_id: int | None = None,
    ) -> None:
        super().__init__(message)
        self.request = request
        self.job_id = job_id


class NetworkError(ClientError):
    """网络层面的错误 (I/O 级别)。

    触发场景:
    1. TCP 连接建立失败或被拒绝。
    2. 发送 (write) 或 接收 (read) 超时。
    3. 对端关闭连接 (EOF) 或读取长度不足。
    """

    pass


class CommandError(BeansError):
    """命令被拒绝 (业务层面的失败)。

    服务器对某条命令返回了该命令定义内的否定结果，
    例如 delete 时的 NOT_FOUND、ignore 时的 NOT_IGNORED、put 时的 JOB_TOO_BIG。
    上层调用者通常需要根据 status 分支处理。
    """

    def __init__(
        self,
        message: str,
        status: str | None = None,
        request: str | None = None,
        job_id: int | None = None,
    ) -> None:
        """初始化命令错误。

        Args:
            message: 错误描述信息。
            status: 服务器返回的状态字 (如 "NOT_FOUND")。
            request: 触发该错误的原始请求行 (不含 CRLF)。
            job_id: 相关的任务 ID (如有)。
        """
        super().__init__(message)
        self.status = status
        self.request = request
        self.job_id = job_id


class ServerErrorStatus(StrEnum):
    """服务器全局错误状态字枚举。

    这些状态可能出现在任意命令的响应中，表示服务器自身处于异常状态。
    """

    OUT_OF_MEMORY = "OUT_OF_MEMORY"  # 服务器无法为任务分配内存
    INTERNAL_ERROR = "INTERNAL_ERROR"  # 服务器内部 Bug
    BAD_FORMAT = "BAD_FORMAT"  # 请求行格式错误 (客户端与服务端协议不一致)
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"  # 服务器不认识该命令
    DRAINING = "DRAINING"  # 服务器处于 drain 模式，拒绝新任务

    @property
    def description(self) -> str:
        """获取状态字对应的人类可读中文描述。

        Returns:
            str: 对应的中文错误提示。
        """
        _DESC_MAP = {
            "OUT_OF_MEMORY": "服务器内存不足",
            "INTERNAL_ERROR": "服务器内部错误",
            "BAD_FORMAT": "请求格式错误",
            "UNKNOWN_COMMAND": "服务器不支持该命令",
            "DRAINING": "服务器正在排空 (drain 模式)，暂不接受新任务",
        }
        return _DESC_MAP.get(self.value, f"未知服务器错误 ({self.value})")


class ServerError(BeansError):
    """服务器全局错误。

    当响应状态属于全局错误集合时抛出。此时服务器已处于降级状态，
    请求携带的任务/数据无法恢复，库内部不会自动重试。
    """

    def __init__(self, status: str, request: str | None = None) -> None:
        """初始化服务器错误。

        Args:
            status: 服务器返回的全局错误状态字。构造函数会自动尝试将其转换为
                ServerErrorStatus 枚举，并使用标准化的中文描述生成 message。
            request: 触发该错误的原始请求行。
        """
        self.status_enum: ServerErrorStatus | None = None
        try:
            self.status_enum = ServerErrorStatus(status)
            detail = self.status_enum.description
        except ValueError:
            detail = "未知服务器错误"

        message = f"收到 {status} ({detail})"
        if request is not None:
            message += f"，请求: {request}"

        super().__init__(message)
        # 已知状态字以枚举形式保存，StrEnum 与原始字符串比较仍然相等
        self.status: ServerErrorStatus | str = (
            self.status_enum if self.status_enum is not None else status
        )
        self.request = request
