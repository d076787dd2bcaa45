# src/beanstalk_core/__init__.py
"""
Beanstalk-Core v1.0.0
同步、强类型的 beanstalkd 协议客户端核心库。
"""

# 暴露核心配置
from .config import (
    BeansConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露引擎与能力接口
from .core import BeansClient
from .encoders import Encoder, JsonEncoder, MsgpackEncoder

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    BeansError,
    ClientError,
    CommandError,
    ConfigError,
    NetworkError,
    ServerError,
    ServerErrorStatus,
)
from .models import Job, ReserveTimeout
from .network import Connection, SocketConnection

__version__ = "1.0.0"

__all__ = [
    "BeansClient",
    "BeansConfig",
    "Connection",
    "SocketConnection",
    "Encoder",
    "JsonEncoder",
    "MsgpackEncoder",
    "Job",
    "ReserveTimeout",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "BeansError",
    "ConfigError",
    "ClientError",
    "NetworkError",
    "CommandError",
    "ServerError",
    "ServerErrorStatus",
]
