"""
Beanstalk 核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量 (含 .env 文件) 或字典中加载配置。
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .exceptions import ClientError, ConfigError
from .protocols.base import validate_tube_name

logger = logging.getLogger(__name__)

_ENCODER_NAMES = ("json", "msgpack", "none")


@dataclass(frozen=True)
class BeansConfig:
    """BeansClient 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        host: beanstalkd 服务器地址。
        port: beanstalkd 服务器端口 (默认 11300)。
        connect_timeout: TCP 建连超时秒数。
        read_timeout: 读写超时秒数；None 表示阻塞等待 (reserve 无超时时需要)。
        default_tube: 建立连接后 use 的 tube。
        watch: 建立连接后 watch 的 tube 列表。
        encoder: payload 编码器名称 ("json" / "msgpack" / "none")。
    """

    host: str = "127.0.0.1"
    port: int = 11300
    connect_timeout: float = 5.0
    read_timeout: float | None = None
    default_tube: str = "default"
    watch: tuple[str, ...] = ()
    encoder: str = "json"


def create_config_from_dict(raw_data: dict[str, Any]) -> BeansConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        BeansConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当字段格式错误时抛出。
    """
    try:
        # --- 内部辅助函数 ---
        def _get(key: str, default: Any) -> Any:
            """获取可选字段，缺失则使用默认值"""
            return raw_data.get(key, default)

        def _to_port(key: str, default: int) -> int:
            val = _get(key, default)
            try:
                port = int(val)
            except (TypeError, ValueError):
                raise ConfigError(f"端口格式无效 '{key}': {val}")
            if not 0 < port < 65536:
                raise ConfigError(f"端口超出范围 '{key}': {port}")
            return port

        def _to_timeout(key: str, default: float | None) -> float | None:
            """超时字段：空字符串 / "none" 表示不限时。"""
            val = _get(key, default)
            if val is None or str(val).strip().lower() in ("", "none"):
                return None
            try:
                timeout = float(val)
            except (TypeError, ValueError):
                raise ConfigError(f"超时格式无效 '{key}': {val}")
            if timeout < 0:
                raise ConfigError(f"超时不能为负数 '{key}': {val}")
            return timeout

        def _to_tube(val: Any) -> str:
            try:
                return validate_tube_name(str(val).strip())
            except ClientError as e:
                raise ConfigError(f"tube 名无效: {e}") from e

        def _to_tubes(key: str) -> tuple[str, ...]:
            """支持列表或逗号分隔的字符串 (来自环境变量)。"""
            val = _get(key, ())
            if isinstance(val, str):
                val = [part for part in val.split(",") if part.strip()]
            return tuple(_to_tube(item) for item in val)

        encoder = str(_get("encoder", "json")).lower()
        if encoder not in _ENCODER_NAMES:
            raise ConfigError(f"未知的编码器 '{encoder}'，可选: {_ENCODER_NAMES}")

        # --- 构建对象 ---
        return BeansConfig(
            host=str(_get("host", "127.0.0.1")),
            port=_to_port("port", 11300),
            connect_timeout=_to_timeout("connect_timeout", 5.0) or 5.0,
            read_timeout=_to_timeout("read_timeout", None),
            default_tube=_to_tube(_get("default_tube", "default")),
            watch=_to_tubes("watch"),
            encoder=encoder,
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> BeansConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [beanstalk]: 单一配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Returns:
        BeansConfig: 配置对象。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    raw_config = {}

    # 优先查找 profile
    if "profile" in data:
        if profile not in data["profile"]:
            # 如果指定了非 default 的 profile 且没找到，报错
            if profile != "default":
                raise ConfigError(f"未找到预设: [profile.{profile}]")
        else:
            raw_config = data["profile"][profile]

    elif "beanstalk" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [beanstalk] 节，忽略 profile='{profile}'。")
        raw_config = data["beanstalk"]
    else:
        # 兼容根目录直接配置
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env(dotenv_path: Path | None = None) -> BeansConfig:
    """从环境变量加载配置 (Docker/Cloud Friendly)。

    先通过 python-dotenv 加载 .env 文件 (已存在的环境变量不会被覆盖)，
    再读取所有以 `BEANSTALK_` 开头的环境变量，并映射到配置字段。
    例如: `BEANSTALK_HOST` -> `host`。

    Args:
        dotenv_path: .env 文件路径。为 None 时由 python-dotenv 自动查找。

    Returns:
        BeansConfig: 配置对象。

    Raises:
        ConfigError: 未检测到任何相关环境变量。
    """
    if dotenv_path is not None and not dotenv_path.exists():
        raise ConfigError(f".env 文件未找到: {dotenv_path}")
    load_dotenv(dotenv_path=dotenv_path)

    # 字段映射表 (Config Field -> Env Suffix)
    env_map = {
        "host": "HOST",
        "port": "PORT",
        "connect_timeout": "CONNECT_TIMEOUT",
        "read_timeout": "READ_TIMEOUT",
        "default_tube": "TUBE",
        "watch": "WATCH",
        "encoder": "ENCODER",
    }

    raw_data = {}

    for cfg_key, env_suffix in env_map.items():
        env_key = f"BEANSTALK_{env_suffix}"
        val = os.environ.get(env_key)
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 BEANSTALK_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
