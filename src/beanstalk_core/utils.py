# File: src/beanstalk_core/utils.py
"""
Beanstalk 核心库 - 通用工具箱

本模块汇集了响应数据体的解码工具 (stats / list 的 YAML 子集文本) 与诊断辅助函数。
"""

import re
from typing import Any

import yaml

from .exceptions import ClientError

# 可选符号 + 纯数字，才视为整数 (如 "1.10"、"0.012" 保持字符串)
_INT_PATTERN = re.compile(r"^[+-]?\d+$")


def _to_scalar(value: Any) -> int | str:
    """将 BaseLoader 读出的字符串标量转换为 int (全数字时) 或 str。"""
    if value is None:
        return ""
    text = str(value)
    if _INT_PATTERN.match(text):
        return int(text)
    return text


def _load_yaml(body: bytes) -> Any:
    """以 BaseLoader 解析 YAML 文本，所有标量都作为字符串读出。

    Args:
        body: 服务器返回的数据体 (不含结尾 CRLF)。

    Raises:
        ClientError: 数据体不是合法的 UTF-8/YAML 文本。
    """
    try:
        text = body.decode("utf-8")
        return yaml.load(text, Loader=yaml.BaseLoader)
    except (UnicodeDecodeError, yaml.YAMLError) as e:
        raise ClientError(f"无法解析 YAML 数据体: {e}") from e


def parse_yaml_dict(body: bytes) -> dict[str, int | str]:
    """解析 stats / stats-job / stats-tube 的 `key: value` 文本。

    算法逻辑:
    1. 使用 BaseLoader 读取，避免 `version: 1.10` 被转为浮点数 1.1。
    2. 值为可选符号加纯数字时转换为 int，其余保持 str。

    Args:
        body: 数据体，例如 b"---\\ncount: 5\\nname: jobs\\n"。

    Returns:
        dict[str, int | str]: 例如 {"count": 5, "name": "jobs"}。

    Raises:
        ClientError: 文本不是 YAML 映射。
    """
    data = _load_yaml(body)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ClientError(f"stats 数据体不是键值映射: {type(data).__name__}")

    return {str(key): _to_scalar(value) for key, value in data.items()}


def parse_yaml_list(body: bytes) -> list[str]:
    """解析 list-tubes / list-tubes-watched 的 `- name` 序列文本。

    Args:
        body: 数据体，例如 b"---\\n- default\\n- jobs\\n"。

    Returns:
        list[str]: 保持服务器返回顺序的 tube 名列表。

    Raises:
        ClientError: 文本不是 YAML 序列。
    """
    data = _load_yaml(body)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ClientError(f"list 数据体不是序列: {type(data).__name__}")

    return [str(item) for item in data]


def escape_crlf(data: bytes | str) -> str:
    """将 CR/LF/TAB 转为可见的转义文本，用于错误信息。

    Args:
        data: 原始字节或字符串。

    Returns:
        str: 例如 b"\\r\\n" -> "\\\\r\\\\n"。
    """
    if isinstance(data, bytes):
        data = data.decode("latin-1")
    return data.replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t")
