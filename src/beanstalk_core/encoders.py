# File: src/beanstalk_core/encoders.py
"""
Beanstalk 核心库 - Payload 编码器

Encoder 负责把应用层的任意值转换为 bytes 写入任务体，并在 reserve/peek 时还原。
Encoder 是可选能力：未注入时，payload 必须本身就是字符串、bytes 或数字。
"""

import json
from typing import Any, Protocol

import msgpack

from .exceptions import ClientError, ConfigError


class Encoder(Protocol):
    """Payload 编码能力 (由调用者注入)。"""

    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes) -> Any: ...


class JsonEncoder:
    """JSON 编码器 (UTF-8，紧凑分隔符)。"""

    name = "json"

    def encode(self, value: Any) -> bytes:
        try:
            return json.dumps(value, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise ClientError(f"JSON 编码失败: {e}") from e

    def decode(self, data: bytes) -> Any:
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise ClientError(f"JSON 解码失败: {e}") from e


class MsgpackEncoder:
    """MessagePack 编码器 (二进制安全，体积更小)。"""

    name = "msgpack"

    def encode(self, value: Any) -> bytes:
        try:
            return msgpack.packb(value, use_bin_type=True)
        except (TypeError, ValueError, OverflowError) as e:
            raise ClientError(f"MessagePack 编码失败: {e}") from e

    def decode(self, data: bytes) -> Any:
        try:
            return msgpack.unpackb(data, raw=False)
        except (ValueError, msgpack.UnpackException) as e:
            raise ClientError(f"MessagePack 解码失败: {e}") from e


_REGISTRY: dict[str, type] = {
    JsonEncoder.name: JsonEncoder,
    MsgpackEncoder.name: MsgpackEncoder,
}


def get_encoder(name: str) -> Encoder | None:
    """按名称创建编码器。

    Args:
        name: "json"、"msgpack" 或 "none"。

    Returns:
        Encoder | None: "none" 返回 None (不启用编码)。

    Raises:
        ConfigError: 未知的编码器名称。
    """
    key = name.lower()
    if key == "none":
        return None
    if key not in _REGISTRY:
        raise ConfigError(f"未知的编码器: {name}")
    return _REGISTRY[key]()


def payload_to_bytes(payload: Any, encoder: Encoder | None) -> bytes:
    """将 payload 转换为任务体字节。

    Args:
        payload: 应用层数据。
        encoder: 可选编码器；为 None 时 payload 必须是 str/bytes/数字。

    Returns:
        bytes: 任务体。

    Raises:
        ClientError: 未启用编码器且 payload 不是字符串或数字。
    """
    if encoder is not None:
        return encoder.encode(payload)

    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    # bool 是 int 的子类，但不应被当作数字发送
    if isinstance(payload, (int, float)) and not isinstance(payload, bool):
        return str(payload).encode("ascii")

    raise ClientError(
        "未启用 payload 编码器时，任务 payload 必须是字符串或数字，"
        f"实际为 {type(payload).__name__}"
    )


def bytes_to_payload(data: bytes, encoder: Encoder | None) -> Any:
    """将任务体字节还原为 payload；未启用编码器时原样返回 bytes。"""
    if encoder is None:
        return data
    return encoder.decode(data)
