# tests/test_protocol/test_put.py
"""
测试 put 命令的参数校验、请求渲染与响应解析 (不涉及任何 I/O)。
"""

import math

import pytest

from beanstalk_core.encoders import JsonEncoder, MsgpackEncoder
from beanstalk_core.exceptions import ClientError, CommandError
from beanstalk_core.models import Job
from beanstalk_core.protocols import Put
from beanstalk_core.protocols.constants import Limits


@pytest.mark.parametrize(
    "priority, delay, ttr",
    [
        (0, 0, 1),
        (2048, 0, 30),
        (Limits.MAX_PRIORITY, 3600, 86400),
    ],
)
def test_render_request(priority, delay, ttr):
    cmd = Put("payload", priority, delay, ttr)
    expected = f"put {priority} {delay} {ttr} 7\r\npayload\r\n".encode()
    assert cmd.render_request() == expected


def test_render_uses_encoded_length():
    """长度取编码后的字节数，而不是字符数。"""
    cmd = Put("任务", encoder=None)
    body = "任务".encode("utf-8")
    assert cmd.render_request() == b"put 2048 0 30 6\r\n" + body + b"\r\n"


def test_render_with_encoder():
    cmd = Put({"a": [1, 2]}, encoder=JsonEncoder())
    assert cmd.render_request() == b'put 2048 0 30 11\r\n{"a":[1,2]}\r\n'


def test_msgpack_body_is_binary_safe():
    encoder = MsgpackEncoder()
    cmd = Put({"data": b"\r\n\x00"}, encoder=encoder)
    request = cmd.render_request()

    header, rest = request.split(b"\r\n", 1)
    length = int(header.split(b" ")[-1])
    assert rest[length:] == b"\r\n"
    assert encoder.decode(rest[:length]) == {"data": b"\r\n\x00"}


@pytest.mark.parametrize(
    "payload, expected",
    [
        (b"raw\x00bytes", b"raw\x00bytes"),
        (42, b"42"),
        (1.5, b"1.5"),
    ],
)
def test_payload_without_encoder(payload, expected):
    assert Put(payload).body == expected


@pytest.mark.parametrize("payload", [{"a": 1}, [1], None, True])
def test_unsupported_payload_without_encoder(payload):
    with pytest.raises(ClientError, match="字符串或数字"):
        Put(payload)


@pytest.mark.parametrize(
    "kwargs, match",
    [
        ({"priority": -1}, "优先级"),
        ({"priority": Limits.MAX_PRIORITY + 1}, "优先级"),
        ({"priority": "high"}, "必须是数字"),
        ({"priority": math.nan}, "有限数值"),
        ({"priority": math.inf}, "有限数值"),
        ({"delay": -1}, "延迟"),
        ({"ttr": 0}, "ttr"),
        ({"ttr": -30}, "ttr"),
    ],
)
def test_invalid_arguments(kwargs, match):
    with pytest.raises(ClientError, match=match):
        Put("x", **kwargs)


def test_float_priority_is_floored():
    assert Put("x", priority=10.9).priority == 10


def test_payload_size_ceiling():
    Put("a" * Limits.MAX_PAYLOAD_SIZE)
    with pytest.raises(ClientError, match="超过上限"):
        Put("a" * (Limits.MAX_PAYLOAD_SIZE + 1))


def test_parse_inserted():
    assert Put("x").parse_response(["INSERTED", "42"], None) == Job(
        id=42, payload="x", status="INSERTED"
    )


def test_parse_buried():
    job = Put("x").parse_response(["BURIED", "7"], None)
    assert job.id == 7
    assert job.status == "BURIED"
    assert job.is_buried


@pytest.mark.parametrize("status", ["JOB_TOO_BIG", "EXPECTED_CRLF", "TOUCHED"])
def test_parse_failures(status):
    with pytest.raises(CommandError) as exc_info:
        Put("x").parse_response([status], None)

    assert exc_info.value.status == status
    assert exc_info.value.request == "put 2048 0 30 1"


def test_parse_missing_job_id():
    with pytest.raises(ClientError, match="任务 ID"):
        Put("x").parse_response(["INSERTED"], None)


class _TextEncoder:
    """返回 str 而不是 bytes 的错误编码器。"""

    def encode(self, value):
        return str(value)

    def decode(self, data):
        return data.decode()


def test_encoder_must_return_bytes():
    with pytest.raises(ClientError, match="必须返回 bytes"):
        Put({"a": 1}, encoder=_TextEncoder())
