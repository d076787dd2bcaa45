# tests/test_encoders.py
import pytest

from beanstalk_core.encoders import (
    JsonEncoder,
    MsgpackEncoder,
    bytes_to_payload,
    get_encoder,
    payload_to_bytes,
)
from beanstalk_core.exceptions import ClientError, ConfigError

PAYLOADS = [
    {"task": "resize", "size": [640, 480]},
    ["a", 1, None, True],
    "纯文本",
    12345,
]


@pytest.mark.parametrize("encoder", [JsonEncoder(), MsgpackEncoder()])
@pytest.mark.parametrize("payload", PAYLOADS)
def test_round_trip(encoder, payload):
    data = encoder.encode(payload)
    assert isinstance(data, bytes)
    assert encoder.decode(data) == payload


def test_json_is_compact():
    assert JsonEncoder().encode({"a": 1, "b": 2}) == b'{"a":1,"b":2}'


def test_json_encode_error():
    with pytest.raises(ClientError, match="JSON 编码失败"):
        JsonEncoder().encode({"a": object()})


def test_json_decode_error():
    with pytest.raises(ClientError, match="JSON 解码失败"):
        JsonEncoder().decode(b"{not json")


def test_msgpack_encode_error():
    with pytest.raises(ClientError, match="MessagePack 编码失败"):
        MsgpackEncoder().encode(object())


def test_get_encoder():
    assert isinstance(get_encoder("json"), JsonEncoder)
    assert isinstance(get_encoder("MSGPACK"), MsgpackEncoder)
    assert get_encoder("none") is None
    with pytest.raises(ConfigError):
        get_encoder("pickle")


def test_without_encoder():
    assert payload_to_bytes("abc", None) == b"abc"
    assert bytes_to_payload(b"abc", None) == b"abc"


def test_with_encoder():
    encoder = JsonEncoder()
    assert bytes_to_payload(payload_to_bytes({"k": 1}, encoder), encoder) == {"k": 1}
