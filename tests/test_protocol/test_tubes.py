# tests/test_protocol/test_tubes.py
"""
测试 tube 相关命令 (use / watch / ignore / list / pause) 的请求与响应解析。
"""

import pytest

from beanstalk_core.exceptions import ClientError, CommandError
from beanstalk_core.protocols import (
    IgnoreTube,
    ListTubes,
    ListTubesWatched,
    ListTubeUsed,
    PauseTube,
    UseTube,
    WatchTube,
)


@pytest.mark.parametrize(
    "cmd, expected",
    [
        (UseTube("jobs"), b"use jobs\r\n"),
        (WatchTube("jobs"), b"watch jobs\r\n"),
        (IgnoreTube("default"), b"ignore default\r\n"),
        (ListTubeUsed(), b"list-tube-used\r\n"),
        (ListTubes(), b"list-tubes\r\n"),
        (ListTubesWatched(), b"list-tubes-watched\r\n"),
        (PauseTube("jobs", 30), b"pause-tube jobs 30\r\n"),
    ],
)
def test_render_request(cmd, expected):
    assert cmd.render_request() == expected


@pytest.mark.parametrize(
    "tube",
    ["", "has space", "-leading-hyphen", "a" * 201, "tab\tname", None, "中文"],
)
def test_invalid_tube_names(tube):
    with pytest.raises(ClientError):
        UseTube(tube)


@pytest.mark.parametrize("tube", ["a", "jobs.email", "x-y_z", "(a)+b/c;d$e", "a" * 200])
def test_valid_tube_names(tube):
    assert WatchTube(tube).tube == tube


def test_use_tube_confirmed():
    assert UseTube("jobs").parse_response(["USING", "jobs"], None) == "jobs"


def test_use_tube_mismatch():
    with pytest.raises(CommandError, match="不一致") as exc_info:
        UseTube("jobs").parse_response(["USING", "other"], None)
    assert exc_info.value.request == "use jobs"


def test_use_tube_missing_name():
    with pytest.raises(ClientError, match="tube 名"):
        UseTube("jobs").parse_response(["USING"], None)


def test_watch_returns_count():
    assert WatchTube("jobs").parse_response(["WATCHING", "3"], None) == 3


def test_ignore_returns_count():
    assert IgnoreTube("jobs").parse_response(["WATCHING", "1"], None) == 1


def test_ignore_last_tube():
    with pytest.raises(CommandError) as exc_info:
        IgnoreTube("default").parse_response(["NOT_IGNORED"], None)
    assert exc_info.value.status == "NOT_IGNORED"


def test_list_tube_used():
    assert ListTubeUsed().parse_response(["USING", "emails"], None) == "emails"


@pytest.mark.parametrize("cmd_cls", [ListTubes, ListTubesWatched])
def test_list_tubes_keeps_order(cmd_cls):
    body = b"---\n- default\n- jobs\n- emails\n"
    assert cmd_cls().parse_response(["OK", str(len(body))], body) == [
        "default",
        "jobs",
        "emails",
    ]


def test_list_tubes_rejects_mapping():
    body = b"---\nname: jobs\n"
    with pytest.raises(ClientError, match="不是序列"):
        ListTubes().parse_response(["OK", str(len(body))], body)


def test_pause_tube():
    assert PauseTube("jobs", 10).parse_response(["PAUSED"], None) is True


def test_pause_tube_not_found():
    with pytest.raises(CommandError, match="不存在"):
        PauseTube("jobs", 10).parse_response(["NOT_FOUND"], None)


def test_pause_tube_negative_delay():
    with pytest.raises(ClientError):
        PauseTube("jobs", -1)
