# tests/test_main.py
"""
测试命令行入口：参数解析、命令路由与退出码。
"""

import json
from unittest.mock import patch

import pytest

from beanstalk_core import BeansClient, JsonEncoder
from beanstalk_core.main import main


@pytest.fixture
def json_client(conn):
    return BeansClient(conn, JsonEncoder())


@pytest.fixture
def run(json_client):
    """[Fixture] 以预设客户端运行 CLI，返回退出码。"""

    def _run(*argv):
        with patch.object(BeansClient, "from_config", return_value=json_client):
            return main(list(argv))

    return _run


def test_put(run, conn, capsys):
    conn.queue(b"INSERTED 11\r\n")

    assert run("put", '{"task": "resize"}', "--ttr", "60") == 0

    assert conn.writes == [b'put 2048 0 60 17\r\n{"task":"resize"}\r\n']
    out = json.loads(capsys.readouterr().out)
    assert out == {"id": 11, "status": "INSERTED", "payload": {"task": "resize"}}


def test_reserve_and_delete(run, conn, capsys):
    conn.queue(b"RESERVED 4 2\r\n42\r\n", b"DELETED\r\n")

    assert run("reserve", "--timeout", "1", "--delete") == 0

    assert conn.writes == [b"reserve-with-timeout 1\r\n", b"delete 4\r\n"]
    assert json.loads(capsys.readouterr().out)["payload"] == 42


def test_reserve_timed_out(run, conn):
    conn.queue(b"TIMED_OUT\r\n")
    assert run("reserve", "--timeout", "0") == 2


def test_stats_tube_missing(run, conn):
    conn.queue(b"NOT_FOUND\r\n")
    assert run("stats-tube", "nope") == 1


def test_library_error_exit_code(run, conn):
    conn.queue(b"NOT_FOUND\r\n")
    assert run("delete", "99") == 1


def test_list_tubes(run, conn, capsys):
    conn.queue(b"OK 14\r\n---\n- default\n\r\n")
    assert run("list-tubes") == 0
    assert json.loads(capsys.readouterr().out) == ["default"]


def test_config_error(tmp_path):
    assert main(["--config", str(tmp_path / "missing.toml"), "stats"]) == 1
