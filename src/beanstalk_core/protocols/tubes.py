# src/beanstalk_core/protocols/tubes.py
"""
Beanstalk tube 命令 (Tube Commands)

负责 use / watch / ignore / list-tube* / pause-tube 命令的请求构建与响应解析。
客户端不缓存任何 tube 状态，结果一律以服务器响应为准。
"""

from typing import Any, Optional

from ..exceptions import ClientError, CommandError
from ..utils import parse_yaml_list
from .base import BaseCommand, validate_non_negative, validate_tube_name
from .constants import CommandName, Response


class TubeCommand(BaseCommand):
    """以 tube 名为参数的命令基类。"""

    def __init__(self, tube: str) -> None:
        super().__init__()
        self.tube = validate_tube_name(tube)

    def arguments(self) -> list[Any]:
        return [self.tube]


def _require_tube_name(cmd: BaseCommand, header: list[str]) -> str:
    if len(header) < 2:
        raise ClientError(
            f"响应缺少 tube 名 [{' '.join(header)}]", request=cmd.command_line()
        )
    return header[1]


def _require_body(cmd: BaseCommand, header: list[str], body: Optional[bytes]) -> bytes:
    if body is None:
        raise ClientError(
            f"响应缺少数据体 [{' '.join(header)}]", request=cmd.command_line()
        )
    return body


class UseTube(TubeCommand):
    """`use <tube>`，返回服务器确认使用的 tube 名。"""

    name = CommandName.USE

    def parse_response(self, header: list[str], body: Optional[bytes]) -> str:
        if header[0] != Response.USING:
            raise self.unexpected(header)

        used = _require_tube_name(self, header)
        if used != self.tube:
            raise CommandError(
                f"服务器使用的 tube [{used}] 与请求的 tube [{self.tube}] 不一致",
                status=header[0],
                request=self.command_line(),
            )
        return used


class WatchTube(TubeCommand):
    """`watch <tube>`，返回当前关注的 tube 数量。"""

    name = CommandName.WATCH

    def parse_response(self, header: list[str], body: Optional[bytes]) -> int:
        if header[0] != Response.WATCHING:
            raise self.unexpected(header)
        return self.require_int(header, 1, "关注数量")


class IgnoreTube(TubeCommand):
    """`ignore <tube>`，返回剩余关注的 tube 数量。"""

    name = CommandName.IGNORE

    def parse_response(self, header: list[str], body: Optional[bytes]) -> int:
        if header[0] == Response.NOT_IGNORED:
            raise CommandError(
                f"无法取消关注最后一个 tube [{self.tube}]",
                status=header[0],
                request=self.command_line(),
            )
        if header[0] != Response.WATCHING:
            raise self.unexpected(header)
        return self.require_int(header, 1, "关注数量")


class ListTubeUsed(BaseCommand):
    """`list-tube-used`"""

    name = CommandName.LIST_TUBE_USED

    def parse_response(self, header: list[str], body: Optional[bytes]) -> str:
        if header[0] != Response.USING:
            raise self.unexpected(header)
        return _require_tube_name(self, header)


class ListTubes(BaseCommand):
    """`list-tubes`，返回服务器上所有 tube 名。"""

    name = CommandName.LIST_TUBES

    def parse_response(self, header: list[str], body: Optional[bytes]) -> list[str]:
        if header[0] != Response.OK:
            raise self.unexpected(header)
        return parse_yaml_list(_require_body(self, header, body))


class ListTubesWatched(ListTubes):
    """`list-tubes-watched`，返回当前连接关注的 tube 名。"""

    name = CommandName.LIST_TUBES_WATCHED


class PauseTube(TubeCommand):
    """`pause-tube <tube> <delay>`，在 delay 秒内暂停该 tube 的任务分发。"""

    name = CommandName.PAUSE_TUBE

    def __init__(self, tube: str, delay: int) -> None:
        super().__init__(tube)
        self.delay = validate_non_negative(delay, "暂停时长")

    def arguments(self) -> list[Any]:
        return [self.tube, self.delay]

    def parse_response(self, header: list[str], body: Optional[bytes]) -> bool:
        if header[0] == Response.NOT_FOUND:
            raise CommandError(
                f"tube [{self.tube}] 不存在",
                status=header[0],
                request=self.command_line(),
            )
        if header[0] != Response.PAUSED:
            raise self.unexpected(header)
        return True
