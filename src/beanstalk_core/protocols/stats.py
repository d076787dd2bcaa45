# src/beanstalk_core/protocols/stats.py
"""
Beanstalk 统计命令 (Stats Commands)

stats / stats-job / stats-tube 的响应数据体是 YAML 子集文本，
由 utils.parse_yaml_dict 解码为 str -> int | str 的映射。
"""

from typing import Any, Optional

from ..exceptions import ClientError
from ..utils import parse_yaml_dict
from .base import BaseCommand, validate_job_id, validate_tube_name
from .constants import CommandName, Response

StatsDict = dict[str, int | str]


class Stats(BaseCommand):
    """`stats`，服务器全局统计。"""

    name = CommandName.STATS

    def parse_response(
        self, header: list[str], body: Optional[bytes]
    ) -> Optional[StatsDict]:
        if header[0] != Response.OK:
            raise self.unexpected(header)
        if body is None:
            raise ClientError(
                f"响应缺少数据体 [{' '.join(header)}]", request=self.command_line()
            )
        return parse_yaml_dict(body)


class StatsJob(Stats):
    """`stats-job <id>`，任务不存在时返回 None。"""

    name = CommandName.STATS_JOB

    def __init__(self, job_id: int) -> None:
        super().__init__()
        self.job_id = validate_job_id(job_id)

    def arguments(self) -> list[Any]:
        return [self.job_id]

    def parse_response(
        self, header: list[str], body: Optional[bytes]
    ) -> Optional[StatsDict]:
        if header[0] == Response.NOT_FOUND:
            self.logger.debug(f"stats-job: 任务 {self.job_id} 不存在")
            return None
        return super().parse_response(header, body)


class StatsTube(Stats):
    """`stats-tube <tube>`，tube 不存在时返回 None。"""

    name = CommandName.STATS_TUBE

    def __init__(self, tube: str) -> None:
        super().__init__()
        self.tube = validate_tube_name(tube)

    def arguments(self) -> list[Any]:
        return [self.tube]

    def parse_response(
        self, header: list[str], body: Optional[bytes]
    ) -> Optional[StatsDict]:
        if header[0] == Response.NOT_FOUND:
            self.logger.debug(f"stats-tube: tube [{self.tube}] 不存在")
            return None
        return super().parse_response(header, body)
