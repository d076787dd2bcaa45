# File: src/beanstalk_core/main.py
"""
Beanstalk-Core 命令行入口

用法示例:
    beanstalk-core --config config.toml put '{"task": "resize"}' --ttr 60
    beanstalk-core --env .env reserve --timeout 5
    beanstalk-core stats-tube jobs
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .config import (
    BeansConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)
from .core import BeansClient
from .exceptions import BeansError
from .models import Job

logger = logging.getLogger("beanstalk_core.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="beanstalk-core", description="beanstalkd 命令行客户端"
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--config", type=Path, help="TOML 配置文件路径")
    parser.add_argument("--profile", default="default", help="TOML 配置预设名")
    parser.add_argument("--env", type=Path, help=".env 文件路径 (读取 BEANSTALK_* 变量)")
    parser.add_argument("--host", help="覆盖配置中的服务器地址")
    parser.add_argument("--port", type=int, help="覆盖配置中的服务器端口")
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")

    sub = parser.add_subparsers(dest="command", required=True)

    p_put = sub.add_parser("put", help="投递任务")
    p_put.add_argument("payload", help="任务数据 (JSON 编码器下按 JSON 解析)")
    p_put.add_argument("--priority", type=int, default=2048)
    p_put.add_argument("--delay", type=int, default=0)
    p_put.add_argument("--ttr", type=int, default=30)

    p_reserve = sub.add_parser("reserve", help="保留一个任务")
    p_reserve.add_argument("--timeout", type=int, default=None)
    p_reserve.add_argument("--delete", action="store_true", help="保留后立即删除")

    p_delete = sub.add_parser("delete", help="删除任务")
    p_delete.add_argument("job_id", type=int)

    sub.add_parser("stats", help="服务器统计")

    p_stats_tube = sub.add_parser("stats-tube", help="tube 统计")
    p_stats_tube.add_argument("tube")

    sub.add_parser("list-tubes", help="列出所有 tube")

    return parser


def _load_config(args: argparse.Namespace) -> BeansConfig:
    if args.config:
        config = load_config_from_toml(args.config, args.profile)
    elif args.env:
        config = load_config_from_env(args.env)
    else:
        config = create_config_from_dict({})

    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if overrides:
        raw = {
            "host": config.host,
            "port": config.port,
            "connect_timeout": config.connect_timeout,
            "read_timeout": config.read_timeout,
            "default_tube": config.default_tube,
            "watch": list(config.watch),
            "encoder": config.encoder,
        }
        raw.update(overrides)
        config = create_config_from_dict(raw)
    return config


def _parse_payload(text: str, config: BeansConfig):
    if config.encoder == "none":
        return text
    try:
        return json.loads(text)
    except ValueError:
        return text


def _print(value) -> None:
    if isinstance(value, Job):
        payload = value.payload
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8", errors="replace")
        value = {"id": value.id, "status": value.status, "payload": payload}
    print(json.dumps(value, ensure_ascii=False, indent=2, default=str))


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = _load_config(args)
        with BeansClient.from_config(config) as client:
            if args.command == "put":
                _print(
                    client.put(
                        _parse_payload(args.payload, config),
                        args.priority,
                        args.delay,
                        args.ttr,
                    )
                )
            elif args.command == "reserve":
                result = client.reserve(args.timeout)
                if isinstance(result, Job):
                    _print(result)
                    if args.delete:
                        client.delete(result.id)
                        logger.info(f"任务 {result.id} 已删除")
                else:
                    logger.warning(f"未保留到任务: {result.status}")
                    return 2
            elif args.command == "delete":
                client.delete(args.job_id)
                logger.info(f"任务 {args.job_id} 已删除")
            elif args.command == "stats":
                _print(client.stats())
            elif args.command == "stats-tube":
                stats = client.stats_tube(args.tube)
                if stats is None:
                    logger.error(f"tube [{args.tube}] 不存在")
                    return 1
                _print(stats)
            elif args.command == "list-tubes":
                _print(client.list_tubes())
    except BeansError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
