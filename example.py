# example.py
"""
这是一个 BeansClient API 的最小示例。

它演示了如何将 beanstalk-core 作为一个库导入到你自己的项目中，
并实现一个健壮的"保留 - 处理 - 删除/埋葬"消费循环。

运行此示例：
1. 确保本机 11300 端口运行着 beanstalkd (或在 .env 中设置 BEANSTALK_HOST)。
2. 确保已安装依赖： pip install -e .
3. 从项目根目录运行： python example.py
"""

import logging
import sys

from beanstalk_core import (
    BeansClient,
    ClientError,
    CommandError,
    ConfigError,
    Job,
    ServerError,
    create_config_from_dict,
    load_config_from_env,
)

# 日志配置
logging.basicConfig(
    level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("BeansExample")


def handle(job: Job) -> None:
    """业务处理函数：payload 缺少 task 字段时视为坏任务。"""
    if not isinstance(job.payload, dict) or "task" not in job.payload:
        raise ValueError(f"无法识别的任务: {job.payload!r}")
    logger.info(f"处理任务 {job.id}: {job.payload['task']}")


def main() -> int:
    """
    程序主入口点。
    投递两个任务，然后消费直到队列为空。
    """
    try:
        config = load_config_from_env()
    except ConfigError:
        logger.warning("未检测到 BEANSTALK_ 环境变量，使用默认配置")
        config = create_config_from_dict({"default_tube": "example", "watch": ["example"]})

    try:
        with BeansClient.from_config(config) as client:
            client.put({"task": "resize", "size": [640, 480]})
            client.put("not a dict", priority=10)

            while True:
                try:
                    result = client.reserve(timeout=1)
                except ClientError as e:
                    if e.job_id is None:
                        raise
                    # 数据体无法解码，连接仍同步，埋葬该任务后继续
                    logger.error(f"{e}，埋葬任务 {e.job_id}")
                    client.bury(e.job_id)
                    continue

                if not isinstance(result, Job):
                    logger.info(f"队列已空 ({result.status})，退出。")
                    break

                try:
                    handle(result)
                except ValueError as e:
                    logger.error(f"{e}，埋葬任务 {result.id}")
                    client.bury(result.id)
                else:
                    client.delete(result.id)

            logger.info(f"tube 统计: {client.stats_tube(config.default_tube)}")

    except CommandError as e:
        logger.error(f"命令被拒绝: {e} (status={e.status})")
        return 1
    except ServerError as e:
        logger.error(f"服务器异常: {e}")
        return 1
    except ClientError as e:
        # 包含 NetworkError：连接已不可用，需要重新连接
        logger.error(f"客户端/网络错误: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
