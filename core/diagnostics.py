"""
诊断日志
统一的日志出口，所有组件通过 log(category, message) 输出，不影响控制流
"""
import logging
import sys

from core.config_manager import get_config

LOGGER_NAME = "ExtraAttack"

# 避免重复配置
_LOGGING_CONFIGURED = False

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = None) -> logging.Logger:
    """
    配置日志输出

    Args:
        level: 日志级别；为空时读取 ConfigManager.log_level
    """
    global _LOGGING_CONFIGURED
    logger = logging.getLogger(LOGGER_NAME)

    # 已经配置过时只更新级别
    if not _LOGGING_CONFIGURED:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter('%(levelname)s %(message)s'))
        logger.addHandler(handler)
        _LOGGING_CONFIGURED = True

    level_name = (level or get_config().log_level).upper()
    logger.setLevel(_LEVEL_MAP.get(level_name, logging.INFO))
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def log(category: str, message: str, level: str = "INFO"):
    """
    统一日志接口
    Args:
        category: 日志类别 (System, COMBO, VFX, TIMING ...)
        message: 日志内容
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)
    """
    level = level.upper()
    # 错误总是输出，其余按类别开关过滤
    if level != "ERROR" and not get_config().is_category_enabled(category):
        return

    formatted_msg = f"[{category}] {message}"
    get_logger().log(_LEVEL_MAP.get(level, logging.INFO), formatted_msg)
