"""
命中序号判定
多段攻击片段中，根据当前播放位置找到最近的攻击触发事件
"""
from typing import Optional

from animation.clip import AnimationClip
from core.config_manager import get_config
from core.diagnostics import log


def current_hit_index(clip: AnimationClip, normalized_time: float,
                      tolerance: Optional[float] = None) -> int:
    """
    获取当前命中序号

    Args:
        clip: 已烘焙事件的片段
        normalized_time: 当前归一化播放时间（会折回 [0, 1)）
        tolerance: 容差（秒，片段本地时间），默认读取 ConfigManager

    Returns:
        容差内最近的 OnAttackTrigger 事件的 int_parameter；没有则返回 0
    """
    if tolerance is None:
        tolerance = get_config().hit_index_tolerance

    try:
        current_time = (normalized_time % 1.0) * clip.length

        closest_diff = float("inf")
        hit_index = 0
        for evt in clip.events:
            if not evt.is_attack_trigger:
                continue
            diff = abs(evt.time - current_time)
            if diff < closest_diff and diff < tolerance:
                closest_diff = diff
                hit_index = evt.int_parameter
        return hit_index
    except Exception as e:
        log("System", f"命中序号判定出错 [{getattr(clip, 'name', '?')}]: {e}", level="ERROR")
        return 0
