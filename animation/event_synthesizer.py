"""
动画事件合成
根据时机记录计算 TrailOn / OnAttackTrigger / TrailOff 的时间戳并写回片段
"""
from typing import Dict, List

from animation.clip import AnimationClip, AnimationEvent
from core.diagnostics import log
from core.enums import AnimEventName
from core.replacement_map import ReplacementMapper
from core.timing_store import TimingRecord, TimingRecordStore, clamp01


def build_events(clip_length: float, record: TimingRecord) -> List[AnimationEvent]:
    """
    计算三个事件（语义顺序：拖尾开始、命中、拖尾结束）

    数值上拖尾开始可能晚于命中，这里不做排序约束
    """
    return [
        AnimationEvent(time=clip_length * clamp01(record.trail_on_timing),
                       function_name=AnimEventName.TRAIL_ON.value),
        AnimationEvent(time=clip_length * clamp01(record.hit_timing),
                       function_name=AnimEventName.ATTACK_TRIGGER.value),
        AnimationEvent(time=clip_length * clamp01(record.trail_off_timing),
                       function_name=AnimEventName.TRAIL_OFF.value),
    ]


def synthesize(clip: AnimationClip, record: TimingRecord):
    """用合成的三个事件整体替换片段的事件列表（可重复调用）"""
    events = build_events(clip.length, record)
    clip.events = events
    trail_on, hit, trail_off = events
    log("TIMING",
        f"[{clip.name}] 写入 {len(events)} 个事件: TrailOn={trail_on.time:.3f}s, "
        f"Hit={hit.time:.3f}s, TrailOff={trail_off.time:.3f}s",
        level="DEBUG")


def synthesize_all(external_clips: Dict[str, AnimationClip], mapper: ReplacementMapper,
                   store: TimingRecordStore) -> int:
    """
    为所有外部片段合成事件

    - 能解析到配置键：总是以配置为准重新写入
    - 解析不到且已有事件：保留手工事件
    - 解析不到且没有事件：按默认记录写入

    Returns:
        写入事件的片段数
    """
    count = 0
    snapshot = store.snapshot()
    for name, clip in external_clips.items():
        key = mapper.resolve_config_key_for_clip(name)
        if key is not None:
            synthesize(clip, snapshot.get(key))
            count += 1
            continue

        if clip.events:
            log("TIMING", f"[{name}] 已有 {len(clip.events)} 个事件，跳过", level="DEBUG")
            continue

        synthesize(clip, snapshot.default)
        count += 1

    log("TIMING", f"为 {count} 个片段写入动画事件")
    return count
