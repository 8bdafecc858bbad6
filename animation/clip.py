from dataclasses import dataclass, field
from typing import List, Optional

from core.enums import AnimEventName


@dataclass
class AnimationEvent:
    time: float                  # 片段本地时间（秒）
    function_name: str           # TrailOn / OnAttackTrigger / TrailOff
    int_parameter: int = 0       # 多段攻击时为命中序号
    float_parameter: float = 0.0
    string_parameter: str = ""

    @property
    def is_attack_trigger(self) -> bool:
        return self.function_name == AnimEventName.ATTACK_TRIGGER.value


@dataclass
class AnimationClip:
    name: str
    length: float                # 秒
    events: List[AnimationEvent] = field(default_factory=list)

    def sorted_events(self) -> List[AnimationEvent]:
        return sorted(self.events, key=lambda e: e.time)

    def attack_triggers(self) -> List[AnimationEvent]:
        return [e for e in self.events if e.is_attack_trigger]

    def find_event(self, function_name: str) -> Optional[AnimationEvent]:
        for e in self.events:
            if e.function_name == function_name:
                return e
        return None


@dataclass
class PlaybackState:
    """宿主返回的当前播放状态"""
    clip: AnimationClip
    normalized_time: float       # 可能大于 1（循环播放）
    controller_name: Optional[str] = None
