"""
事件驱动系统
额外攻击系统对外发布生命周期通知，调试工具或宿主集成层可以订阅
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Optional
from collections import defaultdict
from enum import Enum

from core.diagnostics import log


class EventType(Enum):
    """事件类型枚举"""
    # 模式切换
    MODE_CHANGED = "mode_changed"
    EXTRA_ATTACK_REQUESTED = "extra_attack_requested"
    EXTRA_ATTACK_REJECTED = "extra_attack_rejected"
    EXTRA_ATTACK_ENDED = "extra_attack_ended"

    # 连段
    CARRY_OVER_MARKED = "carry_over_marked"      # 额外攻击成功，等待清除
    CARRY_OVER_CLEARED = "carry_over_cleared"    # 普攻前已清除

    # 门控
    DAMAGE_SUPPRESSED = "damage_suppressed"
    VFX_SUPPRESSED = "vfx_suppressed"

    # 配置 / 生命周期
    CONFIG_RELOADED = "config_reloaded"
    CLIPS_SYNTHESIZED = "clips_synthesized"
    ACTOR_DESTROYED = "actor_destroyed"

    CUSTOM = "custom"


@dataclass
class Event:
    """事件对象"""
    event_type: EventType
    data: Dict[str, Any]
    actor_id: Optional[Hashable] = None

    def get(self, key: str, default: Any = None) -> Any:
        """安全地获取事件数据"""
        return self.data.get(key, default)


class EventListener:
    """事件监听器"""

    def __init__(self, callback: Callable[[Event], None],
                 priority: int = 0, once: bool = False):
        """
        Args:
            callback: 回调函数
            priority: 优先级（数值越大越先执行）
            once: 是否只触发一次
        """
        self.callback = callback
        self.priority = priority
        self.once = once
        self.executed_count = 0

    def execute(self, event: Event):
        # 出错也算执行过一次，一次性监听器照常移除
        self.executed_count += 1
        self.callback(event)

    def should_remove(self) -> bool:
        return self.once and self.executed_count > 0


class EventBus:
    """事件总线"""

    def __init__(self, max_history: int = 100):
        self._listeners: Dict[EventType, List[EventListener]] = defaultdict(list)
        self._event_history: List[Event] = []
        self._max_history = max_history
        self._enabled = True

    def subscribe(self, event_type: EventType,
                  callback: Callable[[Event], None],
                  priority: int = 0, once: bool = False) -> EventListener:
        """
        订阅事件

        Returns:
            EventListener: 监听器对象（可用于取消订阅）
        """
        listener = EventListener(callback, priority, once)
        self._listeners[event_type].append(listener)
        self._listeners[event_type].sort(key=lambda x: x.priority, reverse=True)
        return listener

    def unsubscribe(self, event_type: EventType, listener: EventListener):
        """取消订阅"""
        if listener in self._listeners.get(event_type, []):
            self._listeners[event_type].remove(listener)

    def emit(self, event: Event):
        """
        发布事件

        监听器只用于诊断：单个监听器出错只记录日志，不影响其他监听器和发布方
        """
        if not self._enabled:
            return

        self._event_history.append(event)
        if len(self._event_history) > self._max_history:
            self._event_history.pop(0)

        listeners_to_remove = []
        for listener in list(self._listeners.get(event.event_type, [])):
            try:
                listener.execute(event)
            except Exception as e:
                log("System", f"事件监听器出错 [{event.event_type.value}]: {e}", level="ERROR")
            if listener.should_remove():
                listeners_to_remove.append(listener)

        # 移除一次性监听器
        for listener in listeners_to_remove:
            self._listeners[event.event_type].remove(listener)

    def emit_simple(self, event_type: EventType, actor_id: Optional[Hashable] = None, **kwargs):
        """快捷方式：发布简单事件"""
        self.emit(Event(event_type=event_type, data=kwargs, actor_id=actor_id))

    def get_listener_count(self, event_type: Optional[EventType] = None) -> int:
        if event_type is None:
            return sum(len(listeners) for listeners in self._listeners.values())
        return len(self._listeners.get(event_type, []))

    def get_event_history(self, event_type: Optional[EventType] = None,
                          limit: int = 10) -> List[Event]:
        """获取事件历史（最新的在前）"""
        if event_type is None:
            return self._event_history[-limit:][::-1]

        filtered = [e for e in self._event_history if e.event_type == event_type]
        return filtered[-limit:][::-1]

    def enable(self):
        self._enabled = True

    def disable(self):
        self._enabled = False

    def reset(self):
        self._listeners.clear()
        self._event_history.clear()
