"""
攻击模式追踪
记录每个角色当前的额外攻击模式，并用一次性标记阻止额外攻击的连段带入下一次普通攻击
"""
import time
from dataclasses import dataclass, field
from typing import Dict, Hashable, Optional

from core.config_manager import get_config
from core.diagnostics import log
from core.enums import AttackMode


@dataclass
class ActorAttackState:
    """单个角色的攻击状态"""
    active_mode: AttackMode = AttackMode.NONE
    pending_clear_on_next_normal: bool = False  # 一次性：下次普攻前清除连段
    cooldowns: Dict[AttackMode, float] = field(default_factory=dict)  # 模式 -> 冷却结束时间


class AttackModeTracker:
    """
    攻击模式追踪器

    状态以稳定的角色 ID 为键，首次写入时创建，角色销毁时移除。
    所有查询对未知角色返回默认值，不会报错。
    """

    def __init__(self):
        self._states: Dict[Hashable, ActorAttackState] = {}

    def _get_or_create(self, actor_id: Hashable) -> ActorAttackState:
        state = self._states.get(actor_id)
        if state is None:
            state = ActorAttackState()
            self._states[actor_id] = state
        return state

    def get_state(self, actor_id: Hashable) -> Optional[ActorAttackState]:
        return self._states.get(actor_id)

    def get_active_mode(self, actor_id: Hashable) -> AttackMode:
        """当前模式；未见过的角色返回 NONE"""
        state = self._states.get(actor_id)
        return state.active_mode if state else AttackMode.NONE

    def is_in_extra_attack(self, actor_id: Hashable) -> bool:
        return self.get_active_mode(actor_id).is_extra

    def set_active_mode(self, actor_id: Hashable, mode: AttackMode):
        """切换模式（由热键处理驱动）"""
        if not isinstance(mode, AttackMode):
            raise TypeError(f"mode 必须是 AttackMode: {mode!r}")
        self._get_or_create(actor_id).active_mode = mode

    def on_attack_started(self, actor_id: Hashable, is_secondary: bool, succeeded: bool):
        """
        攻击尝试结束后调用

        攻击成功且处于额外模式时，标记"下次普攻前清除连段"（置位而非翻转）
        """
        if not succeeded:
            return
        state = self._states.get(actor_id)
        if state is None or not state.active_mode.is_extra:
            return
        state.pending_clear_on_next_normal = True
        log("COMBO", f"{actor_id}: 额外攻击开始 ({state.active_mode.value}, secondary={is_secondary}) -> 标记下次普攻清除连段",
            level="DEBUG")

    def on_normal_attack_about_to_start(self, actor_id: Hashable) -> bool:
        """
        普通攻击即将开始前调用

        Returns:
            True 表示标记已被消耗，调用方需要清除宿主的"上一次攻击"引用和排队的后续攻击计时
        """
        state = self._states.get(actor_id)
        if state is None or not state.pending_clear_on_next_normal:
            return False
        state.pending_clear_on_next_normal = False
        return True

    def has_pending_clear(self, actor_id: Hashable) -> bool:
        state = self._states.get(actor_id)
        return bool(state and state.pending_clear_on_next_normal)

    # --- 冷却 ---

    def set_cooldown(self, actor_id: Hashable, mode: AttackMode, duration: float,
                     now: Optional[float] = None):
        if not mode.is_extra or duration <= 0:
            return
        now = time.monotonic() if now is None else now
        self._get_or_create(actor_id).cooldowns[mode] = now + duration

    def cooldown_remaining(self, actor_id: Hashable, mode: AttackMode,
                           now: Optional[float] = None) -> float:
        state = self._states.get(actor_id)
        if state is None or not mode.is_extra:
            return 0.0
        deadline = state.cooldowns.get(mode)
        if deadline is None:
            return 0.0
        now = time.monotonic() if now is None else now
        return max(0.0, deadline - now)

    def is_on_cooldown(self, actor_id: Hashable, mode: AttackMode,
                       now: Optional[float] = None) -> bool:
        return self.cooldown_remaining(actor_id, mode, now) > 0

    def cleanup(self, actor_id: Hashable):
        """移除角色的全部状态（幂等）"""
        self._states.pop(actor_id, None)

    def tracked_actors(self):
        return list(self._states.keys())


class ControllerModeTable:
    """
    运行时控制器名 -> 攻击模式

    注册时一次性建表，之后只做字典查找
    """

    def __init__(self, controller_modes: Optional[Dict[str, str]] = None):
        if controller_modes is None:
            controller_modes = get_config().controller_modes
        self._table: Dict[str, AttackMode] = {}
        for name, mode_value in controller_modes.items():
            self.register(name, AttackMode(mode_value))

    def register(self, controller_name: str, mode: AttackMode):
        self._table[controller_name] = mode

    def detect(self, controller_name: Optional[str]) -> AttackMode:
        """未登记的控制器视为普通模式"""
        if controller_name is None:
            return AttackMode.NONE
        return self._table.get(controller_name, AttackMode.NONE)
