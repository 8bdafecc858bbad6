import traceback
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Optional, Tuple

from animation.clip import AnimationClip
from animation.event_synthesizer import synthesize_all
from animation.hit_index import current_hit_index
from core import config_loader
from core.config_manager import ConfigManager
from core.cost_config import CostConfig, CostTable
from core.diagnostics import log, setup_logging
from core.enums import AttackMode, RequestStatus
from core.exclusion_config import ExclusionConfig, ExclusionList
from core.replacement_map import ReplacementMapper, ReplacementSource
from core.timing_store import TimingConfig, TimingRecord, TimingRecordStore
from mechanics.attack_mode import AttackModeTracker, ControllerModeTable
from mechanics.gating import (
    AttackOverrides, apply_speed_multiplier, build_attack_overrides,
    check_damage_gate, check_vfx_gate,
)
from mechanics.key_resolver import KeyResolver
from simulation.event_system import EventBus, EventType
from simulation.host_bridge import HostBridge

MESSAGES = {
    RequestStatus.ACCEPTED.value: "Extra Attack!",
    RequestStatus.COOLDOWN.value: "Extra Attack on cooldown: {0}s",
    RequestStatus.NO_STAMINA.value: "Not enough stamina for Extra Attack",
    RequestStatus.NO_WEAPON.value: "No weapon equipped",
    RequestStatus.EXCLUDED.value: "This item type does not support extra attacks",
    RequestStatus.BLOCKED.value: "Cannot use Extra Attack right now",
}


@dataclass
class ExtraAttackRequest:
    """热键请求额外攻击的结果"""
    status: RequestStatus
    mode: AttackMode
    stamina_cost: float = 0.0
    eitr_cost: float = 0.0
    cooldown_remaining: float = 0.0

    @property
    def accepted(self) -> bool:
        return self.status is RequestStatus.ACCEPTED

    @property
    def message(self) -> str:
        if self.status is RequestStatus.ACCEPTED:
            return MESSAGES[self.status.value]
        text = MESSAGES.get(self.status.value, self.status.value)
        return text.format(f"{self.cooldown_remaining:.1f}")


@dataclass
class ResolvedAttack:
    """当前帧解析结果"""
    mode: AttackMode
    clip_name: str
    hit_index: int
    config_key: str
    record: TimingRecord


class ExtraAttackEngine:
    """
    额外攻击系统入口

    宿主在打过补丁的攻击/动画回调里调用这里的 on_* 方法。
    所有回调都不会向宿主抛异常：出错时记录日志并按普通攻击处理。
    """

    def __init__(self, host: HostBridge, store: Optional[TimingRecordStore] = None):
        self.config = ConfigManager.get_instance()
        self.host = host

        self.store = store or TimingRecordStore()
        self.mapper = ReplacementMapper(self.store)
        self.costs = CostTable()
        self.exclusions = ExclusionList()
        self.tracker = AttackModeTracker()
        self.resolver = KeyResolver(self.store)
        self.controller_modes = ControllerModeTable()
        self.event_bus = EventBus()

        self.external_clips: Dict[str, AnimationClip] = {}

        self.logger = setup_logging()

    def log(self, category: str, message: str, level: str = "INFO"):
        log(category, message, level)

    def _log_exception(self, where: str, e: Exception):
        self.log("System", f"{where} 出错: {e}", level="ERROR")
        if self.config.enable_detailed_logging:
            self.log("System", traceback.format_exc(), level="DEBUG")

    # ==========================================
    # 配置加载
    # ==========================================
    def initialize(self) -> bool:
        self.log("System", "=== 额外攻击系统初始化 ===")
        return self.reload()

    def reload(self,
               timing_loader: Optional[Callable[[], TimingConfig]] = None,
               replacement_loader: Optional[Callable[[], ReplacementSource]] = None,
               cost_loader: Optional[Callable[[], CostConfig]] = None,
               exclusion_loader: Optional[Callable[[], ExclusionConfig]] = None) -> bool:
        """
        重新加载全部配置并重新合成外部片段事件

        默认从 ConfigManager 指定的目录读取 YAML；任一部分失败时该部分保留旧数据。
        """
        loaded_source: ReplacementSource = {}

        def _load_replacements() -> ReplacementSource:
            loaded_source.update(config_loader.load_replacements())
            return loaded_source

        if replacement_loader is None:
            replacement_loader = _load_replacements
        if timing_loader is None:
            timing_loader = lambda: config_loader.load_timing_config(source=loaded_source or None)
        if cost_loader is None:
            cost_loader = config_loader.load_cost_config
        if exclusion_loader is None:
            exclusion_loader = config_loader.load_exclusion_config

        # 替换表先加载，时机配置的默认文件依赖它
        results = {
            "replacements": self.mapper.reload(replacement_loader),
            "timing": self.store.reload(timing_loader),
            "costs": self.costs.reload(cost_loader),
            "exclusions": self.exclusions.reload(exclusion_loader),
        }
        self.synthesize_external_clips()

        success = all(results.values())
        self.event_bus.emit_simple(EventType.CONFIG_RELOADED, success=success, **results)
        if not success:
            failed = [name for name, ok in results.items() if not ok]
            self.log("System", f"部分配置加载失败，继续使用旧数据: {', '.join(failed)}", level="WARNING")
        return success

    # ==========================================
    # 外部片段
    # ==========================================
    def register_external_clip(self, clip: AnimationClip, synthesize_now: bool = True):
        self.external_clips[clip.name] = clip
        if synthesize_now:
            synthesize_all({clip.name: clip}, self.mapper, self.store)

    def synthesize_external_clips(self) -> int:
        if not self.external_clips:
            return 0
        count = synthesize_all(self.external_clips, self.mapper, self.store)
        self.event_bus.emit_simple(EventType.CLIPS_SYNTHESIZED, count=count)
        return count

    # ==========================================
    # 模式切换
    # ==========================================
    def request_extra_attack(self, actor_id: Hashable, mode: AttackMode,
                             weapon_type: Optional[str] = None,
                             item_name: Optional[str] = None,
                             item_type: Optional[str] = None,
                             prefab_name: Optional[str] = None,
                             stamina: Optional[float] = None,
                             now: Optional[float] = None) -> ExtraAttackRequest:
        """
        热键按下时调用

        通过排除列表、冷却和体力检查后切换到额外模式并开始冷却；
        体力的实际扣除由宿主按返回的 stamina_cost 处理。
        """
        if not isinstance(mode, AttackMode) or not mode.is_extra:
            raise ValueError(f"不是额外攻击模式: {mode!r}")

        try:
            result = self._check_request(actor_id, mode, weapon_type, item_name,
                                         item_type, prefab_name, stamina, now)
        except Exception as e:
            self._log_exception("request_extra_attack", e)
            result = ExtraAttackRequest(RequestStatus.BLOCKED, mode)

        if not result.accepted:
            self.event_bus.emit_simple(EventType.EXTRA_ATTACK_REJECTED, actor_id=actor_id,
                                       mode=mode, status=result.status)
            return result

        previous = self.tracker.get_active_mode(actor_id)
        self.tracker.set_active_mode(actor_id, mode)
        self.tracker.set_cooldown(actor_id, mode, self.costs.get_cooldown(weapon_type, mode), now)
        self.event_bus.emit_simple(EventType.EXTRA_ATTACK_REQUESTED, actor_id=actor_id,
                                   mode=mode, stamina_cost=result.stamina_cost)
        if previous is not mode:
            self.event_bus.emit_simple(EventType.MODE_CHANGED, actor_id=actor_id,
                                       previous=previous, mode=mode)
        return result

    def _check_request(self, actor_id, mode, weapon_type, item_name, item_type,
                       prefab_name, stamina, now) -> ExtraAttackRequest:
        if not weapon_type:
            return ExtraAttackRequest(RequestStatus.NO_WEAPON, mode)

        if self.exclusions.is_excluded(item_name, item_type, prefab_name):
            return ExtraAttackRequest(RequestStatus.EXCLUDED, mode)

        remaining = self.tracker.cooldown_remaining(actor_id, mode, now)
        if remaining > 0:
            return ExtraAttackRequest(RequestStatus.COOLDOWN, mode, cooldown_remaining=remaining)

        cost = self.costs.get_cost(weapon_type, mode)
        stamina_cost = self.costs.get_stamina_cost(weapon_type, mode, self.config.default_stamina_cost)
        if stamina is not None and stamina < stamina_cost:
            return ExtraAttackRequest(RequestStatus.NO_STAMINA, mode, stamina_cost=stamina_cost)

        return ExtraAttackRequest(RequestStatus.ACCEPTED, mode,
                                  stamina_cost=stamina_cost, eitr_cost=cost.eitr_cost)

    def end_extra_attack(self, actor_id: Hashable):
        """额外攻击动画结束，回到普通模式"""
        previous = self.tracker.get_active_mode(actor_id)
        if not previous.is_extra:
            return
        self.tracker.set_active_mode(actor_id, AttackMode.NONE)
        self.event_bus.emit_simple(EventType.EXTRA_ATTACK_ENDED, actor_id=actor_id, mode=previous)
        self.event_bus.emit_simple(EventType.MODE_CHANGED, actor_id=actor_id,
                                   previous=previous, mode=AttackMode.NONE)

    def sync_mode_from_controller(self, actor_id: Hashable, controller_name: Optional[str]) -> AttackMode:
        """宿主替换动画控制器后，根据控制器名同步模式"""
        mode = self.controller_modes.detect(controller_name)
        previous = self.tracker.get_active_mode(actor_id)
        if mode is not previous:
            self.tracker.set_active_mode(actor_id, mode)
            self.event_bus.emit_simple(EventType.MODE_CHANGED, actor_id=actor_id,
                                       previous=previous, mode=mode)
        return mode

    # ==========================================
    # 连段清除
    # ==========================================
    def on_attack_started(self, actor_id: Hashable, is_secondary: bool, succeeded: bool):
        try:
            self.tracker.on_attack_started(actor_id, is_secondary, succeeded)
            if self.tracker.has_pending_clear(actor_id):
                self.event_bus.emit_simple(EventType.CARRY_OVER_MARKED, actor_id=actor_id)
        except Exception as e:
            self._log_exception("on_attack_started", e)

    def on_normal_attack_about_to_start(self, actor_id: Hashable) -> bool:
        """
        普通（非副）攻击开始前调用

        Returns:
            是否清除了遗留的连段状态
        """
        try:
            if not self.tracker.has_pending_clear(actor_id):
                return False

            previous_attack = self.host.peek_carried_attack_state(actor_id)
            self.host.clear_carried_attack_state(actor_id)
            self.host.clear_queued_followup(actor_id)
            # 宿主清除成功后才消耗标记，失败时下次普攻重试
            self.tracker.on_normal_attack_about_to_start(actor_id)
            self.log("COMBO", f"{actor_id}: 普攻前清除遗留连段 (previous={previous_attack or 'NULL'})")
            self.event_bus.emit_simple(EventType.CARRY_OVER_CLEARED, actor_id=actor_id,
                                       previous_attack=previous_attack)
            return True
        except Exception as e:
            self._log_exception("on_normal_attack_about_to_start", e)
            return False

    # ==========================================
    # 时机解析与门控
    # ==========================================
    def resolve_current(self, actor_id: Hashable) -> Optional[ResolvedAttack]:
        """
        解析角色当前帧对应的配置

        普通模式或无法获取播放状态时返回 None
        """
        mode = self.tracker.get_active_mode(actor_id)
        if not mode.is_extra:
            return None

        playback = self.host.current_playback_state(actor_id)
        if playback is None or playback.clip is None:
            return None

        clip = playback.clip
        hit_index = current_hit_index(clip, playback.normalized_time)
        key, record = self._resolve_clip(clip.name, mode, hit_index)
        return ResolvedAttack(mode, clip.name, hit_index, key, record)

    def _resolve_clip(self, clip_name: str, mode: AttackMode,
                      hit_index: int) -> Tuple[str, TimingRecord]:
        snapshot = self.store.snapshot()
        key, record = self.resolver.resolve_record(clip_name, mode, hit_index, snapshot)
        if snapshot.has(key):
            return key, record

        # 片段原名没有配置时，按替换表反查原版片段名再解析
        for vanilla, _ in self.mapper.lookup_clip(clip_name):
            mapped_key, mapped_record = self.resolver.resolve_record(vanilla, mode, hit_index, snapshot)
            if snapshot.has(mapped_key):
                return mapped_key, mapped_record
        return key, record

    def on_attack_trigger(self, actor_id: Hashable) -> bool:
        """
        攻击判定触发时调用

        Returns:
            True 继续执行伤害与音效；False 跳过
        """
        try:
            resolved = self.resolve_current(actor_id)
            if resolved is None:
                return True
            decision = check_damage_gate(resolved.mode, resolved.config_key, resolved.record)
        except Exception as e:
            self._log_exception("on_attack_trigger", e)
            return True

        if decision.suppress:
            self.log("COMBO", f"[SKIP] OnAttackTrigger: [{decision.config_key}] {decision.reason}")
            self.event_bus.emit_simple(EventType.DAMAGE_SUPPRESSED, actor_id=actor_id,
                                       config_key=decision.config_key)
        return not decision.suppress

    def on_trail_start(self, actor_id: Hashable) -> bool:
        """
        拖尾开始时调用

        Returns:
            True 生成拖尾特效；False 跳过
        """
        try:
            resolved = self.resolve_current(actor_id)
            if resolved is None:
                return True
            decision = check_vfx_gate(resolved.mode, resolved.config_key, resolved.record)
        except Exception as e:
            self._log_exception("on_trail_start", e)
            return True

        if decision.suppress:
            self.log("VFX", f"[SKIP] OnTrailStart: [{decision.config_key}] {decision.reason}")
            self.event_bus.emit_simple(EventType.VFX_SUPPRESSED, actor_id=actor_id,
                                       config_key=decision.config_key)
        return not decision.suppress

    def adjust_speed(self, actor_id: Hashable, speed_scale: float) -> float:
        """按配置的 speedMultiplier 调整动画速度"""
        try:
            resolved = self.resolve_current(actor_id)
            if resolved is None:
                return speed_scale
            new_scale = apply_speed_multiplier(resolved.mode, resolved.record, speed_scale,
                                               self.config.speed_multiplier_epsilon)
            if new_scale != speed_scale:
                self.log("TIMING", f"SpeedMultiplier: key={resolved.config_key} "
                                   f"{speed_scale:.2f} -> {new_scale:.2f}", level="DEBUG")
            return new_scale
        except Exception as e:
            self._log_exception("adjust_speed", e)
            return speed_scale

    def attack_overrides(self, actor_id: Hashable) -> Optional[AttackOverrides]:
        """
        近战判定前调用，返回需要临时替换的判定参数

        被伤害门控跳过的键不返回参数
        """
        try:
            resolved = self.resolve_current(actor_id)
            if resolved is None:
                return None
            if check_damage_gate(resolved.mode, resolved.config_key, resolved.record).suppress:
                return None
            return build_attack_overrides(resolved.record)
        except Exception as e:
            self._log_exception("attack_overrides", e)
            return None

    # ==========================================
    # 生命周期
    # ==========================================
    def on_actor_destroyed(self, actor_id: Hashable):
        self.tracker.cleanup(actor_id)
        self.event_bus.emit_simple(EventType.ACTOR_DESTROYED, actor_id=actor_id)
        self.log("System", f"{actor_id}: 已清理角色数据", level="DEBUG")
