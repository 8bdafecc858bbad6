from animation.clip import AnimationClip, AnimationEvent, PlaybackState
from core.cost_config import CostConfig
from core.enums import AttackMode
from core.exclusion_config import ExclusionConfig
from core.timing_store import TimingConfig, TimingRecord
from simulation.engine import ExtraAttackEngine
from simulation.event_system import EventType
from simulation.host_bridge import HostBridge


class DemoHost(HostBridge):
    """最小的演示宿主：一个角色、一个正在播放的片段"""

    def __init__(self):
        self.playback = {}
        self.previous_attack = {}
        self.queued_followup = {}

    def current_playback_state(self, actor_id):
        return self.playback.get(actor_id)

    def peek_carried_attack_state(self, actor_id):
        return self.previous_attack.get(actor_id)

    def clear_carried_attack_state(self, actor_id):
        self.previous_attack.pop(actor_id, None)

    def clear_queued_followup(self, actor_id):
        self.queued_followup.pop(actor_id, None)


def main():
    host = DemoHost()
    engine = ExtraAttackEngine(host)

    print("==================================================")
    print("       额外攻击系统演示")
    print("==================================================")

    # 1. 加载配置（不读文件，直接提供数据）
    timing = TimingConfig(animations={
        "sword_secondary_Q": TimingRecord(hit_timing=0.3, trail_on_timing=0.2, trail_off_timing=0.6),
        "Sword-Attack-R4_T": TimingRecord(attack_range=0, speed_multiplier=1.2),
    })
    engine.reload(
        timing_loader=lambda: timing,
        replacement_loader=lambda: {"Sword": {"secondary_Q": "OneHand_Up_Attack_B_1External"}},
        cost_loader=CostConfig,
        exclusion_loader=ExclusionConfig.create_default,
    )
    engine.event_bus.subscribe(EventType.DAMAGE_SUPPRESSED,
                               lambda e: print(f"  -> 伤害已跳过: {e.get('config_key')}"))

    # 2. 外部片段合成事件
    external = AnimationClip("OneHand_Up_Attack_B_1External", 1.5)
    engine.register_external_clip(external)
    print("\n[外部片段事件]")
    for evt in external.sorted_events():
        print(f"  {evt.function_name:<16} {evt.time:.3f}s")

    # 3. Q 键额外攻击
    player = "player-1"
    result = engine.request_extra_attack(player, AttackMode.VARIANT_Q, weapon_type="Sword", stamina=100)
    print(f"\n[请求 Q] {result.message} (体力 {result.stamina_cost})")
    host.playback[player] = PlaybackState(external, 0.3)
    resolved = engine.resolve_current(player)
    print(f"  解析键: {resolved.config_key}, 命中序号 {resolved.hit_index}")
    engine.on_attack_started(player, is_secondary=True, succeeded=True)
    host.previous_attack[player] = "sword_secondary"

    # 4. 回到普攻：清除遗留连段
    engine.end_extra_attack(player)
    cleared = engine.on_normal_attack_about_to_start(player)
    print(f"\n[普攻] 清除遗留连段: {cleared}, 再次普攻: {engine.on_normal_attack_about_to_start(player)}")

    # 5. T 键多段攻击，第三段命中被配置关闭
    multi = AnimationClip("Sword-Attack-R4", 2.0, [
        AnimationEvent(time=0.4, function_name="OnAttackTrigger", int_parameter=0),
        AnimationEvent(time=0.7, function_name="OnAttackTrigger", int_parameter=1),
        AnimationEvent(time=1.0, function_name="OnAttackTrigger", int_parameter=2),
    ])
    engine.request_extra_attack(player, AttackMode.VARIANT_T, weapon_type="Sword", stamina=100)
    host.playback[player] = PlaybackState(multi, 0.5)
    print("\n[请求 T]")
    allowed = engine.on_attack_trigger(player)
    print(f"  执行伤害: {allowed}, 速度 1.0 -> {engine.adjust_speed(player, 1.0):.2f}")

    engine.on_actor_destroyed(player)
    print(f"\n追踪中的角色: {engine.tracker.tracked_actors()}")


if __name__ == "__main__":
    main()
