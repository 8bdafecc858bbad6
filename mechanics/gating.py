"""
伤害 / 特效门控
根据解析出的 TimingRecord 决定是否跳过攻击判定、拖尾特效，以及调整速度和判定参数
"""
from dataclasses import dataclass, asdict

from core.enums import AttackMode
from core.timing_store import TimingRecord


@dataclass
class GateDecision:
    """门控结果"""
    suppress: bool = False
    config_key: str = ""
    reason: str = ""


@dataclass(frozen=True)
class AttackOverrides:
    """一次近战判定期间替换的攻击参数（宿主负责在判定后还原）"""
    attack_range: float
    attack_height: float
    attack_offset: float
    attack_angle: float
    attack_ray_width: float
    attack_ray_width_char_extra: float
    attack_height_char1: float
    attack_height_char2: float
    max_y_angle: float

    def to_dict(self):
        return asdict(self)


def damage_gate_suppresses(record: TimingRecord) -> bool:
    """range 或 angle <= 0 时跳过整个伤害与音效触发"""
    return record.attack_range <= 0 or record.attack_angle <= 0


def vfx_gate_suppresses(record: TimingRecord) -> bool:
    return not record.enable_vfx


def check_damage_gate(mode: AttackMode, key: str, record: TimingRecord) -> GateDecision:
    # 普通攻击从不被门控
    if not mode.is_extra:
        return GateDecision(config_key=key)
    if damage_gate_suppresses(record):
        return GateDecision(
            suppress=True,
            config_key=key,
            reason=f"Range={record.attack_range:.2f}, Angle={record.attack_angle:.1f}",
        )
    return GateDecision(config_key=key)


def check_vfx_gate(mode: AttackMode, key: str, record: TimingRecord) -> GateDecision:
    if not mode.is_extra:
        return GateDecision(config_key=key)
    if vfx_gate_suppresses(record):
        return GateDecision(suppress=True, config_key=key, reason="EnableVFX=false")
    return GateDecision(config_key=key)


def apply_speed_multiplier(mode: AttackMode, record: TimingRecord, speed_scale: float,
                           epsilon: float = 0.001) -> float:
    """额外模式下按 speedMultiplier 缩放动画速度，接近 1 时不修改"""
    if not mode.is_extra:
        return speed_scale
    multiplier = max(0.0, record.speed_multiplier)
    if abs(multiplier - 1.0) > epsilon:
        return speed_scale * multiplier
    return speed_scale


def build_attack_overrides(record: TimingRecord) -> AttackOverrides:
    return AttackOverrides(
        attack_range=record.attack_range,
        attack_height=record.attack_height,
        attack_offset=record.attack_offset,
        attack_angle=record.attack_angle,
        attack_ray_width=record.attack_ray_width,
        attack_ray_width_char_extra=record.attack_ray_width_char_extra,
        attack_height_char1=record.attack_height_char1,
        attack_height_char2=record.attack_height_char2,
        max_y_angle=record.max_y_angle,
    )
