from enum import Enum


class AttackMode(Enum):
    NONE = "none"                  # 普通攻击（左键）
    VARIANT_Q = "secondary_Q"      # Q 键
    VARIANT_T = "secondary_T"      # T 键
    VARIANT_G = "secondary_G"      # G 键

    @property
    def suffix(self) -> str:
        """配置键后缀（"" / "_Q" / "_T" / "_G"）"""
        return MODE_SUFFIX[self]

    @property
    def slot(self) -> str:
        """槽位名（"" / "Q" / "T" / "G"）"""
        return MODE_SLOT[self]

    @property
    def is_extra(self) -> bool:
        return self is not AttackMode.NONE


# 一次性建表，避免到处散落模式字符串
MODE_SUFFIX = {
    AttackMode.NONE: "",
    AttackMode.VARIANT_Q: "_Q",
    AttackMode.VARIANT_T: "_T",
    AttackMode.VARIANT_G: "_G",
}

MODE_SLOT = {
    AttackMode.NONE: "",
    AttackMode.VARIANT_Q: "Q",
    AttackMode.VARIANT_T: "T",
    AttackMode.VARIANT_G: "G",
}

SLOT_MODE = {slot: mode for mode, slot in MODE_SLOT.items() if slot}

# 替换表里的槽位键前缀（secondary_Q 等）
SLOT_KEY_PREFIX = "secondary_"


def mode_from_slot_key(slot_key: str):
    """
    解析替换表槽位键

    "secondary_Q" -> AttackMode.VARIANT_Q；不认识的键（旧格式等）返回 None
    """
    if not isinstance(slot_key, str) or not slot_key.startswith(SLOT_KEY_PREFIX):
        return None
    return SLOT_MODE.get(slot_key[len(SLOT_KEY_PREFIX):])


class AnimEventName(Enum):
    """动画事件函数名（与宿主动画系统约定）"""
    TRAIL_ON = "TrailOn"
    ATTACK_TRIGGER = "OnAttackTrigger"
    TRAIL_OFF = "TrailOff"


class RequestStatus(Enum):
    """额外攻击请求结果"""
    ACCEPTED = "accepted"
    NO_WEAPON = "extra_attack_no_weapon"
    EXCLUDED = "extra_attack_tool_bomb_blocked"
    COOLDOWN = "extra_attack_cooldown"
    NO_STAMINA = "extra_attack_no_stamina"
    BLOCKED = "extra_attack_blocked"
