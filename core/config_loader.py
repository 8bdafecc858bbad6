"""
配置文件读写
YAML 文件 -> pydantic 模型；文件不存在或为空时生成默认文件
"""
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import ValidationError

from core.config_manager import get_config
from core.cost_config import AttackCost, CostConfig
from core.diagnostics import log
from core.enums import mode_from_slot_key
from core.exclusion_config import ExclusionConfig
from core.replacement_map import ReplacementSource
from core.timing_store import TimingConfig, TimingRecord

# 默认替换表（武器类型 -> 槽位 -> 外部片段名）
DEFAULT_REPLACEMENTS: ReplacementSource = {
    "Greatsword": {
        "secondary_Q": "Eas_GreatSword_Combo1External",
        "secondary_T": "Eas_GreatSword_JumpAttackExternal",
        "secondary_G": "Eas_GreatSword_SlideAttackExternal",
    },
    "Sword": {
        "secondary_Q": "OneHand_Up_Attack_B_1External",
        "secondary_T": "OneHand_Up_Attack_B_2External",
        "secondary_G": "OneHand_Up_Attack_B_3External",
    },
    "Axe": {
        "secondary_Q": "MWA_RightHand_Attack03External",
        "secondary_T": "Attack04External",
        "secondary_G": "0DS_Attack_07External",
    },
    "Battleaxe": {
        "secondary_Q": "2Hand_Combo01External",
        "secondary_T": "2Hand_Combo02External",
        "secondary_G": "2Hand_Combo03External",
    },
    "Club": {
        "secondary_Q": "StrongAttk1External",
        "secondary_T": "StrongAttk3External",
        "secondary_G": "StrongAttk4External",
    },
    "Spear": {
        "secondary_Q": "ChargeAttkExternal",
        "secondary_T": "HardAttkExternal",
        "secondary_G": "0MGSA_Attack_Dash01External",
    },
    "Knife": {
        "secondary_Q": "Sw-Ma-GS-Up_Attack_A_1External",
        "secondary_T": "Sw-Ma-GS-Up_Attack_A_2External",
        "secondary_G": "Sw-Ma-GS-Up_Attack_A_3External",
    },
    "Fist": {
        "secondary_Q": "Flying Knee Punch ComboExternal",
        "secondary_T": "Standing Melee Attack 360 LowExternal",
        "secondary_G": "Standing Melee Combo AttackExternal",
    },
}

TIMING_HEADER = """\
# ============================================================================
# Extra Attack System - Animation Timing Configuration
# ============================================================================
# Key Format:
#   VanillaClipName_Q       - Q key
#   VanillaClipName_T       - T key
#   VanillaClipName_G       - G key
#   VanillaClipName_Q_hit0  - Q key, first hit (multi-hit)
#   VanillaClipName         - Fallback (no mode suffix)
# attackRange / attackAngle = 0 disables damage and sound for that key.
# ============================================================================
"""


def _read_yaml(path: Path):
    """读取 YAML；文件不存在返回 None，内容为空返回 {}"""
    if not path.exists():
        return None
    with open(path, 'r', encoding='utf-8') as f:
        content = f.read()
    if not content.strip():
        return {}
    data = yaml.safe_load(content)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"配置文件顶层必须是映射: {path}")
    return data


def _write_yaml(path: Path, data: dict, header: str = ""):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        if header:
            f.write(header)
            f.write("\n")
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)


# --- 替换表 ---

def load_replacements(path: Optional[Path] = None) -> ReplacementSource:
    """读取 AnimationReplacement_WeaponTypes.yaml"""
    config = get_config()
    path = Path(path) if path else config.config_path(config.replacement_file)

    data = _read_yaml(path)
    if data is None:
        log("System", f"{path.name} 不存在，生成默认文件")
        save_replacements(path, DEFAULT_REPLACEMENTS)
        return {k: dict(v) for k, v in DEFAULT_REPLACEMENTS.items()}

    weapon_types = data.get("WeaponTypes") or {}
    if not weapon_types:
        log("System", f"{path.name} 中没有武器类型", level="WARNING")
    return {
        str(category): {str(k): str(v) for k, v in (slots or {}).items()}
        for category, slots in weapon_types.items()
    }


def save_replacements(path: Path, source: ReplacementSource):
    _write_yaml(Path(path), {"WeaponTypes": source})


# --- 时机配置 ---

def default_timing_config(source: Optional[ReplacementSource] = None) -> TimingConfig:
    """
    根据替换表生成默认时机配置

    每个 (武器类型, 槽位) 生成一条 "{原版片段名}_{槽位}" 记录
    """
    config = get_config()
    source = DEFAULT_REPLACEMENTS if source is None else source
    animations: Dict[str, TimingRecord] = {}
    for category, slots in source.items():
        vanilla = config.get_vanilla_clip_name(category)
        for slot_key in slots:
            mode = mode_from_slot_key(slot_key)
            if mode is None:
                continue
            animations.setdefault(f"{vanilla}_{mode.slot}", TimingRecord())
    return TimingConfig(default=TimingRecord(), animations=animations)


def load_timing_config(path: Optional[Path] = None,
                       source: Optional[ReplacementSource] = None) -> TimingConfig:
    """
    读取 AnimationTiming.yaml

    单条记录校验失败时跳过该条并告警，其余记录照常加载；
    文件本身无法解析时抛出异常（由调用方保留旧数据）。
    """
    config = get_config()
    path = Path(path) if path else config.config_path(config.timing_file)

    data = _read_yaml(path)
    if not data:
        log("System", f"{path.name} 不存在或为空，生成默认文件")
        timing_config = default_timing_config(source)
        save_timing_config(path, timing_config)
        return timing_config

    default = TimingRecord.model_validate(data.get("default") or {})
    animations: Dict[str, TimingRecord] = {}
    for key, raw in (data.get("animations") or {}).items():
        try:
            animations[str(key)] = TimingRecord.model_validate(raw or {})
        except ValidationError as e:
            log("System", f"跳过无效的时机记录 [{key}]: {e.error_count()} 个错误", level="WARNING")

    return TimingConfig(default=default, animations=animations)


def save_timing_config(path: Path, timing_config: TimingConfig):
    data = {
        "default": timing_config.default.to_yaml_dict(),
        "animations": {k: v.to_yaml_dict() for k, v in sorted(timing_config.animations.items())},
    }
    _write_yaml(Path(path), data, header=TIMING_HEADER)


# --- 消耗配置 ---

def default_cost_config(source: Optional[ReplacementSource] = None) -> CostConfig:
    source = DEFAULT_REPLACEMENTS if source is None else source
    base = AttackCost(stamina_cost=get_config().default_stamina_cost)
    weapon_types = {
        category: {slot_key: base for slot_key in slots if mode_from_slot_key(slot_key)}
        for category, slots in source.items()
    }
    return CostConfig(default=base, weapon_types=weapon_types)


def load_cost_config(path: Optional[Path] = None) -> CostConfig:
    config = get_config()
    path = Path(path) if path else config.config_path(config.cost_file)

    data = _read_yaml(path)
    if not data:
        log("System", f"{path.name} 不存在或为空，生成默认文件")
        cost_config = default_cost_config()
        _write_yaml(path, cost_config.model_dump(by_alias=True))
        return cost_config
    return CostConfig.model_validate(data)


# --- 排除列表 ---

def load_exclusion_config(path: Optional[Path] = None) -> ExclusionConfig:
    config = get_config()
    path = Path(path) if path else config.config_path(config.exclusion_file)

    data = _read_yaml(path)
    if not data:
        log("System", f"{path.name} 不存在或为空，生成默认文件")
        exclusion = ExclusionConfig.create_default()
        _write_yaml(path, exclusion.model_dump(by_alias=True))
        return exclusion
    return ExclusionConfig.model_validate(data)
