"""额外攻击消耗配置（体力 / Eitr / 冷却）"""
from typing import Callable, Dict

from pydantic import BaseModel, ConfigDict, Field

from core.diagnostics import log
from core.enums import AttackMode


class AttackCost(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # 基础消耗（受技能加成影响，由宿主计算）
    stamina_cost: float = Field(0.0, alias="staminaCost", ge=0.0)
    eitr_cost: float = Field(0.0, alias="eitrCost", ge=0.0)
    # 固定冷却时长（秒）
    cooldown_sec: float = Field(0.0, alias="cooldownSec", ge=0.0)


class CostConfig(BaseModel):
    """eas_attackconfig_cost.yaml 的整体结构"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    default: AttackCost = Field(default_factory=AttackCost)
    # {武器类型: {"secondary_Q": AttackCost}}
    weapon_types: Dict[str, Dict[str, AttackCost]] = Field(default_factory=dict, alias="weaponTypes")


class CostTable:
    """消耗查询，reload 时整体替换"""

    def __init__(self, config: CostConfig = None):
        self._config = config or CostConfig()

    def get_cost(self, weapon_type: str, mode: AttackMode) -> AttackCost:
        """按武器类型和模式查找，找不到时返回默认值"""
        per_mode = self._config.weapon_types.get(weapon_type, {})
        return per_mode.get(mode.value, self._config.default)

    def get_cooldown(self, weapon_type: str, mode: AttackMode) -> float:
        if not mode.is_extra:
            return 0.0
        return self.get_cost(weapon_type, mode).cooldown_sec

    def get_stamina_cost(self, weapon_type: str, mode: AttackMode, fallback: float) -> float:
        """体力消耗；未配置 (<=0) 时使用 fallback"""
        cost = self.get_cost(weapon_type, mode).stamina_cost
        return cost if cost > 0 else fallback

    def reload(self, loader: Callable[[], CostConfig]) -> bool:
        try:
            new_config = loader()
        except Exception as e:
            log("System", f"消耗配置重新加载失败: {e}", level="ERROR")
            return False
        self._config = new_config
        log("System", f"消耗配置已加载: {len(new_config.weapon_types)} 个武器类型")
        return True
