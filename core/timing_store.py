"""
动画时机记录存储
配置键 -> TimingRecord 的只读快照，重新加载时整表替换
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.diagnostics import log


def clamp01(value: float) -> float:
    """限制到 [0, 1]"""
    return min(1.0, max(0.0, float(value)))


class TimingRecord(BaseModel):
    """单个配置键对应的时机/行为记录（不可变）"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # 动画事件时机（片段长度的比例 0.0 ~ 1.0）
    hit_timing: float = Field(0.45, alias="hitTiming")
    trail_on_timing: float = Field(0.35, alias="trailOnTiming")
    trail_off_timing: float = Field(0.70, alias="trailOffTiming")
    chain_timing: float = Field(0.75, alias="chainTiming")
    speed_multiplier: float = Field(1.0, alias="speedMultiplier")

    # 攻击判定参数；range/angle <= 0 表示关闭伤害和音效
    attack_range: float = Field(1.5, alias="attackRange")
    attack_height: float = Field(0.6, alias="attackHeight")
    attack_offset: float = Field(0.0, alias="attackOffset")
    attack_angle: float = Field(90.0, alias="attackAngle")
    attack_ray_width: float = Field(0.0, alias="attackRayWidth")
    attack_ray_width_char_extra: float = Field(0.0, alias="attackRayWidthCharExtra")
    attack_height_char1: float = Field(0.0, alias="attackHeightChar1")
    attack_height_char2: float = Field(0.0, alias="attackHeightChar2")
    max_y_angle: float = Field(0.0, alias="maxYAngle")

    enable_vfx: bool = Field(True, alias="enableVFX")

    @field_validator("hit_timing", "trail_on_timing", "trail_off_timing", "chain_timing")
    @classmethod
    def _clamp_ratio(cls, v: float) -> float:
        return clamp01(v)

    @field_validator("speed_multiplier")
    @classmethod
    def _floor_speed(cls, v: float) -> float:
        return max(0.0, v)

    def to_yaml_dict(self) -> Dict[str, object]:
        """按配置文件的驼峰键导出"""
        return self.model_dump(by_alias=True)


class TimingConfig(BaseModel):
    """AnimationTiming.yaml 的整体结构"""
    model_config = ConfigDict(extra="ignore")

    default: TimingRecord = Field(default_factory=TimingRecord)
    animations: Dict[str, TimingRecord] = Field(default_factory=dict)


@dataclass(frozen=True)
class TimingSnapshot:
    """一次完整加载的结果；读者持有同一个快照即可保证一致"""
    default: TimingRecord = field(default_factory=TimingRecord)
    records: Mapping[str, TimingRecord] = field(default_factory=lambda: MappingProxyType({}))

    def has(self, key: str) -> bool:
        return key in self.records

    def get(self, key: str) -> TimingRecord:
        return self.records.get(key, self.default)


class TimingRecordStore:
    """
    TimingRecord 存储

    只按精确字符串查找，不做任何通配或回退（回退由 KeyResolver 负责）。
    reload 先构建完整的新快照，再一次性替换引用。
    """

    def __init__(self, records: Optional[Dict[str, TimingRecord]] = None,
                 default: Optional[TimingRecord] = None):
        self._snapshot = self._build_snapshot(records or {}, default)

    @staticmethod
    def _build_snapshot(records: Dict[str, TimingRecord],
                        default: Optional[TimingRecord]) -> TimingSnapshot:
        return TimingSnapshot(
            default=default if default is not None else TimingRecord(),
            records=MappingProxyType(dict(records)),
        )

    @classmethod
    def from_config(cls, config: TimingConfig) -> 'TimingRecordStore':
        return cls(config.animations, config.default)

    def snapshot(self) -> TimingSnapshot:
        """获取当前快照"""
        return self._snapshot

    @property
    def default(self) -> TimingRecord:
        return self._snapshot.default

    def has(self, key: str) -> bool:
        """检查配置键是否存在"""
        return self._snapshot.has(key)

    def get(self, key: str) -> TimingRecord:
        """获取记录；不存在时返回默认记录"""
        return self._snapshot.get(key)

    def get_exact(self, key: str) -> Optional[TimingRecord]:
        return self._snapshot.records.get(key)

    def keys(self) -> List[str]:
        return list(self._snapshot.records.keys())

    def __contains__(self, key) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        return len(self._snapshot.records)

    def replace(self, records: Dict[str, TimingRecord], default: Optional[TimingRecord] = None):
        """整表替换"""
        self._snapshot = self._build_snapshot(records, default)

    def reload(self, loader: Callable[[], TimingConfig]) -> bool:
        """
        重新加载

        Args:
            loader: 返回 TimingConfig 的加载函数（通常读取 YAML）

        Returns:
            是否成功；失败时保留上一次成功加载的数据
        """
        try:
            config = loader()
            new_snapshot = self._build_snapshot(config.animations, config.default)
        except Exception as e:
            log("System", f"时机配置重新加载失败，保留旧数据: {e}", level="ERROR")
            return False

        self._snapshot = new_snapshot
        log("System", f"时机配置已加载: {len(new_snapshot.records)} 条")
        return True
