"""额外攻击排除列表（工具类物品等不允许额外攻击）"""
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.diagnostics import log


class ExclusionConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    excluded_item_names: List[str] = Field(default_factory=list, alias="ExcludedItemNames")
    excluded_item_types: List[str] = Field(default_factory=list, alias="ExcludedItemTypes")
    excluded_prefab_names: List[str] = Field(default_factory=list, alias="ExcludedPrefabNames")

    @classmethod
    def create_default(cls) -> 'ExclusionConfig':
        # 默认屏蔽所有工具类以及常见工具预制体
        return cls(
            excluded_item_types=["Tool"],
            excluded_prefab_names=[
                "Hammer", "Hoe", "PickaxeAntler", "PickaxeIron",
                "PickaxeBlackMetal", "Cultivator", "Tankard", "TankardOdin",
            ],
        )


class ExclusionList:
    def __init__(self, config: ExclusionConfig = None):
        self._config = config or ExclusionConfig()

    @property
    def config(self) -> ExclusionConfig:
        return self._config

    def is_excluded(self, item_name: Optional[str] = None, item_type: Optional[str] = None,
                    prefab_name: Optional[str] = None) -> bool:
        """任一条件命中即排除"""
        config = self._config
        if item_name and item_name in config.excluded_item_names:
            return True
        if item_type and item_type in config.excluded_item_types:
            return True
        if prefab_name and prefab_name in config.excluded_prefab_names:
            return True
        return False

    def reload(self, loader: Callable[[], ExclusionConfig]) -> bool:
        try:
            new_config = loader()
        except Exception as e:
            log("System", f"排除列表重新加载失败: {e}", level="ERROR")
            return False
        self._config = new_config
        log("System", f"排除列表已加载: names={len(new_config.excluded_item_names)}, "
                      f"types={len(new_config.excluded_item_types)}, "
                      f"prefabs={len(new_config.excluded_prefab_names)}")
        return True
