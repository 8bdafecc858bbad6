"""
统一配置管理系统
集中管理额外攻击系统的路径、容差和日志开关，支持从 JSON/YAML 覆盖
"""
import json
import yaml
from pathlib import Path
from typing import Dict, Any


class ConfigManager:
    """单例配置管理器"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        # 配置文件位置
        self.config_dir = "config/ExtraAttackSystem"
        self.timing_file = "AnimationTiming.yaml"
        self.replacement_file = "AnimationReplacement_WeaponTypes.yaml"
        self.cost_file = "eas_attackconfig_cost.yaml"
        self.exclusion_file = "ExtraAttackExclusion.yaml"

        # 命中序号判定容差 (秒，片段本地时间)
        self.hit_index_tolerance = 0.1

        # 速度倍率与 1.0 的差值小于此值时视为未修改
        self.speed_multiplier_epsilon = 0.001

        # 没有消耗配置时的默认体力消耗（与原版副攻击一致）
        self.default_stamina_cost = 20.0

        # 武器类型 -> 原版副攻击片段名
        self.vanilla_clip_names = {
            "Sword": "sword_secondary",
            "Greatsword": "greatsword_secondary",
            "Axe": "axe_secondary",
            "Battleaxe": "battleaxe_secondary",
            "Club": "mace_secondary",
            "Spear": "spear_secondary",
            "Polearm": "atgeir_secondary",
            "Knife": "knife_secondary",
            "Fist": "fist_secondary",
        }

        # 运行时控制器名 -> 攻击模式值
        self.controller_modes = {
            "ExtraAttack_Q": "secondary_Q",
            "ExtraAttack_T_Swords": "secondary_T",
            "ExtraAttack_T_Clubs": "secondary_T",
            "ExtraAttack_G_Swords": "secondary_G",
            "ExtraAttack_G_Clubs": "secondary_G",
        }

        # 日志配置
        self.log_level = "INFO"  # DEBUG, INFO, WARNING, ERROR
        self.enable_combo_log = True
        self.enable_vfx_log = True
        self.enable_timing_log = True
        self.enable_detailed_logging = False  # 启用详细日志

        self._initialized = True

    def load_from_dict(self, config_dict: Dict[str, Any]):
        """从字典加载配置"""
        for key, value in config_dict.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def load_from_json(self, file_path: str):
        """从JSON文件加载配置"""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"配置文件不存在: {file_path}")

        with open(path, 'r', encoding='utf-8') as f:
            config_dict = json.load(f)
            self.load_from_dict(config_dict)

    def load_from_yaml(self, file_path: str):
        """从YAML文件加载配置"""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"配置文件不存在: {file_path}")

        with open(path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f) or {}
            self.load_from_dict(config_dict)

    def save_to_json(self, file_path: str):
        """保存配置到JSON文件"""
        config_dict = self.to_dict()
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config_dict, f, indent=2, ensure_ascii=False)

    def to_dict(self) -> Dict[str, Any]:
        """导出为字典"""
        return {
            key: value
            for key, value in self.__dict__.items()
            if not key.startswith('_')
        }

    def config_path(self, file_name: str) -> Path:
        """拼接配置目录下的文件路径"""
        return Path(self.config_dir) / file_name

    def get_vanilla_clip_name(self, category: str) -> str:
        """
        获取武器类型对应的原版副攻击片段名

        未登记的类型按 "{小写类型}_secondary" 推导
        """
        name = self.vanilla_clip_names.get(category)
        if name:
            return name
        return f"{category.lower()}_secondary"

    def is_category_enabled(self, category: str) -> bool:
        """按类别开关日志（COMBO / VFX / TIMING），其他类别始终输出"""
        switches = {
            "COMBO": self.enable_combo_log,
            "VFX": self.enable_vfx_log,
            "TIMING": self.enable_timing_log,
        }
        return switches.get(category.upper(), True)

    def reset_to_defaults(self):
        """重置为默认配置"""
        self._initialized = False
        self.__init__()

    @classmethod
    def get_instance(cls) -> 'ConfigManager':
        """获取单例实例"""
        return cls()


# 提供全局访问点
def get_config() -> ConfigManager:
    """获取配置管理器实例"""
    return ConfigManager.get_instance()
