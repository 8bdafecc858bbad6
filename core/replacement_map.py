"""
动画替换映射
武器类型 × 槽位(Q/T/G) -> 外部片段名，以及外部片段名 -> (原版片段名, 槽位) 的反查
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from core.config_manager import get_config
from core.diagnostics import log
from core.enums import AttackMode, mode_from_slot_key
from core.timing_store import TimingRecordStore

# {类型: {"secondary_Q": 外部片段名, ...}}
ReplacementSource = Dict[str, Dict[str, str]]


@dataclass(frozen=True)
class ReplacementTable:
    """一次完整加载的替换表（正向 + 反查）"""
    forward: Mapping[str, Mapping[AttackMode, str]] = field(default_factory=lambda: MappingProxyType({}))
    reverse: Mapping[str, Tuple[Tuple[str, AttackMode], ...]] = field(default_factory=lambda: MappingProxyType({}))


class ReplacementMapper:
    """
    替换映射管理器

    读者总是看到完整的旧表或完整的新表：reload 在局部变量里构建新表，最后替换引用。
    """

    def __init__(self, store: TimingRecordStore, source: Optional[ReplacementSource] = None):
        self.store = store
        self.config = get_config()
        self._table = self._build_table(source or {})

    def _build_table(self, source: ReplacementSource) -> ReplacementTable:
        forward: Dict[str, Mapping[AttackMode, str]] = {}
        reverse: Dict[str, List[Tuple[str, AttackMode]]] = {}

        for category, slots in source.items():
            if not isinstance(slots, dict):
                continue
            vanilla = self.config.get_vanilla_clip_name(category)
            by_mode: Dict[AttackMode, str] = {}

            for slot_key, clip_name in slots.items():
                mode = mode_from_slot_key(slot_key)
                # 旧格式或无法识别的槽位直接跳过
                if mode is None or not clip_name:
                    continue
                by_mode[mode] = clip_name
                reverse.setdefault(clip_name, []).append((vanilla, mode))

            forward[category] = MappingProxyType(by_mode)

        return ReplacementTable(
            forward=MappingProxyType(forward),
            reverse=MappingProxyType({k: tuple(v) for k, v in reverse.items()}),
        )

    def reload(self, loader: Callable[[], ReplacementSource]) -> bool:
        """
        清空并重新填充映射

        Returns:
            是否成功；失败时保留旧表
        """
        try:
            new_table = self._build_table(loader() or {})
        except Exception as e:
            log("System", f"替换映射重新加载失败，保留旧数据: {e}", level="ERROR")
            return False

        self._table = new_table
        log("System", f"替换映射已加载: {len(new_table.forward)} 个武器类型")
        return True

    def table(self) -> ReplacementTable:
        return self._table

    def categories(self) -> List[str]:
        return list(self._table.forward.keys())

    def get_external_clip(self, category: str, mode: AttackMode) -> Optional[str]:
        """正向查找：类型 + 模式 -> 外部片段名"""
        slots = self._table.forward.get(category)
        if slots is None:
            return None
        return slots.get(mode)

    def vanilla_clip_for(self, category: str) -> str:
        return self.config.get_vanilla_clip_name(category)

    def lookup_clip(self, clip_name: str) -> Tuple[Tuple[str, AttackMode], ...]:
        """反查：外部片段名 -> [(原版片段名, 模式)]"""
        return self._table.reverse.get(clip_name, ())

    def resolve_config_key_for_clip(self, clip_name: str) -> Optional[str]:
        """
        为外部片段找到配置键

        候选键为 "{原版片段名}_{槽位}"（如 sword_secondary_Q），存在于时机配置中才返回；
        返回 None 表示调用方应改用片段原名。
        """
        snapshot = self.store.snapshot()
        for vanilla, mode in self.lookup_clip(clip_name):
            key = f"{vanilla}_{mode.slot}"
            if snapshot.has(key):
                return key
        return None
