"""
配置键解析
(片段名, 模式, 命中序号) -> 时机配置中最具体的已存在键
"""
from typing import List, Optional, Tuple

from core.diagnostics import log
from core.enums import AttackMode
from core.timing_store import TimingRecord, TimingRecordStore, TimingSnapshot


def build_candidates(clip_base_name: str, mode: AttackMode, hit_index: int) -> List[str]:
    """
    按优先级生成候选键（已去重）

    1. {clip}{suffix}_hit{n}
    2. {clip}{suffix}
    3. {clip}_hit{n}
    4. {clip}
    """
    suffix = mode.suffix
    ordered = [
        f"{clip_base_name}{suffix}_hit{hit_index}",
        f"{clip_base_name}{suffix}",
        f"{clip_base_name}_hit{hit_index}",
        clip_base_name,
    ]
    # 普通模式下后缀为空，1/3 与 2/4 重复
    return list(dict.fromkeys(ordered))


class KeyResolver:
    def __init__(self, store: TimingRecordStore):
        self.store = store

    def resolve(self, clip_base_name: str, mode: AttackMode, hit_index: int) -> str:
        """
        解析配置键

        所有候选都不存在时返回片段名本身（随后查表得到默认记录）；
        解析过程中的异常只记录日志，同样退回片段名。
        """
        return self._resolve_in(self.store.snapshot(), clip_base_name, mode, hit_index)

    def resolve_record(self, clip_base_name: str, mode: AttackMode, hit_index: int,
                       snapshot: Optional[TimingSnapshot] = None) -> Tuple[str, TimingRecord]:
        """
        解析配置键并返回对应记录（同一快照内完成）

        调用方需要在多次解析间保持一致时，传入自己持有的快照
        """
        if snapshot is None:
            snapshot = self.store.snapshot()
        key = self._resolve_in(snapshot, clip_base_name, mode, hit_index)
        return key, snapshot.get(key)

    @staticmethod
    def _resolve_in(snapshot: TimingSnapshot, clip_base_name: str,
                    mode: AttackMode, hit_index: int) -> str:
        try:
            for key in build_candidates(clip_base_name, mode, hit_index):
                if snapshot.has(key):
                    return key
            log("TIMING", f"未找到配置: {clip_base_name} ({mode.value}, hit{hit_index})，使用默认值", level="DEBUG")
            return clip_base_name
        except Exception as e:
            log("System", f"解析配置键出错 [{clip_base_name}]: {e}", level="ERROR")
            return clip_base_name
