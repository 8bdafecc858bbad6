from typing import Hashable, Optional

from animation.clip import PlaybackState


class HostBridge:
    """
    宿主集成层接口

    额外攻击系统只通过这些方法接触宿主的攻击/动画对象，
    宿主内部字段（上一次攻击、排队的后续攻击计时等）由实现方负责读写。
    """

    def current_playback_state(self, actor_id: Hashable) -> Optional[PlaybackState]:
        """当前播放的片段和归一化时间；无法获取时返回 None"""
        raise NotImplementedError

    def peek_carried_attack_state(self, actor_id: Hashable) -> Optional[str]:
        """查看遗留的"上一次攻击"（仅用于日志），没有则返回 None"""
        return None

    def clear_carried_attack_state(self, actor_id: Hashable):
        """清除遗留的"上一次攻击"引用"""
        raise NotImplementedError

    def clear_queued_followup(self, actor_id: Hashable):
        """清除排队的后续攻击计时"""
        pass
