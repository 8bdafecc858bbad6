import unittest

from animation.clip import AnimationClip, AnimationEvent
from animation.hit_index import current_hit_index


def trigger(time, index):
    return AnimationEvent(time=time, function_name="OnAttackTrigger", int_parameter=index)


class TestHitIndex(unittest.TestCase):
    def setUp(self):
        self.clip = AnimationClip("combo", 2.0, [
            AnimationEvent(time=0.2, function_name="TrailOn"),
            trigger(0.5, 0),
            trigger(1.0, 1),
            trigger(1.6, 2),
        ])

    def test_within_tolerance(self):
        # 0.525 * 2.0 = 1.05，离 1.00 差 0.05
        self.assertEqual(current_hit_index(self.clip, 0.525), 1)

    def test_outside_tolerance(self):
        # 0.6 * 2.0 = 1.20，最近的触发差 0.2
        self.assertEqual(current_hit_index(self.clip, 0.6), 0)

    def test_picks_closest(self):
        clip = AnimationClip("dense", 1.0, [trigger(0.50, 3), trigger(0.56, 4)])
        self.assertEqual(current_hit_index(clip, 0.55), 4)

    def test_wraps_looping_time(self):
        self.assertEqual(current_hit_index(self.clip, 1.8), 2)

    def test_no_triggers(self):
        clip = AnimationClip("empty", 1.0, [AnimationEvent(time=0.5, function_name="TrailOn", int_parameter=7)])
        self.assertEqual(current_hit_index(clip, 0.5), 0)

    def test_custom_tolerance(self):
        self.assertEqual(current_hit_index(self.clip, 0.6, tolerance=0.25), 1)

    def test_broken_clip_returns_zero(self):
        self.assertEqual(current_hit_index(None, 0.5), 0)


if __name__ == '__main__':
    unittest.main()
