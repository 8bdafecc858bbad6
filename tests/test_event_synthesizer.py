import unittest

from animation.clip import AnimationClip, AnimationEvent
from animation.event_synthesizer import build_events, synthesize, synthesize_all
from core.replacement_map import ReplacementMapper
from core.timing_store import TimingRecord, TimingRecordStore


class TestBuildEvents(unittest.TestCase):
    def test_times_scaled_by_length(self):
        record = TimingRecord(trail_on_timing=0.1, hit_timing=0.4, trail_off_timing=0.6)
        trail_on, hit, trail_off = build_events(2.0, record)
        self.assertAlmostEqual(trail_on.time, 0.2)
        self.assertAlmostEqual(hit.time, 0.8)
        self.assertAlmostEqual(trail_off.time, 1.2)
        self.assertEqual([e.function_name for e in (trail_on, hit, trail_off)],
                         ["TrailOn", "OnAttackTrigger", "TrailOff"])

    def test_order_not_enforced(self):
        record = TimingRecord(trail_on_timing=0.8, hit_timing=0.2)
        trail_on, hit, _ = build_events(1.0, record)
        self.assertGreater(trail_on.time, hit.time)


class TestSynthesize(unittest.TestCase):
    def test_idempotent(self):
        clip = AnimationClip("ext", 1.5)
        record = TimingRecord()
        synthesize(clip, record)
        first = list(clip.events)
        synthesize(clip, record)
        self.assertEqual(clip.events, first)
        self.assertEqual(len(clip.events), 3)
        self.assertAlmostEqual(clip.find_event("OnAttackTrigger").time, 1.5 * 0.45)

    def test_replaces_existing_events(self):
        clip = AnimationClip("ext", 1.0, [AnimationEvent(time=0.1, function_name="Footstep")])
        synthesize(clip, TimingRecord())
        self.assertIsNone(clip.find_event("Footstep"))


class TestSynthesizeAll(unittest.TestCase):
    def setUp(self):
        self.store = TimingRecordStore({"sword_secondary_Q": TimingRecord(hit_timing=0.2)})
        self.mapper = ReplacementMapper(self.store, {"Sword": {"secondary_Q": "ExtSwordQ"}})

    def test_mapped_clip_uses_record(self):
        clip = AnimationClip("ExtSwordQ", 1.0, [trigger_at(0.9)])
        count = synthesize_all({clip.name: clip}, self.mapper, self.store)
        self.assertEqual(count, 1)
        self.assertAlmostEqual(clip.find_event("OnAttackTrigger").time, 0.2)

    def test_unmapped_clip_keeps_manual_events(self):
        clip = AnimationClip("Handmade", 1.0, [trigger_at(0.9)])
        count = synthesize_all({clip.name: clip}, self.mapper, self.store)
        self.assertEqual(count, 0)
        self.assertEqual(len(clip.events), 1)
        self.assertAlmostEqual(clip.events[0].time, 0.9)

    def test_unmapped_empty_clip_gets_default(self):
        clip = AnimationClip("Bare", 2.0)
        synthesize_all({clip.name: clip}, self.mapper, self.store)
        self.assertAlmostEqual(clip.find_event("OnAttackTrigger").time, 0.9)


def trigger_at(time):
    return AnimationEvent(time=time, function_name="OnAttackTrigger")


if __name__ == '__main__':
    unittest.main()
