import unittest

from pydantic import ValidationError

from core.timing_store import TimingConfig, TimingRecord, TimingRecordStore, clamp01


class TestTimingRecord(unittest.TestCase):
    def test_defaults(self):
        record = TimingRecord()
        self.assertAlmostEqual(record.hit_timing, 0.45)
        self.assertAlmostEqual(record.trail_on_timing, 0.35)
        self.assertAlmostEqual(record.trail_off_timing, 0.70)
        self.assertAlmostEqual(record.chain_timing, 0.75)
        self.assertTrue(record.enable_vfx)

    def test_camel_case_aliases(self):
        record = TimingRecord.model_validate({"hitTiming": 0.3, "attackRange": 0, "enableVFX": False})
        self.assertAlmostEqual(record.hit_timing, 0.3)
        self.assertEqual(record.attack_range, 0)
        self.assertFalse(record.enable_vfx)

    def test_ratios_clamped(self):
        record = TimingRecord(hit_timing=1.5, trail_on_timing=-0.2, speed_multiplier=-1.0)
        self.assertEqual(record.hit_timing, 1.0)
        self.assertEqual(record.trail_on_timing, 0.0)
        self.assertEqual(record.speed_multiplier, 0.0)

    def test_immutable(self):
        record = TimingRecord()
        with self.assertRaises(ValidationError):
            record.hit_timing = 0.9

    def test_yaml_dict_uses_aliases(self):
        data = TimingRecord().to_yaml_dict()
        self.assertIn("hitTiming", data)
        self.assertIn("enableVFX", data)

    def test_clamp01(self):
        self.assertEqual(clamp01(2), 1.0)
        self.assertEqual(clamp01(-3), 0.0)
        self.assertEqual(clamp01(0.4), 0.4)


class TestTimingRecordStore(unittest.TestCase):
    def setUp(self):
        self.store = TimingRecordStore({"sword_secondary_Q": TimingRecord(hit_timing=0.3)})

    def test_exact_lookup_only(self):
        self.assertTrue(self.store.has("sword_secondary_Q"))
        self.assertFalse(self.store.has("sword_secondary"))
        self.assertFalse(self.store.has("Sword_Secondary_Q"))

    def test_get_falls_back_to_default(self):
        self.assertAlmostEqual(self.store.get("missing").hit_timing, 0.45)
        self.assertIsNone(self.store.get_exact("missing"))

    def test_reload_replaces_whole_table(self):
        config = TimingConfig(animations={"other": TimingRecord()})
        self.assertTrue(self.store.reload(lambda: config))
        self.assertEqual(self.store.keys(), ["other"])
        self.assertNotIn("sword_secondary_Q", self.store)

    def test_reload_failure_keeps_previous(self):
        def broken():
            raise ValueError("bad yaml")

        old = self.store.snapshot()
        self.assertFalse(self.store.reload(broken))
        self.assertIs(self.store.snapshot(), old)
        self.assertTrue(self.store.has("sword_secondary_Q"))

    def test_snapshot_stable_across_reload(self):
        # 读者持有的旧快照不会被 reload 修改
        old = self.store.snapshot()
        self.store.reload(lambda: TimingConfig())
        self.assertTrue(old.has("sword_secondary_Q"))
        self.assertEqual(len(self.store), 0)


if __name__ == '__main__':
    unittest.main()
