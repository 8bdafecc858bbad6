import unittest

from core.enums import AttackMode
from core.timing_store import TimingRecord
from mechanics.gating import (
    apply_speed_multiplier, build_attack_overrides, check_damage_gate, check_vfx_gate,
)


class TestDamageGate(unittest.TestCase):
    def test_zero_range_suppresses(self):
        decision = check_damage_gate(AttackMode.VARIANT_Q, "k", TimingRecord(attack_range=0))
        self.assertTrue(decision.suppress)
        self.assertEqual(decision.config_key, "k")

    def test_zero_angle_suppresses(self):
        self.assertTrue(check_damage_gate(AttackMode.VARIANT_T, "k", TimingRecord(attack_angle=0)).suppress)

    def test_normal_record_allowed(self):
        self.assertFalse(check_damage_gate(AttackMode.VARIANT_G, "k", TimingRecord()).suppress)

    def test_normal_mode_never_gated(self):
        record = TimingRecord(attack_range=0, attack_angle=0)
        self.assertFalse(check_damage_gate(AttackMode.NONE, "k", record).suppress)


class TestVfxGate(unittest.TestCase):
    def test_disabled_vfx(self):
        record = TimingRecord(enable_vfx=False)
        self.assertTrue(check_vfx_gate(AttackMode.VARIANT_Q, "k", record).suppress)
        self.assertFalse(check_vfx_gate(AttackMode.NONE, "k", record).suppress)

    def test_vfx_independent_of_damage(self):
        record = TimingRecord(attack_range=0)
        self.assertFalse(check_vfx_gate(AttackMode.VARIANT_Q, "k", record).suppress)


class TestSpeedMultiplier(unittest.TestCase):
    def test_applied(self):
        record = TimingRecord(speed_multiplier=1.5)
        self.assertAlmostEqual(apply_speed_multiplier(AttackMode.VARIANT_Q, record, 2.0), 3.0)

    def test_near_one_ignored(self):
        record = TimingRecord(speed_multiplier=1.0005)
        self.assertEqual(apply_speed_multiplier(AttackMode.VARIANT_Q, record, 2.0), 2.0)

    def test_normal_mode_ignored(self):
        record = TimingRecord(speed_multiplier=0.5)
        self.assertEqual(apply_speed_multiplier(AttackMode.NONE, record, 1.0), 1.0)


class TestOverrides(unittest.TestCase):
    def test_copies_parameters(self):
        record = TimingRecord(attack_range=2.5, attack_angle=45, max_y_angle=30)
        overrides = build_attack_overrides(record).to_dict()
        self.assertEqual(overrides["attack_range"], 2.5)
        self.assertEqual(overrides["attack_angle"], 45)
        self.assertEqual(overrides["max_y_angle"], 30)
        self.assertEqual(len(overrides), 9)


if __name__ == '__main__':
    unittest.main()
