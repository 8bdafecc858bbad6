import unittest
from unittest.mock import patch

from core.enums import AttackMode
from core.timing_store import TimingRecord, TimingRecordStore
from mechanics.key_resolver import KeyResolver, build_candidates


def make_store(*keys):
    return TimingRecordStore({k: TimingRecord() for k in keys})


class TestBuildCandidates(unittest.TestCase):
    def test_order(self):
        self.assertEqual(
            build_candidates("Sword-Attack-R4", AttackMode.VARIANT_T, 2),
            ["Sword-Attack-R4_T_hit2", "Sword-Attack-R4_T",
             "Sword-Attack-R4_hit2", "Sword-Attack-R4"],
        )

    def test_none_mode_deduplicated(self):
        self.assertEqual(build_candidates("clip", AttackMode.NONE, 0), ["clip_hit0", "clip"])


class TestKeyResolver(unittest.TestCase):
    def test_most_specific_wins(self):
        store = make_store("clip_Q_hit1", "clip_Q", "clip_hit1", "clip")
        resolver = KeyResolver(store)
        self.assertEqual(resolver.resolve("clip", AttackMode.VARIANT_Q, 1), "clip_Q_hit1")

    def test_fallback_levels(self):
        resolver = KeyResolver(make_store("clip_Q", "clip_hit1", "clip"))
        self.assertEqual(resolver.resolve("clip", AttackMode.VARIANT_Q, 1), "clip_Q")

        resolver = KeyResolver(make_store("clip_hit1", "clip"))
        self.assertEqual(resolver.resolve("clip", AttackMode.VARIANT_Q, 1), "clip_hit1")

        resolver = KeyResolver(make_store("clip"))
        self.assertEqual(resolver.resolve("clip", AttackMode.VARIANT_Q, 1), "clip")

    def test_only_mode_key_exists(self):
        resolver = KeyResolver(make_store("Sword-Attack-R4_T"))
        self.assertEqual(resolver.resolve("Sword-Attack-R4", AttackMode.VARIANT_T, 2), "Sword-Attack-R4_T")

    def test_unknown_returns_clip_name(self):
        resolver = KeyResolver(make_store("other"))
        self.assertEqual(resolver.resolve("clip", AttackMode.VARIANT_G, 0), "clip")

    def test_other_mode_not_used(self):
        resolver = KeyResolver(make_store("clip_Q"))
        self.assertEqual(resolver.resolve("clip", AttackMode.VARIANT_T, 0), "clip")

    def test_resolve_record(self):
        store = TimingRecordStore({"clip_G": TimingRecord(hit_timing=0.2)})
        key, record = KeyResolver(store).resolve_record("clip", AttackMode.VARIANT_G, 0)
        self.assertEqual(key, "clip_G")
        self.assertAlmostEqual(record.hit_timing, 0.2)

    def test_resolve_record_uses_given_snapshot(self):
        old = TimingRecordStore({"clip_Q": TimingRecord(hit_timing=0.1)}).snapshot()
        resolver = KeyResolver(make_store())
        key, record = resolver.resolve_record("clip", AttackMode.VARIANT_Q, 0, old)
        self.assertEqual(key, "clip_Q")
        self.assertAlmostEqual(record.hit_timing, 0.1)

    def test_error_returns_clip_name(self):
        resolver = KeyResolver(make_store("clip_Q"))
        with patch("mechanics.key_resolver.build_candidates", side_effect=RuntimeError("boom")):
            self.assertEqual(resolver.resolve("clip", AttackMode.VARIANT_Q, 0), "clip")


if __name__ == '__main__':
    unittest.main()
