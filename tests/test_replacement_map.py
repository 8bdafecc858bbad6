import unittest

from core.enums import AttackMode
from core.replacement_map import ReplacementMapper
from core.timing_store import TimingRecord, TimingRecordStore

SOURCE = {
    "Sword": {"secondary_Q": "ExtSwordQ", "secondary_T": "ExtSwordT", "Q": "LegacyClip"},
    "Club": {"secondary_G": "ExtClubG"},
}


class TestReplacementMapper(unittest.TestCase):
    def setUp(self):
        self.store = TimingRecordStore({"sword_secondary_Q": TimingRecord(), "mace_secondary_G": TimingRecord()})
        self.mapper = ReplacementMapper(self.store, SOURCE)

    def test_forward_lookup(self):
        self.assertEqual(self.mapper.get_external_clip("Sword", AttackMode.VARIANT_T), "ExtSwordT")
        self.assertIsNone(self.mapper.get_external_clip("Sword", AttackMode.VARIANT_G))
        self.assertIsNone(self.mapper.get_external_clip("Axe", AttackMode.VARIANT_Q))

    def test_reverse_lookup(self):
        self.assertEqual(self.mapper.lookup_clip("ExtClubG"), (("mace_secondary", AttackMode.VARIANT_G),))
        self.assertEqual(self.mapper.lookup_clip("nothing"), ())

    def test_legacy_keys_skipped(self):
        self.assertEqual(self.mapper.lookup_clip("LegacyClip"), ())

    def test_config_key_for_clip(self):
        self.assertEqual(self.mapper.resolve_config_key_for_clip("ExtSwordQ"), "sword_secondary_Q")
        self.assertEqual(self.mapper.resolve_config_key_for_clip("ExtClubG"), "mace_secondary_G")
        # 有映射但时机配置里没有对应键
        self.assertIsNone(self.mapper.resolve_config_key_for_clip("ExtSwordT"))

    def test_reload_replaces_table(self):
        self.assertTrue(self.mapper.reload(lambda: {"Axe": {"secondary_Q": "ExtAxeQ"}}))
        self.assertEqual(self.mapper.categories(), ["Axe"])
        self.assertEqual(self.mapper.lookup_clip("ExtSwordQ"), ())

    def test_reload_failure_keeps_table(self):
        def broken():
            raise IOError("unreadable")

        old = self.mapper.table()
        self.assertFalse(self.mapper.reload(broken))
        self.assertIs(self.mapper.table(), old)
        self.assertEqual(self.mapper.get_external_clip("Sword", AttackMode.VARIANT_Q), "ExtSwordQ")

    def test_old_table_unchanged_after_reload(self):
        old = self.mapper.table()
        self.mapper.reload(lambda: {})
        self.assertIn("Sword", old.forward)
        self.assertEqual(self.mapper.categories(), [])


if __name__ == '__main__':
    unittest.main()
