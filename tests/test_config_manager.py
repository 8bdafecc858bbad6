import os
import tempfile
import unittest

from core.config_manager import ConfigManager, get_config


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        # 重置单例以保证测试隔离
        ConfigManager._instance = None
        self.config = get_config()

    def tearDown(self):
        ConfigManager._instance = None

    def test_singleton(self):
        c1 = get_config()
        c2 = get_config()
        self.assertIs(c1, c2)

    def test_default_values(self):
        self.assertAlmostEqual(self.config.hit_index_tolerance, 0.1)
        self.assertAlmostEqual(self.config.speed_multiplier_epsilon, 0.001)
        self.assertEqual(self.config.default_stamina_cost, 20.0)
        self.assertEqual(self.config.controller_modes["ExtraAttack_Q"], "secondary_Q")

    def test_vanilla_clip_name(self):
        self.assertEqual(self.config.get_vanilla_clip_name("Club"), "mace_secondary")
        self.assertEqual(self.config.get_vanilla_clip_name("Polearm"), "atgeir_secondary")
        # 未登记的类型按小写推导
        self.assertEqual(self.config.get_vanilla_clip_name("Crossbow"), "crossbow_secondary")

    def test_category_switches(self):
        self.config.load_from_dict({"enable_vfx_log": False})
        self.assertFalse(self.config.is_category_enabled("VFX"))
        self.assertTrue(self.config.is_category_enabled("COMBO"))
        self.assertTrue(self.config.is_category_enabled("System"))

    def test_load_from_dict_ignores_unknown(self):
        self.config.load_from_dict({"hit_index_tolerance": 0.2, "no_such_field": 1})
        self.assertAlmostEqual(self.config.hit_index_tolerance, 0.2)
        self.assertFalse(hasattr(self.config, "no_such_field"))

    def test_yaml_and_json_roundtrip(self):
        with tempfile.TemporaryDirectory() as tmp:
            yaml_path = os.path.join(tmp, "settings.yaml")
            with open(yaml_path, "w", encoding="utf-8") as f:
                f.write("log_level: DEBUG\ndefault_stamina_cost: 15\n")
            self.config.load_from_yaml(yaml_path)
            self.assertEqual(self.config.log_level, "DEBUG")
            self.assertEqual(self.config.default_stamina_cost, 15)

            json_path = os.path.join(tmp, "out", "settings.json")
            self.config.save_to_json(json_path)
            self.config.reset_to_defaults()
            self.assertEqual(self.config.log_level, "INFO")

            self.config.load_from_json(json_path)
            self.assertEqual(self.config.log_level, "DEBUG")

    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            self.config.load_from_yaml("/nonexistent/settings.yaml")


if __name__ == '__main__':
    unittest.main()
