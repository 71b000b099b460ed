from . import config
from .models import ReceiptSettings, LOCALIZED_ONLY, MAIN_LOCALIZED
import unittest
import tempfile
import os


class ConfigItemTest(unittest.TestCase):
    def test_text_config(self):
        with self.assertRaises(Exception):
            config.ConfigItem("test:bad_default", None)
        with self.assertRaises(Exception):
            config.ConfigItem("test:no_none", "", allow_none=True)

        cfg = config.ConfigItem("test:text", "hello")
        self.assertEqual(cfg.value_from("goodbye"), "goodbye")
        self.assertEqual(cfg.value_from(""), "hello")
        self.assertEqual(cfg.value_from(None), "hello")
        self.assertEqual(cfg.value_from(42), "42")
        cfg = config.ConfigItem("test:text_or_none", None, allow_none=True)
        self.assertIsNone(cfg.value_from(""))

    def test_names(self):
        cfg = config.BooleanConfigItem("test:show_a_thing", False)
        self.assertEqual(cfg.section, "test")
        self.assertEqual(cfg.name, "show_a_thing")
        self.assertEqual(cfg.api_name, "showAThing")

    def test_boolean_config(self):
        with self.assertRaises(Exception):
            config.BooleanConfigItem("test:bad_default", "wibble")
        cfg = config.BooleanConfigItem("test:bool", True)
        self.assertFalse(cfg.value_from("No"))
        self.assertTrue(cfg.value_from("Yes"))
        self.assertFalse(cfg.value_from(False))
        self.assertTrue(cfg.value_from(""))
        cfg = config.BooleanConfigItem("test:bool_false", False)
        self.assertTrue(cfg.value_from(True))
        self.assertTrue(cfg.value_from("true"))
        self.assertFalse(cfg.value_from(None))

    def test_choice_config(self):
        with self.assertRaises(Exception):
            config.ChoiceConfigItem("test:bad_default", "Z", choices="AB")
        cfg = config.ChoiceConfigItem("test:choice", "A", choices=("A", "B"))
        self.assertEqual(cfg.value_from("B"), "B")
        self.assertEqual(cfg.value_from(" b "), "B")
        with self.assertLogs("tillslip.config", "WARNING"):
            self.assertEqual(cfg.value_from("C"), "A")

    def test_positive_int_config(self):
        with self.assertRaises(Exception):
            config.PositiveIntConfigItem("test:bad_default", -1)
        cfg = config.PositiveIntConfigItem("test:posint", 5)
        self.assertEqual(cfg.value_from("4"), 4)
        self.assertEqual(cfg.value_from(48), 48)
        with self.assertLogs("tillslip.config", "WARNING"):
            self.assertEqual(cfg.value_from("0"), 5)
        with self.assertLogs("tillslip.config", "WARNING"):
            self.assertEqual(cfg.value_from("wide"), 5)


class SettingsTest(unittest.TestCase):
    def test_defaults_match_settings(self):
        defaults = ReceiptSettings()
        items = config.ConfigItem.items("receipt")
        self.assertEqual(len(items), 15)
        for ci in items:
            with self.subTest(key=ci.key):
                self.assertEqual(getattr(defaults, ci.name), ci.default)
        self.assertEqual(config.settings_from_table({}), defaults)
        self.assertEqual(config.settings_from_table(None), defaults)

    def test_settings_from_table(self):
        settings = config.settings_from_table({
            "showSubtotal": False,
            "hide_free_modifier_options": "yes",
            "printLanguage": "localized_only",
            "receiptHeader": "",
            "receipt_footer": "See you soon",
            "invoiceTitle": "",
        })
        self.assertFalse(settings.show_subtotal)
        self.assertTrue(settings.hide_free_modifier_options)
        self.assertEqual(settings.print_language, LOCALIZED_ONLY)
        self.assertIsNone(settings.receipt_header)
        self.assertEqual(settings.receipt_footer, "See you soon")
        self.assertIsNone(settings.invoice_title)
        self.assertTrue(settings.show_order_number)

    def test_bad_values_fall_back(self):
        with self.assertLogs("tillslip.config", "WARNING") as cm:
            settings = config.settings_from_table({
                "printLanguage": "KLINGON",
                "showLogo": True,
            })
        self.assertEqual(settings.print_language, MAIN_LOCALIZED)
        self.assertTrue(any("showLogo" in m for m in cm.output))

    def test_layout_from_table(self):
        self.assertEqual(config.layout_from_table({}),
                         {'width': 42, 'brand_name': "SADI"})
        self.assertEqual(config.layout_from_table({"paper": "58mm"}),
                         {'width': 32, 'brand_name': "SADI"})
        self.assertEqual(
            config.layout_from_table(
                {"paper": "58mm", "width": 40, "brandName": "Qahwa"}),
            {'width': 40, 'brand_name': "Qahwa"})


class SettingsFileTest(unittest.TestCase):
    def write(self, text):
        fd, path = tempfile.mkstemp(suffix=".toml")
        with os.fdopen(fd, "w") as f:
            f.write(text)
        self.addCleanup(os.unlink, path)
        return path

    def test_read_settings_file(self):
        path = self.write(
            '[receipt]\n'
            'show_subtotal = false\n'
            'showCalories = true\n'
            'receipt_footer = """\n'
            'Thank you,\n'
            'come again"""\n'
            '\n'
            '[layout]\n'
            'paper = "80mm-wide"\n'
            'brand_name = "Qahwa"\n')
        settings, layout = config.read_settings_file(path)
        self.assertFalse(settings.show_subtotal)
        self.assertTrue(settings.show_calories)
        self.assertEqual(settings.receipt_footer, "Thank you,\ncome again")
        self.assertEqual(layout, {'width': 48, 'brand_name': "Qahwa"})

    def test_empty_file(self):
        settings, layout = config.read_settings_file(self.write(""))
        self.assertEqual(settings, ReceiptSettings())
        self.assertEqual(layout['width'], 42)

    def test_missing_file(self):
        with self.assertRaises(config.ConfigError):
            config.read_settings_file("/nonexistent/tillslip.toml")

    def test_bad_toml(self):
        with self.assertRaises(config.ConfigError):
            config.read_settings_file(self.write("[receipt\n"))

    def test_receipt_not_a_table(self):
        with self.assertRaises(config.ConfigError):
            config.read_settings_file(self.write("receipt = 5\n"))


if __name__ == '__main__':
    unittest.main()
