import shutil
import tempfile
import unittest
from pathlib import Path

import yaml

from streamguard.rules.defaults.loader import CATALOG_FILE, DefaultRulesLoader
from streamguard.rules.domain.enums import RuleId
from streamguard.shared.domain.exceptions import ConfigurationError


class TestDefaultRulesLoader(unittest.TestCase):
    def setUp(self):
        self.loader = DefaultRulesLoader()
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def _write(self, name, data):
        path = self.test_dir / name
        with open(path, "w") as f:
            yaml.dump(data, f)
        return path

    def test_bundled_catalog_is_complete(self):
        catalog = self.loader.load_catalog()
        self.assertEqual(list(catalog), list(RuleId))
        for rule_id, definition in catalog.items():
            self.assertEqual(definition.name, rule_id.slug)
            self.assertTrue(definition.message)

    def test_heuristic_rules_are_marked(self):
        catalog = self.loader.load_catalog()
        heuristic = {int(r) for r, d in catalog.items() if d.heuristic}
        self.assertEqual(heuristic, {3, 8, 9})

    def test_overrides_disable_by_slug_and_id(self):
        path = self._write(
            "overrides.yaml",
            {
                "disabled": [8],
                "rules": {"limit-before-sort": {"enabled": False}},
            },
        )
        config = self.loader.load_config(path)
        self.assertFalse(config.is_enabled(RuleId.SINGLE_OPERATION_PIPELINE))
        self.assertFalse(config.is_enabled(RuleId.LIMIT_BEFORE_SORT))
        self.assertTrue(config.is_enabled(RuleId.MISSING_NULL_CHECK))

    def test_override_message_and_threshold(self):
        path = self._write(
            "overrides.yaml",
            {"parallel_threshold": 500, "rules": {7: {"message": "filter nulls first"}}},
        )
        config = self.loader.load_config(path)
        self.assertEqual(config.parallel_threshold, 500)
        self.assertEqual(config.definition(RuleId.MISSING_NULL_CHECK).message, "filter nulls first")

    def test_explicit_threshold_wins(self):
        path = self._write("overrides.yaml", {"parallel_threshold": 500})
        config = self.loader.load_config(path, parallel_threshold=42)
        self.assertEqual(config.parallel_threshold, 42)

    def test_unknown_rule_is_rejected(self):
        path = self._write("overrides.yaml", {"disabled": ["no-such-rule"]})
        with self.assertRaises(ConfigurationError):
            self.loader.load_config(path)

    def test_invalid_threshold_is_rejected(self):
        path = self._write("overrides.yaml", {"parallel_threshold": 0})
        with self.assertRaises(ConfigurationError):
            self.loader.load_config(path)

    def test_rules_section_must_be_a_mapping(self):
        path = self._write("overrides.yaml", {"rules": ["limit-before-sort"]})
        with self.assertRaises(ConfigurationError) as ctx:
            self.loader.load_config(path)
        self.assertEqual(ctx.exception.context["key"], "rules")

    def test_disabled_must_be_a_list(self):
        path = self._write("overrides.yaml", {"disabled": "limit-before-sort"})
        with self.assertRaises(ConfigurationError) as ctx:
            self.loader.load_config(path)
        self.assertEqual(ctx.exception.context["key"], "disabled")

    def test_quoted_enabled_flag_is_rejected(self):
        path = self.test_dir / "overrides.yaml"
        path.write_text('rules:\n  limit-before-sort:\n    enabled: "false"\n')
        with self.assertRaises(ConfigurationError):
            self.loader.load_config(path)

    def test_non_string_message_is_rejected(self):
        path = self._write("overrides.yaml", {"rules": {7: {"message": ["filter", "nulls"]}}})
        with self.assertRaises(ConfigurationError):
            self.loader.load_config(path)

    def test_per_rule_override_must_be_a_mapping(self):
        path = self._write("overrides.yaml", {"rules": {7: "off"}})
        with self.assertRaises(ConfigurationError):
            self.loader.load_config(path)

    def test_malformed_yaml_is_rejected(self):
        path = self.test_dir / "broken.yaml"
        path.write_text("rules: [unclosed")
        with self.assertRaises(ConfigurationError):
            self.loader.load_config(path)

    def test_missing_override_file_is_rejected(self):
        with self.assertRaises(ConfigurationError):
            self.loader.load_config(self.test_dir / "absent.yaml")

    def test_incomplete_catalog_is_rejected(self):
        self._write(
            CATALOG_FILE,
            {"rules": [{"id": 5, "name": "limit-before-sort", "message": "sort first"}]},
        )
        loader = DefaultRulesLoader(rules_dir=self.test_dir)
        with self.assertRaises(ConfigurationError):
            loader.load_catalog()

    def test_misnamed_catalog_entry_is_rejected(self):
        self._write(CATALOG_FILE, {"rules": [{"id": 5, "name": "sort-late", "message": "m"}]})
        loader = DefaultRulesLoader(rules_dir=self.test_dir)
        with self.assertRaises(ConfigurationError):
            loader.load_catalog()


class TestRuleIdParsing(unittest.TestCase):
    def test_parse_forms(self):
        self.assertIs(RuleId.parse(5), RuleId.LIMIT_BEFORE_SORT)
        self.assertIs(RuleId.parse("5"), RuleId.LIMIT_BEFORE_SORT)
        self.assertIs(RuleId.parse("limit-before-sort"), RuleId.LIMIT_BEFORE_SORT)
        self.assertIs(RuleId.parse("LIMIT_BEFORE_SORT"), RuleId.LIMIT_BEFORE_SORT)

    def test_parse_unknown(self):
        with self.assertRaises(ValueError):
            RuleId.parse(11)


if __name__ == "__main__":
    unittest.main()
