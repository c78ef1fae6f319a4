# tests/test_storage.py
"""
Tests for loading wage supplement configuration from JSON.
"""

import json
import sys
from decimal import Decimal
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from app.core.storage import StorageError, load_wage_supplements
from app.core.validators import InvalidRuleConfigurationError

DATA_FILE = project_root / "data" / "wage_supplements.json"


def write_rules(tmp_path: Path, rules) -> Path:
    path = tmp_path / "wage_supplements.json"
    path.write_text(json.dumps(rules), encoding="utf-8")
    return path


class TestLoadWageSupplements:
    def test_shipped_configuration_is_valid(self):
        rules = load_wage_supplements(DATA_FILE)

        assert [rule.id for rule in rules] == ["kveld", "natt", "helg", "helligdag", "helligdag-bonus"]
        assert rules[1].applies_to == "night"
        assert rules[1].amount == Decimal("25")
        assert rules[2].time_start is None
        assert rules[4].is_active is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(StorageError):
            load_wage_supplements(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "wage_supplements.json"
        path.write_text("[{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            load_wage_supplements(path)

    def test_top_level_must_be_a_list(self, tmp_path):
        path = write_rules(tmp_path, {"name": "Natt"})

        with pytest.raises(StorageError):
            load_wage_supplements(path)

    def test_missing_required_field(self, tmp_path):
        path = write_rules(tmp_path, [{"name": "Natt", "supplement_type": "percentage", "amount": 25}])

        with pytest.raises(StorageError):
            load_wage_supplements(path)

    def test_misconfigured_rule_is_rejected_on_load(self, tmp_path):
        path = write_rules(
            tmp_path,
            [
                {
                    "name": "Natt",
                    "supplement_type": "percentage",
                    "amount": 25,
                    "applies_to": "night",
                    "time_start": "23:00",
                    "time_end": None,
                }
            ],
        )

        with pytest.raises(InvalidRuleConfigurationError) as excinfo:
            load_wage_supplements(path)

        assert excinfo.value.rule_name == "Natt"

    def test_negative_amount_is_rejected(self, tmp_path):
        path = write_rules(
            tmp_path,
            [{"name": "Helg", "supplement_type": "fixed", "amount": -100, "applies_to": "weekend"}],
        )

        with pytest.raises(InvalidRuleConfigurationError):
            load_wage_supplements(path)

    def test_byte_order_mark_is_accepted(self, tmp_path):
        path = tmp_path / "wage_supplements.json"
        rules = [{"name": "Helg", "supplement_type": "percentage", "amount": 50, "applies_to": "weekend"}]
        path.write_text(json.dumps(rules), encoding="utf-8-sig")

        assert load_wage_supplements(path)[0].name == "Helg"

    def test_empty_list(self, tmp_path):
        assert load_wage_supplements(write_rules(tmp_path, [])) == []
