from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from rulesheet.services.rule_names import (
    base_rule_key,
    normalize_parameterized_rule,
    normalize_rule_name,
    rule_sort_key,
    strip_annotations,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Impact Hits (1)", "Impact Hits (X)"),
        ("Impact Hits (D3+1)", "Impact Hits (X)"),
        ("Armour Bane (2)", "Armour Bane (X)"),
        ("Multiple Wounds (2D6)", "Multiple Wounds (X)"),
        ("Stomp Attacks (d6)", "Stomp Attacks (X)"),
        ("Killing Blow (6+)", "Killing Blow (X)"),
        ("Extra Attacks (3 - Impact Hits)", "Extra Attacks (X)"),
        ("Regeneration  (5+)", "Regeneration (X)"),
    ],
)
def test_variable_parameters_collapse_to_placeholder(raw, expected):
    assert normalize_parameterized_rule(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "Always Strikes First",
        "Stubborn (per model)",
        "Hatred (Orc Boar Boys & Boss only)",
        "Impact Hits (X)",
        "Fear ()",
        "",
    ],
)
def test_free_text_and_plain_rules_are_kept(raw):
    assert normalize_parameterized_rule(raw) == raw


@pytest.mark.parametrize(
    "raw",
    [
        "Impact Hits (1)",
        "Impact Hits (X)",
        "Stubborn (per model)",
        "Breath Weapon (Strength 4) (2)",
        "Fly (9)",
        "Terror",
    ],
)
def test_normalization_is_idempotent(raw):
    once = normalize_parameterized_rule(raw)
    assert normalize_parameterized_rule(once) == once


def test_strip_annotations_removes_page_references():
    assert strip_annotations("Fear {p.12}, Terror {p. 99}") == "Fear, Terror"


def test_strip_annotations_keeps_rules_between_references():
    assert strip_annotations("Fear {p.1}, Frenzy {p.2}") == "Fear, Frenzy"


def test_normalize_rule_name_builds_lookup_keys():
    assert normalize_rule_name("Impact Hits (X)") == "impact hits (x)"
    assert normalize_rule_name("Move-or-Shoot") == "move or shoot"
    assert normalize_rule_name("Warrior's Pride {p.3}") == "warriors pride"
    assert normalize_rule_name("  Ward Save ( X ) ") == "ward save (x)"
    assert normalize_rule_name("Éclaireurs") == "eclaireurs"
    assert normalize_rule_name(None) == ""


def test_base_rule_key_drops_qualifier():
    assert base_rule_key("hatred (dwarfs)") == "hatred"
    assert base_rule_key("fear") == "fear"


def test_rule_sort_key_is_case_and_accent_insensitive():
    names = ["zealots", "Ambushers", "éclaireurs", "Fear"]
    assert sorted(names, key=rule_sort_key) == ["Ambushers", "éclaireurs", "Fear", "zealots"]
