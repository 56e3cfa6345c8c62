from __future__ import annotations

import sys
from pathlib import Path

import pytest
from markupsafe import Markup

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from rulesheet.services import print_sheet, rule_content


def _roster(list_id: str = "abc", rules: str = "Fear, Impact Hits (2)") -> dict:
    return {
        "id": list_id,
        "name": "Grand Army",
        "core": [{"specialRules": {"name_en": rules, "name_de": "Angst"}}],
    }


def test_refresh_extracts_rules():
    sheet = print_sheet.SpecialRulesSheet()

    assert sheet.refresh(_roster(), "en") == ["Fear", "Impact Hits (X)"]
    assert sheet.rules == ["Fear", "Impact Hits (X)"]


def test_refresh_recomputes_only_on_roster_or_language_change(monkeypatch):
    calls: list[str] = []
    original = print_sheet.extract_special_rules

    def counting_extract(roster, language):
        calls.append(language)
        return original(roster, language)

    monkeypatch.setattr(print_sheet, "extract_special_rules", counting_extract)
    sheet = print_sheet.SpecialRulesSheet()
    roster = _roster()

    sheet.refresh(roster, "en")
    sheet.refresh(roster, "en")
    assert calls == ["en"]

    assert sheet.refresh(roster, "de") == ["Angst"]
    sheet.refresh(_roster("other"), "de")
    assert calls == ["en", "de", "de"]


def test_missing_roster_has_no_rules():
    sheet = print_sheet.SpecialRulesSheet()

    assert sheet.refresh(None, "en") == []
    assert sheet.list_name == ""


@pytest.mark.asyncio
async def test_load_contents_exposes_mapping(monkeypatch):
    async def fake_resolve(names, client=None):
        return {"Fear": Markup("<p>Fear test</p>")}

    monkeypatch.setattr(rule_content, "resolve_rule_contents", fake_resolve)
    sheet = print_sheet.SpecialRulesSheet()
    sheet.refresh(_roster(), "en")

    await sheet.load_contents()

    assert sheet.loading is False
    assert sheet.content_for("Fear") == Markup("<p>Fear test</p>")
    assert sheet.content_for("Impact Hits (X)") is None


def test_print_trigger_is_idempotent_and_reset_after_print():
    sheet = print_sheet.SpecialRulesSheet(title="Old World Builder")
    sheet.refresh(_roster(), "en")

    assert sheet.page_title == "Old World Builder | Grand Army - Special Rules"
    assert sheet.document_title == "Old World Builder"

    first = sheet.start_print()
    second = sheet.start_print()

    assert first == second == "Grand Army - Special Rules - Old World Builder"
    assert sheet.is_printing is True

    sheet.after_print()

    assert sheet.is_printing is False
    assert sheet.document_title == "Old World Builder"
