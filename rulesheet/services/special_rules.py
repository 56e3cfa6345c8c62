from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping

from .rule_names import normalize_parameterized_rule, rule_sort_key, strip_annotations

BASE_LANGUAGE = "en"
RULE_DELIMITER = ", "

UNIT_CATEGORIES: tuple[str, ...] = (
    "characters",
    "lords",
    "heroes",
    "core",
    "special",
    "rare",
    "mercenaries",
    "allies",
)


def army_composition(roster: Mapping[str, Any]) -> str | None:
    """Active composition key, falling back to the legacy ``army`` field."""

    return roster.get("armyComposition") or roster.get("army")


def iter_units(roster: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    for category in UNIT_CATEGORIES:
        units = roster.get(category) or []
        for unit in units:
            if isinstance(unit, Mapping):
                yield unit


def rules_bundle(
    entry: Mapping[str, Any], composition: str | None
) -> Mapping[str, Any] | None:
    """Return the rule text bundle of a unit or detachment.

    The composition-specific ``armyComposition[composition].specialRules`` wins
    over the entry's own ``specialRules``.
    """

    overrides = entry.get("armyComposition")
    if composition and isinstance(overrides, Mapping):
        override = overrides.get(composition)
        if isinstance(override, Mapping):
            bundle = override.get("specialRules")
            if isinstance(bundle, Mapping):
                return bundle
    bundle = entry.get("specialRules")
    return bundle if isinstance(bundle, Mapping) and bundle else None


def localized_text(bundle: Mapping[str, Any] | None, language: str) -> str | None:
    if not bundle:
        return None
    text = bundle.get(f"name_{language}") or bundle.get(f"name_{BASE_LANGUAGE}")
    return text if isinstance(text, str) and text else None


def split_rules(text: str) -> Iterator[str]:
    """Split a rules string into canonical rule names."""

    for token in strip_annotations(text).split(RULE_DELIMITER):
        trimmed = token.strip()
        if trimmed:
            yield normalize_parameterized_rule(trimmed)


def _detachment_text(
    detachment: Mapping[str, Any], composition: str | None, language: str
) -> str | None:
    bundle = rules_bundle(detachment, composition)
    if not bundle or not bundle.get(f"name_{BASE_LANGUAGE}"):
        return None
    return localized_text(bundle, language)


def _unit_texts(
    unit: Mapping[str, Any], composition: str | None, language: str
) -> Iterable[str]:
    text = localized_text(rules_bundle(unit, composition), language)
    if text:
        yield text
    for detachment in unit.get("detachments") or []:
        if not isinstance(detachment, Mapping):
            continue
        detachment_text = _detachment_text(detachment, composition, language)
        if detachment_text:
            yield detachment_text


def extract_special_rules(
    roster: Mapping[str, Any] | None, language: str
) -> list[str]:
    """Collect the sorted, de-duplicated special rules of an army list."""

    if not roster:
        return []
    composition = army_composition(roster)
    rules: set[str] = set()
    for unit in iter_units(roster):
        for text in _unit_texts(unit, composition, language):
            rules.update(split_rules(text))
    return sorted(rules, key=rule_sort_key)
