from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..services.rule_names import base_rule_key, normalize_rule_name


@dataclass(frozen=True)
class RuleIndexEntry:
    name: str
    url: str | None = None

    @property
    def key(self) -> str:
        return normalize_rule_name(self.name)


def _special(name: str, slug: str | None = None) -> RuleIndexEntry:
    if slug is None:
        slug = normalize_rule_name(name).replace(" (x)", "").replace(" ", "-")
    return RuleIndexEntry(name=name, url=f"special-rules/{slug}")


RULE_INDEX_ENTRIES: List[RuleIndexEntry] = [
    _special("Always Strikes First"),
    _special("Always Strikes Last"),
    _special("Ambushers"),
    _special("Arcane Item", "arcane-items"),
    _special("Armour Bane (X)"),
    _special("Armoured Hide (X)"),
    _special("Armour Piercing (X)"),
    _special("Breath Weapon (X)"),
    _special("Chariot Runners"),
    _special("Close Order"),
    _special("Cumbersome"),
    _special("Detachment"),
    _special("Dragged Along"),
    _special("Ethereal"),
    _special("Evasive"),
    _special("Extra Attacks (X)", "extra-attacks"),
    _special("Fear"),
    _special("Fight in Extra Rank"),
    _special("First Charge"),
    _special("Flaming Attacks"),
    _special("Fly (X)"),
    _special("Frenzy"),
    _special("Hatred"),
    _special("Horde"),
    _special("Immune to Psychology"),
    _special("Impact Hits (X)"),
    _special("Impetuous"),
    _special("Killing Blow"),
    _special("Large Target"),
    _special("Levies"),
    _special("Loner"),
    _special("Magic Resistance (X)"),
    _special("Magical Attacks"),
    _special("Monster Handlers"),
    _special("Motley Crew"),
    _special("Move & Shoot", "move-and-shoot"),
    _special("Move or Shoot"),
    _special("Multiple Shots (X)"),
    _special("Multiple Wounds (X)"),
    _special("Open Order"),
    _special("Poisoned Attacks"),
    _special("Quick Shot"),
    _special("Random Attacks"),
    _special("Random Movement (X)"),
    _special("Regeneration (X)"),
    _special("Reserve Move"),
    _special("Scouts"),
    _special("Skirmishers"),
    _special("Stomp Attacks (X)"),
    _special("Stubborn"),
    _special("Stupidity"),
    _special("Swiftstride"),
    _special("Terror"),
    _special("Unbreakable"),
    _special("Unstable"),
    _special("Vanguard"),
    _special("Veteran"),
    _special("Warband"),
    _special("Ward Save (X)"),
    # Army-book rules without a published page yet.
    RuleIndexEntry(name="Warrior Priest"),
    RuleIndexEntry(name="Lore of Undeath"),
]

RULES_INDEX: Dict[str, RuleIndexEntry] = {entry.key: entry for entry in RULE_INDEX_ENTRIES}


def find_rule(key: str) -> RuleIndexEntry | None:
    """Look up a rule by its normalized key, retrying without a qualifier."""

    if not key:
        return None
    entry = RULES_INDEX.get(key)
    if entry is not None:
        return entry
    base_key = base_rule_key(key)
    if base_key != key:
        return RULES_INDEX.get(base_key)
    return None
