from __future__ import annotations

from typing import Any, Mapping

import httpx
from markupsafe import Markup

from ..config import APP_TITLE
from .rule_content import RuleContentResolver
from .special_rules import extract_special_rules


class SpecialRulesSheet:
    """View state of the printable special rules page of one army list."""

    def __init__(self, title: str = APP_TITLE) -> None:
        self.app_title = title
        self.roster: Mapping[str, Any] | None = None
        self.language: str | None = None
        self.rules: list[str] = []
        self.resolver = RuleContentResolver()
        self.is_printing = False
        self.document_title = title

    @property
    def list_name(self) -> str:
        if not self.roster:
            return ""
        return str(self.roster.get("name") or "")

    @property
    def page_title(self) -> str:
        return f"{self.app_title} | {self.list_name} - Special Rules"

    @property
    def loading(self) -> bool:
        return self.resolver.loading

    @property
    def contents(self) -> dict[str, Markup]:
        return self.resolver.contents

    def content_for(self, rule: str) -> Markup | None:
        return self.resolver.contents.get(rule)

    def refresh(self, roster: Mapping[str, Any] | None, language: str) -> list[str]:
        """Recompute the rule list when the list or the language changed."""

        if roster is self.roster and language == self.language:
            return self.rules
        self.roster = roster
        self.language = language
        self.rules = extract_special_rules(roster, language)
        return self.rules

    async def load_contents(self, client: httpx.AsyncClient | None = None) -> dict[str, Markup]:
        return await self.resolver.resolve(self.rules, client)

    def start_print(self) -> str:
        if not self.is_printing:
            self.is_printing = True
            self.document_title = f"{self.list_name} - Special Rules - {self.app_title}"
        return self.document_title

    def after_print(self) -> None:
        self.is_printing = False
        self.document_title = self.app_title
