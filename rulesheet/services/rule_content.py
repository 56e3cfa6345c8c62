from __future__ import annotations

import asyncio
import logging
import re
from typing import Sequence

import httpx
from bs4 import BeautifulSoup, NavigableString, Tag
from markupsafe import Markup

from ..config import (
    RULES_BASE_URL,
    RULES_FETCH_TIMEOUT,
    RULES_UTM_MEDIUM,
    RULES_UTM_SOURCE,
)
from ..data import rules_index
from .rule_names import normalize_rule_name

logger = logging.getLogger(__name__)

_JAVASCRIPT_URL = re.compile(r"^\s*(javascript|vbscript):", re.IGNORECASE)

UNSAFE_TAGS: tuple[str, ...] = ("script", "style", "iframe", "object", "embed", "form")
URL_ATTRIBUTES: frozenset[str] = frozenset({"href", "src", "action", "formaction", "xlink:href"})

RULE_ARTICLE_SELECTOR = "article.article--rich-text:not(.section-intro)"
RULE_CONTENT_PARAMS: dict[str, str] = {
    "minimal": "true",
    "utm_source": RULES_UTM_SOURCE,
    "utm_medium": RULES_UTM_MEDIUM,
}


class RuleContentError(Exception):
    """Raised when a rule page cannot be turned into embeddable content."""


def sanitize_rule_html(html: str) -> Markup | None:
    """Extract the rule articles of a page as markup safe for embedding.

    Only ``article.article--rich-text`` blocks that are not the intro section
    are kept. Inline SVG icons, scripts and embedded frames are dropped, event
    handler attributes and ``javascript:`` URLs are removed and links are
    flattened to their text. Returns ``None`` when the page has no such article.
    """

    soup = BeautifulSoup(html, "html.parser")
    articles = soup.select(RULE_ARTICLE_SELECTOR)
    if not articles:
        return None
    parts: list[str] = []
    for article in articles:
        for element in article.find_all(["svg", *UNSAFE_TAGS]):
            element.decompose()
        for link in article.find_all("a"):
            link.replace_with(NavigableString(link.get_text()))
        for element in article.find_all(True):
            _strip_unsafe_attributes(element)
        parts.append(article.decode_contents())
    return Markup("".join(parts))


def _strip_unsafe_attributes(element: Tag) -> None:
    for name in list(element.attrs):
        value = element.attrs[name]
        if isinstance(value, list):
            value = " ".join(value)
        if name.lower().startswith("on"):
            del element.attrs[name]
        elif name.lower() in URL_ATTRIBUTES and _JAVASCRIPT_URL.match(str(value)):
            del element.attrs[name]


def rule_content_url(path: str) -> str:
    return f"{RULES_BASE_URL}/{path.lstrip('/')}"


def _rule_url(rule_name: str) -> str | None:
    entry = rules_index.find_rule(normalize_rule_name(rule_name))
    if entry is None or not entry.url:
        return None
    return rule_content_url(entry.url)


async def _download_rule(client: httpx.AsyncClient, url: str) -> Markup | None:
    response = await client.get(url, params=RULE_CONTENT_PARAMS)
    if not response.is_success:
        raise RuleContentError(f"{url} answered with HTTP {response.status_code}")
    try:
        return sanitize_rule_html(response.text)
    except Exception as exc:
        raise RuleContentError(f"{url} could not be parsed: {exc}") from exc


async def fetch_rule_content(client: httpx.AsyncClient, rule_name: str) -> Markup | None:
    """Fetch the description of a single rule; ``None`` when unavailable."""

    url = _rule_url(rule_name)
    if url is None:
        return None
    try:
        return await _download_rule(client, url)
    except RuleContentError as exc:
        logger.warning("Rule description for %r unavailable: %s", rule_name, exc)
    except httpx.HTTPError as exc:
        logger.warning("Fetching rule description for %r failed: %s", rule_name, exc)
    except Exception:
        logger.exception("Unexpected error while fetching rule description for %r", rule_name)
    return None


async def resolve_rule_contents(
    rule_names: Sequence[str], client: httpx.AsyncClient | None = None
) -> dict[str, Markup]:
    """Fetch every rule description concurrently.

    The result only holds rules whose description could be resolved.
    """

    if not rule_names:
        return {}
    if client is None:
        async with httpx.AsyncClient(timeout=RULES_FETCH_TIMEOUT) as own_client:
            return await resolve_rule_contents(rule_names, own_client)

    results = await asyncio.gather(
        *(fetch_rule_content(client, name) for name in rule_names)
    )
    return {
        name: content
        for name, content in zip(rule_names, results)
        if content
    }


class RuleContentResolver:
    """Holds the resolved descriptions for the rules currently on display.

    Every call to :meth:`resolve` starts a new generation; results of an
    older generation that finish late are discarded.
    """

    def __init__(self) -> None:
        self.generation = 0
        self.loading = False
        self.contents: dict[str, Markup] = {}
        self._rule_names: tuple[str, ...] | None = None

    async def resolve(
        self, rule_names: Sequence[str], client: httpx.AsyncClient | None = None
    ) -> dict[str, Markup]:
        requested = tuple(rule_names)
        if requested == self._rule_names and not self.loading:
            return self.contents

        self.generation += 1
        generation = self.generation
        self._rule_names = requested
        if not requested:
            self.contents = {}
            self.loading = False
            return self.contents

        self.loading = True
        try:
            contents = await resolve_rule_contents(requested, client)
        finally:
            if generation == self.generation:
                self.loading = False
        if generation != self.generation:
            logger.debug(
                "Discarding %d rule descriptions from superseded batch %d",
                len(contents),
                generation,
            )
            return contents
        self.contents = contents
        return contents
