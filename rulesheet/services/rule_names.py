from __future__ import annotations

import re
import unicodedata

PLACEHOLDER = "X"

_PARAMETERIZED_RULE = re.compile(r"^(.+?)\s*\(([^)]+)\)$")
# Digits ("1", "6+", "3 - Impact Hits") and dice notation ("D3", "2D6", "D3+1").
_VARIABLE_PARAMETER = re.compile(r"^[\dDd]")
_ANNOTATION = re.compile(r"\s*\{[^}]*\}")
_KEY_DISALLOWED = re.compile(r"[^a-z0-9 ()+]")


def normalize_parameterized_rule(text: str) -> str:
    """Collapse a numeric or dice parameter into the ``(X)`` placeholder.

    ``"Impact Hits (1)"`` becomes ``"Impact Hits (X)"``; free-text qualifiers
    such as ``"Stubborn (per model)"`` are kept as written. Anything without a
    trailing parenthetical is returned unchanged.
    """

    match = _PARAMETERIZED_RULE.match(text)
    if not match:
        return text
    name, parameter = match.group(1).strip(), match.group(2).strip()
    if parameter == PLACEHOLDER:
        return text
    if _VARIABLE_PARAMETER.match(parameter):
        return f"{name} ({PLACEHOLDER})"
    return text


def strip_annotations(text: str) -> str:
    """Remove page references such as ``{p.123}``."""

    return _ANNOTATION.sub("", text)


def _ascii_letters(value: str) -> str:
    result: list[str] = []
    for char in value:
        if unicodedata.combining(char):
            continue
        if ord(char) < 128:
            result.append(char)
            continue
        name = unicodedata.name(char, "")
        if "LETTER" in name:
            base = name.split("LETTER", 1)[1].strip()
            if " WITH " in base:
                base = base.split(" WITH ", 1)[0].strip()
            if " DIGRAPH" in base:
                base = base.split(" DIGRAPH", 1)[0].strip()
            tokens = base.split()
            if len(tokens) > 1 and len(tokens[-1]) == 1:
                base = tokens[-1]
            else:
                base = base.replace(" ", "")
            if base:
                result.append(base.lower())
    return "".join(result)


def normalize_rule_name(name: str | None) -> str:
    """Return the rules-index lookup key for a canonical rule name."""

    if not name:
        return ""
    value = strip_annotations(str(name))
    value = unicodedata.normalize("NFKD", value)
    value = _ascii_letters(value).casefold()
    value = value.replace("-", " ").replace("_", " ")
    value = _KEY_DISALLOWED.sub("", re.sub(r"\s+", " ", value))
    value = re.sub(r"\s*\(\s*", " (", value)
    value = re.sub(r"\s*\)", ")", value)
    return re.sub(r"\s+", " ", value).strip()


def base_rule_key(key: str) -> str:
    """Drop a trailing parenthetical from a lookup key, if any."""

    match = _PARAMETERIZED_RULE.match(key)
    if not match:
        return key
    return match.group(1).strip()


def rule_sort_key(name: str) -> tuple[str, str]:
    """Locale-style collation key: accent and case insensitive first, then exact."""

    folded = unicodedata.normalize("NFKD", name)
    folded = "".join(char for char in folded if not unicodedata.combining(char))
    return folded.casefold(), name
