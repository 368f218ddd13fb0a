"""Keyword tables and tiered risk rules for SMS symptom triage."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping


class RiskLevel(str, Enum):
    """Escalation tier for one check-in, ordered green < yellow < red."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {RiskLevel.GREEN: 0, RiskLevel.YELLOW: 1, RiskLevel.RED: 2}

SymptomKeywordTable = tuple[tuple[str, tuple[str, ...]], ...]

# Declaration order is significant: extracted tags follow it.
ENGLISH_KEYWORDS: SymptomKeywordTable = (
    ("bleeding", ("bleeding", "bleed", "blood", "discharge")),
    ("fever", ("fever", "feverish", "hot", "temperature")),
    ("pain", ("pain", "painful", "ache", "hurts")),
    ("breast_pain", ("breast", "breast pain", "nipple", "mastitis")),
    ("urination_pain", ("urine", "urination", "pee", "bladder")),
    ("cramping", ("cramp", "cramping", "contraction")),
    ("low_mood", ("sad", "depressed", "low", "down", "mood")),
    ("tired", ("tired", "exhausted", "fatigue", "weak")),
    ("nausea", ("nausea", "nauseous", "vomit", "sick")),
    ("headache", ("headache", "head pain", "migraine")),
)

HINDI_KEYWORDS: SymptomKeywordTable = (
    ("bleeding", ("rakta", "खून")),
    ("fever", ("bukhar", "बुखार")),
    ("pain", ("dard", "दर्द")),
    ("breast_pain", ("स्तन",)),
    ("urination_pain", ("peshab", "पेशाब")),
    ("cramping", ("sukna", "सूखना")),
    ("low_mood", ("udaas", "उदास")),
    ("tired", ("thakaan", "थकान")),
    ("nausea", ("ultii", "उल्टी")),
    ("headache", ("sir dard", "सिर दर्द")),
)

KEYWORD_PACKS: Mapping[str, SymptomKeywordTable] = MappingProxyType(
    {
        "english": ENGLISH_KEYWORDS,
        "hindi": HINDI_KEYWORDS,
    }
)

RED_FLAGS: frozenset[str] = frozenset({"bleeding", "fever", "breast_pain"})
YELLOW_FLAGS: frozenset[str] = frozenset({"pain", "urination_pain", "cramping", "low_mood"})


def merge_keyword_tables(tables: Iterable[SymptomKeywordTable]) -> SymptomKeywordTable:
    """
    Merge keyword packs tag by tag.

    Tag order comes from the first table that declares each tag; keywords of
    later packs are appended after the existing ones, without duplicates.
    """
    order: list[str] = []
    merged: dict[str, list[str]] = {}
    for table in tables:
        for tag, keywords in table:
            if tag not in merged:
                order.append(tag)
                merged[tag] = []
            for keyword in keywords:
                lowered = keyword.lower()
                if lowered not in merged[tag]:
                    merged[tag].append(lowered)
    return tuple((tag, tuple(merged[tag])) for tag in order)


@dataclass(frozen=True)
class TriageRules:
    """Read-only rule set shared by every classification call."""

    keyword_table: SymptomKeywordTable = ENGLISH_KEYWORDS
    red_flags: frozenset[str] = RED_FLAGS
    yellow_flags: frozenset[str] = YELLOW_FLAGS
    languages: tuple[str, ...] = ("english",)

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(tag for tag, _ in self.keyword_table)


def build_triage_rules(languages: Iterable[str] = ("english",)) -> TriageRules:
    """Build a rule set from named keyword packs; English is always included."""
    requested = [language.strip().lower() for language in languages if language.strip()]
    resolved: list[str] = ["english"]
    for language in requested:
        if language not in KEYWORD_PACKS:
            supported = ", ".join(KEYWORD_PACKS)
            raise ValueError(
                f"Unsupported keyword language '{language}'. Supported values: {supported}."
            )
        if language not in resolved:
            resolved.append(language)

    table = merge_keyword_tables(KEYWORD_PACKS[language] for language in resolved)
    return TriageRules(keyword_table=table, languages=tuple(resolved))


DEFAULT_RULES = TriageRules()


@dataclass(frozen=True)
class TriageResult:
    """Matched symptom tags in table order plus the resulting tier."""

    symptoms: tuple[str, ...]
    risk_level: RiskLevel

    @property
    def primary_symptom(self) -> str | None:
        return self.symptoms[0] if self.symptoms else None


def extract_symptoms(text: str, rules: TriageRules = DEFAULT_RULES) -> tuple[str, ...]:
    """
    Return every tag with at least one keyword found in ``text``.

    Matching is a case-insensitive substring test, not a word-boundary match,
    so "feverish" hits ``fever`` and "speech" hits ``urination_pain`` via "pee".
    """
    lowered = text.lower()
    return tuple(
        tag
        for tag, keywords in rules.keyword_table
        if any(keyword in lowered for keyword in keywords)
    )


def assess_risk_level(symptoms: Iterable[str], rules: TriageRules = DEFAULT_RULES) -> RiskLevel:
    """Red flags dominate yellow flags; anything else is green."""
    found = set(symptoms)
    if found & rules.red_flags:
        return RiskLevel.RED
    if found & rules.yellow_flags:
        return RiskLevel.YELLOW
    return RiskLevel.GREEN


def triage_text(text: str, rules: TriageRules = DEFAULT_RULES) -> TriageResult:
    symptoms = extract_symptoms(text, rules)
    return TriageResult(symptoms=symptoms, risk_level=assess_risk_level(symptoms, rules))
