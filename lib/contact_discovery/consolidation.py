"""Merge per-source contact facts into confidence-ordered, deduplicated lists.

A fact reported by several providers gains a fixed confidence increment per
extra source (capped at 1.0), so independently corroborated facts rank above
single-source ones.
"""

from typing import Iterable

from lib.contact_discovery.models import (
    KIND_PRIORITY,
    Channel,
    ConsolidatedFact,
    SourceResult,
)

DEFAULT_INCREMENT = 0.15
NON_REGIONAL_FLAG = "non_regional"
MIN_PENALISED_CONFIDENCE = 0.1


def consolidate(
    results: Iterable[SourceResult],
    channel: Channel,
    increment: float = DEFAULT_INCREMENT,
) -> list[ConsolidatedFact]:
    """Deduplicate one channel (emails or phones) across source results.

    Sources are read in the order given; ties in the final ordering keep
    that encounter order.
    """
    merged: dict[str, dict] = {}

    for result in results:
        facts = result.emails if channel == "email" else result.phones
        for fact in facts:
            key = fact.dedup_key
            if not key:
                continue
            entry = merged.get(key)
            if entry is None:
                merged[key] = {
                    "value": fact.value,
                    "channel": fact.channel,
                    "kind": fact.kind,
                    "confidence": fact.confidence,
                    "sources": [fact.source],
                }
                continue

            entry["sources"].append(fact.source)
            entry["confidence"] = round(min(entry["confidence"] + increment, 1.0), 4)
            if KIND_PRIORITY[fact.kind] > KIND_PRIORITY[entry["kind"]]:
                entry["kind"] = fact.kind

    facts = [
        ConsolidatedFact(occurrence_count=len(e["sources"]), **e)
        for e in merged.values()
    ]
    # sorted() is stable: equal confidences keep encounter order
    return sorted(facts, key=lambda f: f.confidence, reverse=True)


def has_regional_prefix(value: str, prefixes: Iterable[str]) -> bool:
    compact = "".join(value.split())
    return any(compact.startswith(p) for p in prefixes)


def flag_non_regional_phones(
    phones: list[ConsolidatedFact],
    prefixes: Iterable[str],
    penalty: float,
) -> list[ConsolidatedFact]:
    """Demote mobiles that don't carry one of the region's dialling prefixes.

    Providers sometimes return stale overseas mobiles for local contacts.
    Landlines and company lines are left alone: local area codes and
    13/1300/1800 numbers don't carry a country prefix.
    """
    prefixes = tuple(prefixes)
    if penalty <= 0 or not prefixes:
        return list(phones)

    adjusted = []
    for phone in phones:
        if phone.kind != "mobile" or has_regional_prefix(phone.value, prefixes):
            adjusted.append(phone)
            continue
        floor = min(phone.confidence, MIN_PENALISED_CONFIDENCE)
        adjusted.append(phone.model_copy(update={
            "confidence": round(max(phone.confidence - penalty, floor), 4),
            "flags": [*phone.flags, NON_REGIONAL_FLAG],
        }))
    return sorted(adjusted, key=lambda f: f.confidence, reverse=True)
