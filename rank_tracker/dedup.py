# File: rank_tracker/dedup.py
"""rank_tracker.dedup: Глобальная фильтрация записей по первому вхождению домена."""

from __future__ import annotations

from typing import Iterable, List, Set

from rank_tracker.logger import logger
from rank_tracker.models import CanonicalRecord

__all__ = ["dedupe_by_domain"]


def dedupe_by_domain(records: Iterable[CanonicalRecord]) -> List[CanonicalRecord]:
    """Оставляет первую запись для каждого домена, сохраняя порядок.

    Записи без домена сохраняются всегда.
    """
    seen: Set[str] = set()
    kept: List[CanonicalRecord] = []
    dropped = 0
    for record in records:
        if record.domain:
            if record.domain in seen:
                dropped += 1
                continue
            seen.add(record.domain)
        kept.append(record)
    if dropped:
        logger.debug("Removed %d records with an already seen domain", dropped)
    return kept
