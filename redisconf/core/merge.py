from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Tuple

from .source import ConfigurationProvider
from .types import ProvenanceRecord


def merge_providers(
    providers: Iterable[ConfigurationProvider],
) -> Tuple[Dict[str, str], Dict[str, ProvenanceRecord]]:
    effective: Dict[str, str] = {}
    provenance: Dict[str, ProvenanceRecord] = {}
    spelling: Dict[str, str] = {}
    loaded_at = datetime.now()

    for provider in providers:
        for key, value in provider.data.items():
            folded = key.casefold()
            # keys are case-insensitive; keep the first spelling, last provider wins
            canonical = spelling.setdefault(folded, key)
            effective[canonical] = value
            provenance[folded] = ProvenanceRecord(
                key=canonical,
                provider_name=provider.name,
                timestamp_loaded=loaded_at,
            )

    return effective, provenance
