# src/fairmint/runtime/sources.py
from __future__ import annotations

"""Collaborator interfaces for indexer data, plus an in-process indexer.

The core never fetches anything itself. A height provider, a claimant source
and a balance source hand it resolved facts; a source that has not caught up
raises DataUnavailable instead of returning an empty answer.

InMemoryIndexer implements all three from a plain dict or a JSON snapshot
file. Expected snapshot shape:

    {
      "height": 880123,
      "synced_height": 880123,
      "token_id": "800000",              # optional claim filter
      "claimants": {"880123": [{"address": "...", "amount": "500000000",
                                "txid": "...", "timestamp": 0, "token_id": "800000"}]},
      "balances": {"default": [{"address": "...", "balance": "123"}]}
    }
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from fairmint.ledger.amounts import as_amount, as_height
from fairmint.ledger.distribution import HolderBalance
from fairmint.runtime.errors import DataUnavailable, InvalidInput
from fairmint.runtime.participation import ClaimantRecord

Json = Dict[str, Any]

DEFAULT_SCOPE = "default"


class HeightProvider(Protocol):
    def current_height(self) -> int: ...


class ClaimantSource(Protocol):
    def claimants_at(self, height: int) -> List[ClaimantRecord]: ...


class BalanceSource(Protocol):
    def balances(self, scope: Optional[str] = None) -> List[HolderBalance]: ...


def parse_claimant_entries(
    entries: Iterable[Any],
    *,
    height: int,
    token_id: Optional[str] = None,
) -> List[ClaimantRecord]:
    """Turn raw indexer mint entries into ClaimantRecords.

    With `token_id` set, only entries carrying that token id are kept; entries
    for other tokens minted at the same height are not claimants.
    """
    out: List[ClaimantRecord] = []
    for e in entries or []:
        if not isinstance(e, Mapping):
            continue
        if token_id is not None and str(e.get("token_id", "")) != str(token_id):
            continue
        out.append(ClaimantRecord.from_json(e, height=height))
    return out


def parse_balance_entries(entries: Iterable[Any]) -> List[HolderBalance]:
    out: List[HolderBalance] = []
    for e in entries or []:
        if not isinstance(e, Mapping):
            continue
        addr = str(e.get("address") or "").strip()
        if not addr:
            raise InvalidInput("invalid_balance", "missing_address", {"entry": dict(e)})
        out.append(HolderBalance(address=addr, balance=as_amount(e.get("balance", 0), field="balance")))
    return out


def collect_claimants(source: ClaimantSource, start_height: int, end_height: int) -> Dict[int, List[ClaimantRecord]]:
    """Fetch start..end inclusive into the mapping ParticipationTracker.trend() takes.

    Each lookup is a separate call into the source; DataUnavailable from any of
    them aborts the scan.
    """
    start = as_height(start_height, field="start_height")
    end = as_height(end_height, field="end_height")
    return {h: list(source.claimants_at(h)) for h in range(start, end + 1)}


class InMemoryIndexer:
    """In-process indexer view used by the API and tests.

    `synced_height` is the last height the indexer has processed; claimant
    lookups above it raise DataUnavailable. Heights at or below it with no
    recorded claims are genuinely empty blocks.
    """

    def __init__(
        self,
        *,
        height: int,
        synced_height: Optional[int] = None,
        claimants: Optional[Mapping[int, Sequence[ClaimantRecord]]] = None,
        balances: Optional[Mapping[str, Sequence[HolderBalance]]] = None,
    ) -> None:
        self._height = as_height(height)
        self._synced = as_height(synced_height if synced_height is not None else height, field="synced_height")
        self._claimants: Dict[int, List[ClaimantRecord]] = {int(h): list(v) for h, v in (claimants or {}).items()}
        self._balances: Dict[str, List[HolderBalance]] = {str(k): list(v) for k, v in (balances or {}).items()}

    @property
    def synced_height(self) -> int:
        return self._synced

    def current_height(self) -> int:
        return self._height

    def claimants_at(self, height: int) -> List[ClaimantRecord]:
        h = as_height(height)
        if h > self._synced:
            raise DataUnavailable(
                "claimants_unavailable",
                "indexer_behind",
                {"height": h, "synced_height": self._synced},
            )
        return list(self._claimants.get(h, []))

    def balances(self, scope: Optional[str] = None) -> List[HolderBalance]:
        key = scope or DEFAULT_SCOPE
        if key not in self._balances:
            raise DataUnavailable("balances_unavailable", "unknown_scope", {"scope": key})
        return list(self._balances[key])

    @classmethod
    def from_snapshot(cls, obj: Json) -> "InMemoryIndexer":
        if not isinstance(obj, dict):
            raise InvalidInput("invalid_snapshot", "snapshot_not_object", {"type": str(type(obj))})

        height = as_height(obj.get("height"))
        synced = obj.get("synced_height")
        token_id = obj.get("token_id")
        token_id = str(token_id) if token_id is not None else None

        raw_claims = obj.get("claimants") if isinstance(obj.get("claimants"), dict) else {}
        claimants: Dict[int, List[ClaimantRecord]] = {}
        for k, entries in raw_claims.items():
            try:
                h = int(k)
            except (TypeError, ValueError):
                raise InvalidInput("invalid_snapshot", "claimant_height_not_int", {"height": k}) from None
            claimants[h] = parse_claimant_entries(entries, height=h, token_id=token_id)

        raw_bal = obj.get("balances")
        if isinstance(raw_bal, list):
            raw_bal = {DEFAULT_SCOPE: raw_bal}
        if not isinstance(raw_bal, dict):
            raw_bal = {}
        balances = {str(scope): parse_balance_entries(entries) for scope, entries in raw_bal.items()}

        return cls(
            height=height,
            synced_height=as_height(synced, field="synced_height") if synced is not None else None,
            claimants=claimants,
            balances=balances,
        )

    @classmethod
    def load_snapshot_file(cls, path: str) -> "InMemoryIndexer":
        p = Path(path)
        if not p.is_file():
            raise FileNotFoundError(str(p))
        with p.open("r", encoding="utf-8") as f:
            return cls.from_snapshot(json.load(f))
