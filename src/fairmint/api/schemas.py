# src/fairmint/api/schemas.py
from __future__ import annotations

"""Pydantic request schemas for the public API.

Amounts are accepted as JSON integers or decimal strings; floats are refused
by the core (they cannot represent base units exactly).
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class BalanceEntry(BaseModel):
    address: str = Field(..., min_length=1, description="Holder address")
    balance: Union[int, str] = Field(..., description="Balance in base units (int or decimal string)")

    model_config = {"extra": "allow"}


class DistributionAnalyzeRequest(BaseModel):
    holders: List[BalanceEntry] = Field(default_factory=list)

    # Caller-owned Gini series; the response returns it extended by one value.
    gini_history: List[float] = Field(default_factory=list)
    window: int = Field(default=10, ge=1, description="Moving-average window")
    periods: int = Field(default=5, ge=0, description="Prediction horizon (periods ahead)")

    model_config = {"extra": "allow"}


class ParticipantHistoryRequest(BaseModel):
    addresses: List[str] = Field(default_factory=list, description="Claimants in this period")
    known: List[str] = Field(default_factory=list, description="Addresses seen in earlier periods")
    height: Optional[int] = Field(default=None, ge=0)

    model_config = {"extra": "allow"}
