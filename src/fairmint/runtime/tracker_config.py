# src/fairmint/runtime/tracker_config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from fairmint.ledger.constants import (
    COIN,
    COIN_DECIMALS,
    GENESIS_HEIGHT,
    HALVING_INTERVAL,
    INITIAL_REWARD,
    LAUNCH_HEIGHT,
    MAX_SUPPLY,
    TARGET_BLOCK_TIME_SECONDS,
    TOKEN_SYMBOL,
)

Json = Dict[str, Any]


def _as_int(v: Any, default: int) -> int:
    """Ints may arrive as JSON numbers or as decimal strings (big amounts)."""
    if v is None or isinstance(v, bool):
        return int(default)
    try:
        if isinstance(v, str):
            return int(v.replace(",", "").replace("_", "").strip())
        return int(v)
    except Exception:
        return int(default)


def _as_float(v: Any, default: float) -> float:
    if v is None or isinstance(v, bool):
        return float(default)
    try:
        return float(v)
    except Exception:
        return float(default)


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s if s.strip() else str(default)


def _as_opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


@dataclass(frozen=True, slots=True)
class EmissionParams:
    genesis_height: int = GENESIS_HEIGHT
    launch_height: int = LAUNCH_HEIGHT
    halving_interval: int = HALVING_INTERVAL
    initial_reward: int = INITIAL_REWARD
    max_supply: int = MAX_SUPPLY

    # Average spacing used for date estimates only.
    block_time_seconds: int = TARGET_BLOCK_TIME_SECONDS


@dataclass(frozen=True, slots=True)
class AlertThresholds:
    large_claim_amount: int = 10 * COIN
    low_participation_count: int = 10
    halving_soon_blocks: int = 144  # ~1 day at 10 minute blocks
    high_gini: float = 0.8


@dataclass(frozen=True)
class TrackerConfig:
    emission: EmissionParams = field(default_factory=EmissionParams)
    alerts: AlertThresholds = field(default_factory=AlertThresholds)

    treasury_address: Optional[str] = None

    token_symbol: str = TOKEN_SYMBOL
    token_decimals: int = COIN_DECIMALS

    # Indexer snapshot file consumed by the API when no indexer is injected.
    snapshot_path: Optional[str] = None

    # Upper bound on heights scanned by one trend request.
    max_trend_range: int = 2_016

    api_host: str = "127.0.0.1"
    api_port: int = 8080

    log_level: str = "INFO"


def validate_emission_params(p: EmissionParams) -> None:
    for name in ("genesis_height", "launch_height", "halving_interval", "initial_reward", "max_supply"):
        v = getattr(p, name)
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"{name} must be an int; got: {v!r}")

    if p.genesis_height < 0:
        raise ValueError(f"genesis_height must be >= 0; got: {p.genesis_height}")
    if p.launch_height < p.genesis_height:
        raise ValueError(f"launch_height must be >= genesis_height; got: {p.launch_height} < {p.genesis_height}")
    if p.halving_interval <= 0:
        raise ValueError(f"halving_interval must be > 0; got: {p.halving_interval}")
    if p.launch_height - p.genesis_height > p.halving_interval:
        # premine() assumes every premine height is in epoch 0.
        raise ValueError("launch_height must fall within the first halving epoch")
    if p.initial_reward <= 0:
        raise ValueError(f"initial_reward must be > 0; got: {p.initial_reward}")
    if p.max_supply <= 0:
        raise ValueError(f"max_supply must be > 0; got: {p.max_supply}")
    if int(p.block_time_seconds) <= 0:
        raise ValueError(f"block_time_seconds must be > 0; got: {p.block_time_seconds}")


def validate_tracker_config(cfg: TrackerConfig) -> None:
    """Fail-fast validation for operator config."""
    validate_emission_params(cfg.emission)

    a = cfg.alerts
    if a.large_claim_amount < 0:
        raise ValueError(f"alerts.large_claim_amount must be >= 0; got: {a.large_claim_amount}")
    if a.low_participation_count < 0:
        raise ValueError(f"alerts.low_participation_count must be >= 0; got: {a.low_participation_count}")
    if a.halving_soon_blocks < 0:
        raise ValueError(f"alerts.halving_soon_blocks must be >= 0; got: {a.halving_soon_blocks}")
    if not 0.0 <= float(a.high_gini) <= 1.0:
        raise ValueError(f"alerts.high_gini must be within [0, 1]; got: {a.high_gini}")

    if cfg.treasury_address is not None and not cfg.treasury_address.strip():
        raise ValueError("treasury_address must be non-empty when set")
    if not isinstance(cfg.token_symbol, str) or not cfg.token_symbol.strip():
        raise ValueError("token_symbol must be a non-empty string")
    if int(cfg.token_decimals) < 0:
        raise ValueError(f"token_decimals must be >= 0; got: {cfg.token_decimals}")
    if int(cfg.max_trend_range) <= 0:
        raise ValueError(f"max_trend_range must be > 0; got: {cfg.max_trend_range}")
    if int(cfg.api_port) <= 0 or int(cfg.api_port) > 65535:
        raise ValueError(f"api_port must be 1..65535; got: {cfg.api_port}")


def default_tracker_config() -> TrackerConfig:
    return TrackerConfig()


def tracker_config_from_dict(raw: Json) -> TrackerConfig:
    if not isinstance(raw, dict):
        raise ValueError("tracker config must be a mapping")

    d = default_tracker_config()
    em = raw.get("emission") if isinstance(raw.get("emission"), dict) else {}
    al = raw.get("alerts") if isinstance(raw.get("alerts"), dict) else {}

    emission = EmissionParams(
        genesis_height=_as_int(em.get("genesis_height"), d.emission.genesis_height),
        launch_height=_as_int(em.get("launch_height"), d.emission.launch_height),
        halving_interval=_as_int(em.get("halving_interval"), d.emission.halving_interval),
        initial_reward=_as_int(em.get("initial_reward"), d.emission.initial_reward),
        max_supply=_as_int(em.get("max_supply"), d.emission.max_supply),
        block_time_seconds=_as_int(em.get("block_time_seconds"), d.emission.block_time_seconds),
    )
    alerts = AlertThresholds(
        large_claim_amount=_as_int(al.get("large_claim_amount"), d.alerts.large_claim_amount),
        low_participation_count=_as_int(al.get("low_participation_count"), d.alerts.low_participation_count),
        halving_soon_blocks=_as_int(al.get("halving_soon_blocks"), d.alerts.halving_soon_blocks),
        high_gini=_as_float(al.get("high_gini"), d.alerts.high_gini),
    )

    cfg = TrackerConfig(
        emission=emission,
        alerts=alerts,
        treasury_address=_as_opt_str(raw.get("treasury_address")),
        token_symbol=_as_str(raw.get("token_symbol"), d.token_symbol),
        token_decimals=_as_int(raw.get("token_decimals"), d.token_decimals),
        snapshot_path=_as_opt_str(raw.get("snapshot_path")),
        max_trend_range=_as_int(raw.get("max_trend_range"), d.max_trend_range),
        api_host=_as_str(raw.get("api_host"), d.api_host),
        api_port=_as_int(raw.get("api_port"), d.api_port),
        log_level=_as_str(raw.get("log_level"), d.log_level),
    )

    validate_tracker_config(cfg)
    return cfg


def read_tracker_config_file(path: str) -> TrackerConfig:
    """Read a JSON or YAML (.yaml/.yml) config file."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        raw = yaml.safe_load(text)
    else:
        raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("tracker config must be a JSON/YAML object")
    return tracker_config_from_dict(raw)


def load_tracker_config(*, config_path: Optional[str] = None) -> TrackerConfig:
    p = config_path or os.environ.get("FAIRMINT_CONFIG_PATH")
    if p:
        return read_tracker_config_file(p)

    cfg = default_tracker_config()
    validate_tracker_config(cfg)
    return cfg
