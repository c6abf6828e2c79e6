#!/usr/bin/env python3

"""Smoke test for the fairmint API.

It verifies:
  - the emission constants pass the startup integrity check
  - FastAPI app boots against a throwaway indexer snapshot
  - /v1/health, /v1/emission/stats and /v1/participation/current answer

Usage:
  python3 scripts/smoke.py

Optional env overrides:
  FAIRMINT_CONFIG_PATH=./tracker.yaml
  FAIRMINT_SMOKE_HEIGHT=880000
  FAIRMINT_SMOKE_CLAIMANTS=10
"""

from __future__ import annotations

import json
import os
import tempfile

from fastapi.testclient import TestClient

from fairmint.api.app import create_app


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)))
    except ValueError:
        return int(default)


def main() -> int:
    height = _env_int("FAIRMINT_SMOKE_HEIGHT", 880_000)
    claimants = _env_int("FAIRMINT_SMOKE_CLAIMANTS", 10)

    with tempfile.TemporaryDirectory(prefix="fairmint-smoke-") as td:
        snap_path = os.path.join(td, "snapshot.json")
        snapshot = {
            "height": height,
            "claimants": {
                str(height): [{"address": f"bc1smoke{i}", "amount": "0", "txid": f"{i:064x}"} for i in range(claimants)]
            },
            "balances": [{"address": f"bc1smoke{i}", "balance": str((i + 1) * 1000)} for i in range(claimants)],
        }
        with open(snap_path, "w", encoding="utf-8") as f:
            json.dump(snapshot, f)

        os.environ["FAIRMINT_SNAPSHOT_PATH"] = snap_path
        app = create_app(boot_runtime=True)

        c = TestClient(app)
        r = c.get("/v1/health")
        assert r.status_code == 200, r.text
        j = r.json()
        assert bool(j.get("ok")) is True, j

        r2 = c.get("/v1/emission/stats")
        assert r2.status_code == 200, r2.text
        stats = r2.json()["data"]

        r3 = c.get("/v1/participation/current")
        assert r3.status_code == 200, r3.text
        part = r3.json()["data"]
        if int(part["claimant_count"]) != claimants:
            raise RuntimeError(f"claimant count mismatch: expected={claimants} got={part['claimant_count']}")

        print(
            "OK: health + emission + participation",
            {
                "height": height,
                "circulating_supply": stats["circulating_supply"],
                "reward_per_claimant": part["reward_per_claimant"],
            },
        )
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
