# src/fairmint/ledger/constants.py
from __future__ import annotations

"""Default monetary constants for the tracked token.

Deployment defaults only. Every value here can be overridden through
TrackerConfig; nothing in the core reads these directly except the config
defaults.

- Divisible to 1e-8 (8 fractional digits)
- Genesis at height 800,000, public claiming from 880,000
- Initial reward 50 tokens per block, halving every 210,000 blocks
- Target block time: 10 minutes
"""

# Monetary precision (1 token = 1e8 base units)
COIN_DECIMALS: int = 8
COIN: int = 10**COIN_DECIMALS

GENESIS_HEIGHT: int = 800_000
LAUNCH_HEIGHT: int = 880_000

HALVING_INTERVAL: int = 210_000

INITIAL_REWARD_TOKENS: int = 50
INITIAL_REWARD: int = INITIAL_REWARD_TOKENS * COIN

# Geometric series bound: initial_reward * halving_interval * 2 = 21,000,000 tokens
MAX_SUPPLY_TOKENS: int = 21_000_000
MAX_SUPPLY: int = MAX_SUPPLY_TOKENS * COIN

TARGET_BLOCK_TIME_SECONDS: int = 600

TOKEN_SYMBOL: str = "DIESEL"
