"""
tilemine: Getting Started
==========================

The simplest possible example: summarise a one-hot encoded pandas
DataFrame with a few noise-tolerant tiles.
"""

import pandas as pd

from tilemine import Panda

# A small market-basket dataset (6 transactions, 5 items)
data = {
    "bread": [1, 1, 1, 1, 0, 0],
    "butter": [1, 1, 1, 0, 0, 0],
    "milk": [1, 1, 1, 1, 0, 1],
    "eggs": [0, 0, 0, 0, 1, 1],
    "cheese": [0, 0, 0, 0, 1, 1],
}
df = pd.DataFrame(data).astype(bool)

print("Input DataFrame:")
print(df.to_string())
print()

# ── 1. Exact tiles ──────────────────────────────────────────────────────────
model = Panda(df, max_k=5)
tiles = model.mine()

print("Exact tiles:")
print(tiles.to_string(index=False))
print(f"Description cost: {model.cost_:.1f} (raw data: {int(df.to_numpy().sum())})")
print()

# ── 2. Allow one missing cell in three ─────────────────────────────────────
noisy = model.mine(max_row_noise=0.34, max_column_noise=0.34)

print("Tiles with noise tolerance 0.34:")
print(noisy.to_string(index=False))
print(f"Description cost: {model.cost_:.1f}")
