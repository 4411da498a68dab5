"""pytest configuration and shared fixtures."""

from __future__ import annotations

import pandas as pd
import pytest

from tilemine import TransactionList


@pytest.fixture
def basket_dataset() -> TransactionList[str]:
    """Three identical {A, B} baskets and a lone {C}."""
    return TransactionList([["A", "B"], ["A", "B"], ["A", "B"], ["C"]])


@pytest.fixture
def noisy_rows() -> list[list[str]]:
    """A 3x3 block of A, B, C, a fourth row missing C and an unrelated D."""
    return [
        ["A", "B", "C"],
        ["A", "B", "C"],
        ["A", "B", "C"],
        ["A", "B"],
        ["D"],
    ]


@pytest.fixture
def noisy_dataset(noisy_rows: list[list[str]]) -> TransactionList[str]:
    return TransactionList(noisy_rows)


@pytest.fixture
def noisy_onehot(noisy_rows: list[list[str]]) -> pd.DataFrame:
    items = ["A", "B", "C", "D"]
    return pd.DataFrame([{item: (item in row) for item in items} for row in noisy_rows])
