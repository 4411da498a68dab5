"""Tests for ResultState and the cost model."""

from __future__ import annotations

import pytest

from tilemine import CostModel, Pattern, PatternList, ResultState, TransactionList


class TestCostModel:
    def test_total(self) -> None:
        assert CostModel().total(3, 1, 5) == 9.0
        assert CostModel(pattern_weight=0.5).total(3, 1, 5) == 6.5

    @pytest.mark.parametrize("weight", [0, -1.0, "1", True])
    def test_rejects_invalid_weight(self, weight: object) -> None:
        with pytest.raises(ValueError, match="pattern_weight"):
            CostModel(pattern_weight=weight)  # type: ignore[arg-type]


class TestResultState:
    def test_initial_cost_is_raw_dataset(self, noisy_dataset: TransactionList[str]) -> None:
        state = ResultState(noisy_dataset)
        assert state.current_cost() == 12.0
        assert len(state.patterns) == 0
        assert state.residual_dataset is not noisy_dataset

    def test_probe_does_not_mutate(self, noisy_dataset: TransactionList[str]) -> None:
        state = ResultState(noisy_dataset)
        tile = Pattern(["A", "B", "C"], [0, 1, 2, 3])
        # 12 - 11 uncovered, one false positive, 3 + 4 ids
        assert state.try_add_pattern(tile) == 9.0
        assert state.residual_dataset.el_count == 12
        assert state.current_cost() == 12.0

    def test_commit_matches_probe(self, noisy_dataset: TransactionList[str]) -> None:
        state = ResultState(noisy_dataset)
        first = Pattern(["A", "B", "C"], [0, 1, 2, 3])
        second = Pattern(["D"], [4])

        probe = state.try_add_pattern(first)
        state.add_pattern(first)
        assert state.current_cost() == probe
        assert state.false_positives == [1]

        probe = state.try_add_pattern(second)
        assert probe == 0 + 1 + 7 + 2
        state.add_pattern(second)
        assert state.current_cost() == probe
        assert state.costs == [9.0, 10.0]
        assert state.patterns == PatternList([first, second])

    def test_residual_and_original(self, noisy_dataset: TransactionList[str]) -> None:
        state = ResultState(noisy_dataset)
        state.add_pattern(Pattern(["A", "B"], [0, 1, 2, 3]))
        assert state.residual_dataset.el_count == 4
        assert state.residual_dataset.get(0).items == ["C"]
        assert state.dataset.get(0).items == ["A", "B", "C"]
        assert noisy_dataset.el_count == 12

    def test_cost_model_is_used(self, noisy_dataset: TransactionList[str]) -> None:
        state = ResultState(noisy_dataset, CostModel(pattern_weight=2.0))
        assert state.try_add_pattern(Pattern(["A", "B"], [0, 1, 2, 3])) == 4 + 2.0 * 6


class TestPatternList:
    def test_to_pandas(self) -> None:
        patterns = PatternList([Pattern([2, 0], [1, 0, 3]), Pattern([1], [2])])
        df = patterns.to_pandas(n_rows=4, col_names=["a", "b", "c"], use_colnames=True, costs=[5.0, 4.0])
        assert list(df.columns) == ["itemsets", "transactions", "support", "area", "cost"]
        assert list(df["itemsets"].iloc[0]) == ["a", "c"]
        assert list(df["transactions"].iloc[0]) == [0, 1, 3]
        assert df["support"].tolist() == [0.75, 0.25]
        assert df["area"].tolist() == [6, 1]
        assert df.attrs["num_itemsets"] == 4

    def test_to_pandas_indices(self) -> None:
        df = PatternList([Pattern([2, 0], [1])]).to_pandas(n_rows=2, col_names=["a", "b", "c"])
        assert list(df["itemsets"].iloc[0]) == [0, 2]

    def test_empty(self) -> None:
        df = PatternList().to_pandas(n_rows=0, false_positives=[], costs=[])
        assert df.empty
        assert list(df.columns) == ["itemsets", "transactions", "support", "area", "false_positives", "cost"]

    def test_sequence_behaviour(self) -> None:
        first, second = Pattern(["x"], [0]), Pattern(["y"], [1])
        patterns = PatternList([first, second])
        assert patterns[1] is second
        assert patterns[:1] == [first]
        assert first in patterns
        assert patterns == [first, second]
