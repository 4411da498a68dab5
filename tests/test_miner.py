"""Tests for the Panda estimator and its DataFrame inputs/outputs."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from scipy import sparse as sp

from tilemine import Panda, Pattern, from_transactions, panda_tiles


class TestPandaEstimator:
    def test_mine_pandas(self, noisy_onehot: pd.DataFrame) -> None:
        result = Panda(noisy_onehot, max_row_noise=0.4, max_column_noise=0.4).mine()
        assert len(result) == 1
        row = result.iloc[0]
        assert set(row["itemsets"]) == {"A", "B", "C"}
        assert list(row["transactions"]) == [0, 1, 2, 3]
        assert row["support"] == pytest.approx(0.8)
        assert row["area"] == 12
        assert row["false_positives"] == 1
        assert row["cost"] == 9.0

    def test_strict_tolerance(self, noisy_onehot: pd.DataFrame) -> None:
        result = Panda(noisy_onehot).mine()
        assert len(result) == 1
        assert list(result["transactions"].iloc[0]) == [0, 1, 2]
        assert result["false_positives"].iloc[0] == 0

    def test_fitted_attributes(self, noisy_onehot: pd.DataFrame) -> None:
        model = Panda(noisy_onehot, max_row_noise=0.4, max_column_noise=0.4)
        with pytest.raises(RuntimeError, match="mine"):
            _ = model.patterns_
        model.fit()
        assert list(model.patterns_) == [Pattern([0, 1, 2], [0, 1, 2, 3])]
        assert model.cost_ == 9.0
        assert model.residual_.el_count == 1
        assert model.predict() is model._result

    def test_kwargs_override(self, noisy_onehot: pd.DataFrame) -> None:
        model = Panda(noisy_onehot)
        assert len(model.mine(max_k=0)) == 0
        assert list(model.mine(use_colnames=False)["itemsets"].iloc[0]) == [0, 1, 2]
        assert model.max_k == 10

    def test_numpy_input(self, noisy_onehot: pd.DataFrame) -> None:
        result = Panda(noisy_onehot.to_numpy()).mine()
        assert list(result["itemsets"].iloc[0]) == [0, 1, 2]

    def test_numpy_with_item_names(self, noisy_onehot: pd.DataFrame) -> None:
        result = panda_tiles(noisy_onehot.to_numpy(), column_names=["w", "x", "y", "z"])
        assert list(result["itemsets"].iloc[0]) == ["w", "x", "y"]

    def test_scipy_input(self, noisy_onehot: pd.DataFrame) -> None:
        csr = sp.csr_matrix(noisy_onehot.to_numpy())
        result = Panda(csr, max_row_noise=0.4, max_column_noise=0.4).mine()
        assert list(result["transactions"].iloc[0]) == [0, 1, 2, 3]

    def test_empty_input(self) -> None:
        result = Panda(np.zeros((0, 3), dtype=bool)).mine()
        assert result.empty
        assert "itemsets" in result.columns

    @pytest.mark.parametrize(
        ("param", "value", "match"),
        [
            ("max_row_noise", 1.0, "max_row_noise"),
            ("max_column_noise", -0.1, "max_column_noise"),
            ("pattern_weight", 0.0, "pattern_weight"),
            ("max_k", 2.5, "max_k"),
        ],
    )
    def test_invalid_parameters(self, noisy_onehot: pd.DataFrame, param: str, value: float, match: str) -> None:
        with pytest.raises(ValueError, match=match):
            Panda(noisy_onehot, **{param: value}).mine()

    def test_repr(self, noisy_onehot: pd.DataFrame) -> None:
        model = Panda(noisy_onehot, max_k=3)
        assert repr(model) == "Panda(max_k=3, max_row_noise=0.0, max_column_noise=0.0, fitted=False)"
        model.mine()
        assert "fitted=True" in repr(model)

    def test_verbose(self, noisy_onehot: pd.DataFrame, capsys: pytest.CaptureFixture[str]) -> None:
        Panda(noisy_onehot, verbose=1).mine()
        out = capsys.readouterr().out
        assert "Tiling 5 transactions" in out
        assert "Found 1 patterns" in out


class TestFromTransactions:
    def test_list_of_lists(self) -> None:
        baskets = [["bread", "milk"], ["bread", "milk"], ["bread", "milk"], ["eggs"]]
        result = Panda.from_transactions(baskets, max_k=2).mine()
        assert len(result) == 1
        assert set(result["itemsets"].iloc[0]) == {"bread", "milk"}
        assert list(result["transactions"].iloc[0]) == [0, 1, 2]

    def test_long_format(self) -> None:
        df = pd.DataFrame(
            {
                "order_id": [1, 1, 2, 2, 3, 3, 4],
                "item": ["a", "b", "a", "b", "a", "b", "c"],
            }
        )
        result = Panda.from_pandas(df).mine()
        assert set(result["itemsets"].iloc[0]) == {"a", "b"}

    def test_one_hot_shape(self) -> None:
        ohe = from_transactions([[3, 4, 5], [3, 5], [8]])
        assert ohe.shape == (3, 4)
        assert list(ohe.columns) == ["3", "4", "5", "8"]
        assert ohe.sparse.to_coo().sum() == 6

    def test_min_item_count(self) -> None:
        ohe = from_transactions([["a", "b"], ["a"], ["c"]], min_item_count=2)
        assert list(ohe.columns) == ["a"]

    def test_frame_counts_items_once_per_transaction(self) -> None:
        df = pd.DataFrame({"order_id": [1, 1, 1, 2, 2, 3], "item": ["a", "a", "b", "a", "c", "c"]})
        ohe = from_transactions(df, min_item_count=2)
        assert list(ohe.columns) == ["a", "c"]
        assert ohe.shape == (3, 2)
        assert ohe.sparse.to_coo().sum() == 4

    def test_missing_column(self) -> None:
        df = pd.DataFrame({"order_id": [1], "item": ["a"]})
        with pytest.raises(ValueError, match="not found"):
            from_transactions(df, item_col="product")

    def test_rejects_other_types(self) -> None:
        with pytest.raises(TypeError):
            from_transactions({"a": 1})


class TestOtherFrames:
    def test_polars_round_trip(self, noisy_onehot: pd.DataFrame) -> None:
        pl = pytest.importorskip("polars")
        result = Panda(pl.from_pandas(noisy_onehot)).mine()
        assert isinstance(result, pl.DataFrame)
        assert result.height == 1
        assert sorted(result.to_dicts()[0]["itemsets"]) == ["A", "B", "C"]

    def test_pyarrow_round_trip(self, noisy_onehot: pd.DataFrame) -> None:
        pa = pytest.importorskip("pyarrow")
        pytest.importorskip("polars")
        result = Panda(pa.Table.from_pandas(noisy_onehot)).mine()
        assert isinstance(result, pa.Table)
        assert result.num_rows == 1


class TestSaveLoad:
    def test_round_trip(self, noisy_onehot: pd.DataFrame, tmp_path) -> None:
        model = Panda(noisy_onehot, max_row_noise=0.4, max_column_noise=0.4).fit()
        path = tmp_path / "panda.pkl"
        model.save(path)

        loaded = Panda.load(path)
        assert list(loaded.patterns_) == list(model.patterns_)
        assert loaded.cost_ == model.cost_
        assert loaded.max_row_noise == 0.4

    def test_foreign_payload(self, tmp_path) -> None:
        import pickle

        path = tmp_path / "other.pkl"
        with open(path, "wb") as f:
            pickle.dump([1, 2, 3], f)
        with pytest.raises(TypeError):
            Panda.load(path)


class TestOptionalDependency:
    def test_missing_module(self) -> None:
        from tilemine._dependencies import import_optional_dependency

        assert import_optional_dependency("tilemine_no_such_module", errors="ignore") is None
        with pytest.raises(ImportError, match="Missing optional dependency 'tilemine_no_such_module'"):
            import_optional_dependency("tilemine_no_such_module")

    def test_unknown_mode(self) -> None:
        from tilemine._dependencies import import_optional_dependency

        with pytest.raises(ValueError, match="errors"):
            import_optional_dependency("tqdm", errors="warn")
