from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    import pandas as pd

T = TypeVar("T")


class Pattern(Generic[T]):
    """A tile: the items of ``item_ids`` (approximately) occur in every row of ``transaction_ids``."""

    __slots__ = ("item_ids", "transaction_ids")

    def __init__(self, item_ids: Iterable[T] = (), transaction_ids: Iterable[int] = ()) -> None:
        self.item_ids: set[T] = set(item_ids)
        self.transaction_ids: set[int] = set(transaction_ids)

    def has_item(self, item: T) -> bool:
        return item in self.item_ids

    def has_transaction(self, tr_id: int) -> bool:
        return tr_id in self.transaction_ids

    @property
    def size(self) -> int:
        """Number of ids needed to describe the tile, ``|I| + |T|``."""
        return len(self.item_ids) + len(self.transaction_ids)

    @property
    def area(self) -> int:
        return len(self.item_ids) * len(self.transaction_ids)

    def copy(self) -> Pattern[T]:
        return Pattern(self.item_ids, self.transaction_ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return self.item_ids == other.item_ids and self.transaction_ids == other.transaction_ids

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        items = sorted(self.item_ids, key=repr)
        return f"Pattern(item_ids={items!r}, transaction_ids={sorted(self.transaction_ids)!r})"


class PatternList(Sequence, Generic[T]):
    """Committed patterns in the order they were accepted."""

    def __init__(self, patterns: Iterable[Pattern[T]] = ()) -> None:
        self._patterns: list[Pattern[T]] = list(patterns)

    def append(self, pattern: Pattern[T]) -> None:
        self._patterns.append(pattern)

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return PatternList(self._patterns[index])
        return self._patterns[index]

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[Pattern[T]]:
        return iter(self._patterns)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PatternList):
            return self._patterns == other._patterns
        if isinstance(other, list):
            return self._patterns == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PatternList({self._patterns!r})"

    def to_pandas(
        self,
        n_rows: int,
        col_names: Sequence[Any] | None = None,
        use_colnames: bool = False,
        false_positives: Sequence[int] | None = None,
        costs: Sequence[float] | None = None,
    ) -> pd.DataFrame:
        """Tabulate the patterns, one row per tile.

        Parameters
        ----------
        n_rows : int
            Number of transactions in the mined dataset, used for ``support``.
        col_names : sequence, optional
            Names of the one-hot columns; item ``i`` is named ``col_names[i]``.
        use_colnames : bool, default=False
            Report item names instead of column indices in ``itemsets``.
        false_positives, costs : sequence, optional
            Per-pattern noise counts and running total costs.

        Returns
        -------
        pd.DataFrame
            Columns ``itemsets``, ``transactions``, ``support``, ``area`` and,
            when given, ``false_positives`` and ``cost``.  List columns are
            backed by ``pyarrow`` list arrays.
        """
        import numpy as np
        import pandas as pd
        import pyarrow as pa

        columns = ["itemsets", "transactions", "support", "area"]
        if false_positives is not None:
            columns.append("false_positives")
        if costs is not None:
            columns.append("cost")

        if not self._patterns:
            return pd.DataFrame(columns=columns)  # type: ignore[arg-type]

        item_lists = [sorted(p.item_ids, key=lambda x: (isinstance(x, str), x)) for p in self._patterns]
        tr_lists = [sorted(p.transaction_ids) for p in self._patterns]

        item_offsets = np.concatenate([[0], np.cumsum([len(x) for x in item_lists])]).astype(np.int32)
        flat_items: list[Any] = [item for items in item_lists for item in items]
        if use_colnames and col_names is not None:
            names = np.asarray(list(col_names), dtype=object)
            flat_items = [names[item] for item in flat_items]
        items_pa = pa.array(flat_items)
        itemsets = pa.ListArray.from_arrays(pa.array(item_offsets, type=pa.int32()), items_pa)

        tr_offsets = np.concatenate([[0], np.cumsum([len(x) for x in tr_lists])]).astype(np.int32)
        trs_pa = pa.array([tr for trs in tr_lists for tr in trs], type=pa.int64())
        transactions = pa.ListArray.from_arrays(pa.array(tr_offsets, type=pa.int32()), trs_pa)

        n_transactions = np.array([len(x) for x in tr_lists], dtype=np.int64)
        result = pd.DataFrame(
            {
                "itemsets": pd.Series(itemsets, dtype=pd.ArrowDtype(itemsets.type)),
                "transactions": pd.Series(transactions, dtype=pd.ArrowDtype(transactions.type)),
                "support": n_transactions / n_rows if n_rows else np.zeros(len(tr_lists)),
                "area": np.array([p.area for p in self._patterns], dtype=np.int64),
            }
        )
        if false_positives is not None:
            result["false_positives"] = np.asarray(false_positives, dtype=np.int64)
        if costs is not None:
            result["cost"] = np.asarray(costs, dtype=np.float64)
        result.attrs["num_itemsets"] = n_rows
        return result
