from __future__ import annotations

import time
import typing
from collections import Counter
from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._compat import to_dataframe

if TYPE_CHECKING:
    import pandas as pd
    from scipy import sparse as sp

    from ._compat import DataFrame
    from .pattern import Pattern

T = TypeVar("T")


class Transaction(Generic[T]):
    """One dataset row: an ordered list of items and a stable row id."""

    __slots__ = ("items", "tr_id")

    def __init__(self, items: Iterable[T] = (), tr_id: int = 0) -> None:
        self.items: list[T] = list(items)
        self.tr_id = tr_id

    def includes(self, item: T) -> bool:
        return item in self.items

    def copy(self) -> Transaction[T]:
        return Transaction(self.items, self.tr_id)

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"Transaction(items={self.items!r}, tr_id={self.tr_id})"


class TransactionList(Generic[T]):
    """A transaction-by-item dataset.

    ``el_count`` caches the total number of item occurrences and is kept in
    sync by every mutating method.  Rows keep their ``tr_id`` when the list is
    reordered, so ``get(tr_id)`` is the way to reach a row by identity.
    """

    def __init__(self, transactions: Iterable[Iterable[T]] | None = None) -> None:
        self.transactions: list[Transaction[T]] = []
        self.el_count = 0
        self._by_id: dict[int, Transaction[T]] = {}
        if transactions is not None:
            for items in transactions:
                self.add_transaction(items)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_lists(cls, rows: Iterable[Iterable[T]]) -> TransactionList[T]:
        return cls(rows)

    @classmethod
    def from_onehot(cls, data: DataFrame | Any, null_values: bool = False) -> TransactionList[int]:
        """Build a dataset from a one-hot encoded matrix.

        Items are the column indices of the set cells, transactions are the
        rows in order.

        Parameters
        ----------
        data : pandas.DataFrame, polars.DataFrame, numpy.ndarray, scipy sparse matrix or pyarrow.Table
            Boolean / 0-1 matrix with one row per transaction.
        null_values : bool, default=False
            If True, NaN cells of a pandas DataFrame are treated as absent.
        """
        import numpy as np
        import pandas as pd
        from scipy import sparse as sp

        data = to_dataframe(data)

        if type(data).__name__ == "DataFrame" and getattr(type(data), "__module__", "").startswith("polars"):
            data = np.asarray(typing.cast(Any, data).to_numpy())

        if isinstance(data, pd.DataFrame):
            from ._validation import valid_input_check

            valid_input_check(data, null_values)
            if hasattr(data, "sparse") and data.size > 0:
                csr = data.sparse.to_coo().tocsr()
            else:
                values = data.to_numpy()
                if null_values:
                    values = np.where(pd.isna(values), False, values)
                csr = sp.csr_matrix(np.asarray(values, dtype=bool).reshape(data.shape))
        elif sp.issparse(data):
            csr = sp.csr_matrix(data)
        elif isinstance(data, np.ndarray):
            if data.ndim != 2:
                raise ValueError(f"Expected a 2-D array, got an array with {data.ndim} dimension(s).")
            csr = sp.csr_matrix(data.astype(bool))
        else:
            raise TypeError(
                f"Expected a pandas/polars DataFrame, numpy array, scipy sparse matrix or pyarrow Table, got {type(data)}"
            )

        csr.eliminate_zeros()
        csr.sort_indices()
        dataset: TransactionList[int] = TransactionList()
        indptr, indices = csr.indptr, csr.indices
        for row in range(csr.shape[0]):
            dataset.add_transaction(int(i) for i in indices[indptr[row] : indptr[row + 1]])
        return dataset

    def add_transaction(self, items: Iterable[T] | Transaction[T]) -> Transaction[T]:
        """Append a row; its ``tr_id`` becomes its position in the list."""
        if isinstance(items, Transaction):
            items = items.items
        transaction = Transaction(items, len(self.transactions))
        self.transactions.append(transaction)
        self._by_id[transaction.tr_id] = transaction
        self.el_count += len(transaction.items)
        return transaction

    def copy(self) -> TransactionList[T]:
        clone: TransactionList[T] = TransactionList()
        clone.transactions = [t.copy() for t in self.transactions]
        clone._by_id = {t.tr_id: t for t in clone.transactions}
        clone.el_count = self.el_count
        return clone

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.transactions)

    def __iter__(self) -> Iterator[Transaction[T]]:
        return iter(self.transactions)

    def __getitem__(self, position: int) -> Transaction[T]:
        return self.transactions[position]

    def get(self, tr_id: int) -> Transaction[T]:
        """Return the row with id *tr_id*, wherever it currently sits."""
        return self._by_id[tr_id]

    def ids(self) -> list[int]:
        return sorted(self._by_id)

    def items(self) -> set[T]:
        distinct: set[T] = set()
        for transaction in self.transactions:
            distinct.update(transaction.items)
        return distinct

    def density(self) -> float:
        n_items = len(self.items())
        if not self.transactions or not n_items:
            return 0.0
        return self.el_count / (len(self.transactions) * n_items)

    def to_lists(self) -> list[list[T]]:
        return [list(t.items) for t in self.transactions]

    def to_csr(self, n_items: int | None = None) -> sp.csr_matrix:
        """Export as a boolean CSR matrix, rows ordered by ``tr_id``.

        Only valid for datasets whose items are non-negative column indices,
        such as the ones built by :meth:`from_onehot`.
        """
        import numpy as np
        from scipy import sparse as sp

        rows: list[int] = []
        cols: list[int] = []
        for tr_id in self.ids():
            for item in set(self._by_id[tr_id].items):
                rows.append(tr_id)
                cols.append(int(typing.cast(Any, item)))

        if n_items is None:
            n_items = max(cols) + 1 if cols else 0
        data = np.ones(len(rows), dtype=bool)
        return sp.csr_matrix(
            (data, (np.array(rows, dtype=np.int64), np.array(cols, dtype=np.int64))),
            shape=(len(self.transactions), n_items),
        )

    # ------------------------------------------------------------------
    # Pattern footprints
    # ------------------------------------------------------------------

    def remove_pattern(self, pattern: Pattern[T]) -> None:
        """Erase the pattern's cells from the rows it covers (residual update)."""
        for transaction in self.transactions:
            if not pattern.has_transaction(transaction.tr_id):
                continue
            kept = [item for item in transaction.items if not pattern.has_item(item)]
            self.el_count -= len(transaction.items) - len(kept)
            transaction.items = kept

    def try_remove_pattern(self, pattern: Pattern[T]) -> int:
        """Return the ``el_count`` :meth:`remove_pattern` would leave, without mutating."""
        count = self.el_count
        for transaction in self.transactions:
            if pattern.has_transaction(transaction.tr_id):
                count -= sum(1 for item in transaction.items if pattern.has_item(item))
        return count

    def calc_pattern_false_positives(self, pattern: Pattern[T]) -> int:
        """Count the cells of the pattern's rectangle that are absent from this dataset."""
        false_positives = 0
        for tr_id in pattern.transaction_ids:
            present = set(self._by_id[tr_id].items)
            false_positives += sum(1 for item in pattern.item_ids if item not in present)
        return false_positives

    # ------------------------------------------------------------------
    # Frequencies
    # ------------------------------------------------------------------

    def get_items_freq(self) -> Counter[T]:
        freq: Counter[T] = Counter()
        for transaction in self.transactions:
            freq.update(transaction.items)
        return freq

    def sort_by_freq(self) -> None:
        """Reorder items in every row, then the rows, by descending frequency.

        Both sorts are stable, so ties keep their current relative order.
        """
        freq = self.get_items_freq()
        for transaction in self.transactions:
            transaction.items.sort(key=lambda item: freq[item], reverse=True)
        self.transactions.sort(key=lambda t: sum(freq[item] for item in t.items), reverse=True)

    def __repr__(self) -> str:
        return f"TransactionList(n_transactions={len(self.transactions)}, el_count={self.el_count})"


# ---------------------------------------------------------------------------
# Long-format / list-of-lists → one-hot
# ---------------------------------------------------------------------------


def from_transactions(
    data: DataFrame | Sequence[Sequence[str | int]] | Any,
    transaction_col: str | None = None,
    item_col: str | None = None,
    min_item_count: int = 1,
    verbose: int = 0,
) -> pd.DataFrame:
    """Convert long-format transactional data to a one-hot boolean matrix.

    Parameters
    ----------
    data
        One of:

        - **Pandas / Polars DataFrame** with (at least) two columns:
          one for the transaction identifier and one for the item.
        - **List of lists** where each inner list contains the items of a
          single transaction, e.g. ``[["bread", "milk"], ["bread", "eggs"]]``.

    transaction_col
        Name of the column that identifies transactions.  If ``None`` the
        first column is used.  Ignored for list-of-lists input.

    item_col
        Name of the column that contains item values.  If ``None`` the
        second column is used.  Ignored for list-of-lists input.

    min_item_count
        Minimum number of times an item must appear to be included in the
        resulting one-hot-encoded matrix. Default is 1.

    Returns
    -------
    pd.DataFrame
        A sparse boolean pandas DataFrame ready for :class:`tilemine.Panda`.
        Column names correspond to the unique items.

    Examples
    --------
    >>> import tilemine
    >>> import pandas as pd
    >>> df = pd.DataFrame({
    ...     "order_id": [1, 1, 1, 2, 2, 3],
    ...     "item": [3, 4, 5, 3, 5, 8],
    ... })
    >>> ohe = tilemine.from_transactions(df)
    >>> tiles = tilemine.panda_tiles(ohe, max_k=2)
    """
    import pandas as pd

    data = to_dataframe(data)

    if isinstance(data, (list, tuple)):
        return _from_list(data, min_item_count=min_item_count, verbose=verbose)

    if type(data).__name__ == "DataFrame" and getattr(type(data), "__module__", "").startswith("polars"):
        data = typing.cast(Any, data).to_pandas()

    if not isinstance(data, pd.DataFrame):
        raise TypeError(f"Expected a Pandas/Polars DataFrame or list of lists, got {type(data)}")

    return _from_dataframe(data, transaction_col, item_col, min_item_count=min_item_count, verbose=verbose)


def _from_list(
    transactions: Sequence[Sequence[str | int]],
    min_item_count: int = 1,
    verbose: int = 0,
) -> pd.DataFrame:
    import numpy as np
    import pandas as pd
    from scipy import sparse as sp

    t0 = 0.0
    if verbose:
        print(f"[{time.strftime('%X')}] Extracting unique items from list of lists...")
        t0 = time.perf_counter()

    counts: Counter[Any] = Counter()
    for txn in transactions:
        counts.update(set(txn))
    all_items_set = {item for item, count in counts.items() if count >= min_item_count}

    all_items = sorted(all_items_set, key=lambda x: (isinstance(x, str), x))
    item_to_idx = {item: i for i, item in enumerate(all_items)}

    n_txn = len(transactions)
    n_items = len(all_items)

    if verbose:
        print(f"[{time.strftime('%X')}] Found {n_items:,} unique items. Building COO coordinates...")

    row_idx: list[int] = []
    col_idx: list[int] = []
    iterator: Iterable[tuple[int, Sequence[Any]]] = enumerate(transactions)
    if verbose:
        from ._dependencies import import_optional_dependency

        tqdm_auto = import_optional_dependency("tqdm.auto", errors="ignore")
        if tqdm_auto is not None:
            iterator = tqdm_auto.tqdm(iterator, total=n_txn, desc="Transactions")

    for i, txn in iterator:
        for item in set(txn):
            if item in item_to_idx:
                row_idx.append(i)
                col_idx.append(item_to_idx[item])

    data = np.ones(len(row_idx), dtype=bool)
    csr = sp.csr_matrix(
        (data, (np.array(row_idx, dtype=np.int64), np.array(col_idx, dtype=np.int64))),
        shape=(n_txn, n_items),
    )

    sparse_df = pd.DataFrame.sparse.from_spmatrix(
        csr,
        columns=[str(item) for item in all_items],
    ).astype(pd.SparseDtype("bool", fill_value=False))

    if verbose:
        print(f"[{time.strftime('%X')}] CSR generation completed in {time.perf_counter() - t0:.2f}s.")

    return sparse_df


def _from_dataframe(
    df: pd.DataFrame,
    transaction_col: str | None,
    item_col: str | None,
    min_item_count: int = 1,
    verbose: int = 0,
) -> pd.DataFrame:
    import numpy as np
    import pandas as pd
    from scipy import sparse as sp

    t0 = time.perf_counter()
    if df.shape[1] < 2:
        raise ValueError(f"Long-format input needs a transaction column and an item column, got {list(df.columns)}")

    txn_col = df.columns[0] if transaction_col is None else transaction_col
    itm_col = df.columns[1] if item_col is None else item_col
    for role, col in (("Transaction", txn_col), ("Item", itm_col)):
        if col not in df.columns:
            raise ValueError(f"{role} column {col!r} not found in {list(df.columns)}")

    # One cell per (transaction, item), however often the pair is repeated.
    pairs = df[[txn_col, itm_col]].drop_duplicates()
    if verbose:
        print(f"[{time.strftime('%X')}] {len(pairs):,} distinct (transaction, item) pairs out of {len(df):,} rows.")

    if min_item_count > 1:
        support = pairs[itm_col].map(pairs[itm_col].value_counts())
        pairs = pairs[support >= min_item_count]

    if pairs.empty:
        return pd.DataFrame()

    rows, _ = pd.factorize(pairs[txn_col], sort=False)
    cols, items = pd.factorize(pairs[itm_col], sort=True)
    csr = sp.csr_matrix(
        (np.ones(len(rows), dtype=bool), (rows.astype(np.int64), cols.astype(np.int64))),
        shape=(int(rows.max()) + 1, len(items)),
    )

    res = pd.DataFrame.sparse.from_spmatrix(csr, columns=[str(item) for item in items])
    res = res.astype(pd.SparseDtype("bool", fill_value=False))

    if verbose:
        print(f"[{time.strftime('%X')}] Built a {res.shape[0]:,} x {res.shape[1]:,} one-hot frame in {time.perf_counter() - t0:.2f}s.")
    return res
