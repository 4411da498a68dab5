from __future__ import annotations

import logging
import time
from collections import deque
from typing import TYPE_CHECKING, Any, TypeVar

from .cost import CostModel
from .model import Miner
from .pattern import Pattern, PatternList
from .result import ResultState
from .transactions import TransactionList

if TYPE_CHECKING:
    import numpy as np
    import pandas as pd
    import polars as pl

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Greedy search
# ---------------------------------------------------------------------------


def not_too_noisy(
    dataset: TransactionList[T],
    core: Pattern[T],
    max_row_noise: float,
    max_column_noise: float,
) -> bool:
    """Check the tile's density against the original dataset.

    Every item column must be present in at least ``(1 - max_column_noise)``
    of the tile's rows and every row must hold at least ``(1 - max_row_noise)``
    of the tile's items.
    """
    rows = {tr_id: set(dataset.get(tr_id).items) for tr_id in core.transaction_ids}

    min_column = (1 - max_column_noise) * len(core.transaction_ids)
    for item in core.item_ids:
        if sum(1 for present in rows.values() if item in present) < min_column:
            return False

    min_row = (1 - max_row_noise) * len(core.item_ids)
    for present in rows.values():
        if sum(1 for item in core.item_ids if item in present) < min_row:
            return False

    return True


def find_core(state: ResultState[T]) -> tuple[Pattern[T], deque[T]]:
    """Seed a pure tile from the densest residual row.

    Returns the core and the FIFO of first-row items that did not lower the
    cost when added; those are retried by :func:`extend_core`.
    """
    state.sort_residual_dataset()
    residual = state.residual_dataset
    if len(residual) == 0 or not residual[0].items:
        raise ValueError("Cannot seed a core from an empty residual dataset.")

    extension_list: deque[T] = deque()
    first_row = list(residual[0].items)

    seed = first_row[0]
    core: Pattern[T] = Pattern([seed], (t.tr_id for t in residual if t.includes(seed)))
    current_cost = state.try_add_pattern(core)

    for item in first_row[1:]:
        candidate = core.copy()
        candidate.item_ids.add(item)
        # Keep the rows holding every core item so the seed stays a pure tile.
        candidate.transaction_ids = {
            tr_id for tr_id in core.transaction_ids if residual.get(tr_id).includes(item)
        }

        candidate_cost = state.try_add_pattern(candidate)
        if candidate_cost <= current_cost:
            core = candidate
            current_cost = candidate_cost
        else:
            extension_list.append(item)

    return core, extension_list


def extend_core(
    state: ResultState[T],
    core: Pattern[T],
    extension_list: deque[T],
    max_row_noise: float,
    max_column_noise: float,
) -> Pattern[T]:
    """Grow *core* with rows and deferred items until neither lowers the cost.

    Items are drained from *extension_list*; a rejected item is not retried.
    """
    dataset = state.dataset
    progress = True

    while progress:
        progress = False
        current_cost = state.try_add_pattern(core)

        for tr_id in dataset.ids():
            if core.has_transaction(tr_id):
                continue
            candidate = core.copy()
            candidate.transaction_ids.add(tr_id)
            if not not_too_noisy(dataset, candidate, max_row_noise, max_column_noise):
                continue
            candidate_cost = state.try_add_pattern(candidate)
            if candidate_cost <= current_cost:
                core = candidate
                current_cost = candidate_cost
                progress = True

        while extension_list:
            item = extension_list.popleft()
            candidate = core.copy()
            candidate.item_ids.add(item)
            if not not_too_noisy(dataset, candidate, max_row_noise, max_column_noise):
                continue
            candidate_cost = state.try_add_pattern(candidate)
            if candidate_cost <= current_cost:
                core = candidate
                current_cost = candidate_cost
                progress = True
                break

    return core


def panda(
    max_k: int,
    dataset: TransactionList[T],
    max_row_noise: float = 0.0,
    max_column_noise: float = 0.0,
    cost_model: CostModel | None = None,
    verbose: int = 0,
) -> PatternList[T]:
    """Mine up to *max_k* noise-tolerant tiles that lower the description cost.

    Parameters
    ----------
    max_k : int
        Upper bound on the number of patterns.  Non-positive values return
        an empty list.
    dataset : TransactionList
        The transactions to explain.  It is not modified.
    max_row_noise, max_column_noise : float
        Tolerated fraction of absent cells per tile row / column, in ``[0, 1)``.
        ``0`` requires every cell of a tile to be present.
    cost_model : CostModel, optional
        Objective weights.  Defaults to ``CostModel()``.
    verbose : int, default=0
        If > 0, print progress details to standard output.

    Returns
    -------
    PatternList
        Committed patterns in acceptance order.
    """
    return _run(max_k, dataset, max_row_noise, max_column_noise, cost_model, verbose).patterns


def _run(
    max_k: int,
    dataset: TransactionList[T],
    max_row_noise: float,
    max_column_noise: float,
    cost_model: CostModel | None,
    verbose: int,
) -> ResultState[T]:
    state = ResultState(dataset, cost_model)

    t0 = time.perf_counter()
    if verbose:
        print(
            f"[{time.strftime('%X')}] Tiling {len(dataset):,} transactions "
            f"({dataset.el_count:,} cells, initial cost {state.current_cost():.1f})..."
        )

    if state.residual_dataset.el_count == 0:
        logger.debug("Dataset holds no item occurrence; nothing to explain")
        return state

    for k in range(max_k):
        core, extension_list = find_core(state)
        core = extend_core(state, core, extension_list, max_row_noise, max_column_noise)

        current_cost = state.current_cost()
        new_cost = state.try_add_pattern(core)
        if current_cost < new_cost:
            logger.debug("Pattern %d would raise the cost (%.1f -> %.1f); stopping", k, current_cost, new_cost)
            break

        state.add_pattern(core)
        logger.debug(
            "Accepted pattern %d: %d items x %d transactions, cost %.1f -> %.1f",
            k,
            len(core.item_ids),
            len(core.transaction_ids),
            current_cost,
            new_cost,
        )
        if verbose > 1:
            print(
                f"[{time.strftime('%X')}] Pattern {k + 1}: {len(core.item_ids)} items x "
                f"{len(core.transaction_ids)} transactions, cost {new_cost:.1f}"
            )

        if state.residual_dataset.el_count == 0:
            logger.debug("Residual dataset fully explained after %d patterns", k + 1)
            break

    if verbose:
        print(
            f"[{time.strftime('%X')}] Found {len(state.patterns)} patterns "
            f"(cost {state.current_cost():.1f}) in {time.perf_counter() - t0:.2f}s."
        )
    return state


# ---------------------------------------------------------------------------
# DataFrame estimator
# ---------------------------------------------------------------------------


class Panda(Miner):
    """PANDA tiling miner.

    Finds at most ``max_k`` approximate tiles (item sets together with the
    transactions that contain them up to a noise tolerance) which jointly
    minimise the description cost of a one-hot dataset.
    """

    def __init__(
        self,
        data: pd.DataFrame | pl.DataFrame | np.ndarray | Any,
        item_names: list[str] | None = None,
        max_k: int = 10,
        max_row_noise: float = 0.0,
        max_column_noise: float = 0.0,
        pattern_weight: float = 1.0,
        null_values: bool = False,
        use_colnames: bool = True,
        verbose: int = 0,
        **kwargs: Any,
    ):
        """Initialize the PANDA miner.

        Parameters
        ----------
        data : pandas.DataFrame, polars.DataFrame, numpy.ndarray or scipy sparse matrix
            One-hot encoded transactions, one row per transaction.
        item_names : list[str] | None, default=None
            Custom column names to use if input is a numpy array or scipy sparse matrix
            and `use_colnames=True`.
        max_k : int, default=10
            Maximum number of patterns to return.
        max_row_noise : float, default=0.0
            Tolerated fraction of a tile's items missing from one of its rows, in `[0, 1)`.
        max_column_noise : float, default=0.0
            Tolerated fraction of a tile's rows missing one of its items, in `[0, 1)`.
        pattern_weight : float, default=1.0
            Cost of one item or transaction id in a tile, relative to one noisy cell.
        null_values : bool, default=False
            If True, ignore missing/null values in pandas DataFrames.
        use_colnames : bool, default=True
            If True, returns itemsets containing actual item names (column names)
            rather than their column indices.
        verbose : int, default=0
            If > 0, print progress details to standard output.
        """
        super().__init__(data=data, item_names=item_names, **kwargs)
        self.max_k = max_k
        self.max_row_noise = max_row_noise
        self.max_column_noise = max_column_noise
        self.pattern_weight = pattern_weight
        self.null_values = null_values
        self.use_colnames = use_colnames
        self.verbose = verbose

        self._state: ResultState[int] | None = None

    def mine(self, **kwargs: Any) -> pd.DataFrame:
        """Run PANDA on the stored data.

        Keyword arguments override the constructor parameters for this call.

        Returns
        -------
        pandas.DataFrame
            One row per tile, in acceptance order:
            - `itemsets`: items of the tile (indices or column names).
            - `transactions`: row positions covered by the tile.
            - `support`: fraction of rows covered.
            - `area`: number of cells claimed by the tile.
            - `false_positives`: claimed cells absent from the data.
            - `cost`: total description cost after accepting the tile.
        """
        from ._validation import check_max_k, check_noise

        max_k = kwargs.get("max_k", self.max_k)
        max_row_noise = kwargs.get("max_row_noise", self.max_row_noise)
        max_column_noise = kwargs.get("max_column_noise", self.max_column_noise)
        pattern_weight = kwargs.get("pattern_weight", self.pattern_weight)
        null_values = kwargs.get("null_values", self.null_values)
        use_colnames = kwargs.get("use_colnames", self.use_colnames)
        verbose = kwargs.get("verbose", self.verbose)

        check_max_k(max_k)
        check_noise("max_row_noise", max_row_noise)
        check_noise("max_column_noise", max_column_noise)
        cost_model = CostModel(pattern_weight=pattern_weight)

        dataset = TransactionList.from_onehot(self.data, null_values=null_values)
        self._state = _run(max_k, dataset, max_row_noise, max_column_noise, cost_model, verbose)

        result_df = self._state.patterns.to_pandas(
            n_rows=len(dataset),
            col_names=self.item_names,
            use_colnames=use_colnames,
            false_positives=self._state.false_positives,
            costs=self._state.costs,
        )
        return self._convert_to_orig_type(result_df)

    def _fitted_state(self) -> ResultState[int]:
        if self._state is None:
            raise RuntimeError("Call mine() or fit() before accessing fitted attributes.")
        return self._state

    @property
    def patterns_(self) -> PatternList[int]:
        """Accepted tiles as :class:`~tilemine.pattern.Pattern` objects over column indices."""
        return self._fitted_state().patterns

    @property
    def cost_(self) -> float:
        """Description cost of the accepted tiles."""
        return self._fitted_state().current_cost()

    @property
    def residual_(self) -> TransactionList[int]:
        """The dataset with every accepted tile's cells erased."""
        return self._fitted_state().residual_dataset

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"max_k={self.max_k}, "
            f"max_row_noise={self.max_row_noise}, "
            f"max_column_noise={self.max_column_noise}, "
            f"fitted={self._state is not None})"
        )


def panda_tiles(
    df: pd.DataFrame | pl.DataFrame | np.ndarray | Any,
    max_k: int = 10,
    max_row_noise: float = 0.0,
    max_column_noise: float = 0.0,
    pattern_weight: float = 1.0,
    null_values: bool = False,
    use_colnames: bool = True,
    verbose: int = 0,
    column_names: list[str] | None = None,
) -> pd.DataFrame:
    """Find approximate tiles of a one-hot dataset with PANDA.

    This module-level function relies on the Object-Oriented APIs.
    """
    return Panda(
        data=df,
        item_names=column_names,
        max_k=max_k,
        max_row_noise=max_row_noise,
        max_column_noise=max_column_noise,
        pattern_weight=pattern_weight,
        null_values=null_values,
        use_colnames=use_colnames,
        verbose=verbose,
    ).mine()
