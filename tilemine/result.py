from __future__ import annotations

from typing import Generic, TypeVar

from .cost import CostModel
from .pattern import Pattern, PatternList
from .transactions import TransactionList

T = TypeVar("T")


class ResultState(Generic[T]):
    """Search state of one tiling run.

    Owns the original ``dataset`` (never mutated), the ``residual_dataset``
    with every committed footprint erased, and the committed ``patterns``.
    Running totals of the pattern sizes and false positives make each cost
    probe a single pass over the residual rows.
    """

    def __init__(self, dataset: TransactionList[T], cost_model: CostModel | None = None) -> None:
        self.dataset = dataset
        self.residual_dataset = dataset.copy()
        self.patterns: PatternList[T] = PatternList()
        self.cost_model = cost_model if cost_model is not None else CostModel()
        self.false_positives: list[int] = []
        self.costs: list[float] = []
        self._pattern_size = 0
        self._false_positive_total = 0

    def sort_residual_dataset(self) -> None:
        self.residual_dataset.sort_by_freq()

    def current_cost(self) -> float:
        return self.cost_model.total(
            self.residual_dataset.el_count,
            self._false_positive_total,
            self._pattern_size,
        )

    def try_add_pattern(self, pattern: Pattern[T]) -> float:
        """Total cost if *pattern* were committed now; mutates nothing."""
        return self.cost_model.total(
            self.residual_dataset.try_remove_pattern(pattern),
            self._false_positive_total + self.dataset.calc_pattern_false_positives(pattern),
            self._pattern_size + pattern.size,
        )

    def add_pattern(self, pattern: Pattern[T]) -> None:
        false_positives = self.dataset.calc_pattern_false_positives(pattern)
        self.patterns.append(pattern)
        self.residual_dataset.remove_pattern(pattern)
        self._pattern_size += pattern.size
        self._false_positive_total += false_positives
        self.false_positives.append(false_positives)
        self.costs.append(self.current_cost())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"n_patterns={len(self.patterns)}, "
            f"residual_el_count={self.residual_dataset.el_count}, "
            f"cost={self.current_cost()})"
        )
