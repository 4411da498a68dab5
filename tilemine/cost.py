"""Encoding-length objective for a set of tiles.

The cost of a pattern set ``P`` over a dataset ``D`` is::

    J(P) = noise(P) + pattern_weight * sum(|I_p| + |T_p| for p in P)

where ``noise`` counts the cells of ``D`` left uncovered (false negatives) plus
the cells claimed by a tile but absent from ``D`` (false positives).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CostModel:
    """Weights of the two terms of the objective.

    Parameters
    ----------
    pattern_weight : float, default=1.0
        Price of one id (item or transaction) in a tile description, relative
        to one noisy cell.  Larger values favour fewer, larger tiles.
    """

    pattern_weight: float = 1.0

    def __post_init__(self) -> None:
        from ._validation import check_pattern_weight

        check_pattern_weight(self.pattern_weight)

    def total(self, false_negatives: int, false_positives: int, pattern_size: int) -> float:
        return float(false_negatives + false_positives) + self.pattern_weight * pattern_size
