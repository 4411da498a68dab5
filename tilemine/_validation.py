"""Input and parameter validation for the tiling estimators."""

from __future__ import annotations

import numbers
import warnings

import numpy as np
import pandas as pd


def valid_input_check(df: pd.DataFrame, null_values: bool = False) -> None:
    """Validate a one-hot / boolean DataFrame before building a dataset.

    Parameters
    ----------
    df:
        Input DataFrame.  Allowed values: 0/1 or True/False (and NaN if
        ``null_values=True``).
    null_values:
        Whether NaN values are allowed in *df*.
    """
    if df is None:
        return

    if df.size == 0:
        return

    if hasattr(df, "sparse"):
        if not isinstance(df.columns[0], str) and df.columns[0] != 0:
            raise ValueError(
                "Due to current limitations in Pandas, "
                "if the sparse format has integer column names,"
                "names, please make sure they either start "
                "with `0` or cast them as string column names: "
                "`df.columns = [str(i) for i in df.columns`]."
            )

    if null_values:
        all_bools = (
            df.apply(lambda col: col.apply(lambda x: pd.isna(x) or isinstance(x, (bool, np.bool_))))
            .all()
            .all()
        )
    else:
        all_bools = df.dtypes.apply(pd.api.types.is_bool_dtype).all()

    if all_bools:
        return

    warnings.warn(
        "DataFrames with non-bool types result in worse computational "
        "performance. Please use a DataFrame with bool type",
        UserWarning,
        stacklevel=3,
    )

    has_nans = pd.isna(df).any().any()
    if null_values and not has_nans:
        warnings.warn(
            "null_values=True is inefficient when there are no NaN values "
            "in the DataFrame. Set null_values=False for faster output.",
            stacklevel=3,
        )
    if not null_values and has_nans:
        raise ValueError("NaN values are not permitted in the DataFrame when null_values=False.")

    if hasattr(df, "sparse"):
        values = df.sparse.to_coo().tocoo().data
    else:
        values = df.to_numpy(dtype=float, na_value=np.nan)

    if null_values:
        idxs = np.where((values != 1) & (values != 0) & (~np.isnan(values)))
    else:
        idxs = np.where((values != 1) & (values != 0))

    if len(idxs[0]) > 0:
        val = values[tuple(loc[0] for loc in idxs)]
        if null_values:
            s = "The allowed values for a DataFrame are True, False, 0, 1, NaN. Found value %s" % (val,)
        else:
            s = "The allowed values for a DataFrame are True, False, 0, 1. Found value %s" % (val,)
        raise ValueError(s)


def check_noise(name: str, value: float) -> None:
    """Noise tolerances are fractions of absent cells in ``[0, 1)``."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not 0.0 <= value < 1.0:
        raise ValueError(f"`{name}` must be a number within the interval `[0, 1)`. Got {value}.")


def check_max_k(max_k: int) -> None:
    if isinstance(max_k, bool) or not isinstance(max_k, numbers.Integral):
        raise ValueError(f"`max_k` must be an integer. Got {max_k!r}.")


def check_pattern_weight(pattern_weight: float) -> None:
    if isinstance(pattern_weight, bool) or not isinstance(pattern_weight, numbers.Real) or not pattern_weight > 0:
        raise ValueError(f"`pattern_weight` must be a positive number. Got {pattern_weight}.")
