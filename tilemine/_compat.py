from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    import numpy as np
    import pandas as pd
    import polars as pl
    import pyarrow as pa
    from scipy import sparse as sp

    #: Union of all supported tabular input types.
    #:
    #: Accepted by every ``df`` / ``data`` parameter in tilemine:
    #:
    #: * ``pandas.DataFrame`` – including sparse-backed frames
    #: * ``polars.DataFrame``
    #: * ``numpy.ndarray`` – 2-D boolean / 0-1 matrix
    #: * ``scipy.sparse`` matrices
    #: * ``pyarrow.Table`` – converted to Polars via zero-copy
    DataFrame = Union[pd.DataFrame, pl.DataFrame, np.ndarray, sp.spmatrix, pa.Table]  # noqa: UP007


def input_type(data: Any) -> str:
    """Name the container family of *data*: ``pandas``, ``polars`` or ``pyarrow``."""
    _type = type(data)
    mod_name = getattr(_type, "__module__", "") or ""
    if _type.__name__ == "Table" and mod_name.startswith("pyarrow"):
        return "pyarrow"
    if _type.__name__ == "DataFrame" and mod_name.startswith("polars"):
        return "polars"
    return "pandas"


def to_dataframe(data: Any) -> Any:
    """Coerce PyArrow inputs to a zero-copy Polars DataFrame; return everything else unchanged."""
    if input_type(data) == "pyarrow":
        from tilemine._dependencies import import_optional_dependency

        pl = import_optional_dependency("polars")

        return pl.from_arrow(data)

    # Keep polars dataframes as they are; callers convert to numpy themselves
    return data
