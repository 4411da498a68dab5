from __future__ import annotations

import importlib
import importlib.util
import types

# Distribution name and the extra that pulls it in.
_OPTIONAL = {
    "polars": ("polars", "polars"),
    "tqdm": ("tqdm", "progress"),
}


def import_optional_dependency(name: str, errors: str = "raise") -> types.ModuleType | None:
    """Import *name* if its distribution is installed.

    With ``errors="raise"`` a missing module raises an ImportError naming the
    ``tilemine`` extra to install; with ``errors="ignore"`` it returns None.
    """
    if errors not in ("raise", "ignore"):
        raise ValueError(f"`errors` must be 'raise' or 'ignore'. Got {errors!r}.")

    top_level = name.partition(".")[0]
    if importlib.util.find_spec(top_level) is None or importlib.util.find_spec(name) is None:
        if errors == "ignore":
            return None
        dist, extra = _OPTIONAL.get(top_level, (top_level, ""))
        hint = f"pip install 'tilemine[{extra}]'" if extra else f"pip install {dist}"
        raise ImportError(f"Missing optional dependency '{dist}'. Install it with `{hint}`.")

    return importlib.import_module(name)
