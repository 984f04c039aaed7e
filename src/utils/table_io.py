"""CSV persistence for projection tables."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from ..groundwater.projection import (
    FLOW_COLUMNS,
    ProjectionError,
    ProjectionTable,
    validate_projection_frame,
)

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]


def save_projection(table: ProjectionTable, path: PathLike, *, float_format: str = "%.6f") -> Path:
    """Write ``table`` to ``path`` as CSV and return the resolved path."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_frame().to_csv(path, index=False, float_format=float_format)
    LOGGER.info("Projection table written to %s", path)
    return path


def load_projection(path: PathLike) -> ProjectionTable:
    """Read a projection table previously written by :func:`save_projection`.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ProjectionError
        If required columns are missing or the year sequence is broken.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    frame = pd.read_csv(path)
    validate_projection_frame(frame, step=_infer_step(frame))
    frame["year"] = frame["year"].astype(int)
    LOGGER.debug("Loaded projection table %s (%d rows)", path, len(frame))
    return ProjectionTable(_frame=frame, start_year=int(frame["year"].iloc[0]),
                           step=_infer_step(frame))


def _infer_step(frame: pd.DataFrame) -> int:
    if "year" not in frame.columns:
        raise ProjectionError(f"Projection table is missing columns: {['year']}")
    years = frame["year"].to_numpy()
    if years.size < 2:
        return 1
    step = int(years[1] - years[0])
    if step <= 0:
        raise ProjectionError("Projection years must be increasing.")
    return step


__all__ = ["FLOW_COLUMNS", "load_projection", "save_projection"]
