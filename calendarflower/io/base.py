from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from typing import Any, Iterable, Iterator, Mapping, Optional

from ..compute.core.types import EventAggregate, LoadResult

_log = logging.getLogger(__name__)


def iter_records(data: Any) -> Iterator[Mapping[str, Any]]:
    """Yield one mapping per aggregate row from in-memory objects only.

    Supports:
    - In-memory pandas.DataFrame (one mapping per row)
    - In-memory polars.DataFrame or LazyFrame (collected, then per row)
    - An iterable of mappings or ``EventAggregate`` objects (pass-through)

    Notes:
    - Optional dependencies (pandas/polars) are imported lazily.
    - Row order is preserved; it drives the order of arcs within a month.
    """
    if data is None:
        return

    # In-memory pandas DataFrame
    try:
        import pandas as pd  # type: ignore

        if isinstance(data, pd.DataFrame):
            for row in data.to_dict(orient="records"):
                yield row
            return
    except ImportError:
        pass

    # In-memory polars DataFrame / LazyFrame
    try:
        import polars as pl  # type: ignore

        if isinstance(data, pl.LazyFrame):
            data = data.collect()
        if isinstance(data, pl.DataFrame):
            for row in data.iter_rows(named=True):
                yield row
            return
    except ImportError:
        pass

    if isinstance(data, (str, bytes, bytearray, Mapping)) or not isinstance(
        data, Iterable
    ):
        raise TypeError(
            "Unsupported input for iter_records. Provide an in-memory pandas/polars DataFrame, or an iterable of mappings."
        )

    for item in data:
        if isinstance(item, EventAggregate):
            yield item.to_dict()
        elif isinstance(item, Mapping):
            yield item
        elif is_dataclass(item) and not isinstance(item, type):
            yield asdict(item)
        else:
            raise TypeError(
                f"Unsupported record type {type(item).__name__!r}; expected a mapping or EventAggregate."
            )


def load_aggregates(data: Any, logger: Optional[logging.Logger] = None) -> LoadResult:
    """Convert raw rows into ``EventAggregate`` records.

    Malformed numeric fields are coerced (counts and percentage to 0, severity
    to N/A). Rows that cannot be placed on the flower at all, because their
    event type is unknown or their year/month is unusable, are dropped and
    reported as warnings.

    Args:
        data: Any input accepted by :func:`iter_records`.
        logger: Optional logger; defaults to this module's logger.

    Returns:
        A :class:`LoadResult` with records in source order.
    """
    log = logger or _log
    result = LoadResult()
    for i, row in enumerate(iter_records(data)):
        try:
            result.records.append(EventAggregate.from_mapping(row))
        except ValueError as e:
            msg = f"row {i}: {e}"
            result.warnings.append(msg)
            log.warning("dropping aggregate %s", msg)
    if result.records:
        log.debug("loaded %d aggregates (%d dropped)", len(result.records), result.dropped)
    return result
