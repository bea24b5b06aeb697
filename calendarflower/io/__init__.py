"""Loading of event aggregates from in-memory frames and record iterables."""

from .base import iter_records, load_aggregates

__all__ = ["iter_records", "load_aggregates"]
