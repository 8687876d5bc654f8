"""Model metadata lookup and caching."""

from .cache import MetadataCache, default_cache, describe_model, get_table_descriptor
from .descriptors import ColumnDescriptor, ColumnValue, TableDescriptor

__all__ = [
    "ColumnDescriptor",
    "ColumnValue",
    "MetadataCache",
    "TableDescriptor",
    "default_cache",
    "describe_model",
    "get_table_descriptor",
]
