"""Process-wide cache of table descriptors keyed by model class."""

from __future__ import annotations

from threading import RLock
from typing import TYPE_CHECKING, Dict, Type

from ..utils import get_logger
from .descriptors import ColumnDescriptor, TableDescriptor

if TYPE_CHECKING:
    from ..core.model import Model


logger = get_logger("metadata.cache")


def describe_model(model: Type["Model"]) -> TableDescriptor:
    from ..core.model import Model

    if not isinstance(model, type) or not issubclass(model, Model) or model is Model:
        raise TypeError(f"Expected a Model subclass, received {model!r}")
    options = model._meta
    return TableDescriptor(
        model=model,
        table_name=options.table_name or model.__name__,
        order_by=options.order_by,
        group_by=options.group_by,
        having=options.having,
        columns=tuple(ColumnDescriptor.from_field(f) for f in options.get_fields()),
    )


class MetadataCache:
    """
    Get-or-compute store of :class:`TableDescriptor` objects.

    Descriptors are computed outside the lock; two threads describing the same
    unseen model may both compute, but ``setdefault`` under the lock makes every
    caller receive the first stored descriptor.
    """

    def __init__(self) -> None:
        self._store: Dict[Type["Model"], TableDescriptor] = {}
        self._lock = RLock()

    def get(self, model: Type["Model"]) -> TableDescriptor:
        with self._lock:
            cached = self._store.get(model)
        if cached is not None:
            return cached
        descriptor = describe_model(model)
        with self._lock:
            stored = self._store.setdefault(model, descriptor)
        if stored is descriptor:
            logger.debug(
                "Described %s as table %s with %d column(s)",
                model.__name__,
                descriptor.table_name,
                len(descriptor.columns),
            )
        return stored

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __contains__(self, model: object) -> bool:
        with self._lock:
            return model in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


default_cache = MetadataCache()


def get_table_descriptor(model: Type["Model"]) -> TableDescriptor:
    return default_cache.get(model)
