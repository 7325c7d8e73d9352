"""Catalog of field names known to the index."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator

from IndexQueryTool.core.errors import InvalidFieldNames

if TYPE_CHECKING:
    from IndexQueryTool.index.base import SearchIndex


class FieldCatalog:
    """Immutable set of every field name in the index schema.

    Stored-only fields that contribute no terms are included, so they can be
    selected for output even though they cannot be queried.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Iterable[str]) -> None:
        self._names = frozenset(names)

    @classmethod
    def from_index(cls, index: SearchIndex) -> FieldCatalog:
        """Build the catalog from the index field metadata."""
        return cls(index.field_names())

    def validate(self, names: Iterable[str]) -> None:
        """Check that every name exists in the catalog.

        Args:
            names: Field names to check.

        Raises:
            InvalidFieldNames: Listing all unknown names, not only the first.
        """
        invalid = [name for name in dict.fromkeys(names) if name not in self._names]
        if invalid:
            raise InvalidFieldNames(invalid)

    def sorted_names(self) -> list[str]:
        return sorted(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self.sorted_names())

    def __len__(self) -> int:
        return len(self._names)
