"""Ordered, read-only collections of query results."""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence, TypeVar, overload

from blog.services.exceptions import NonUniqueResult, NotFound

T = TypeVar("T")


class ResultCollection(Sequence[T]):
    """Immutable sequence returned by every collection-valued query."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: tuple[T, ...] = tuple(items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> "ResultCollection[T]": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ResultCollection(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResultCollection):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return list(self._items) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ResultCollection({list(self._items)!r})"

    def get_single_result(self) -> T:
        """Return the only item, failing when there is none or more than one."""

        if not self._items:
            raise NotFound("Query returned no result.")
        if len(self._items) > 1:
            raise NonUniqueResult(f"Query returned {len(self._items)} results, expected one.")
        return self._items[0]

    def to_list(self) -> list[T]:
        return list(self._items)


__all__ = ["ResultCollection"]
