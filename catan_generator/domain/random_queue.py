from __future__ import annotations

import random
from typing import Callable, Generic, Iterable, Iterator, List, Optional, Protocol, TypeVar, Union

T = TypeVar("T")


class IndexSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


class RandomQueue(Generic[T]):
    """A bag of values that always hands values back in random order.

    Every random choice the generators make goes through this class, so tests
    can pin outcomes by passing an `rng` whose `randrange` returns fixed indexes.
    """

    def __init__(
        self,
        initial: Union[Iterable[T], "RandomQueue[T]", None] = None,
        *,
        rng: Optional[IndexSource] = None,
    ) -> None:
        if isinstance(initial, RandomQueue):
            self._values: List[T] = list(initial._values)
            self._rng = rng if rng is not None else initial._rng
        else:
            self._values = list(initial) if initial is not None else []
            self._rng = rng if rng is not None else random.Random()
        self._next_for_pop: Optional[int] = None

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._values

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._values))

    def __repr__(self) -> str:
        return f"RandomQueue({self._values!r})"

    @property
    def values(self) -> List[T]:
        return list(self._values)

    def is_empty(self) -> bool:
        return not self._values

    def count(self, value: T) -> int:
        return self._values.count(value)

    def copy(self) -> "RandomQueue[T]":
        return RandomQueue(self)

    def push(self, *values: T) -> None:
        self._values.extend(values)
        self._mark_mutated()

    def remove(self, value: T) -> bool:
        """Removes a single instance of `value`. Returns False if there was none."""
        try:
            index = self._values.index(value)
        except ValueError:
            return False
        self._remove_at(index)
        return True

    def filter(self, fn: Callable[[T], bool]) -> "RandomQueue[T]":
        return RandomQueue([value for value in self._values if fn(value)], rng=self._rng)

    def filter_by(self, *values: T) -> "RandomQueue[T]":
        return self.filter(lambda value: value in values)

    def pop(self) -> Optional[T]:
        if self.is_empty():
            return None
        if self._next_for_pop is None:
            self._next_for_pop = self._rng.randrange(len(self._values))
        return self._remove_at(self._next_for_pop)

    def peek(self) -> Optional[T]:
        """Returns the value the next `pop` will return, until the queue changes."""
        if self.is_empty():
            return None
        if self._next_for_pop is None:
            self._next_for_pop = self._rng.randrange(len(self._values))
        return self._values[self._next_for_pop]

    def pop_excluding(self, *values: T) -> Optional[T]:
        """Pops a random value that is not in `values`, or None if nothing qualifies."""
        return self._pop_from(self.filter(lambda value: value not in values))

    def pop_one_of(self, *values: T) -> Optional[T]:
        """Pops a random value that is in `values`, or None if nothing qualifies."""
        return self._pop_from(self.filter(lambda value: value in values))

    def pop_avoiding(self, *values: T) -> Optional[T]:
        """Like pop_excluding, but falls back to any value rather than None."""
        popped = self.pop_excluding(*values)
        if popped is not None:
            return popped
        return self.pop()

    def _pop_from(self, subset: "RandomQueue[T]") -> Optional[T]:
        popped = subset.pop()
        if popped is None:
            return None
        self.remove(popped)
        return popped

    def _remove_at(self, index: int) -> T:
        value = self._values.pop(index)
        self._mark_mutated()
        return value

    def _mark_mutated(self) -> None:
        self._next_for_pop = None
