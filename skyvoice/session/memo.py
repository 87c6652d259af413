"""Memoization keyed on an explicit dependency tuple."""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_UNSET = object()


class Memo(Generic[T]):
    """Caches compute(*deps) and recomputes only when deps change."""

    def __init__(self, compute: Callable[..., T]):
        self._compute = compute
        self._deps: Any = _UNSET
        self._value: T | None = None
        self.compute_count = 0

    def get(self, *deps: Any) -> T:
        if deps != self._deps:
            self._value = self._compute(*deps)
            self._deps = deps
            self.compute_count += 1
        return self._value  # type: ignore[return-value]

    def reset(self) -> None:
        self._deps = _UNSET
        self._value = None
