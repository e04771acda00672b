"""Running arithmetic mean accumulator."""

from __future__ import annotations

__all__ = ["RunningAverage"]


class RunningAverage:
    """Sum/count accumulator; not thread-safe."""

    __slots__ = ("_sum", "_count")

    def __init__(self) -> None:
        self._sum = 0.0
        self._count = 0

    def add(self, value: float) -> None:
        self._sum += float(value)
        self._count += 1

    def average(self) -> float:
        """Current mean, ``0.0`` when nothing has been added."""

        if self._count == 0:
            return 0.0
        return self._sum / self._count

    @property
    def count(self) -> int:
        return self._count

    def reset(self) -> None:
        self._sum = 0.0
        self._count = 0
