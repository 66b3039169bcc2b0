# Copyright 2023 NVIDIA Corporation
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
from __future__ import annotations

from operator import index
from typing import Any, Iterable, Iterator, Optional, Union

from ..exception import BoundsError, InvalidCast
from .env import MAX_DIM

# Anything that can name a point: a Point, a DomainPoint, a single
# coordinate or a sequence of coordinates.
PointLike = Union["Point", "DomainPoint", int, Iterable[int]]


def coords_of(p: Optional[PointLike]) -> list[int]:
    if p is None:
        return []
    if isinstance(p, (Point, DomainPoint)):
        return list(p.coords)
    try:
        return [index(p)]  # type: ignore[arg-type]
    except TypeError:
        pass
    return [index(x) for x in p]  # type: ignore[union-attr]


def _check_dim(dim: int) -> None:
    if dim > MAX_DIM:
        raise ValueError(
            "Point cannot exceed "
            + str(MAX_DIM)
            + " dimensions set from SERIAL_LEGION_MAX_DIM"
        )


class Point:
    coords: list[int]

    def __init__(self, *coords: int) -> None:
        """
        A Point is a fixed-length sequence of integer coordinates. Its
        dimension is the number of coordinates it was built with and never
        changes afterwards. The usual forms are ``Point(x)`` and
        ``Point(x, y)``; higher dimensions (up to ``MAX_DIM``) are built the
        same way, or with `Point.zeros` followed by component assignment.
        """
        _check_dim(len(coords))
        self.coords = [index(c) for c in coords]

    @classmethod
    def zeros(cls, dim: int) -> Point:
        return cls(*([0] * dim))

    @property
    def dim(self) -> int:
        return len(self.coords)

    def _check_key(self, key: int) -> int:
        key = index(key)
        if key < 0 or key >= self.dim:
            raise BoundsError(
                f"index {key} out of range for {self.dim}-D point"
            )
        return key

    def __getitem__(self, key: int) -> int:
        return self.coords[self._check_key(key)]

    def __setitem__(self, key: int, value: int) -> None:
        self.coords[self._check_key(key)] = index(value)

    def __len__(self) -> int:
        return self.dim

    def __iter__(self) -> Iterator[int]:
        return iter(self.coords)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (Point, DomainPoint)):
            return NotImplemented
        return self.coords == other.coords

    def __hash__(self) -> int:
        return hash(tuple(self.coords))

    def __index__(self) -> int:
        if self.dim != 1:
            raise InvalidCast(
                "cannot cast multi-dimensional point to value type"
            )
        return self.coords[0]

    def __int__(self) -> int:
        return self.__index__()

    def __repr__(self) -> str:
        return "Point(" + ", ".join(str(c) for c in self.coords) + ")"

    def __str__(self) -> str:
        return "<" + ",".join(str(c) for c in self.coords) + ">"


class DomainPoint:
    coords: list[int]

    def __init__(self, p: Optional[PointLike] = None) -> None:
        """
        The dimension-erased form of a Point: a growable sequence of integer
        coordinates. Built by copying the coordinates of a Point, from a
        single coordinate, or empty.
        """
        self.coords = coords_of(p)

    @property
    def dim(self) -> int:
        return len(self.coords)

    def __getitem__(self, key: int) -> int:
        if key < 0 or key >= self.dim:
            raise BoundsError(
                f"index {key} out of range for {self.dim}-D domain point"
            )
        return self.coords[key]

    def __setitem__(self, key: int, value: int) -> None:
        if key < 0 or key >= self.dim:
            raise BoundsError(
                f"index {key} out of range for {self.dim}-D domain point"
            )
        self.coords[key] = index(value)

    def __len__(self) -> int:
        return self.dim

    def __iter__(self) -> Iterator[int]:
        return iter(self.coords)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (Point, DomainPoint)):
            return NotImplemented
        return self.coords == other.coords

    def __hash__(self) -> int:
        return hash(tuple(self.coords))

    def to_point(self) -> Point:
        return Point(*self.coords)

    def __repr__(self) -> str:
        return f"DomainPoint({self.coords})"


class Rect:
    def __init__(self, lo: PointLike, hi: PointLike) -> None:
        """
        The Rect class represents an N-D box of dense points between `lo`
        and `hi`, both inclusive. Nothing checks that `lo` is below `hi`;
        such a Rect simply contains no points.
        """
        self._lo = Point(*coords_of(lo))
        self._hi = Point(*coords_of(hi))
        if self._lo.dim != self._hi.dim:
            raise ValueError("Length of 'lo' must equal length of 'hi'")

    @property
    def lo(self) -> Point:
        return self._lo

    @property
    def hi(self) -> Point:
        return self._hi

    @property
    def dim(self) -> int:
        return self._lo.dim

    def get_volume(self) -> int:
        volume = 1
        for i in range(self.dim):
            volume *= self.hi[i] - self.lo[i] + 1
        return volume

    def empty(self) -> bool:
        return any(self.hi[i] < self.lo[i] for i in range(self.dim))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return self.lo == other.lo and self.hi == other.hi

    def __hash__(self) -> int:
        return hash((self.lo, self.hi))

    def __iter__(self) -> Iterator[Point]:
        return PointInRectIterator(self)

    def __repr__(self) -> str:
        return f"Rect(lo={repr(self._lo)},hi={repr(self._hi)})"

    def __str__(self) -> str:
        return str(self._lo) + ".." + str(self._hi)

    def to_domain(self) -> Domain:
        return Domain(self)


class Domain:
    def __init__(
        self,
        lo: Union[Rect, PointLike, None] = None,
        hi: Optional[PointLike] = None,
    ) -> None:
        """
        A Domain is the dimension-erased form of a Rect and the value owned
        by an IndexSpace. It can be built from a Rect or from a pair of
        points (or coordinate sequences).

        Parameters
        ----------
        lo : Rect or point-like
            Either a Rect, or the lower corner of the domain
        hi : point-like
            The upper corner of the domain; must be omitted for a Rect
        """
        if isinstance(lo, Rect):
            if hi is not None:
                raise ValueError("'hi' cannot be set when 'lo' is a Rect")
            lo, hi = lo.lo, lo.hi
        elif (lo is None) != (hi is None):
            raise ValueError("'lo' and 'hi' must be set together")
        self.lo = DomainPoint(lo)
        self.hi = DomainPoint(hi)
        if self.lo.dim != self.hi.dim:
            raise ValueError("Length of 'lo' must equal length of 'hi'")
        _check_dim(self.lo.dim)

    @property
    def dim(self) -> int:
        return self.lo.dim

    def size(self) -> int:
        """
        Return the number of points in the domain
        """
        size = 1
        for i in range(self.dim):
            size *= self.hi[i] - self.lo[i] + 1
        return size

    get_volume = size

    def get_rect(self) -> Rect:
        return Rect(self.lo, self.hi)

    def contains(self, p: PointLike) -> bool:
        coords = coords_of(p)
        if len(coords) != self.dim:
            return False
        return all(
            self.lo[i] <= c <= self.hi[i] for i, c in enumerate(coords)
        )

    def __contains__(self, p: Any) -> bool:
        return self.contains(p)

    def __iter__(self) -> Iterator[Point]:
        return PointInRectIterator(self.get_rect())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Domain):
            return NotImplemented
        return self.lo == other.lo and self.hi == other.hi

    def __hash__(self) -> int:
        return hash((self.lo, self.hi))

    def __repr__(self) -> str:
        return f"Domain(lo={self.lo.coords},hi={self.hi.coords})"


class PointInRectIterator:
    def __init__(self, rect: Rect, column_major: bool = True) -> None:
        """
        Enumerate every point of a Rect exactly once, starting at `lo` and
        ending at `hi`. In column-major order the first dimension advances
        fastest, in row-major order the last one does. Advancing works like
        a mixed-radix counter: a dimension sitting at `hi` wraps back to
        `lo` and carries into the next dimension.

        The iterator is not restartable. Besides the Python iterator
        protocol it offers the explicit ``valid()``/``point``/``step()``
        protocol:

        .. code-block:: python

            it = PointInRectIterator(rect)
            while it.valid():
                use(it.point)
                it.step()
        """
        self.start = Point(*rect.lo)
        self.cur = Point(*rect.lo)
        self.end = Point(*rect.hi)
        self.column_major = column_major
        self._done = rect.empty()

    def valid(self) -> bool:
        return not self._done

    __call__ = valid

    @property
    def point(self) -> Point:
        if self._done:
            raise BoundsError("iterator is exhausted or its rect is empty")
        return Point(*self.cur)

    def step(self) -> None:
        if self._done:
            return
        dim = self.cur.dim
        order = range(dim) if self.column_major else range(dim - 1, -1, -1)
        for i in order:
            if self.cur[i] == self.end[i]:
                self.cur[i] = self.start[i]
            else:
                self.cur[i] = self.cur[i] + 1
                break
        # The counter only returns to `start` after wrapping past `end`
        if self.cur == self.start:
            self._done = True

    def __iter__(self) -> PointInRectIterator:
        return self

    def __next__(self) -> Point:
        if self._done:
            raise StopIteration
        p = Point(*self.cur)
        self.step()
        return p
