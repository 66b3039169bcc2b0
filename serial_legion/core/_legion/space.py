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

from typing import Optional

from .geometry import Domain, Rect


class IndexSpace:
    def __init__(self, id: int, domain: Domain) -> None:
        """
        An IndexSpace names a collection of points. The handle carries the
        registry id assigned by the runtime together with a copy of the
        Domain it was created over; two index spaces compare equal when
        their domains do.

        Parameters
        ----------
        id : int
            Registry id assigned by `Runtime.create_index_space`
        domain : Domain
            The points of this index space
        """
        self.id = id
        self._domain = domain

    @property
    def domain(self) -> Domain:
        """
        Return a Domain that represents the points in this index space
        """
        return self._domain

    def get_bounds(self) -> Rect:
        return self._domain.get_rect()

    def get_volume(self) -> int:
        """
        Return the total number of points in the IndexSpace
        """
        return self._domain.size()

    size = get_volume

    def get_dim(self) -> int:
        return self._domain.dim

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexSpace):
            return NotImplemented
        return self._domain == other._domain

    def __hash__(self) -> int:
        return hash(self._domain)

    def __repr__(self) -> str:
        return f"IndexSpace(id={self.id}, domain={self._domain!r})"


class IndexSpaceT(IndexSpace):
    def __init__(self, handle: IndexSpace, dim: Optional[int] = None) -> None:
        """
        A view of an IndexSpace that is known to have `dim` dimensions.
        """
        if dim is not None and handle.get_dim() != dim:
            raise ValueError(
                f"IndexSpace has {handle.get_dim()} dimensions, not {dim}"
            )
        super().__init__(handle.id, handle.domain)


class FieldSpace:
    def __init__(self, id: int) -> None:
        """
        A FieldSpace names the set of fields (the columns) shared by one or
        more logical regions. The fields themselves live in the runtime's
        field space registry and are added with a `FieldAllocator`.
        """
        self.id = id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldSpace):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"FieldSpace(id={self.id})"
