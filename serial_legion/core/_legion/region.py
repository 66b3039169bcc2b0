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

from typing import TYPE_CHECKING, Any, Optional

import numpy as np

from .. import ffi
from ...settings import settings
from ..exception import BoundsError, InvalidCast, NotFound
from ..types import CoherenceProperty, PrivilegeMode
from .geometry import Domain, PointLike, coords_of

if TYPE_CHECKING:
    from ..runtime import Runtime
    from ..types import Dtype
    from . import FieldListLike


class LogicalRegion:
    def __init__(self, id: int) -> None:
        """
        A LogicalRegion names the data described by an (IndexSpace,
        FieldSpace) pair. The handle only carries the registry id; two
        handles are equal iff they carry the same id.
        """
        self.id = id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogicalRegion):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"LogicalRegion(id={self.id})"


class LogicalRegionT(LogicalRegion):
    def __init__(self, handle: LogicalRegion, dim: Optional[int] = None):
        super().__init__(handle.id)
        self.dim = dim


class RegionRequirement:
    def __init__(
        self,
        region: LogicalRegion,
        privilege: PrivilegeMode,
        coherence: CoherenceProperty,
        parent: LogicalRegion,
    ) -> None:
        """
        Declares that a task accesses some fields of a logical region. The
        privilege and coherence modes are recorded for the task body to
        inspect but are not enforced.

        Parameters
        ----------
        region : LogicalRegion
            The logical region being accessed
        privilege : PrivilegeMode
            How the task intends to access the fields
        coherence : CoherenceProperty
            The coherence mode for the access
        parent : LogicalRegion
            The region from which privileges are derived
        """
        self.region = region
        self.privilege = privilege
        self.coherence = coherence
        self.parent = parent
        self.field_ids: list[int] = []

    def add_field(self, fid: int) -> RegionRequirement:
        self.field_ids.append(fid)
        return self

    def add_fields(self, fields: FieldListLike) -> RegionRequirement:
        for fid in fields if isinstance(fields, list) else [fields]:
            self.add_field(fid)
        return self

    def __repr__(self) -> str:
        return (
            f"RegionRequirement(region={self.region!r}, "
            f"privilege={self.privilege.name}, fields={self.field_ids})"
        )


class PhysicalInstance:
    def __init__(self, domain: Domain, field_sizes: dict[int, int]) -> None:
        """
        The materialized storage of one logical region: a zero-initialized
        byte buffer per field, each `field_size * domain.size()` bytes long.
        Instances are owned by the runtime and allocated exactly once, when
        their logical region is created.
        """
        self.domain = domain
        self.field_sizes = dict(field_sizes)
        volume = max(domain.size(), 0)
        self.buffers: dict[int, Any] = {
            fid: ffi.new("uint8_t[]", size * volume)
            for fid, size in self.field_sizes.items()
        }

    def get_buffer(self, fid: int) -> Any:
        if fid not in self.buffers:
            raise NotFound("field", fid)
        return self.buffers[fid]

    def get_field_size(self, fid: int) -> int:
        if fid not in self.field_sizes:
            raise NotFound("field", fid)
        return self.field_sizes[fid]

    @property
    def nbytes(self) -> int:
        return sum(len(buf) for buf in self.buffers.values())

    def release(self) -> None:
        self.buffers.clear()
        self.field_sizes.clear()


class PhysicalRegion:
    def __init__(self, runtime: Runtime, region: LogicalRegion) -> None:
        """
        A PhysicalRegion is the mapped view of a logical region's storage.
        It is a lightweight handle: every access goes back to the runtime,
        so using a PhysicalRegion whose logical region was destroyed fails
        with NotFound.

        Parameters
        ----------
        runtime : Runtime
            The runtime owning the storage
        region : LogicalRegion
            The logical region for this physical region
        """
        self.runtime = runtime
        self.region = region

    @property
    def id(self) -> int:
        return self.region.id

    def get_instance(self) -> PhysicalInstance:
        return self.runtime.get_physical_instance(self.region)

    @property
    def domain(self) -> Domain:
        return self.get_instance().domain

    @property
    def fields(self) -> list[int]:
        return list(self.get_instance().buffers)

    def get_field_size(self, fid: int) -> int:
        return self.get_instance().get_field_size(fid)

    def get_index(self, p: PointLike) -> int:
        """
        Return the linear (column-major) element index of a point: the
        first dimension varies fastest and strides grow by the extents of
        the region's domain.
        """
        domain = self.domain
        coords = coords_of(p)
        if len(coords) != domain.dim:
            raise BoundsError(
                f"{len(coords)}-D point used with {domain.dim}-D region"
            )
        index = 0
        stride = 1
        for dim, coord in enumerate(coords):
            index += (coord - domain.lo[dim]) * stride
            stride *= domain.hi[dim] - domain.lo[dim] + 1
        return index

    def is_mapped(self) -> bool:
        return self.runtime.has_physical_instance(self.region)

    def wait_until_valid(self) -> None:
        """
        Storage is always valid once a region exists
        """
        pass

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PhysicalRegion):
            return NotImplemented
        return self.runtime is other.runtime and self.region == other.region

    def __hash__(self) -> int:
        return hash(self.region)

    def __repr__(self) -> str:
        return f"PhysicalRegion(id={self.id})"


class FieldAccessor:
    def __init__(
        self,
        region: PhysicalRegion,
        fid: int,
        dtype: Dtype,
        privilege: PrivilegeMode = PrivilegeMode.READ_WRITE,
        check_bounds: Optional[bool] = None,
    ) -> None:
        """
        A FieldAccessor reads and writes the elements of one field of a
        physical region as values of `dtype`.

        Parameters
        ----------
        region : PhysicalRegion
            The region holding the field
        fid : int
            The field to access
        dtype : Dtype
            The element type; must not be larger than the field
        privilege : PrivilegeMode
            The declared access mode; recorded only
        check_bounds : bool
            Whether points outside the region's domain are rejected;
            defaults to the ``bounds_check`` setting
        """
        field_size = region.get_field_size(fid)
        if dtype.size > field_size:
            raise InvalidCast(
                f"Cannot access a field of {field_size} bytes as {dtype}"
            )
        self.region = region
        self.field = fid
        self.dtype = dtype
        self.privilege = privilege
        self.check_bounds = settings.bounds_check(check_bounds)

    def _address(self, p: PointLike) -> Any:
        instance = self.region.get_instance()
        buf = instance.get_buffer(self.field)
        field_size = instance.get_field_size(self.field)
        if self.check_bounds and not instance.domain.contains(p):
            raise BoundsError(f"{p} is outside of {instance.domain}")
        offset = self.region.get_index(p) * field_size
        if offset < 0 or offset + self.dtype.size > len(buf):
            raise BoundsError(f"{p} is outside of field {self.field}")
        base = ffi.cast("uint8_t *", buf)
        return ffi.cast(f"{self.dtype.ctype} *", base + offset)

    def read(self, p: PointLike) -> Any:
        return self._address(p)[0]

    def write(self, p: PointLike, value: Any) -> None:
        self._address(p)[0] = self.dtype.coerce(value)

    def __getitem__(self, p: PointLike) -> Any:
        return self.read(p)

    def __setitem__(self, p: PointLike, value: Any) -> None:
        self.write(p, value)

    def to_numpy(self) -> np.ndarray[Any, Any]:
        """
        Return a NumPy array aliasing the field's storage, shaped like the
        region's domain and laid out in column-major order.
        """
        instance = self.region.get_instance()
        buf = instance.get_buffer(self.field)
        field_size = instance.get_field_size(self.field)
        domain = instance.domain
        shape = tuple(
            domain.hi[dim] - domain.lo[dim] + 1 for dim in range(domain.dim)
        )
        strides = []
        stride = field_size
        for extent in shape:
            strides.append(stride)
            stride *= extent
        return np.ndarray(
            shape=shape,
            dtype=self.dtype.to_numpy_dtype(),
            buffer=ffi.buffer(buf),
            strides=tuple(strides),
        )
