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

from cffi import FFI

# A single FFI instance owns every raw buffer the runtime allocates
ffi = FFI()

from ._legion import (  # noqa: E402
    MAX_DIM,
    MAX_FIELDS,
    BufferBuilder,
    Domain,
    DomainPoint,
    FieldAccessor,
    FieldAllocator,
    FieldSpace,
    Future,
    IndexPartition,
    IndexSpace,
    IndexSpaceT,
    InlineLauncher,
    LogicalPartition,
    LogicalRegion,
    LogicalRegionT,
    PhysicalRegion,
    Point,
    PointInRectIterator,
    Processor,
    ProcessorConstraint,
    Rect,
    RegionRequirement,
    RuntimeHelper,
    Task,
    TaskArgument,
    TaskLauncher,
    TaskVariantRegistrar,
)
from .exception import (  # noqa: E402
    BoundsError,
    FieldReallocationError,
    InvalidCast,
    NotFound,
    SerialLegionError,
)
from .runtime import Context, InputArgs, Runtime  # noqa: E402
from .types import (  # noqa: E402
    CoherenceProperty,
    Dtype,
    PrivilegeMode,
    bool_,
    float32,
    float64,
    int8,
    int16,
    int32,
    int64,
    uint8,
    uint16,
    uint32,
    uint64,
)

# Legion's spellings of the privilege and coherence modes
NO_ACCESS = PrivilegeMode.NO_ACCESS
READ_ONLY = PrivilegeMode.READ_ONLY
REDUCE = PrivilegeMode.REDUCE
READ_WRITE = PrivilegeMode.READ_WRITE
WRITE_DISCARD = PrivilegeMode.WRITE_DISCARD
EXCLUSIVE = CoherenceProperty.EXCLUSIVE
