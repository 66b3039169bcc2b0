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

from .env import MAX_DIM, MAX_FIELDS
from .geometry import (
    Domain,
    DomainPoint,
    Point,
    PointInRectIterator,
    PointLike,
    Rect,
)
from .field import FieldAllocator
from .future import Future
from .partition import IndexPartition, LogicalPartition
from .region import (
    FieldAccessor,
    LogicalRegion,
    LogicalRegionT,
    PhysicalInstance,
    PhysicalRegion,
    RegionRequirement,
)
from .space import FieldSpace, IndexSpace, IndexSpaceT
from .task import (
    InlineLauncher,
    Processor,
    ProcessorConstraint,
    RuntimeHelper,
    Task,
    TaskArgument,
    TaskLauncher,
    TaskVariantRegistrar,
    ValueRuntimeHelper,
    VoidRuntimeHelper,
)
from .util import BufferBuilder, FieldListLike, Logger

__all__ = (
    "BufferBuilder",
    "Domain",
    "DomainPoint",
    "FieldAccessor",
    "FieldAllocator",
    "FieldListLike",
    "FieldSpace",
    "Future",
    "IndexPartition",
    "IndexSpace",
    "IndexSpaceT",
    "InlineLauncher",
    "Logger",
    "LogicalPartition",
    "LogicalRegion",
    "LogicalRegionT",
    "PhysicalInstance",
    "PhysicalRegion",
    "Point",
    "PointInRectIterator",
    "PointLike",
    "Processor",
    "ProcessorConstraint",
    "Rect",
    "RegionRequirement",
    "RuntimeHelper",
    "Task",
    "TaskArgument",
    "TaskLauncher",
    "TaskVariantRegistrar",
    "ValueRuntimeHelper",
    "VoidRuntimeHelper",
    "MAX_DIM",
    "MAX_FIELDS",
)
