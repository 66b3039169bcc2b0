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

from .core import (
    EXCLUSIVE,
    READ_ONLY,
    READ_WRITE,
    WRITE_DISCARD,
    BoundsError,
    Context,
    Domain,
    DomainPoint,
    FieldAccessor,
    FieldReallocationError,
    Future,
    InlineLauncher,
    InvalidCast,
    NotFound,
    Point,
    PointInRectIterator,
    Rect,
    RegionRequirement,
    Runtime,
    SerialLegionError,
    TaskArgument,
    TaskLauncher,
    TaskVariantRegistrar,
)

__version__ = "0.1.0"


def get_runtime() -> Runtime:
    """
    Return a fresh runtime. Every runtime owns its registries, so several
    independent programs can run side by side in one process.
    """
    return Runtime()
