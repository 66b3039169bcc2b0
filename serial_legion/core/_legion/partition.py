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

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from . import IndexSpace, LogicalRegion


class IndexPartition:
    def __init__(
        self,
        parent: Optional[IndexSpace] = None,
        color_space: Optional[IndexSpace] = None,
    ) -> None:
        """
        Placeholder for a partition of an index space. No subdivision is
        ever computed; the parent and color space are only recorded.
        """
        self.parent = parent
        self.color_space = color_space


class LogicalPartition:
    def __init__(
        self,
        region: LogicalRegion,
        index_partition: Optional[IndexPartition] = None,
    ) -> None:
        """
        A LogicalPartition associates a parent logical region with an
        index partition. Every subregion of it is the parent region itself.
        """
        self.region = region
        self.index_partition = index_partition

    @property
    def parent(self) -> LogicalRegion:
        return self.region

    def __repr__(self) -> str:
        return f"LogicalPartition(region={self.region!r})"
