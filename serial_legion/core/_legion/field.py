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

from typing import TYPE_CHECKING

from ..exception import FieldReallocationError, NotFound
from .env import MAX_FIELDS

if TYPE_CHECKING:
    from ..runtime import Runtime
    from . import FieldSpace


class FieldAllocator:
    def __init__(self, runtime: Runtime, field_space: FieldSpace) -> None:
        """
        A FieldAllocator adds fields to one field space. Field ids are
        chosen by the caller; there is no automatic numbering.

        Parameters
        ----------
        runtime : Runtime
            The runtime owning the field space registry
        field_space : FieldSpace
            The field space to allocate fields in
        """
        self.runtime = runtime
        self.field_space = field_space

    def allocate_field(self, field_size: int, desired_fieldid: int) -> int:
        """
        Define field `desired_fieldid` with elements of `field_size` bytes
        and return its id. Defining an existing field again replaces its
        size, unless a logical region has already materialized storage for
        it with the old size.
        """
        fields = self.runtime.get_field_space_fields(self.field_space)
        if field_size <= 0:
            raise ValueError("'field_size' must be positive")
        if desired_fieldid in fields:
            if fields[desired_fieldid] == field_size:
                return desired_fieldid
            if self.runtime.is_field_materialized(
                self.field_space, desired_fieldid
            ):
                raise FieldReallocationError(
                    f"Field {desired_fieldid} of {self.field_space} already "
                    f"has storage of {fields[desired_fieldid]} bytes per "
                    f"element and cannot be resized to {field_size}"
                )
        elif len(fields) == MAX_FIELDS:
            raise RuntimeError(
                "Exceeded maximum number of fields ("
                + str(MAX_FIELDS)
                + ") in field space"
            )
        fields[desired_fieldid] = field_size
        return desired_fieldid

    def free_field(self, fid: int) -> None:
        """
        Remove a field from the field space. Regions that already
        materialized the field keep their storage for it.
        """
        fields = self.runtime.get_field_space_fields(self.field_space)
        if fid not in fields:
            raise NotFound("field", fid)
        del fields[fid]
