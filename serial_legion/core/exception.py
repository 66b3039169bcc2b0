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

__all__ = (
    "BoundsError",
    "FieldReallocationError",
    "InvalidCast",
    "NotFound",
    "SerialLegionError",
)


class SerialLegionError(Exception):
    """Base class for all errors raised by the serial runtime."""


class NotFound(SerialLegionError, KeyError):
    """
    A lookup of a field, index space, field space, region or task id that
    is absent from its registry. Handles whose entry was destroyed fail
    with this error as well.
    """

    def __init__(self, kind: str, key: object) -> None:
        super().__init__(kind, key)
        self.kind = kind
        self.key = key

    def __str__(self) -> str:
        return f"{self.kind} {self.key!r} not found"


class BoundsError(SerialLegionError, IndexError):
    """A coordinate or list index outside of its valid range."""


class InvalidCast(SerialLegionError, TypeError):
    """
    A value was requested as a type it cannot be interpreted as, e.g. a
    multi-dimensional point as a scalar or a future as the wrong type.
    """


class FieldReallocationError(SerialLegionError, ValueError):
    """A field was resized after storage for it had been materialized."""
