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

from enum import IntEnum, unique
from typing import Any, Union

import numpy as np

from . import ffi


@unique
class TypeCode(IntEnum):
    BOOL = 1
    INT8 = 2
    INT16 = 3
    INT32 = 4
    INT64 = 5
    UINT8 = 6
    UINT16 = 7
    UINT32 = 8
    UINT64 = 9
    FLOAT32 = 11
    FLOAT64 = 12


@unique
class PrivilegeMode(IntEnum):
    NO_ACCESS = 0
    READ_ONLY = 1
    REDUCE = 2
    READ_WRITE = 3
    WRITE_DISCARD = 4


@unique
class CoherenceProperty(IntEnum):
    EXCLUSIVE = 0


# code -> (name, C type, NumPy type)
_PRIMITIVES: dict[TypeCode, tuple[str, str, Any]] = {
    TypeCode.BOOL: ("bool", "bool", np.bool_),
    TypeCode.INT8: ("int8", "int8_t", np.int8),
    TypeCode.INT16: ("int16", "int16_t", np.int16),
    TypeCode.INT32: ("int32", "int32_t", np.int32),
    TypeCode.INT64: ("int64", "int64_t", np.int64),
    TypeCode.UINT8: ("uint8", "uint8_t", np.uint8),
    TypeCode.UINT16: ("uint16", "uint16_t", np.uint16),
    TypeCode.UINT32: ("uint32", "uint32_t", np.uint32),
    TypeCode.UINT64: ("uint64", "uint64_t", np.uint64),
    TypeCode.FLOAT32: ("float32", "float", np.float32),
    TypeCode.FLOAT64: ("float64", "double", np.float64),
}


class Dtype:
    _cache: dict[TypeCode, Dtype] = {}

    def __init__(self, code: TypeCode) -> None:
        """
        A Dtype describes the element type of a field or of a task result:
        its C representation, its NumPy equivalent and its size in bytes.
        Use `Dtype.primitive_type` (or the module-level instances such as
        `int32`) instead of constructing Dtypes directly, so that each type
        has a single canonical object.

        Parameters
        ----------
        code : TypeCode
            The code of the primitive type
        """
        name, ctype, np_type = _PRIMITIVES[code]
        self._code = code
        self._name = name
        self._ctype = ctype
        self._np_dtype = np.dtype(np_type)

    @classmethod
    def primitive_type(cls, code: TypeCode) -> Dtype:
        if code not in cls._cache:
            cls._cache[code] = cls(code)
        return cls._cache[code]

    @classmethod
    def from_numpy(cls, dtype: Any) -> Dtype:
        np_dtype = np.dtype(dtype)
        for code, (_, _, np_type) in _PRIMITIVES.items():
            if np.dtype(np_type) == np_dtype:
                return cls.primitive_type(code)
        raise TypeError(f"{np_dtype} is not a supported element type")

    @property
    def code(self) -> TypeCode:
        return self._code

    @property
    def uid(self) -> int:
        return int(self._code)

    @property
    def size(self) -> int:
        return self._np_dtype.itemsize

    @property
    def ctype(self) -> str:
        return self._ctype

    def to_numpy_dtype(self) -> np.dtype[Any]:
        return self._np_dtype

    def coerce(self, value: Any) -> Union[bool, int, float]:
        kind = self._np_dtype.kind
        if kind == "b":
            return bool(value)
        if kind in ("i", "u"):
            return int(value)
        return float(value)

    def pack(self, value: Any) -> bytes:
        """
        Return the bytes of `value` laid out as this type.
        """
        box = ffi.new(f"{self._ctype} *", self.coerce(value))
        return ffi.buffer(box)[:]

    def unpack(self, buf: Any) -> Any:
        """
        Interpret the first `size` bytes of a buffer as a value of this type.
        """
        view = memoryview(buf).cast("B")
        if len(view) < self.size:
            raise ValueError(
                f"Buffer of {len(view)} bytes is too small for {self}"
            )
        box = ffi.new(f"{self._ctype} *")
        ffi.memmove(box, view[: self.size], self.size)
        return box[0]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dtype):
            return NotImplemented
        return self._code == other._code

    def __hash__(self) -> int:
        return hash(self._code)

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Dtype({self._name})"


bool_ = Dtype.primitive_type(TypeCode.BOOL)
int8 = Dtype.primitive_type(TypeCode.INT8)
int16 = Dtype.primitive_type(TypeCode.INT16)
int32 = Dtype.primitive_type(TypeCode.INT32)
int64 = Dtype.primitive_type(TypeCode.INT64)
uint8 = Dtype.primitive_type(TypeCode.UINT8)
uint16 = Dtype.primitive_type(TypeCode.UINT16)
uint32 = Dtype.primitive_type(TypeCode.UINT32)
uint64 = Dtype.primitive_type(TypeCode.UINT64)
float32 = Dtype.primitive_type(TypeCode.FLOAT32)
float64 = Dtype.primitive_type(TypeCode.FLOAT64)
