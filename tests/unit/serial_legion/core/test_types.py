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

import numpy as np
import pytest

import serial_legion.core.types as ty
from serial_legion.core.types import Dtype, TypeCode

_ALL_TYPES = (
    ty.bool_,
    ty.int8,
    ty.int16,
    ty.int32,
    ty.int64,
    ty.uint8,
    ty.uint16,
    ty.uint32,
    ty.uint64,
    ty.float32,
    ty.float64,
)


class TestDtype:
    @pytest.mark.parametrize("dtype", _ALL_TYPES, ids=str)
    def test_canonical(self, dtype: Dtype) -> None:
        assert Dtype.primitive_type(dtype.code) is dtype

    @pytest.mark.parametrize("dtype", _ALL_TYPES, ids=str)
    def test_size_matches_numpy(self, dtype: Dtype) -> None:
        assert dtype.size == dtype.to_numpy_dtype().itemsize

    @pytest.mark.parametrize("dtype", _ALL_TYPES, ids=str)
    def test_from_numpy(self, dtype: Dtype) -> None:
        assert Dtype.from_numpy(dtype.to_numpy_dtype()) is dtype

    def test_from_numpy_unsupported(self) -> None:
        with pytest.raises(TypeError):
            Dtype.from_numpy(np.complex64)

    def test_uids_distinct(self) -> None:
        assert len({dtype.uid for dtype in _ALL_TYPES}) == len(_ALL_TYPES)

    def test_eq_by_code(self) -> None:
        rebuilt = Dtype(TypeCode.INT32)
        assert rebuilt is not ty.int32
        assert rebuilt == ty.int32
        assert hash(rebuilt) == hash(ty.int32)
        assert rebuilt != ty.uint32
        assert rebuilt != "int32"

    def test_uid_is_code(self) -> None:
        assert ty.int32.uid == TypeCode.INT32

    def test_str(self) -> None:
        assert str(ty.float64) == "float64"
        assert repr(ty.bool_) == "Dtype(bool)"


class TestPacking:
    @pytest.mark.parametrize(
        "dtype, value",
        [
            (ty.bool_, True),
            (ty.int8, -5),
            (ty.int32, 42),
            (ty.int64, -(2**40)),
            (ty.uint16, 65535),
            (ty.uint64, 2**63),
            (ty.float32, 1.5),
            (ty.float64, -0.25),
        ],
        ids=str,
    )
    def test_pack_unpack(self, dtype: Dtype, value: object) -> None:
        data = dtype.pack(value)
        assert len(data) == dtype.size
        assert dtype.unpack(data) == value

    def test_pack_native_layout(self) -> None:
        assert ty.int32.pack(42) == np.int32(42).tobytes()
        assert ty.float64.pack(2.5) == np.float64(2.5).tobytes()

    def test_pack_coerces(self) -> None:
        assert ty.int16.unpack(ty.int16.pack(3.0)) == 3
        assert ty.float32.unpack(ty.float32.pack(2)) == 2.0
        assert ty.bool_.unpack(ty.bool_.pack(7)) is True

    def test_unpack_ignores_trailing_bytes(self) -> None:
        assert ty.int8.unpack(bytes([7, 1, 2])) == 7

    def test_unpack_short_buffer(self) -> None:
        with pytest.raises(ValueError):
            ty.int64.unpack(b"\x00\x01")


if __name__ == "__main__":
    import sys

    sys.exit(pytest.main(sys.argv))
