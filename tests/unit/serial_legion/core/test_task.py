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

from typing import Any

import numpy as np
import pytest
from pytest_mock import MockerFixture

import serial_legion.core.types as ty
from serial_legion.core import (
    EXCLUSIVE,
    READ_WRITE,
    BoundsError,
    Future,
    InvalidCast,
    LogicalRegion,
    Processor,
    ProcessorConstraint,
    RegionRequirement,
    RuntimeHelper,
    Task,
    TaskArgument,
    TaskLauncher,
    TaskVariantRegistrar,
)
from serial_legion.core._legion.task import (
    ValueRuntimeHelper,
    VoidRuntimeHelper,
)
from serial_legion.core.types import Dtype, TypeCode


class TestTaskArgument:
    def test_empty(self) -> None:
        arg = TaskArgument()
        assert arg.size == 0
        assert arg.tobytes() == b""

    def test_bytes(self) -> None:
        assert TaskArgument(b"abc").tobytes() == b"abc"

    def test_size_prefix(self) -> None:
        arg = TaskArgument(b"abcdef", 2)
        assert arg.size == 2
        assert arg.tobytes() == b"ab"

    def test_numpy(self) -> None:
        data = np.arange(3, dtype=np.int32)
        arg = TaskArgument(data)
        assert arg.size == 12
        assert arg.tobytes() == data.tobytes()

    def test_bad_size(self) -> None:
        with pytest.raises(ValueError):
            TaskArgument(b"ab", 3)
        with pytest.raises(ValueError):
            TaskArgument(None, 4)


class TestTask:
    def test_copies_argument(self) -> None:
        data = bytearray(b"\x01\x02\x03\x04")
        task = Task(TaskArgument(data))
        data[0] = 9
        assert task.args == b"\x01\x02\x03\x04"
        assert task.arglen == 4

    def test_no_argument(self) -> None:
        task = Task()
        assert task.args == b""
        assert task.arglen == 0


class TestTaskLauncher:
    def test_add_region_requirement(self) -> None:
        region = LogicalRegion(0)
        launcher = TaskLauncher(1)
        req = RegionRequirement(region, READ_WRITE, EXCLUSIVE, region)
        assert launcher.add_region_requirement(req) is req
        launcher.add_field(0, 4)
        assert launcher.region_requirements[0].field_ids == [4]
        assert launcher.argument.size == 0

    def test_add_field_out_of_range(self) -> None:
        launcher = TaskLauncher(1)
        with pytest.raises(BoundsError):
            launcher.add_field(0, 4)


class TestTaskVariantRegistrar:
    def test_constraints(self) -> None:
        registrar = TaskVariantRegistrar(3, "top")
        constraint = ProcessorConstraint(Processor.LOC_PROC)
        assert registrar.add_constraint(constraint) is registrar
        assert registrar.constraints == [constraint]
        assert registrar.constraints[0].kind == Processor.Kind.LOC_PROC
        assert registrar.task_id == 3
        assert registrar.variant_name == "top"


def forty_two(task: Task, regions: Any, ctx: Any, runtime: Any) -> int:
    return 42


class TestRuntimeHelper:
    def test_create_value(self) -> None:
        helper = RuntimeHelper.create(forty_two, ty.int32)
        assert isinstance(helper, ValueRuntimeHelper)
        assert helper.return_type is ty.int32
        assert helper.name == "forty_two"
        assert helper.run(Task(), [], None, None) == ty.int32.pack(42)

    def test_base_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            RuntimeHelper(forty_two)  # type: ignore[abstract]

    def test_create_void(self, mocker: MockerFixture) -> None:
        body = mocker.Mock(return_value=5)
        helper = RuntimeHelper.create(body, name="void")
        assert isinstance(helper, VoidRuntimeHelper)
        assert helper.return_type is None
        assert helper.name == "void"
        task = Task()
        assert helper.run(task, [], None, None) is None
        body.assert_called_once_with(task, [], None, None)


class TestFuture:
    def test_value(self) -> None:
        future = Future.from_value(42, ty.int32)
        assert future.type is ty.int32
        assert future.get_size() == 4
        assert future.get_result() == 42
        assert future.get_result(ty.int32) == 42
        assert future.is_ready()
        future.wait()

    def test_mismatched_type(self) -> None:
        future = Future.from_value(42, ty.int32)
        with pytest.raises(InvalidCast):
            future.get_result(ty.int64)
        with pytest.raises(InvalidCast):
            future.get_result(ty.uint32)

    def test_equal_type_accepted(self) -> None:
        future = Future.from_value(42, ty.int32)
        assert future.get_result(Dtype(TypeCode.INT32)) == 42

    def test_void(self) -> None:
        future = Future()
        assert future.buffer is None
        assert future.get_size() == 0
        assert future.is_ready()
        with pytest.raises(InvalidCast):
            future.get_result()
        with pytest.raises(InvalidCast):
            future.get_buffer()

    def test_buffer_and_type_together(self) -> None:
        with pytest.raises(ValueError):
            Future(b"\x00\x00\x00\x00")
        with pytest.raises(ValueError):
            Future(None, ty.int32)

    def test_destroy(self) -> None:
        future = Future.from_value(1.5, ty.float64)
        future.destroy()
        assert future.released
        with pytest.raises(RuntimeError):
            future.get_result()

    def test_str(self) -> None:
        assert str(Future()) == "Future(None)"
        assert str(Future.from_value(1, ty.int16)) == "Future(int16, 2 bytes)"


if __name__ == "__main__":
    import sys

    sys.exit(pytest.main(sys.argv))
