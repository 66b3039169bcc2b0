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

from abc import ABC, abstractmethod
from enum import IntEnum, unique
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..exception import BoundsError

if TYPE_CHECKING:
    from ..runtime import Context, Runtime
    from ..types import Dtype
    from . import BufferBuilder, PhysicalRegion, RegionRequirement

    TaskFunction = Callable[
        ["Task", "list[PhysicalRegion]", Context, Runtime], Any
    ]


class TaskArgument:
    def __init__(self, data: Any = None, size: Optional[int] = None) -> None:
        """
        The by-value argument of a task launch.

        Parameters
        ----------
        data : object that implements the Python buffer protocol
            The data to pass to the task; None for no argument
        size : int
            Number of leading bytes of `data` to pass; defaults to all
        """
        if data is None:
            if size:
                raise ValueError("'size' must be zero if there is no 'data'")
            self._view = memoryview(b"")
        else:
            view = memoryview(data).cast("B")
            if size is None:
                size = len(view)
            if size < 0 or size > len(view):
                raise ValueError("'size' must fit within 'data'")
            self._view = view[:size]

    @classmethod
    def from_builder(cls, builder: BufferBuilder) -> TaskArgument:
        return cls(builder.get_string())

    @property
    def size(self) -> int:
        return len(self._view)

    def tobytes(self) -> bytes:
        return self._view.tobytes()


class Task:
    def __init__(self, argument: Optional[TaskArgument] = None) -> None:
        """
        One invocation of a task. It owns a private copy of the argument
        bytes taken when the task is created, so the launcher's data can
        change afterwards without affecting the task.
        """
        self.args: bytes = b"" if argument is None else argument.tobytes()

    @property
    def arglen(self) -> int:
        return len(self.args)


class TaskLauncher:
    def __init__(
        self, task_id: int, argument: Optional[TaskArgument] = None
    ) -> None:
        """
        Collects everything needed to launch a single task: the task id,
        its argument and the region requirements it accesses.
        """
        self.task_id = task_id
        self.argument = TaskArgument() if argument is None else argument
        self.region_requirements: list[RegionRequirement] = []

    def add_region_requirement(
        self, req: RegionRequirement
    ) -> RegionRequirement:
        self.region_requirements.append(req)
        return req

    def add_field(self, idx: int, fid: int) -> None:
        if idx < 0 or idx >= len(self.region_requirements):
            raise BoundsError(
                f"Launcher has no region requirement {idx}; it has "
                f"{len(self.region_requirements)}"
            )
        self.region_requirements[idx].add_field(fid)


class InlineLauncher:
    def __init__(self, requirement: RegionRequirement) -> None:
        self.requirement = requirement


class Processor:
    @unique
    class Kind(IntEnum):
        NO_KIND = 0
        LOC_PROC = 1

    NO_KIND = Kind.NO_KIND
    LOC_PROC = Kind.LOC_PROC


class ProcessorConstraint:
    def __init__(self, kind: Processor.Kind = Processor.NO_KIND) -> None:
        self.kind = kind


class TaskVariantRegistrar:
    def __init__(
        self, task_id: int, variant_name: Optional[str] = None
    ) -> None:
        """
        Describes a task variant to register. Processor constraints are
        recorded; every variant runs on the calling thread.
        """
        self.task_id = task_id
        self.variant_name = variant_name
        self.constraints: list[ProcessorConstraint] = []

    def add_constraint(
        self, constraint: ProcessorConstraint
    ) -> TaskVariantRegistrar:
        self.constraints.append(constraint)
        return self


class RuntimeHelper(ABC):
    def __init__(self, task: TaskFunction, name: Optional[str] = None):
        """
        Binds one task function to the uniform `run` contract used by the
        runtime's task table. Subclasses decide how the return value of the
        function is boxed.
        """
        self.task = task
        if name is None:
            name = getattr(task, "__name__", repr(task))
        self.name = name

    @property
    @abstractmethod
    def return_type(self) -> Optional[Dtype]:
        ...

    @abstractmethod
    def run(
        self,
        task: Task,
        regions: list[PhysicalRegion],
        ctx: Context,
        runtime: Runtime,
    ) -> Optional[bytes]:
        """
        Call the task function and return its boxed result
        """
        ...

    @staticmethod
    def create(
        task: TaskFunction,
        return_type: Optional[Dtype] = None,
        name: Optional[str] = None,
    ) -> RuntimeHelper:
        if return_type is None:
            return VoidRuntimeHelper(task, name)
        return ValueRuntimeHelper(task, return_type, name)


class ValueRuntimeHelper(RuntimeHelper):
    def __init__(
        self,
        task: TaskFunction,
        return_type: Dtype,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(task, name)
        self._return_type = return_type

    @property
    def return_type(self) -> Optional[Dtype]:
        return self._return_type

    def run(
        self,
        task: Task,
        regions: list[PhysicalRegion],
        ctx: Context,
        runtime: Runtime,
    ) -> Optional[bytes]:
        value = self.task(task, regions, ctx, runtime)
        return self._return_type.pack(value)


class VoidRuntimeHelper(RuntimeHelper):
    @property
    def return_type(self) -> Optional[Dtype]:
        return None

    def run(
        self,
        task: Task,
        regions: list[PhysicalRegion],
        ctx: Context,
        runtime: Runtime,
    ) -> Optional[bytes]:
        self.task(task, regions, ctx, runtime)
        return None
