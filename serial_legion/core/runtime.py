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

import sys
from dataclasses import dataclass
from itertools import count
from typing import TYPE_CHECKING, Optional, Sequence, Union

from ..settings import settings
from ._legion import (
    Domain,
    FieldAllocator,
    FieldSpace,
    Future,
    IndexPartition,
    IndexSpace,
    Logger,
    LogicalPartition,
    LogicalRegion,
    PhysicalInstance,
    PhysicalRegion,
    Rect,
    RuntimeHelper,
    Task,
)
from .exception import NotFound

if TYPE_CHECKING:
    from ._legion import (
        DomainPoint,
        InlineLauncher,
        TaskLauncher,
        TaskVariantRegistrar,
    )
    from ._legion.task import TaskFunction
    from .types import Dtype


class Context:
    """
    The context of the calling task. Tasks run one at a time on the calling
    thread, so a context carries no state.
    """


@dataclass(frozen=True)
class InputArgs:
    """The command line the runtime was started with"""

    #: Arguments, program name first
    argv: tuple[str, ...] = ()

    @property
    def argc(self) -> int:
        return len(self.argv)


class Runtime:
    def __init__(self) -> None:
        """
        The Runtime owns every registry of the program: index spaces, field
        spaces, logical regions and their storage, the task table and the
        futures produced by task launches. Handles returned by the runtime
        are plain ids into these registries. Ids are never reused, so a
        handle to a destroyed object fails every later lookup with
        NotFound.

        Tasks execute synchronously on the calling thread, in launch order.
        """
        self.input_args = InputArgs()
        self.top_level_task_id: Optional[int] = None
        self.tasks: dict[int, RuntimeHelper] = {}
        self.index_spaces: dict[int, Domain] = {}
        self.field_spaces: dict[int, dict[int, int]] = {}
        self.logical_regions: dict[int, tuple[IndexSpace, FieldSpace]] = {}
        self.physical_regions: dict[int, PhysicalInstance] = {}
        self.futures: list[Future] = []
        self._index_space_ids = count()
        self._field_space_ids = count()
        self._region_ids = count()
        self._logger = Logger("runtime")

    # Lifecycle

    def get_input_args(self) -> InputArgs:
        return self.input_args

    def set_top_level_task_id(self, top_id: int) -> None:
        self.top_level_task_id = top_id

    def start(self, argv: Optional[Sequence[str]] = None) -> int:
        """
        Run the top-level task to completion, then release every future,
        task variant and region buffer the program created.

        Parameters
        ----------
        argv : Sequence[str]
            The command line made available through `get_input_args`;
            defaults to ``sys.argv``

        Returns
        -------
        0 once the top-level task has returned
        """
        self.input_args = InputArgs(
            tuple(sys.argv if argv is None else argv)
        )
        if self.top_level_task_id is None:
            raise NotFound("top-level task", None)
        helper = self._find_task(self.top_level_task_id)
        task = Task()
        self._logger.info(f"Starting top-level task {helper.name}")
        try:
            helper.run(task, [], Context(), self)
        finally:
            self.destroy()
        return 0

    def destroy(self) -> None:
        """
        Release everything the runtime owns. Handles created before this
        call fail every later lookup.
        """
        leaked = 0
        check_leaks = settings.future_leak_check()
        for future in self.futures:
            # The runtime's list and this loop hold the only two references
            # to a future nobody else kept
            if check_leaks and sys.getrefcount(future) > 3:
                leaked += 1
            future.destroy()
        if leaked:
            self._logger.warning(
                f"{leaked} Future(s) still referenced at shutdown have "
                "been released"
            )
        nbytes = sum(inst.nbytes for inst in self.physical_regions.values())
        for instance in self.physical_regions.values():
            instance.release()
        self._logger.info(
            f"Released {len(self.futures)} future(s), {len(self.tasks)} "
            f"task variant(s) and {nbytes} byte(s) of region storage"
        )
        self.futures.clear()
        self.tasks.clear()
        self.physical_regions.clear()
        self.logical_regions.clear()
        self.field_spaces.clear()
        self.index_spaces.clear()

    @property
    def logger(self) -> Logger:
        return self._logger

    # Task registration

    def preregister_task_variant(
        self,
        registrar: TaskVariantRegistrar,
        task: TaskFunction,
        return_type: Optional[Dtype] = None,
        task_name: Optional[str] = None,
    ) -> int:
        """
        Register `task` under the registrar's task id, replacing any earlier
        variant with that id.

        Parameters
        ----------
        registrar : TaskVariantRegistrar
            Names the task id to register
        task : callable
            Called as ``task(task, regions, ctx, runtime)``
        return_type : Dtype
            The type of the value the task returns, or None if the task
            returns nothing

        Returns
        -------
        The id of the registered variant
        """
        if task_name is None:
            task_name = registrar.variant_name
        helper = RuntimeHelper.create(task, return_type, task_name)
        self.tasks[registrar.task_id] = helper
        self._logger.debug(
            f"Registered task {helper.name} as {registrar.task_id}"
        )
        return registrar.task_id

    def _find_task(self, task_id: int) -> RuntimeHelper:
        if task_id not in self.tasks:
            raise NotFound("task", task_id)
        return self.tasks[task_id]

    # Index spaces

    def create_index_space(
        self, ctx: Context, bounds: Union[Domain, Rect]
    ) -> IndexSpace:
        domain = bounds if isinstance(bounds, Domain) else Domain(bounds)
        id = next(self._index_space_ids)
        self.index_spaces[id] = domain
        return IndexSpace(id, domain)

    def destroy_index_space(self, ctx: Context, handle: IndexSpace) -> None:
        self.get_index_space_domain(handle)
        del self.index_spaces[handle.id]

    def get_index_space_domain(self, handle: IndexSpace) -> Domain:
        if handle.id not in self.index_spaces:
            raise NotFound("index space", handle.id)
        return self.index_spaces[handle.id]

    def create_equal_partition(
        self, ctx: Context, parent: IndexSpace, color_space: IndexSpace
    ) -> IndexPartition:
        return IndexPartition(parent, color_space)

    # Field spaces

    def create_field_space(self, ctx: Context) -> FieldSpace:
        id = next(self._field_space_ids)
        self.field_spaces[id] = {}
        return FieldSpace(id)

    def destroy_field_space(self, ctx: Context, handle: FieldSpace) -> None:
        self.get_field_space_fields(handle)
        del self.field_spaces[handle.id]

    def create_field_allocator(
        self, ctx: Context, handle: FieldSpace
    ) -> FieldAllocator:
        self.get_field_space_fields(handle)
        return FieldAllocator(self, handle)

    def get_field_space_fields(self, handle: FieldSpace) -> dict[int, int]:
        """
        Return the live field id -> size table of a field space
        """
        if handle.id not in self.field_spaces:
            raise NotFound("field space", handle.id)
        return self.field_spaces[handle.id]

    def is_field_materialized(self, handle: FieldSpace, fid: int) -> bool:
        return any(
            fspace == handle and fid in self.physical_regions[id].buffers
            for id, (_, fspace) in self.logical_regions.items()
        )

    # Logical regions

    def create_logical_region(
        self, ctx: Context, index: IndexSpace, fields: FieldSpace
    ) -> LogicalRegion:
        """
        Create a logical region and allocate storage for every field its
        field space defines at this point. Fields allocated later are not
        added to the region.
        """
        domain = self.get_index_space_domain(index)
        field_sizes = self.get_field_space_fields(fields)
        id = next(self._region_ids)
        self.logical_regions[id] = (index, fields)
        self.physical_regions[id] = PhysicalInstance(domain, field_sizes)
        self._logger.debug(
            f"Created region {id} over {domain} with fields "
            f"{sorted(field_sizes)}"
        )
        return LogicalRegion(id)

    def destroy_logical_region(
        self, ctx: Context, handle: LogicalRegion
    ) -> None:
        instance = self.get_physical_instance(handle)
        instance.release()
        del self.physical_regions[handle.id]
        del self.logical_regions[handle.id]
        self._logger.debug(f"Destroyed region {handle.id}")

    def get_logical_region_spaces(
        self, handle: LogicalRegion
    ) -> tuple[IndexSpace, FieldSpace]:
        if handle.id not in self.logical_regions:
            raise NotFound("logical region", handle.id)
        return self.logical_regions[handle.id]

    def get_physical_instance(self, handle: LogicalRegion) -> PhysicalInstance:
        if handle.id not in self.physical_regions:
            raise NotFound("logical region", handle.id)
        return self.physical_regions[handle.id]

    def has_physical_instance(self, handle: LogicalRegion) -> bool:
        return handle.id in self.physical_regions

    def get_logical_partition(
        self, parent: LogicalRegion, handle: IndexPartition
    ) -> LogicalPartition:
        return LogicalPartition(parent, handle)

    def get_logical_subregion_by_color(
        self, parent: LogicalPartition, color: DomainPoint
    ) -> LogicalRegion:
        return parent.region

    # Mapping

    def _materialize(self, region: LogicalRegion) -> PhysicalRegion:
        self.get_physical_instance(region)
        return PhysicalRegion(self, region)

    def map_region(
        self, ctx: Context, launcher: InlineLauncher
    ) -> PhysicalRegion:
        return self._materialize(launcher.requirement.region)

    def unmap_region(self, ctx: Context, region: PhysicalRegion) -> None:
        pass

    # Task launches

    def execute_task(self, ctx: Context, launcher: TaskLauncher) -> Future:
        """
        Run a task to completion and return a Future holding its result.

        The argument is copied into the new task, every region requirement
        is resolved to its physical region and the registered variant is
        called on this thread. An exception raised by the task propagates
        to the caller and no future is produced.
        """
        task = Task(launcher.argument)
        regions = [
            self._materialize(req.region)
            for req in launcher.region_requirements
        ]
        helper = self._find_task(launcher.task_id)
        self._logger.debug(
            f"Launching task {helper.name} ({launcher.task_id}) with "
            f"{task.arglen} argument byte(s) on {len(regions)} region(s)"
        )
        try:
            result = helper.run(task, regions, ctx, self)
        except Exception as exn:
            self._logger.error(
                f"Task {helper.name} ({launcher.task_id}) failed: {exn!r}"
            )
            raise
        future = Future(
            result, None if result is None else helper.return_type
        )
        self.futures.append(future)
        return future
