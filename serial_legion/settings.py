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

from .util.settings import (
    EnvOnlySetting,
    PrioritizedSetting,
    Settings,
    convert_bool,
    convert_int,
    convert_log_level,
)

__all__ = ("settings",)


class SerialLegionRuntimeSettings(Settings):
    bounds_check: PrioritizedSetting[bool] = PrioritizedSetting(
        "bounds_check",
        "SERIAL_LEGION_BOUNDS_CHECK",
        default=True,
        convert=convert_bool,
        help="""
        Whether field accessors check that every accessed point lies inside
        the domain of the region being accessed. With checking disabled an
        accessor still refuses to read or write outside the field's buffer,
        but a point outside the domain silently maps onto some other element.
        """,
    )

    log_level: PrioritizedSetting[int] = PrioritizedSetting(
        "log_level",
        "SERIAL_LEGION_LOG_LEVEL",
        default="warning",
        convert=convert_log_level,
        help="""
        Threshold for the runtime loggers, either a level name ("spew",
        "debug", "info", "warning", "error") or a number.
        """,
    )

    future_leak_check: PrioritizedSetting[bool] = PrioritizedSetting(
        "future_leak_check",
        "SERIAL_LEGION_FUTURE_LEAK_CHECK",
        default=False,
        convert=convert_bool,
        help="""
        Whether to report Future objects that are still referenced by the
        application when the runtime releases their results at shutdown
        (developer option). Reading such a Future afterwards fails.
        """,
    )

    test: EnvOnlySetting[bool] = EnvOnlySetting(
        "test",
        "SERIAL_LEGION_TEST",
        default=False,
        convert=convert_bool,
        help="""
        Enable test mode. This sets alternative defaults for various other
        settings.

        This is a read-only environment variable setting used by the runtime.
        """,
    )

    max_dim: EnvOnlySetting[int] = EnvOnlySetting(
        "max_dim",
        "SERIAL_LEGION_MAX_DIM",
        default=3,
        test_default=4,
        convert=convert_int,
        help="""
        The largest number of dimensions a Point, Rect or Domain may have.

        This is a read-only environment variable setting used by the runtime.
        """,
    )

    max_fields: EnvOnlySetting[int] = EnvOnlySetting(
        "max_fields",
        "SERIAL_LEGION_MAX_FIELDS",
        default=256,
        convert=convert_int,
        help="""
        The largest number of fields that can be allocated in one field
        space.

        This is a read-only environment variable setting used by the runtime.
        """,
    )


settings = SerialLegionRuntimeSettings()
