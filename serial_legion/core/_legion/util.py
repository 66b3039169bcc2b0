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

import logging
import struct
from typing import TYPE_CHECKING, List, Optional, Union

from ...settings import settings
from ..types import Dtype, TypeCode

if TYPE_CHECKING:
    from .geometry import Point


FieldListLike = Union[int, List[int]]


# Legion's logging levels that have no direct `logging` counterpart
SPEW = logging.DEBUG - 5
PRINT = logging.INFO + 5
logging.addLevelName(SPEW, "SPEW")
logging.addLevelName(PRINT, "PRINT")

_ROOT_LOGGER = "serial_legion"
logging.getLogger(_ROOT_LOGGER).addHandler(logging.NullHandler())


class Logger:
    def __init__(self, name: str) -> None:
        """
        A named logger for runtime messages with Legion's levels (spew,
        debug, info, print, warning, error, fatal). Messages go to the
        ``serial_legion.<name>`` logger of the standard logging module;
        the threshold of the ``serial_legion`` logger comes from the
        ``log_level`` setting unless the application configured it.
        """
        root = logging.getLogger(_ROOT_LOGGER)
        if root.level == logging.NOTSET:
            root.setLevel(settings.log_level())
        self.handle: Optional[logging.Logger] = logging.getLogger(
            f"{_ROOT_LOGGER}.{name}"
        )

    def destroy(self) -> None:
        """
        Detach this object from its logger. Messages logged afterwards are
        dropped.
        """
        self.handle = None

    def _log(self, level: int, msg: str) -> None:
        if self.handle is not None:
            self.handle.log(level, msg)

    def spew(self, msg: str) -> None:
        self._log(SPEW, msg)

    def debug(self, msg: str) -> None:
        self._log(logging.DEBUG, msg)

    def info(self, msg: str) -> None:
        self._log(logging.INFO, msg)

    def print(self, msg: str) -> None:
        self._log(PRINT, msg)

    def warning(self, msg: str) -> None:
        self._log(logging.WARNING, msg)

    def error(self, msg: str) -> None:
        self._log(logging.ERROR, msg)

    def fatal(self, msg: str) -> None:
        self._log(logging.CRITICAL, msg)

    def _wants(self, level: int) -> bool:
        return self.handle is not None and self.handle.isEnabledFor(level)

    @property
    def want_spew(self) -> bool:
        return self._wants(SPEW)

    @property
    def want_debug(self) -> bool:
        return self._wants(logging.DEBUG)

    @property
    def want_info(self) -> bool:
        return self._wants(logging.INFO)

    @property
    def want_print(self) -> bool:
        return self._wants(PRINT)

    @property
    def want_warning(self) -> bool:
        return self._wants(logging.WARNING)

    @property
    def want_error(self) -> bool:
        return self._wants(logging.ERROR)

    @property
    def want_fatal(self) -> bool:
        return self._wants(logging.CRITICAL)


class BufferBuilder:
    def __init__(self, type_safe: bool = False) -> None:
        """
        A BufferBuilder object is a helpful utility for constructing the
        buffers of bytes passed to tasks as their argument. Values are laid
        out back to back with standard sizes and native byte order, so a
        task can read them back with `struct.unpack`.

        Parameters
        ----------
        type_safe : bool
            Whether to prefix every value with the 32-bit code of its type
        """

        self.fmt: list[str] = []  # struct format string
        self.fmt.append("=")
        self.size = 0
        self.args: list[Union[int, float, bytes]] = []
        self.string: Optional[bytes] = None
        self.arglen: Optional[int] = None
        self.type_safe = type_safe

    def add_arg(
        self, fmt: str, size: int, arg: Union[int, float, bytes], code: int
    ) -> None:
        # The type code goes right before the value
        if self.type_safe:
            self.fmt.append("i")
            self.size += 4
            self.args.append(code)
        self.fmt.append(fmt)
        self.size += size
        self.args.append(arg)

    def pack_8bit_int(self, arg: int) -> None:
        self.add_arg("b", 1, arg, TypeCode.INT8)

    def pack_16bit_int(self, arg: int) -> None:
        self.add_arg("h", 2, arg, TypeCode.INT16)

    def pack_32bit_int(self, arg: int) -> None:
        self.add_arg("i", 4, arg, TypeCode.INT32)

    def pack_64bit_int(self, arg: int) -> None:
        self.add_arg("q", 8, arg, TypeCode.INT64)

    def pack_8bit_uint(self, arg: int) -> None:
        self.add_arg("B", 1, arg, TypeCode.UINT8)

    def pack_16bit_uint(self, arg: int) -> None:
        self.add_arg("H", 2, arg, TypeCode.UINT16)

    def pack_32bit_uint(self, arg: int) -> None:
        self.add_arg("I", 4, arg, TypeCode.UINT32)

    def pack_64bit_uint(self, arg: int) -> None:
        self.add_arg("Q", 8, arg, TypeCode.UINT64)

    def pack_32bit_float(self, arg: float) -> None:
        self.add_arg("f", 4, arg, TypeCode.FLOAT32)

    def pack_64bit_float(self, arg: float) -> None:
        self.add_arg("d", 8, arg, TypeCode.FLOAT64)

    def pack_bool(self, arg: bool) -> None:
        self.add_arg("?", 1, arg, TypeCode.BOOL)

    def pack_value(self, arg: Union[int, float, bool], dtype: Dtype) -> None:
        packers = {
            TypeCode.BOOL: self.pack_bool,
            TypeCode.INT8: self.pack_8bit_int,
            TypeCode.INT16: self.pack_16bit_int,
            TypeCode.INT32: self.pack_32bit_int,
            TypeCode.INT64: self.pack_64bit_int,
            TypeCode.UINT8: self.pack_8bit_uint,
            TypeCode.UINT16: self.pack_16bit_uint,
            TypeCode.UINT32: self.pack_32bit_uint,
            TypeCode.UINT64: self.pack_64bit_uint,
            TypeCode.FLOAT32: self.pack_32bit_float,
            TypeCode.FLOAT64: self.pack_64bit_float,
        }
        packers[dtype.code](dtype.coerce(arg))  # type: ignore[operator]

    def pack_dimension(self, dim: int) -> None:
        self.pack_32bit_int(dim)

    def pack_point(self, point: Point) -> None:
        dim = len(point)
        if dim <= 0:
            raise ValueError("'dim' must be positive")
        if self.type_safe:
            self.pack_32bit_int(dim)
        for p in point:
            self.pack_64bit_int(p)

    def pack_string(self, string: str) -> None:
        data = string.encode("utf-8")
        self.pack_32bit_uint(len(data))
        self.fmt.append(f"{len(data)}s")
        self.size += len(data)
        self.args.append(data)

    def pack_buffer(self, buf: BufferBuilder) -> None:
        self.pack_32bit_uint(buf.get_size())
        self.fmt.append("".join(buf.fmt[1:]))
        self.size += buf.size
        self.args.extend(buf.args)

    def pack_dtype(self, dtype: Dtype) -> None:
        self.pack_32bit_int(dtype.code)

    def get_string(self) -> bytes:
        if self.string is None or self.arglen != len(self.args):
            fmtstr = "".join(self.fmt)
            self.string = struct.pack(fmtstr, *self.args)
            self.arglen = len(self.args)
        return self.string

    def get_size(self) -> int:
        return self.size
