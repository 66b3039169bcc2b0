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

from typing import TYPE_CHECKING, Any, Optional

from ..exception import InvalidCast

if TYPE_CHECKING:
    from ..types import Dtype


class Future:
    def __init__(
        self, buffer: Optional[bytes] = None, type: Optional[Dtype] = None
    ) -> None:
        """
        A Future holds the result of a task. Tasks execute immediately, so
        a Future is always complete; it carries the result bytes together
        with the Dtype they were produced as. A Future of a task without a
        return type carries no buffer at all.

        Parameters
        ----------
        buffer : bytes
            The boxed result, or None for a void task
        type : Dtype
            The type of the boxed result
        """
        if (buffer is None) != (type is None):
            raise ValueError("'buffer' and 'type' must be set together")
        self._buffer = buffer
        self._type = type
        self._released = False

    @classmethod
    def from_value(cls, value: Any, type: Dtype) -> Future:
        return cls(type.pack(value), type)

    def __str__(self) -> str:
        if self._buffer is None:
            return "Future(None)"
        return f"Future({self._type}, {self.get_size()} bytes)"

    @property
    def type(self) -> Optional[Dtype]:
        return self._type

    @property
    def buffer(self) -> Optional[bytes]:
        return self._buffer

    @property
    def released(self) -> bool:
        return self._released

    def destroy(self) -> None:
        """
        Release the result buffer. It is illegal to read the Future after
        this call.
        """
        self._buffer = None
        self._released = True

    def get_buffer(self) -> bytes:
        """
        Return the raw bytes of the result
        """
        if self._released:
            raise RuntimeError("Future has already been released")
        if self._buffer is None:
            raise InvalidCast("Future of a void task has no result")
        return self._buffer

    def get_size(self) -> int:
        return 0 if self._buffer is None else len(self._buffer)

    def get_result(self, type: Optional[Dtype] = None) -> Any:
        """
        Return the result of the task decoded as `type`.

        Parameters
        ----------
        type : Dtype
            The expected type of the result; defaults to the type the
            result was produced as. Asking for any other type fails.

        Returns
        -------
        The decoded value
        """
        buf = self.get_buffer()
        assert self._type is not None
        if type is not None and type != self._type:
            raise InvalidCast(
                f"Future holds a {self._type} result, not {type}"
            )
        return self._type.unpack(buf)

    def is_ready(self, subscribe: bool = False) -> bool:
        return True

    def wait(self) -> None:
        pass
