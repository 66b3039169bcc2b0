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
""" Runtime options read from code, the environment or declared defaults.

Lookup order
~~~~~~~~~~~~

A setting resolves its value from the first of these sources that supplies
one:

1. A value passed at the call site, ``settings.bounds_check(False)``. None
   means "not supplied", so optional function parameters can be forwarded
   directly.

2. A value assigned in code, ``settings.bounds_check = False``.

3. The environment variable of the setting:

    .. code-block:: sh

        SERIAL_LEGION_BOUNDS_CHECK=0 python app.py

4. A fallback passed at the call site,
   ``settings.log_level(default="info")``.

5. The default given where the setting is declared.

A setting with none of these raises RuntimeError. Settings that fix the
shape of the runtime at import time (such as the largest point dimension)
are `EnvOnlySetting` objects and only consult the environment and their
declared defaults.

"""
from __future__ import annotations

import logging
import os
from typing import Any, Callable, Generic, Type, TypeVar, Union

from typing_extensions import TypeAlias

__all__ = (
    "convert_bool",
    "convert_int",
    "convert_log_level",
    "convert_str",
    "EnvOnlySetting",
    "PrioritizedSetting",
    "Settings",
)


class _Unset:
    pass


T = TypeVar("T")


Unset: TypeAlias = Union[T, Type[_Unset]]

TEST_ENV_VAR = "SERIAL_LEGION_TEST"


def convert_str(value: str) -> str:
    return value


def convert_int(value: int | str) -> int:
    return int(value)


def convert_bool(value: bool | str) -> bool:
    """Map "1" to True and "0" to False; booleans pass through.

    Raises:
        ValueError

    """
    if isinstance(value, bool):
        return value

    flag = value.strip().lower()
    if flag in ("0", "1"):
        return flag == "1"

    raise ValueError(f'Cannot convert {value!r} to bool, use "0" or "1"')


def convert_log_level(value: int | str) -> int:
    """Map a level name such as ``"debug"``, or a number, to a ``logging``
    level. Any name registered with ``logging.addLevelName`` is accepted.

    Raises:
        ValueError

    """
    if isinstance(value, int):
        return value

    if value.isdigit():
        return int(value)

    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ValueError(f"Cannot convert {value!r} to a logging level")
    return level


_CONVERT_TYPES: dict[Callable[..., Any], str] = {
    convert_str: "str",
    convert_int: "int",
    convert_bool: 'bool ("0" or "1")',
    convert_log_level: "logging level",
}


class SettingBase:
    def __init__(
        self,
        name: str,
        env_var: str | None = None,
        default: Unset[T] = _Unset,
        convert: Any | None = None,
        help: str = "",
    ) -> None:
        self._name = name
        self._env_var = env_var
        self._default = default
        self._convert = convert or convert_str
        self._help = help

    @property
    def name(self) -> str:
        return self._name

    @property
    def env_var(self) -> str | None:
        return self._env_var

    @property
    def help(self) -> str:
        return self._help

    @property
    def default(self) -> Unset[T]:
        return self._default

    @property
    def convert_type(self) -> str:
        """A short description of the values the setting accepts"""
        try:
            return _CONVERT_TYPES[self._convert]
        except KeyError:
            raise RuntimeError(
                f"Setting {self._name!r} has an undocumented converter"
            ) from None

    def _from_env(self) -> Unset[str]:
        if self._env_var and self._env_var in os.environ:
            return os.environ[self._env_var]
        return _Unset

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._name!r}, "
            f"env_var={self._env_var!r})"
        )


class PrioritizedSetting(Generic[T], SettingBase):
    """A setting resolved through the full lookup order of this module.

    Declared as a class attribute of a `Settings` subclass, so that
    ``settings.name`` returns the setting itself and ``settings.name = v``
    records a value assigned in code.
    """

    _user_value: Unset[str | T]

    def __init__(
        self,
        name: str,
        env_var: str | None = None,
        default: Unset[T] = _Unset,
        convert: Any | None = None,
        help: str = "",
    ) -> None:
        super().__init__(name, env_var, default, convert, help)
        self._user_value = _Unset

    def __call__(
        self, value: T | str | None = None, default: Unset[T] = _Unset
    ) -> T:
        candidates = (
            _Unset if value is None else value,
            self._user_value,
            self._from_env(),
            default,
            self._default,
        )
        for candidate in candidates:
            if candidate is not _Unset:
                return self._convert(candidate)

        raise RuntimeError(
            f"No configured value found for setting {self._name!r}"
        )

    def __get__(
        self, instance: Any, owner: type[Any]
    ) -> PrioritizedSetting[T]:
        return self

    def __set__(self, instance: Any, value: str | T) -> None:
        self.set_value(value)

    def set_value(self, value: str | T) -> None:
        """Assign a value in code; only call-site values override it."""
        # There is one Settings object per process, so the descriptor
        # itself holds the assigned value
        self._user_value = value

    def unset_value(self) -> None:
        """Forget the value assigned in code."""
        self._user_value = _Unset


class EnvOnlySetting(Generic[T], SettingBase):
    """A setting read only from its environment variable, falling back to
    its declared default. When ``SERIAL_LEGION_TEST`` is enabled the
    `test_default` is used instead of the default, if one was declared.
    """

    def __init__(
        self,
        name: str,
        env_var: str,
        default: Unset[T] = _Unset,
        test_default: Unset[T] = _Unset,
        convert: Any | None = None,
        help: str = "",
    ) -> None:
        super().__init__(name, env_var, default, convert, help)
        self._test_default = test_default

    def __call__(self) -> T:
        value = self._from_env()
        if value is not _Unset:
            return self._convert(value)

        if (
            self._test_default is not _Unset
            and convert_bool(os.environ.get(TEST_ENV_VAR, False))
        ):
            return self._convert(self._test_default)

        return self._convert(self._default)

    def __get__(self, instance: Any, owner: type[Any]) -> EnvOnlySetting[T]:
        return self

    @property
    def test_default(self) -> Unset[T]:
        return self._test_default


class Settings:
    def __repr__(self) -> str:
        names = sorted(
            name
            for name, value in type(self).__dict__.items()
            if isinstance(value, SettingBase)
        )
        return f"{type(self).__name__}({', '.join(names)})"
