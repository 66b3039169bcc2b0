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

from types import ModuleType

import pytest

import serial_legion
import serial_legion.settings as m
from serial_legion.util.settings import EnvOnlySetting, PrioritizedSetting

_expected_settings = (
    "bounds_check",
    "log_level",
    "future_leak_check",
    "test",
    "max_dim",
    "max_fields",
)


class TestSettings:
    def test_settings_module_importable(self) -> None:
        assert isinstance(m, ModuleType)
        assert serial_legion.settings is m
        assert isinstance(m.settings, m.SerialLegionRuntimeSettings)

    def test_standard_settings(self) -> None:
        settings = [
            k
            for k, v in m.settings.__class__.__dict__.items()
            if isinstance(v, (PrioritizedSetting, EnvOnlySetting))
        ]
        assert set(settings) == set(_expected_settings)

    @pytest.mark.parametrize("name", _expected_settings)
    def test_prefix(self, name: str) -> None:
        ps = getattr(m.settings, name)
        assert ps.env_var.startswith("SERIAL_LEGION_")

    def test_types(self) -> None:
        assert m.settings.bounds_check.convert_type == 'bool ("0" or "1")'
        assert m.settings.future_leak_check.convert_type == 'bool ("0" or "1")'
        assert m.settings.log_level.convert_type == "logging level"
        assert m.settings.max_dim.convert_type == "int"
        assert m.settings.max_fields.convert_type == "int"


class TestDefaults:
    def test_bounds_check(self) -> None:
        assert m.settings.bounds_check.default is True

    def test_log_level(self) -> None:
        assert m.settings.log_level.default == "warning"

    def test_future_leak_check(self) -> None:
        assert m.settings.future_leak_check.default is False

    def test_test(self) -> None:
        assert m.settings.test.default is False

    def test_max_dim(self) -> None:
        assert m.settings.max_dim.default == 3
        assert m.settings.max_dim.test_default == 4

    def test_max_fields(self) -> None:
        assert m.settings.max_fields.default == 256


class TestOverrides:
    def test_bounds_check_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERIAL_LEGION_BOUNDS_CHECK", "0")
        assert m.settings.bounds_check() is False
        assert m.settings.bounds_check(True) is True

    def test_log_level_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERIAL_LEGION_LOG_LEVEL", "debug")
        assert m.settings.log_level() == 10

    def test_max_dim_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERIAL_LEGION_MAX_DIM", "6")
        assert m.settings.max_dim() == 6

    def test_max_dim_test_mode(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SERIAL_LEGION_MAX_DIM", raising=False)
        monkeypatch.setenv("SERIAL_LEGION_TEST", "1")
        assert m.settings.max_dim() == 4


if __name__ == "__main__":
    import sys

    sys.exit(pytest.main(sys.argv))
