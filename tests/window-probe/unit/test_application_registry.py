"""
Unit tests for the application registry.
"""

import json

import pytest

from window_probe.constants import Classification
from window_probe.errors import ConfigError, ErrorCode
from window_probe.models.application import RunningApplication, RunningState
from window_probe.services.application_registry import (
    ApplicationRegistry,
    StaticApplicationRegistry,
    classify_application,
    load_application_registry,
)

EMULATOR_PATH = "/Users/me/Library/Android/sdk/emulator/qemu/darwin-aarch64/qemu-system-aarch64"


@pytest.fixture
def registry():
    return StaticApplicationRegistry([
        RunningApplication(pid=100, bundle_id="com.valvesoftware.steam", name="Steam"),
        RunningApplication(pid=200, bundle_id="com.google.emulator", executable_path=EMULATOR_PATH),
        RunningApplication(pid=300, bundle_id="com.example.closed", state=RunningState.TERMINATED),
        RunningApplication(pid=400, name="unbundled"),
    ])


class TestStaticApplicationRegistry:

    def test_lookup_by_pid(self, registry):
        assert registry.application_for_pid(100).bundle_id == "com.valvesoftware.steam"
        assert registry.application_for_pid(999) is None

    def test_running_state(self, registry):
        assert registry.running_state("com.valvesoftware.steam") == RunningState.RUNNING
        assert registry.running_state("com.example.closed") == RunningState.TERMINATED
        assert registry.running_state("com.example.unknown") == RunningState.UNKNOWN

    def test_emulator_is_classified_from_executable(self, registry):
        assert registry.is_running_application_classified("com.google.emulator", Classification.ANDROID_EMULATOR)
        assert not registry.is_running_application_classified("com.valvesoftware.steam", Classification.ANDROID_EMULATOR)

    def test_terminated_application_is_not_classified(self):
        registry = StaticApplicationRegistry([
            RunningApplication(
                pid=1,
                bundle_id="com.google.emulator",
                executable_path=EMULATOR_PATH,
                state=RunningState.TERMINATED,
            ),
        ])
        assert not registry.is_running_application_classified("com.google.emulator", Classification.ANDROID_EMULATOR)

    def test_unbundled_process_is_only_found_by_pid(self, registry):
        assert registry.application_for_pid(400).name == "unbundled"
        assert len(registry) == 4

    def test_satisfies_protocol(self, registry):
        assert isinstance(registry, ApplicationRegistry)

    def test_blank_bundle_id_is_missing(self):
        assert RunningApplication(pid=1, bundle_id="  ").bundle_id is None

    def test_classify_application_keeps_explicit_classifications(self):
        app = RunningApplication(pid=1, classifications=frozenset({"custom"}))
        assert classify_application(app) == frozenset({"custom"})


class TestLoadApplicationRegistry:

    def test_load_from_json(self, tmp_path):
        path = tmp_path / "applications.json"
        path.write_text(json.dumps([
            {"pid": 10, "bundle_id": "com.colliderli.iina", "name": "IINA"},
            {"pid": 11, "bundle_id": "com.google.emulator", "executable_path": EMULATOR_PATH},
        ]))

        registry = load_application_registry(path)

        assert len(registry) == 2
        assert registry.application_for_pid(10).name == "IINA"
        assert registry.is_running_application_classified("com.google.emulator", Classification.ANDROID_EMULATOR)

    def test_missing_file_is_empty_registry(self, tmp_path):
        assert len(load_application_registry(tmp_path / "missing.json")) == 0

    @pytest.mark.parametrize("content", ["{not json", '{"pid": 1}', '[{"pid": 0}]'])
    def test_invalid_file_raises_config_error(self, tmp_path, content):
        path = tmp_path / "applications.json"
        path.write_text(content)

        with pytest.raises(ConfigError) as exc_info:
            load_application_registry(path)
        assert exc_info.value.code == ErrorCode.REGISTRY_LOAD_FAILED
