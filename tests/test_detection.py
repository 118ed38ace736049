"""
Tests for detection — host architecture and core versions.
"""

import asyncio

import pytest

from coreprov.core.services.provision.detection.arch import ARCH_MAP, detect_arch, map_machine
from coreprov.core.services.provision.detection.version import (
    get_installed_version,
    parse_release_metadata,
    resolve_latest_version,
)

API_URL = "https://api.example/releases/latest"


# ── Architecture ─────────────────────────────────────────────────────


class TestMapMachine:
    @pytest.mark.parametrize("raw,expected", sorted(ARCH_MAP.items()))
    def test_mapped(self, raw: str, expected: str):
        detection = map_machine(raw)
        assert detection.arch == expected
        assert detection.detected

    def test_riscv64(self):
        assert map_machine("riscv64").arch == "riscv64"

    def test_unmapped_defaults(self):
        detection = map_machine("sparc64")
        assert detection.arch == "x86_64"
        assert detection.degraded
        assert "sparc64" in detection.reason

    def test_case_sensitive(self):
        assert map_machine("AARCH64").degraded

    def test_no_partial_match(self):
        assert map_machine("aarch64_be").arch == "x86_64"

    def test_trailing_newline_trimmed(self):
        assert map_machine("aarch64\n").arch == "arm64"

    @pytest.mark.parametrize("raw", [None, "", "   \n"])
    def test_empty(self, raw):
        detection = map_machine(raw)
        assert detection.arch == "x86_64"
        assert not detection.detected

    def test_confirmed_x86_64_is_distinguishable(self):
        assert map_machine("x86_64").detected
        assert not map_machine("sparc64").detected


class TestDetectArch:
    def test_detects(self, runner):
        runner.machine = "mipsel\n"
        detection = asyncio.run(detect_arch(runner, uname_path="/bin/uname"))
        assert detection.arch == "mipsle"
        assert runner.calls == [["/bin/uname", "-m"]]

    def test_uname_unavailable(self, runner):
        runner.machine = None
        detection = asyncio.run(detect_arch(runner))
        assert detection.arch == "x86_64"
        assert detection.degraded
        assert "uname failed" in detection.reason

    def test_empty_output(self, runner):
        runner.machine = ""
        detection = asyncio.run(detect_arch(runner))
        assert detection.arch == "x86_64"
        assert detection.degraded


# ── Latest release ───────────────────────────────────────────────────


class TestParseReleaseMetadata:
    def test_tag(self):
        assert parse_release_metadata('{"tag_name": "v2.5.0"}').tag == "v2.5.0"

    def test_not_json(self):
        resolution = parse_release_metadata("<html>rate limited</html>")
        assert not resolution.resolved
        assert "not JSON" in resolution.error

    def test_not_object(self):
        assert not parse_release_metadata('["v1"]').resolved

    @pytest.mark.parametrize("body", ['{}', '{"tag_name": ""}', '{"tag_name": 3}'])
    def test_missing_tag(self, body: str):
        resolution = parse_release_metadata(body)
        assert not resolution.resolved
        assert resolution.tag is None


class TestResolveLatestVersion:
    def test_resolved(self, runner):
        resolution = asyncio.run(resolve_latest_version(runner, API_URL, wget_path="/usr/bin/wget"))
        assert resolution.tag == "v2.5.0"
        assert runner.calls == [["/usr/bin/wget", "-qO-", API_URL]]

    def test_fetch_failure(self, runner):
        runner.release = None
        resolution = asyncio.run(resolve_latest_version(runner, API_URL))
        assert not resolution.resolved
        assert "exit 4" in resolution.error

    def test_empty_body(self, runner):
        runner.release = ""
        assert not asyncio.run(resolve_latest_version(runner, API_URL)).resolved

    def test_single_attempt(self, runner):
        runner.release = None
        asyncio.run(resolve_latest_version(runner, API_URL))
        assert runner.metadata_fetches == 1


# ── Installed core ───────────────────────────────────────────────────


class TestInstalledVersion:
    def test_installed(self, runner):
        runner.installed_version = "auth-thu 2.3.1\n"
        status = asyncio.run(get_installed_version(runner, "/usr/bin/goauthing"))
        assert status.installed
        assert status.version == "auth-thu 2.3.1"

    def test_not_installed(self, runner):
        status = asyncio.run(get_installed_version(runner, "/usr/bin/goauthing"))
        assert not status.installed
        assert status.version == "Not installed"

    def test_silent_binary(self, runner):
        runner.installed_version = ""
        status = asyncio.run(get_installed_version(runner, "/usr/bin/goauthing"))
        assert status.installed
        assert status.version == "Unknown"
