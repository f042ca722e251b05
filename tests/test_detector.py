"""Tests for backend detection."""

import pytest

from cdns.core.detector import NMCLI_INSTALL_HINT, BackendDetector
from cdns.core.errors import DetectionError
from cdns.core.models import Backend

from conftest import FakeSystemProbe

RESOLV_CONF = "/etc/resolv.conf"


def detect(**probe_kwargs):
    return BackendDetector(FakeSystemProbe(**probe_kwargs)).detect_with_reason()


class TestNetworkManager:
    """NetworkManager has the highest priority."""

    def test_detected(self):
        result = detect(commands={"nmcli"}, services={"NetworkManager"})
        assert result.backend == Backend.NETWORK_MANAGER
        assert result.reason == "nmcli command available and NetworkManager service is running"

    def test_wins_over_everything(self):
        result = detect(
            commands={"nmcli", "resolvectl"},
            services={"NetworkManager", "systemd-resolved"},
            files={RESOLV_CONF: "file"},
        )
        assert result.backend == Backend.NETWORK_MANAGER

    def test_running_without_nmcli(self):
        with pytest.raises(DetectionError) as exc_info:
            detect(services={"NetworkManager"}, files={RESOLV_CONF: "file"})

        error = exc_info.value
        assert "NetworkManager is running but 'nmcli' command is missing." in str(error)
        assert error.remediation == NMCLI_INSTALL_HINT
        assert "sudo apt install network-manager" in str(error)
        assert "sudo dnf install NetworkManager" in str(error)
        assert "sudo pacman -S networkmanager" in str(error)

    def test_nmcli_installed_but_service_stopped(self):
        result = detect(commands={"nmcli", "resolvectl"}, services={"systemd-resolved"})
        assert result.backend == Backend.SYSTEMD_RESOLVED

    def test_query_error_with_nmcli(self):
        with pytest.raises(DetectionError, match="failed to check NetworkManager status"):
            detect(commands={"nmcli"}, service_errors={"NetworkManager"})

    def test_query_error_without_nmcli_is_ignored(self):
        result = detect(service_errors={"NetworkManager"}, files={RESOLV_CONF: "file"})
        assert result.backend == Backend.RESOLV_CONF


class TestSystemdResolved:
    """systemd-resolved is the second choice."""

    def test_detected_with_resolvectl(self):
        result = detect(commands={"resolvectl"}, services={"systemd-resolved"})
        assert result.backend == Backend.SYSTEMD_RESOLVED
        assert result.reason == (
            "resolvectl command available and systemd-resolved service is running"
        )

    def test_detected_with_legacy_tool(self):
        result = detect(commands={"systemd-resolve"}, services={"systemd-resolved"})
        assert result.backend == Backend.SYSTEMD_RESOLVED
        assert result.reason.startswith("systemd-resolve command available")

    def test_wins_over_resolv_conf(self):
        result = detect(
            commands={"resolvectl"},
            services={"systemd-resolved"},
            files={RESOLV_CONF: "symlink"},
        )
        assert result.backend == Backend.SYSTEMD_RESOLVED

    def test_service_without_tool_is_skipped(self):
        result = detect(services={"systemd-resolved"}, files={RESOLV_CONF: "file"})
        assert result.backend == Backend.RESOLV_CONF

    def test_tool_without_service_is_skipped(self):
        result = detect(commands={"resolvectl"}, files={RESOLV_CONF: "file"})
        assert result.backend == Backend.RESOLV_CONF

    def test_query_error(self):
        with pytest.raises(DetectionError, match="failed to check systemd-resolved status"):
            detect(commands={"resolvectl"}, service_errors={"systemd-resolved"})


class TestResolvConf:
    """A plain /etc/resolv.conf is the fallback."""

    def test_regular_file(self):
        result = detect(files={RESOLV_CONF: "file"})
        assert result.backend == Backend.RESOLV_CONF
        assert result.reason == (
            "/etc/resolv.conf exists and is a regular file (not managed by a service)"
        )

    def test_symlink_is_an_error(self):
        with pytest.raises(DetectionError) as exc_info:
            detect(files={RESOLV_CONF: "symlink"})

        assert str(exc_info.value) == "resolv.conf is managed by a service"
        assert exc_info.value.reason == "resolv.conf is a symlink (managed by a service)"

    def test_directory_is_not_a_backend(self):
        with pytest.raises(DetectionError, match="no supported DNS backend found"):
            detect(files={RESOLV_CONF: "dir"})

    def test_missing(self):
        with pytest.raises(DetectionError) as exc_info:
            detect()

        assert exc_info.value.reason == "no supported DNS backend found"

    def test_stat_error(self):
        with pytest.raises(DetectionError, match="failed to check if resolv.conf is a symlink"):
            detect(
                files={RESOLV_CONF: "file"},
                stat_errors={RESOLV_CONF: PermissionError("permission denied")},
            )

    def test_custom_path(self):
        detector = BackendDetector(FakeSystemProbe(files={"/tmp/resolv": "file"}), "/tmp/resolv")
        result = detector.detect_with_reason()
        assert result.reason.startswith("/tmp/resolv exists")


class TestDetect:
    def test_returns_backend_only(self):
        detector = BackendDetector(FakeSystemProbe(commands={"nmcli"}, services={"NetworkManager"}))
        assert detector.detect() is Backend.NETWORK_MANAGER

    def test_propagates_error(self):
        with pytest.raises(DetectionError):
            BackendDetector(FakeSystemProbe()).detect()

    def test_never_returns_netplan(self):
        probe = FakeSystemProbe(
            commands={"nmcli", "resolvectl", "netplan"},
            services={"NetworkManager", "systemd-resolved"},
            files={RESOLV_CONF: "file", "/etc/netplan": "dir"},
        )
        assert BackendDetector(probe).detect() is not Backend.NETPLAN
