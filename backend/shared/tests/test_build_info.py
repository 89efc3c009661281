"""Tests for shared.build_info module."""

import importlib
import subprocess
from importlib import metadata
from unittest.mock import patch

import shared.build_info as build_info_module


class TestGitShortSha:
    def test_returns_stripped_output(self):
        with patch("subprocess.check_output", return_value="abc1234\n"):
            assert build_info_module._git_short_sha() == "abc1234"

    def test_returns_dev_when_git_not_found(self):
        with patch("subprocess.check_output", side_effect=FileNotFoundError):
            assert build_info_module._git_short_sha() == "dev"

    def test_returns_dev_when_not_a_checkout(self):
        with patch("subprocess.check_output", side_effect=subprocess.CalledProcessError(128, "git")):
            assert build_info_module._git_short_sha() == "dev"


class TestInstalledVersion:
    def test_reads_distribution_metadata(self):
        with patch("importlib.metadata.version", return_value="0.3.0"):
            assert build_info_module._installed_version() == "0.3.0"

    def test_returns_dev_when_not_installed(self):
        with patch("importlib.metadata.version", side_effect=metadata.PackageNotFoundError):
            assert build_info_module._installed_version() == "dev"


class TestModuleLevelConstants:
    def test_env_overrides_both_values(self):
        with patch.dict("os.environ", {"APP_VERSION": "1.2.3", "GIT_COMMIT": "abc1234"}):
            importlib.reload(build_info_module)
            assert build_info_module.APP_VERSION == "1.2.3"
            assert build_info_module.GIT_COMMIT == "abc1234"
        importlib.reload(build_info_module)
