"""Tests for config module."""

import nix_cli.config as config


class TestServerConfig:
    def test_defaults(self):
        c = config.get_server_config()
        assert c["model"] == config.DEFAULT_MODEL
        assert c["permission"]["*"] == "deny"
        assert c["permission"]["bash"]["nix *"] == "allow"
        assert c["permission"]["bash"]["*"] == "deny"
        assert c["permission"]["edit"]["*.nix"] == "allow"

    def test_override(self):
        c = config.get_server_config(model="opencode/other")
        assert c["model"] == "opencode/other"
        assert c["permission"] == config.PERMISSIONS

    def test_returns_fresh_copy(self):
        c = config.get_server_config()
        c["permission"]["bash"]["rm *"] = "allow"
        c["model"] = "changed"
        again = config.get_server_config()
        assert "rm *" not in again["permission"]["bash"]
        assert "rm *" not in config.PERMISSIONS["bash"]
        assert again["model"] == config.DEFAULT_MODEL

    def test_only_nix_tools_allowed_in_bash(self):
        commands = ("nix", "nix-env", "nix-shell", "nix-store", "nix-collect-garbage", "which")
        allowed = [k for k, v in config.PERMISSIONS["bash"].items() if v == "allow"]
        assert all(k.split()[0] in commands for k in allowed)
