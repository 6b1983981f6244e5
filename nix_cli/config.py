"""Agent server configuration. Safe to import from anywhere.

The tool takes no flags, environment variables or config files; everything
it needs lives in the defaults below.
"""

import copy
from typing import Any

HOSTNAME = "127.0.0.1"
PORT = 0  # ephemeral; the server reports the port it bound
SERVER_START_TIMEOUT = 5.0  # seconds to wait for the "listening on" line

DEFAULT_MODEL = "opencode/minimax-m2.1-free"

# Deny everything except nix tooling in bash and edits to .nix files.
PERMISSIONS: dict[str, Any] = {
    "*": "deny",
    "bash": {
        "*": "deny",
        "nix *": "allow",
        "nix-env *": "allow",
        "nix-shell *": "allow",
        "nix-store *": "allow",
        "nix-collect-garbage *": "allow",
        "which *": "allow",
    },
    "edit": {
        "*": "deny",
        "*.nix": "allow",
    },
}

_SERVER_CONFIG_DEFAULTS: dict[str, Any] = {
    "model": DEFAULT_MODEL,
    "permission": PERMISSIONS,
}


def get_server_config(**overrides: Any) -> dict[str, Any]:
    """Return a fresh copy of the server config with top-level overrides applied."""
    config = copy.deepcopy(_SERVER_CONFIG_DEFAULTS)
    config.update(copy.deepcopy(overrides))
    return config
