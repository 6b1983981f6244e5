"""nix-cli: install Nix packages by asking an opencode agent session."""

__version__ = "0.1.0"
