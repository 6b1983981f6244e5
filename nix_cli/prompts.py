"""Prompt text sent to the agent."""

SYSTEM_PROMPT = (
    "You are a Nix-only automation agent. Prefer nix profile add over nix-env "
    "for installs. Use only nix-related commands (nix, nix-env, nix-shell, "
    "nix-store, nix-collect-garbage). Do not use other tools or commands unless "
    "explicitly required for nix operations."
)


def build_prompt(name: str) -> str:
    return (
        f'The user asked to install the package named "{name}".\n'
        "Prefer nix profile add nixpkgs#<name> (avoid nix-env). "
        "Permissions: bash(nix:allow) Edit(*.nix:allow) Else(block)."
    )


def build_system_prompt() -> str:
    return SYSTEM_PROMPT


def session_title(command: str, name: str) -> str:
    return f"nix-cli {command} {name}"
