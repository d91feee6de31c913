"""Source definitions offered for one-step registration."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourcePreset:
    name: str
    argument: str
    type: str = ""
    description: str = ""


WELL_KNOWN_SOURCES: dict[str, SourcePreset] = {
    "winget-community": SourcePreset(
        name="winget-pkgs",
        argument="https://cdn.winget.microsoft.com/cache",
        type="Microsoft.PreIndexed.Package",
        description="The official winget package repository.",
    ),
    "chocolatey-github": SourcePreset(
        name="chocolatey-github",
        argument="https://github.com/chocolatey-community/chocolatey-packages",
        description="Chocolatey community packages; installer compatibility may vary.",
    ),
}
