"""
Engine subsystem map.

Static table from a subsystem name to its source directory relative to the
engine root, used to scope scans.
"""

from dataclasses import dataclass, field
from typing import Literal

SubsystemName = Literal[
    "Rendering", "Physics", "Audio", "Networking", "Input", "AI", "Animation", "UI"
]

SUBSYSTEM_DIRS: dict[str, str] = {
    "Rendering": "Engine/Source/Runtime/RenderCore",
    "Physics": "Engine/Source/Runtime/PhysicsCore",
    "Audio": "Engine/Source/Runtime/AudioCore",
    "Networking": "Engine/Source/Runtime/Networking",
    "Input": "Engine/Source/Runtime/InputCore",
    "AI": "Engine/Source/Runtime/AIModule",
    "Animation": "Engine/Source/Runtime/AnimationCore",
    "UI": "Engine/Source/Runtime/UMG",
}


@dataclass
class SubsystemInfo:
    """Classes and files found under a subsystem directory."""

    name: str
    main_classes: list[str] = field(default_factory=list)
    key_features: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    source_files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "main_classes": list(self.main_classes),
            "key_features": list(self.key_features),
            "dependencies": list(self.dependencies),
            "source_files": list(self.source_files),
        }


def get_subsystem_dir(name: str) -> str | None:
    """Relative directory of a subsystem, or None for unknown names."""
    return SUBSYSTEM_DIRS.get(name)
