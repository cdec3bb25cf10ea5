"""
Configuration management for Unreal Code Analyzer.

Configuration via environment variables:

Source roots:
- CPP_SOURCE_PATH: Path to a custom C++ codebase (initialized on startup)
- UNREAL_ENGINE_PATH: Path to an Unreal Engine source checkout

Cache / scanning:
- ANALYZER_CACHE_MAX_SIZE: Capacity of every bounded cache (default: 1000)
- ANALYZER_SCAN_BATCH_SIZE: Files processed concurrently for structural work (default: 10)
- ANALYZER_SEARCH_BATCH_SIZE: Files processed concurrently for text search (default: 20)

Logging:
- ANALYZER_LOG_LEVEL: Logging level name (default: INFO)
"""

import os
from dataclasses import dataclass, field

# Engine directories scanned by initialize(), relative to the engine root.
ENGINE_INITIAL_SCAN_DIRS = (
    "Engine/Source/Runtime/Core",
    "Engine/Source/Runtime/CoreUObject",
)


def _parse_int(value: str | None, default: int) -> int:
    """Parse a positive integer from an environment variable."""
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_path(value: str | None) -> str | None:
    """Normalize an optional path from an environment variable."""
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass
class Config:
    """Analyzer configuration loaded from environment variables."""

    # Source roots
    cpp_source_path: str | None = field(
        default_factory=lambda: _parse_path(os.getenv("CPP_SOURCE_PATH"))
    )
    unreal_engine_path: str | None = field(
        default_factory=lambda: _parse_path(os.getenv("UNREAL_ENGINE_PATH"))
    )

    # Cache settings
    cache_max_size: int = field(
        default_factory=lambda: _parse_int(os.getenv("ANALYZER_CACHE_MAX_SIZE"), 1000)
    )

    # Batch sizes
    scan_batch_size: int = field(
        default_factory=lambda: _parse_int(os.getenv("ANALYZER_SCAN_BATCH_SIZE"), 10)
    )
    search_batch_size: int = field(
        default_factory=lambda: _parse_int(os.getenv("ANALYZER_SEARCH_BATCH_SIZE"), 20)
    )

    log_level: str = field(
        default_factory=lambda: os.getenv("ANALYZER_LOG_LEVEL", "INFO").upper()
    )

    def summary(self) -> dict:
        """Get a printable summary of the effective configuration."""
        return {
            "cpp_source_path": self.cpp_source_path,
            "unreal_engine_path": self.unreal_engine_path,
            "cache_max_size": self.cache_max_size,
            "scan_batch_size": self.scan_batch_size,
            "search_batch_size": self.search_batch_size,
            "log_level": self.log_level,
        }


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    global _config
    _config = None
