"""
MCP Server entry point - Unreal Code Analyzer.

Environment variables:
- CPP_SOURCE_PATH: Custom C++ codebase root (optional)
- UNREAL_ENGINE_PATH: Engine source root (optional)
- ANALYZER_CACHE_MAX_SIZE: Capacity of each analyzer cache (default: 1000)
- ANALYZER_SCAN_BATCH_SIZE / ANALYZER_SEARCH_BATCH_SIZE: Concurrent files per batch
- ANALYZER_LOG_LEVEL: Logging level (default: INFO)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from fastmcp import FastMCP

from . import __version__
from .config import get_config, reset_config
from .cpp_analyzer import get_analyzer
from .errors import AnalyzerError
from .tools import cpp

logger = logging.getLogger(__name__)

# Initialize MCP server
mcp = FastMCP(
    name="UnrealCodeAnalyzer",
    version=__version__,
)


def _log(message: str) -> None:
    # stdout carries the stdio transport
    print(f"[Unreal Analyzer] {message}", file=sys.stderr)


def register_tools():
    """
    Register MCP tools.

    Configuration (2):
    - set_unreal_path, set_custom_codebase

    Analysis (5):
    - analyze_class, find_class_hierarchy, find_references, search_code, analyze_subsystem

    Guidance (3):
    - query_api, detect_patterns, get_best_practices
    """

    # ========================================================================
    # Configuration
    # ========================================================================
    mcp.tool(description="Set the Unreal Engine source path to analyze")(cpp.set_unreal_path)

    mcp.tool(description="Set a custom C++ codebase path to analyze")(cpp.set_custom_codebase)

    # ========================================================================
    # Analysis
    # ========================================================================
    mcp.tool(description="Get detailed information about a C++ class")(cpp.analyze_class)

    mcp.tool(description="Get the inheritance hierarchy of a C++ class")(
        cpp.find_class_hierarchy
    )

    mcp.tool(description="Find all references to a class, function, or variable")(
        cpp.find_references
    )

    mcp.tool(description="Search through C++ source code (regex)")(cpp.search_code)

    mcp.tool(description="Analyze an Unreal Engine subsystem")(cpp.analyze_subsystem)

    # ========================================================================
    # Guidance
    # ========================================================================
    mcp.tool(description="Query Unreal Engine API references synthesized from source")(
        cpp.query_api
    )

    mcp.tool(description="Detect Unreal Engine patterns in a C++ file")(cpp.detect_patterns)

    mcp.tool(description="Get best practices for an Unreal Engine concept")(
        cpp.get_best_practices
    )

    _log("Registered 10 tools.")


def initialize_from_environment() -> bool:
    """Initialize the analyzer from the configured source roots."""
    cfg = get_config()
    analyzer = get_analyzer()

    async def init() -> bool:
        initialized = False

        if cfg.unreal_engine_path:
            try:
                await analyzer.initialize(cfg.unreal_engine_path)
                _log(f"Engine source path: {cfg.unreal_engine_path}")
                initialized = True
            except AnalyzerError as e:
                _log(f"Failed to init engine source path: {e}")

        if cfg.cpp_source_path:
            try:
                await analyzer.initialize_custom_codebase(cfg.cpp_source_path)
                _log(f"Custom source path: {cfg.cpp_source_path}")
                initialized = True
            except AnalyzerError as e:
                _log(f"Failed to init custom source path: {e}")

        if not initialized:
            _log("Warning: no C++ source paths configured.")
            _log("  Set UNREAL_ENGINE_PATH or CPP_SOURCE_PATH, or call set_unreal_path.")
        else:
            logger.info("Analyzer caches: %s", analyzer.cache_stats())
        return initialized

    return asyncio.run(init())


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unreal-code-analyzer",
        description="Unreal Code Analyzer MCP Server",
    )

    parser.add_argument(
        "--cpp-source-path",
        help="Custom C++ codebase root",
        default=None,
    )
    parser.add_argument(
        "--unreal-engine-path",
        help="Unreal Engine source root",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: ANALYZER_LOG_LEVEL or INFO)",
        default=None,
    )
    parser.add_argument(
        "--no-init",
        action="store_true",
        help="Skip initialization on startup",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print effective config and exit",
    )

    # Transport options
    parser.add_argument(
        "--transport",
        choices=["stdio", "http", "sse"],
        default="stdio",
        help="MCP transport (default: stdio)",
    )
    parser.add_argument(
        "--mcp-host",
        default="127.0.0.1",
        help="Host for http/sse transport (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--mcp-port",
        type=int,
        default=8000,
        help="Port for http/sse transport (default: 8000)",
    )
    parser.add_argument(
        "--mcp-path",
        default="/mcp",
        help="Path prefix for http transport (default: /mcp)",
    )

    return parser


def _apply_cli_overrides(args: argparse.Namespace) -> None:
    """Apply CLI overrides to env vars (single-run convenience)."""
    if args.cpp_source_path:
        os.environ["CPP_SOURCE_PATH"] = args.cpp_source_path
    if args.unreal_engine_path:
        os.environ["UNREAL_ENGINE_PATH"] = args.unreal_engine_path
    if args.log_level:
        os.environ["ANALYZER_LOG_LEVEL"] = args.log_level
    reset_config()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None):
    """Run the MCP server."""
    parser = _build_arg_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    _apply_cli_overrides(args)

    cfg = get_config()
    configure_logging(cfg.log_level)

    if args.print_config:
        print("[Unreal Analyzer] Effective config:")
        for key, value in cfg.summary().items():
            print(f"  {key}: {value}")
        return

    register_tools()

    if not args.no_init:
        initialize_from_environment()

    if args.transport == "stdio":
        mcp.run()
    elif args.transport == "http":
        mcp.run(transport="http", host=args.mcp_host, port=args.mcp_port, path=args.mcp_path)
    else:
        mcp.run(transport="sse", host=args.mcp_host, port=args.mcp_port)


if __name__ == "__main__":
    main()
