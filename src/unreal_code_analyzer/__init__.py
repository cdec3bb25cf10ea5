"""
Unreal Code Analyzer - MCP Server for exploring Unreal Engine C++ source.

Provides tools for:
- C++ class structure and inheritance analysis (tree-sitter based)
- Reference finding and regex code search
- Engine subsystem scans
- UE pattern detection and best-practice guidance
- API reference lookup synthesized from source comments
"""

__version__ = "0.1.0"
