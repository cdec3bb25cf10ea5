"""
MCP Tools for Unreal Code Analyzer.

Modules:
- cpp: C++ source code analysis
"""

from . import cpp

__all__ = ["cpp"]
