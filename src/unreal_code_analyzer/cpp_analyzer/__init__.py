"""
C++ Source Code Analyzer.

Uses tree-sitter to parse and analyze Unreal Engine style C++ source files.

Key Components:
- CppAnalyzer: Main analyzer class
- get_analyzer(): Get the global analyzer instance
- FifoCache: Bounded insertion-order cache shared by the analyzer
- detect_patterns(): Match lines against the UE pattern catalog
"""

from .analyzer import (
    ClassHierarchy,
    CodeReference,
    CppAnalyzer,
    get_analyzer,
    set_analyzer,
)
from .api_reference import ApiQueryResult, ApiReference
from .cache import FifoCache
from .extraction import ClassInfo, MethodInfo, ParameterInfo, PropertyInfo
from .patterns import (
    BEST_PRACTICES,
    UNREAL_PATTERNS,
    CodePatternMatch,
    LearningResource,
    PatternInfo,
    detect_patterns,
)
from .queries import QUERY_PATTERNS, get_query_pattern
from .subsystems import SUBSYSTEM_DIRS, SubsystemInfo

__all__ = [
    # Analyzer
    "CppAnalyzer",
    "get_analyzer",
    "set_analyzer",
    "FifoCache",
    # Data classes
    "ClassInfo",
    "MethodInfo",
    "PropertyInfo",
    "ParameterInfo",
    "CodeReference",
    "ClassHierarchy",
    "SubsystemInfo",
    "ApiReference",
    "ApiQueryResult",
    # Patterns
    "UNREAL_PATTERNS",
    "BEST_PRACTICES",
    "PatternInfo",
    "LearningResource",
    "CodePatternMatch",
    "detect_patterns",
    # Queries
    "QUERY_PATTERNS",
    "get_query_pattern",
    # Subsystems
    "SUBSYSTEM_DIRS",
]
