"""
C++ source code analysis tools.

These tools use tree-sitter to analyze C++ source files directly,
without requiring communication with the Unreal Editor.

Capabilities:
- Source root configuration (engine checkout or custom codebase)
- Class structure analysis and inheritance hierarchy discovery
- Reference finding and regex code search
- Engine subsystem scans
- UE pattern detection and best-practice guidance
- API reference queries

Analyzer errors (uninitialized analyzer, invalid path, unknown class, ...)
propagate to the MCP layer, which reports them as tool errors.
"""

from typing import Annotated, Literal

from ..cpp_analyzer import get_analyzer

RefType = Literal["class", "function", "variable"]

Subsystem = Literal["Rendering", "Physics", "Audio", "Networking", "Input", "AI", "Animation", "UI"]

Concept = Literal["UPROPERTY", "UFUNCTION", "Components", "Events", "Replication", "Blueprints"]


# ============================================================================
# Configuration Tools
# ============================================================================


async def set_unreal_path(
    path: Annotated[str, "Unreal Engine source root (the directory containing Engine/)"],
) -> dict:
    """
    Set the Unreal Engine source path and index the Core/CoreUObject headers.

    Returns:
        A dict:
        - success: bool
        - path: str
        - cached_classes: int
    """
    analyzer = get_analyzer()
    await analyzer.initialize(path)
    return {
        "success": True,
        "path": path,
        "cached_classes": analyzer.cache_stats()["classes"],
    }


async def set_custom_codebase(
    path: Annotated[str, "Root directory of a custom C++ codebase"],
) -> dict:
    """
    Set a custom C++ codebase and index its headers.

    Once set, class, reference and search tools scan this root instead of the
    engine source.
    """
    analyzer = get_analyzer()
    await analyzer.initialize_custom_codebase(path)
    return {
        "success": True,
        "path": path,
        "cached_classes": analyzer.cache_stats()["classes"],
    }


# ============================================================================
# Class Analysis Tools
# ============================================================================


async def analyze_class(class_name: str) -> dict:
    """
    Analyze a C++ class structure (tree-sitter).

    Args:
        class_name: C++ class name (e.g. `AActor`, `UObject`).

    Returns:
        A dict with:
        - name: str
        - file: str
        - line: int
        - superclasses: list[str]
        - interfaces: list[str]
        - methods: list[dict]
        - properties: list[dict]
        - comments: list[str]
    """
    analyzer = get_analyzer()
    class_info = await analyzer.analyze_class(class_name)
    return class_info.to_dict()


async def find_class_hierarchy(class_name: str, include_interfaces: bool = True) -> dict:
    """
    Get the inheritance hierarchy of a C++ class (tree-sitter).

    Args:
        class_name: C++ class name.
        include_interfaces: Include implemented interfaces in the result.

    Returns:
        A dict:
        - class: str
        - superclasses: list[dict] (recursive)
        - interfaces: list[str]
    """
    analyzer = get_analyzer()
    hierarchy = await analyzer.find_class_hierarchy(class_name, include_interfaces)
    return hierarchy.to_dict()


# ============================================================================
# Code Search Tools
# ============================================================================


async def find_references(identifier: str, ref_type: RefType | None = None) -> dict:
    """
    Find references to a C++ identifier (tree-sitter).

    Args:
        identifier: Identifier name.
        ref_type: `class` matches type names; `function`/`variable` match identifiers.

    Returns:
        A dict:
        - matches: list[dict] (file, line, column, context)
        - count: int
    """
    analyzer = get_analyzer()
    refs = await analyzer.find_references(identifier, ref_type)
    return {"matches": [r.to_dict() for r in refs], "count": len(refs)}


async def search_code(
    query: str,
    file_pattern: str = "*.{h,cpp}",
    include_comments: bool = True,
) -> dict:
    """
    Search C++ source code (case-insensitive regex).

    Args:
        query: Regex query.
        file_pattern: File glob pattern (default: `*.{h,cpp}`).
        include_comments: Include matches on whole-line comments.

    Returns:
        A dict:
        - matches: list[dict]
        - count: int
    """
    analyzer = get_analyzer()
    refs = await analyzer.search_code(query, file_pattern, include_comments)
    return {"matches": [r.to_dict() for r in refs], "count": len(refs)}


async def analyze_subsystem(subsystem: Subsystem) -> dict:
    """
    Analyze an Unreal Engine subsystem.

    Returns:
        A dict:
        - name: str
        - main_classes: list[str]
        - source_files: list[str]
        - key_features / dependencies: list[str]
    """
    analyzer = get_analyzer()
    info = await analyzer.analyze_subsystem(subsystem)
    return info.to_dict()


# ============================================================================
# API Reference Tools
# ============================================================================


async def query_api(
    query: Annotated[str, "Search terms (e.g. 'actor', 'component tick')"],
    category: Annotated[str | None, "Filter by category (Object/Actor/Structure/Component)"] = None,
    module: Annotated[str | None, "Filter by module (Core/RenderCore/...)"] = None,
    include_examples: Annotated[bool, "Include @example snippets in the context"] = False,
    max_results: Annotated[int, "Maximum number of results"] = 10,
) -> dict:
    """
    Search API references synthesized from the indexed classes.

    Returns:
        A dict:
        - results: list[dict] sorted by relevance
        - count: int
    """
    analyzer = get_analyzer()
    results = await analyzer.query_api_reference(
        query,
        category=category,
        module=module,
        include_examples=include_examples,
        max_results=max_results,
    )
    return {"results": [r.to_dict() for r in results], "count": len(results)}


# ============================================================================
# UE Pattern Detection Tools
# ============================================================================


async def detect_patterns(
    file_path: Annotated[str, "C++ file path (.h/.cpp) to scan for UE patterns"],
) -> dict:
    """
    Detect Unreal Engine patterns in a C++ file.

    Detects UPROPERTY/UFUNCTION/UCLASS macros, component setup and delegate
    binding, each with improvement suggestions and learning resources.

    Example:
        >>> await detect_patterns("Source/MyGame/MyActor.cpp")
        {
            "file": "Source/MyGame/MyActor.cpp",
            "patterns": [
                {
                    "pattern": "Component Setup",
                    "line": 12,
                    "suggested_improvements": ["Consider setting up component hierarchy"]
                }
            ],
            "count": 1
        }
    """
    analyzer = get_analyzer()
    matches = await analyzer.detect_patterns(file_path)
    return {
        "file": file_path,
        "patterns": [m.to_dict() for m in matches],
        "count": len(matches),
    }


async def get_best_practices(concept: Concept) -> dict:
    """
    Get best practices, examples and documentation for a UE concept.

    Works without a configured source path.
    """
    analyzer = get_analyzer()
    return analyzer.get_best_practices(concept)
