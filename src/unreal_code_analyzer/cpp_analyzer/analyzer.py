"""
C++ Analyzer - Core analysis logic using tree-sitter.

Source-code intelligence for Unreal Engine style C++ codebases.

Core capabilities:
- Class structure analysis (methods, properties, inheritance)
- Inheritance hierarchy discovery
- Structural reference finding and regex code search
- Subsystem scans over the engine source tree
- UE pattern detection with improvement suggestions
- API reference synthesis and relevance-ranked querying

All parsed trees, compiled queries, extracted classes and synthesized API
references live in bounded FIFO caches owned by the analyzer instance.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import tree_sitter_cpp as tscpp
from tree_sitter import Language, Parser, QueryCursor, QueryError
from tree_sitter import Query as TSQuery

from ..config import ENGINE_INITIAL_SCAN_DIRS, Config, get_config
from ..errors import (
    BatchIOError,
    ClassNotFoundError,
    DirectoryNotFoundError,
    InvalidPathError,
    InvalidQueryError,
    NotInitializedError,
    UnknownConceptError,
    UnknownSubsystemError,
)
from .api_reference import ApiQueryResult, ApiReference, build_api_reference, rank_api_references
from .cache import FifoCache
from .extraction import ClassInfo, extract_classes, mask_ue_macros
from .patterns import CodePatternMatch, get_best_practices, line_context
from .patterns import detect_patterns as detect_catalog_patterns
from .queries import QUERY_PATTERNS, build_reference_query, reference_cache_key
from .scanner import HEADER_PATTERN, SOURCE_PATTERN, enumerate_files, read_source, run_in_batches
from .subsystems import SubsystemInfo, get_subsystem_dir

logger = logging.getLogger(__name__)

RefType = Literal["class", "function", "variable"]


# ============================================================================
# Data Classes
# ============================================================================


@dataclass
class CodeReference:
    """A reference to code location."""

    file: str
    line: int
    column: int
    context: str

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "context": self.context,
        }


@dataclass
class ClassHierarchy:
    """Class inheritance hierarchy."""

    class_name: str
    superclasses: list["ClassHierarchy"] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "class": self.class_name,
            "superclasses": [s.to_dict() for s in self.superclasses],
            "interfaces": self.interfaces,
        }


def is_comment_line(line: str) -> bool:
    """Whole-line comments only; trailing `//` comments after code do not count."""
    stripped = line.strip()
    return stripped.startswith("//") or stripped.startswith("/*")


# ============================================================================
# Main Analyzer Class
# ============================================================================


class CppAnalyzer:
    """
    C++ source code analyzer using tree-sitter.

    Operations other than the two initializers and get_best_practices raise
    NotInitializedError until a source root has been set.
    """

    def __init__(self, config: Config | None = None):
        """Initialize the analyzer."""
        cfg = config or get_config()

        self._language = Language(tscpp.language())
        self._parser = Parser(self._language)

        # Caches
        self._tree_cache: FifoCache[Any] = FifoCache(cfg.cache_max_size, "tree")
        self._query_cache: FifoCache[TSQuery] = FifoCache(cfg.cache_max_size, "query")
        self._class_cache: FifoCache[ClassInfo] = FifoCache(cfg.cache_max_size, "class")
        # Keyed by class name; each entry remembers the ClassInfo it was built from
        self._api_cache: FifoCache[tuple[ClassInfo, ApiReference]] = FifoCache(
            cfg.cache_max_size, "api"
        )

        self._scan_batch_size = cfg.scan_batch_size
        self._search_batch_size = cfg.search_batch_size

        # Path configuration
        self._unreal_path: str | None = None
        self._custom_path: str | None = None
        self._initialized: bool = False

        # Pre-compile common queries
        self._init_queries()

    def _init_queries(self) -> None:
        """Initialize commonly used queries."""
        for name, pattern in QUERY_PATTERNS.items():
            try:
                self._query_cache.put(name, TSQuery(self._language, pattern))
            except QueryError as e:
                logger.warning("Failed to compile query '%s': %s", name, e)

    def _get_query(self, key: str, pattern: str) -> TSQuery:
        """Get a compiled query from the cache, compiling it on a miss."""
        query = self._query_cache.get(key)
        if query is None:
            query = TSQuery(self._language, pattern)
            self._query_cache.put(key, query)
        return query

    def cache_stats(self) -> dict:
        """Current size of every cache."""
        return {
            "trees": len(self._tree_cache),
            "queries": len(self._query_cache),
            "classes": len(self._class_cache),
            "api_references": len(self._api_cache),
        }

    # ========================================================================
    # Initialization
    # ========================================================================

    def is_initialized(self) -> bool:
        """Check if the analyzer is initialized with a source path."""
        return self._initialized

    def _require_initialized(self, operation: str) -> None:
        if not self._initialized:
            raise NotInitializedError(operation)

    @property
    def search_root(self) -> str | None:
        """Root scanned by class/reference/search operations (custom codebase first)."""
        return self._custom_path or self._unreal_path

    async def initialize(self, engine_path: str) -> None:
        """
        Initialize with Unreal Engine source path.

        Scans the headers of the Core and CoreUObject runtime modules.

        Args:
            engine_path: Path to Unreal Engine installation
        """
        path = Path(engine_path)
        if not path.is_dir():
            raise InvalidPathError(engine_path)
        if not (path / "Engine").is_dir():
            raise InvalidPathError(engine_path, "Engine directory not found")

        self._unreal_path = str(path.resolve())
        self._initialized = True
        logger.info("Engine source path: %s", self._unreal_path)

        await self._build_initial_cache(
            [str(Path(self._unreal_path) / d) for d in ENGINE_INITIAL_SCAN_DIRS]
        )

    async def initialize_custom_codebase(self, custom_path: str) -> None:
        """
        Initialize with a custom C++ codebase path.

        Args:
            custom_path: Path to the C++ source directory
        """
        path = Path(custom_path)
        if not path.is_dir():
            raise InvalidPathError(custom_path)

        self._custom_path = str(path.resolve())
        self._initialized = True
        logger.info("Custom codebase path: %s", self._custom_path)

        await self._build_initial_cache([self._custom_path])

    async def _build_initial_cache(self, roots: list[str]) -> None:
        for root in roots:
            files = await asyncio.to_thread(enumerate_files, root, HEADER_PATTERN)
            logger.info("Scanning %d headers under %s", len(files), root)
            await run_in_batches(files, self._scan_file, self._scan_batch_size)

    # ========================================================================
    # File Parsing
    # ========================================================================

    def _parse_source(self, content: str) -> Any:
        """Parse C++ source text into a tree (UE macros blanked, positions kept)."""
        return self._parser.parse(mask_ue_macros(content).encode("utf-8"))

    def _get_tree(self, file_path: str, content: str) -> Any:
        """
        Get the tree for a file.

        The cached tree is reused unless it is missing or contains a parse error.
        """
        tree = self._tree_cache.get(file_path)
        if tree is None or tree.root_node.has_error:
            try:
                tree = self._parse_source(content)
            except ValueError as e:
                raise BatchIOError(file_path, f"parse failed: {e}") from e
            self._tree_cache.put(file_path, tree)
        return tree

    async def _scan_file(self, file_path: str) -> list[tuple[str, ClassInfo]]:
        """Parse a file and cache every class it defines."""
        content = await read_source(file_path)
        tree = self._get_tree(file_path, content)

        class_query = self._get_query("CLASS", QUERY_PATTERNS["CLASS"])
        extracted = extract_classes(tree, file_path, class_query)
        for key, class_info in extracted:
            self._class_cache.put(key, class_info)
        return extracted

    # ========================================================================
    # Public API - Class Analysis
    # ========================================================================

    async def analyze_class(self, class_name: str) -> ClassInfo:
        """
        Analyze a C++ class structure.

        Args:
            class_name: Name of the class to analyze

        Returns:
            The cached or freshly extracted ClassInfo

        Raises:
            ClassNotFoundError: If no header under the search root declares it
        """
        self._require_initialized("analyze_class")

        cached = self._class_cache.get(class_name)
        if cached is not None:
            return cached

        files = await asyncio.to_thread(enumerate_files, self.search_root, HEADER_PATTERN)
        await run_in_batches(
            files,
            self._scan_file,
            self._scan_batch_size,
            stop_when=lambda _: class_name in self._class_cache,
        )

        cached = self._class_cache.get(class_name)
        if cached is None:
            raise ClassNotFoundError(class_name)
        return cached

    async def find_class_hierarchy(
        self, class_name: str, include_interfaces: bool = True
    ) -> ClassHierarchy:
        """
        Get the inheritance hierarchy of a class.

        The root class must exist. Superclasses that cannot be found are left
        out, and edges back to a class already on the current path are dropped.

        Args:
            class_name: Name of the class
            include_interfaces: Whether to include implemented interfaces

        Returns:
            Nested hierarchy
        """
        self._require_initialized("find_class_hierarchy")
        return await self._resolve_hierarchy(class_name, include_interfaces, frozenset())

    async def _resolve_hierarchy(
        self, class_name: str, include_interfaces: bool, ancestors: frozenset[str]
    ) -> ClassHierarchy:
        class_info = await self.analyze_class(class_name)

        hierarchy = ClassHierarchy(
            class_name=class_info.name,
            interfaces=list(class_info.interfaces) if include_interfaces else [],
        )

        lineage = ancestors | {class_name, class_info.name}
        branches = []
        for superclass in class_info.superclasses:
            if superclass in lineage:
                logger.warning("Inheritance cycle: %s -> %s, skipping", class_name, superclass)
                continue
            branches.append(superclass)

        # Superclass branches resolve concurrently
        resolved = await asyncio.gather(
            *(self._resolve_superclass(s, include_interfaces, lineage) for s in branches)
        )
        hierarchy.superclasses = [h for h in resolved if h is not None]
        return hierarchy

    async def _resolve_superclass(
        self, superclass: str, include_interfaces: bool, lineage: frozenset[str]
    ) -> ClassHierarchy | None:
        try:
            return await self._resolve_hierarchy(superclass, include_interfaces, lineage)
        except (ClassNotFoundError, BatchIOError) as e:
            logger.debug("Could not analyze superclass %s: %s", superclass, e)
            return None

    # ========================================================================
    # Public API - Code Search
    # ========================================================================

    async def find_references(
        self, identifier: str, ref_type: RefType | None = None
    ) -> list[CodeReference]:
        """
        Find all references to an identifier.

        Args:
            identifier: Name of the class, function, or variable
            ref_type: "class" matches type names; anything else matches identifiers

        Returns:
            References ordered by file, then position
        """
        self._require_initialized("find_references")

        try:
            query = self._get_query(
                reference_cache_key(identifier, ref_type),
                build_reference_query(identifier, ref_type),
            )
        except QueryError as e:
            raise InvalidQueryError(identifier, str(e)) from e

        async def _find_in_file(file_path: str) -> list[CodeReference]:
            content = await read_source(file_path)
            tree = self._get_tree(file_path, content)
            lines = content.split("\n")

            refs = []
            cursor = QueryCursor(query)
            for _, captured in cursor.matches(tree.root_node):
                for node in captured.get("id") or []:
                    row, column = node.start_point
                    refs.append(
                        CodeReference(
                            file=file_path,
                            line=row + 1,
                            column=column + 1,
                            context=line_context(lines, row),
                        )
                    )
            return refs

        files = await asyncio.to_thread(enumerate_files, self.search_root, SOURCE_PATTERN)
        results = await run_in_batches(files, _find_in_file, self._scan_batch_size)
        return [ref for refs in results for ref in refs]

    async def search_code(
        self,
        query: str,
        file_pattern: str = "*.{h,cpp}",
        include_comments: bool = True,
    ) -> list[CodeReference]:
        """
        Search through C++ source code.

        The query is a case-insensitive regex. The reported column is where
        the query text occurs literally in the line (0 if it does not, e.g.
        for a regex or differently-cased match).

        Args:
            query: Search query (regex)
            file_pattern: File pattern to search (default: "*.{h,cpp}")
            include_comments: Whether to include whole-line comments

        Returns:
            Matching lines with ±2 lines of context
        """
        self._require_initialized("search_code")

        try:
            regex = re.compile(query, re.IGNORECASE)
        except re.error as e:
            raise InvalidQueryError(query, str(e)) from e

        async def _search_file(file_path: str) -> list[CodeReference]:
            content = await read_source(file_path)
            lines = content.split("\n")

            refs = []
            for i, line in enumerate(lines):
                if not include_comments and is_comment_line(line):
                    continue
                if regex.search(line):
                    refs.append(
                        CodeReference(
                            file=file_path,
                            line=i + 1,
                            column=line.find(query) + 1,
                            context=line_context(lines, i),
                        )
                    )
            return refs

        glob_pattern = file_pattern if file_pattern.startswith("**/") else f"**/{file_pattern}"
        files = await asyncio.to_thread(enumerate_files, self.search_root, glob_pattern)
        results = await run_in_batches(files, _search_file, self._search_batch_size)
        return [ref for refs in results for ref in refs]

    # ========================================================================
    # Public API - Subsystems
    # ========================================================================

    async def analyze_subsystem(self, subsystem: str) -> SubsystemInfo:
        """
        Analyze an engine subsystem (Rendering, Physics, Audio, ...).

        Every .h/.cpp file under the subsystem directory is listed; headers
        are scanned and the classes they define collected.
        """
        self._require_initialized("analyze_subsystem")

        relative_dir = get_subsystem_dir(subsystem)
        if relative_dir is None:
            raise UnknownSubsystemError(subsystem)

        full_path = Path(self._unreal_path or self._custom_path) / relative_dir
        if not full_path.is_dir():
            raise DirectoryNotFoundError(str(full_path))

        info = SubsystemInfo(name=subsystem)
        info.source_files = await asyncio.to_thread(enumerate_files, full_path, SOURCE_PATTERN)

        headers = [f for f in info.source_files if f.endswith(".h")]
        results = await run_in_batches(headers, self._scan_file, self._scan_batch_size)
        info.main_classes = [key for extracted in results for key, _ in extracted]
        return info

    # ========================================================================
    # Public API - API Reference
    # ========================================================================

    def get_or_create_api_reference(self, class_info: ClassInfo) -> ApiReference:
        """
        Get the cached API reference for a class, synthesizing it on a miss.

        A cached reference is only reused while it was built from this very
        ClassInfo; a re-extracted class of the same name gets a fresh one.
        """
        cached = self._api_cache.get(class_info.name)
        if cached is not None and cached[0] is class_info:
            return cached[1]
        api_ref = build_api_reference(class_info)
        self._api_cache.put(class_info.name, (class_info, api_ref))
        return api_ref

    async def query_api_reference(
        self,
        query: str,
        category: str | None = None,
        module: str | None = None,
        include_examples: bool = False,
        max_results: int = 10,
    ) -> list[ApiQueryResult]:
        """
        Query API references of every cached class.

        Args:
            query: Whitespace-separated search terms
            category: Optional exact category filter (Object, Actor, ...)
            module: Optional exact module filter (Core, Engine, ...)
            include_examples: Include @example snippets in the rendered context
            max_results: Maximum number of results (default: 10)

        Returns:
            Results sorted by descending relevance
        """
        self._require_initialized("query_api_reference")

        references = [self.get_or_create_api_reference(c) for c in self._class_cache.values()]
        return rank_api_references(
            references,
            query,
            category=category,
            module=module,
            include_examples=include_examples,
            max_results=max_results,
        )

    # ========================================================================
    # Public API - Pattern Detection
    # ========================================================================

    async def detect_patterns(
        self, file_path: str, content: str | None = None
    ) -> list[CodePatternMatch]:
        """
        Detect Unreal Engine patterns in a file.

        Args:
            file_path: Path to the C++ file
            content: File content; read from `file_path` when omitted

        Returns:
            Catalog pattern matches
        """
        self._require_initialized("detect_patterns")

        if content is None:
            content = await read_source(file_path)
        return detect_catalog_patterns(content, file_path)

    def get_best_practices(self, concept: str) -> dict:
        """Best-practice guidance for a UE concept (no initialization needed)."""
        entry = get_best_practices(concept)
        if entry is None:
            raise UnknownConceptError(concept)
        return entry


# ============================================================================
# Global Instance
# ============================================================================

_analyzer: CppAnalyzer | None = None


def get_analyzer() -> CppAnalyzer:
    """Get the global analyzer instance."""
    global _analyzer
    if _analyzer is None:
        _analyzer = CppAnalyzer()
    return _analyzer


def set_analyzer(analyzer: CppAnalyzer | None) -> None:
    """Set the global analyzer instance (useful for testing)."""
    global _analyzer
    _analyzer = analyzer
