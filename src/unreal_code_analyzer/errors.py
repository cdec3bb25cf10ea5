"""
Error taxonomy for the analyzer.

Validation errors (path, initialization, unknown subsystem/concept, class not
found) also derive from ValueError so callers that only catch ValueError
keep working.
"""


class AnalyzerError(Exception):
    """Base class for all analyzer errors."""


class InvalidPathError(AnalyzerError, ValueError):
    """A root path (or a required subdirectory of it) does not exist."""

    def __init__(self, path: str, reason: str = "Directory does not exist"):
        self.path = path
        super().__init__(f"Invalid path: {reason} - {path}")


class NotInitializedError(AnalyzerError, RuntimeError):
    """An analysis operation was called before any initialize call."""

    def __init__(self, operation: str = ""):
        self.operation = operation
        message = "Analyzer not initialized. Use set_unreal_path or set_custom_codebase first."
        if operation:
            message = f"{message} (operation: {operation})"
        super().__init__(message)


class UnknownSubsystemError(AnalyzerError, ValueError):
    """The requested subsystem is not in the subsystem map."""

    def __init__(self, subsystem: str):
        self.subsystem = subsystem
        super().__init__(f"Unknown subsystem: {subsystem}")


class DirectoryNotFoundError(AnalyzerError, ValueError):
    """A mapped subsystem directory is absent under the configured root."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Subsystem directory not found: {path}")


class ClassNotFoundError(AnalyzerError, ValueError):
    """No declaration of the class was found on the search path."""

    def __init__(self, class_name: str):
        self.class_name = class_name
        super().__init__(f"Class not found: {class_name}")


class BatchIOError(AnalyzerError):
    """Reading or parsing a file failed inside a scan batch."""

    def __init__(self, path: str, detail: str = ""):
        self.path = path
        message = f"Failed to process file: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidQueryError(AnalyzerError, ValueError):
    """A search query could not be compiled."""

    def __init__(self, query: str, detail: str = ""):
        self.query = query
        super().__init__(f"Invalid query {query!r}: {detail}" if detail else f"Invalid query {query!r}")


class UnknownConceptError(AnalyzerError, ValueError):
    """No best-practice entry exists for the requested concept."""

    def __init__(self, concept: str):
        self.concept = concept
        super().__init__(f"Unknown concept: {concept}")
