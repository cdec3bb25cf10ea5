"""
Tree-sitter query patterns for C++ analysis.

Static patterns are compiled once per analyzer and cached by name; reference
queries are built per identifier and cached under a `<kind>-<identifier>` key.
"""

# ============================================================================
# Common Query Patterns for C++ Parsing
# ============================================================================

QUERY_PATTERNS = {
    # Class definitions with a body (forward declarations do not match)
    "CLASS": """
        (class_specifier
            name: (type_identifier) @class_name
            body: (field_declaration_list) @class_body) @class
    """,
}

REFERENCE_KINDS = ("class", "function", "variable")


def get_query_pattern(name: str) -> str | None:
    """
    Get a query pattern by name.

    Args:
        name: Name of the query pattern

    Returns:
        Query pattern string or None if not found
    """
    return QUERY_PATTERNS.get(name)


def _escape_query_string(text: str) -> str:
    """Escape a value for use inside a double-quoted query string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def build_reference_query(identifier: str, ref_type: str | None = None) -> str:
    """
    Build a query matching tokens whose text equals `identifier`.

    Classes are matched as `type_identifier` nodes; functions, variables and
    unspecified kinds are matched as plain `identifier` nodes.
    """
    node_type = "type_identifier" if ref_type == "class" else "identifier"
    return f'(({node_type}) @id (#eq? @id "{_escape_query_string(identifier)}"))'


def reference_cache_key(identifier: str, ref_type: str | None = None) -> str:
    """Cache key for a reference query (one entry per kind + identifier)."""
    return f"{ref_type}-{identifier}"
