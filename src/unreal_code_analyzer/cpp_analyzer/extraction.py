"""
Class extraction from tree-sitter C++ syntax trees.

Turns matches of the CLASS query into ClassInfo records (methods,
properties, superclasses, leading comments). Extraction is best-effort:
a class with a missing body or base clause just yields empty lists.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Literal

from tree_sitter import Query as TSQuery
from tree_sitter import QueryCursor

Visibility = Literal["public", "protected", "private"]

# Node types that carry a declared name inside a function declarator
_FUNCTION_NAME_TYPES = (
    "identifier",
    "field_identifier",
    "destructor_name",
    "operator_name",
    "qualified_identifier",
)

# Nodes a class specifier can be wrapped in (comments sit next to the wrapper)
_CLASS_WRAPPER_TYPES = ("declaration", "template_declaration", "type_definition")

# UE reflection macros that appear as call-like statements inside class bodies
UE_MACRO_NAMES = frozenset(
    {
        "UCLASS",
        "USTRUCT",
        "UENUM",
        "UINTERFACE",
        "UPROPERTY",
        "UFUNCTION",
        "UDELEGATE",
        "UMETA",
        "UPARAM",
        "GENERATED_BODY",
        "GENERATED_UCLASS_BODY",
        "GENERATED_USTRUCT_BODY",
        "GENERATED_IINTERFACE_BODY",
        "GENERATED_UINTERFACE_BODY",
    }
)

_UE_MACRO_CALL_RE = re.compile(r"^\s*(" + "|".join(sorted(UE_MACRO_NAMES)) + r")\s*\(")
_INTERFACE_NAME_RE = re.compile(r"^I[A-Z]")

# Comments and literals are skipped; macro invocations and MODULE_API export
# tokens are blanked before parsing.
_MASK_SCAN_RE = re.compile(
    r"(?P<skip>//[^\n]*|/\*.*?\*/|\"(?:\\.|[^\"\\\n])*\"|'(?:\\.|[^'\\\n])*')"
    r"|\b(?P<macro>" + "|".join(sorted(UE_MACRO_NAMES)) + r")\s*\("
    r"|\b(?P<export>[A-Z][A-Z0-9_]*_API)\b",
    re.S,
)
_LITERAL_RE = re.compile(r"\"(?:\\.|[^\"\\\n])*\"|'(?:\\.|[^'\\\n])*'")


# ============================================================================
# Data Classes
# ============================================================================


@dataclass
class ParameterInfo:
    """Information about a function parameter."""

    name: str
    type: str
    default_value: str | None = None

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "default_value": self.default_value}


@dataclass
class MethodInfo:
    """Information about a class method."""

    name: str
    return_type: str
    parameters: list[ParameterInfo] = field(default_factory=list)
    is_virtual: bool = False
    is_override: bool = False
    visibility: Visibility = "public"
    line: int = 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "return_type": self.return_type,
            "parameters": [p.to_dict() for p in self.parameters],
            "is_virtual": self.is_virtual,
            "is_override": self.is_override,
            "visibility": self.visibility,
            "line": self.line,
        }


@dataclass
class PropertyInfo:
    """Information about a class property."""

    name: str
    type: str
    visibility: Visibility = "public"
    line: int = 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "visibility": self.visibility,
            "line": self.line,
        }


@dataclass
class ClassInfo:
    """Information about a C++ class."""

    name: str
    file: str
    line: int
    superclasses: list[str] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)
    properties: list[PropertyInfo] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "file": self.file,
            "line": self.line,
            "superclasses": list(self.superclasses),
            "interfaces": list(self.interfaces),
            "methods": [m.to_dict() for m in self.methods],
            "properties": [p.to_dict() for p in self.properties],
            "comments": list(self.comments),
        }


# ============================================================================
# Node helpers
# ============================================================================


def node_text(node: Any) -> str:
    """Decode a node's source text (empty string for missing nodes)."""
    if node is None or not node.text:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def iter_descendants(node: Any) -> Iterator[Any]:
    """
    Iterate all descendants of a node in source order (pre-order).

    py-tree-sitter Node has no descendants-of-type helper, so walk `.children`.
    """
    stack = list(reversed(node.children))
    while stack:
        cur = stack.pop()
        yield cur
        if cur.children:
            stack.extend(reversed(cur.children))


def descendants_of_type(node: Any, *types: str) -> list[Any]:
    """All descendants of `node` with one of the given types, in source order."""
    return [n for n in iter_descendants(node) if n.type in types]


def first_of_type(node: Any, *types: str) -> Any | None:
    """The node itself or its first descendant with one of the given types."""
    if node is None:
        return None
    if node.type in types:
        return node
    for n in iter_descendants(node):
        if n.type in types:
            return n
    return None


def is_ue_macro_call(text: str) -> bool:
    """Check whether a statement is a UE reflection macro invocation."""
    return bool(_UE_MACRO_CALL_RE.match(text))


def is_interface_name(name: str) -> bool:
    """UE interfaces are named `I` followed by an uppercase letter."""
    return bool(_INTERFACE_NAME_RE.match(name))


def _find_closing_paren(source: str, open_index: int) -> int | None:
    depth = 0
    i = open_index
    while i < len(source):
        char = source[i]
        if char in "\"'":
            literal = _LITERAL_RE.match(source, i)
            if literal is not None:
                i = literal.end()
                continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def _blank(text: str) -> str:
    # One space per UTF-8 byte keeps every byte offset of the parsed text
    return "".join(c if c in "\r\n" else " " * len(c.encode("utf-8")) for c in text)


def mask_ue_macros(source: str) -> str:
    """
    Blank out UE reflection macros before parsing.

    `UCLASS(...)`, `UPROPERTY(...)`, `UFUNCTION(...)`, `GENERATED_BODY()`
    and `MYGAME_API` export tokens are not C++ the grammar understands; left
    in place they make tree-sitter recover into bogus members. They are
    replaced by spaces (newlines kept), so lines and byte offsets of the
    remaining code are unchanged. Occurrences inside comments and string
    literals are left alone, as is a macro with unbalanced parentheses.
    """
    spans: list[tuple[int, int]] = []
    pos = 0
    while True:
        match = _MASK_SCAN_RE.search(source, pos)
        if match is None:
            break
        if match.group("macro"):
            close = _find_closing_paren(source, match.end() - 1)
            if close is None:
                break
            spans.append((match.start(), close + 1))
            pos = close + 1
        else:
            if match.group("export"):
                spans.append(match.span())
            pos = match.end()

    if not spans:
        return source

    parts = []
    last = 0
    for start, end in spans:
        parts.append(source[last:start])
        parts.append(_blank(source[start:end]))
        last = end
    parts.append(source[last:])
    return "".join(parts)


# ============================================================================
# Extraction
# ============================================================================


def extract_classes(tree: Any, file_path: str, class_query: TSQuery) -> list[tuple[str, ClassInfo]]:
    """
    Run the CLASS query over a tree.

    Returns:
        (cache key, ClassInfo) pairs in match order. The key is the text of
        the `class_name` capture; the ClassInfo name is resolved separately
        from the class node and may differ.
    """
    results: list[tuple[str, ClassInfo]] = []

    # py-tree-sitter >= 0.25: Query execution is done via QueryCursor
    cursor = QueryCursor(class_query)
    for _, captured in cursor.matches(tree.root_node):
        class_nodes = captured.get("class") or []
        name_nodes = captured.get("class_name") or []
        if not class_nodes or not name_nodes:
            continue
        key = node_text(name_nodes[0])
        results.append((key, extract_class_info(class_nodes[0], file_path)))

    return results


def extract_class_info(node: Any, file_path: str) -> ClassInfo:
    """Extract class information from a class_specifier node."""
    # First type_identifier token of the declaration, "" if there is none
    class_info = ClassInfo(
        name=node_text(first_of_type(node, "type_identifier")),
        file=file_path,
        line=node.start_point[0] + 1,
    )

    class_info.superclasses = extract_superclasses(node)
    class_info.interfaces = [s for s in class_info.superclasses if is_interface_name(s)]

    body = node.child_by_field_name("body")
    if body is not None:
        visibility: Visibility = "public"
        for child in body.children:
            if child.type == "access_specifier":
                specifier = node_text(child).strip().rstrip(":").strip()
                if specifier in ("public", "protected", "private"):
                    visibility = specifier
                continue

            if child.type not in ("function_definition", "field_declaration", "declaration"):
                continue

            method = extract_method_info(child, visibility)
            if method is not None:
                class_info.methods.append(method)
            elif child.type == "field_declaration":
                class_info.properties.extend(extract_property_info(child, visibility))

    class_info.comments = extract_leading_comments(node)
    return class_info


def extract_superclasses(class_node: Any) -> list[str]:
    """
    Collect every type_identifier inside the base class clause, in source order.

    `class A : public B, public Ns::C` yields ["B", "C"]: qualified names
    contribute only their type_identifier part.
    """
    for child in class_node.children:
        if child.type == "base_class_clause":
            return [node_text(n) for n in descendants_of_type(child, "type_identifier")]
    return []


def _find_function_declarator(node: Any) -> Any | None:
    """Locate the function_declarator of a member declaration, if it declares a function."""
    for declarator in node.children_by_field_name("declarator"):
        found = first_of_type(declarator, "function_declarator")
        if found is not None:
            return found
    return None


def _declaration_header(node: Any) -> str:
    """Declaration text up to (not including) a function body."""
    text = node_text(node)
    body = node.child_by_field_name("body")
    if body is not None:
        return text[: body.start_byte - node.start_byte]
    return text


def extract_method_info(node: Any, visibility: Visibility = "public") -> MethodInfo | None:
    """Extract method information from a member node, or None if it is not a method."""
    declarator = _find_function_declarator(node)
    if declarator is None:
        return None

    name_node = declarator.child_by_field_name("declarator")
    if name_node is None or name_node.type not in _FUNCTION_NAME_TYPES:
        return None

    name = node_text(name_node)
    if name in UE_MACRO_NAMES or is_ue_macro_call(node_text(node)):
        return None

    header = _declaration_header(node)
    method_info = MethodInfo(
        name=name,
        return_type=node_text(node.child_by_field_name("type")),
        is_virtual=bool(re.search(r"\bvirtual\b", header)),
        is_override=bool(re.search(r"\boverride\b", header)),
        visibility=visibility,
        line=node.start_point[0] + 1,
    )

    params = declarator.child_by_field_name("parameters")
    if params is not None:
        method_info.parameters = extract_parameters(params)

    return method_info


def extract_parameters(param_list: Any) -> list[ParameterInfo]:
    """Extract parameters; entries without both a type and a name are dropped."""
    params = []
    for child in param_list.children:
        if child.type in ("parameter_declaration", "optional_parameter_declaration"):
            param = extract_single_parameter(child)
            if param is not None:
                params.append(param)
    return params


def _declarator_name_and_suffix(declarator: Any, name_types: tuple[str, ...]) -> tuple[str, str]:
    """Resolve a (possibly pointer/reference wrapped) declarator to its name and type suffix."""
    if declarator is None:
        return "", ""
    suffix = ""
    for node in (declarator, *iter_descendants(declarator)):
        if node.type == "pointer_declarator":
            suffix += "*"
        elif node.type == "reference_declarator":
            suffix += "&&" if node_text(node).lstrip().startswith("&&") else "&"
        elif node.type in name_types:
            return node_text(node), suffix
    return "", suffix


def extract_single_parameter(param_node: Any) -> ParameterInfo | None:
    """Extract a single parameter's information."""
    param_type = node_text(param_node.child_by_field_name("type"))
    param_name, suffix = _declarator_name_and_suffix(
        param_node.child_by_field_name("declarator"), ("identifier",)
    )
    if not param_type or not param_name:
        return None

    default_node = param_node.child_by_field_name("default_value")
    return ParameterInfo(
        name=param_name,
        type=param_type + suffix,
        default_value=node_text(default_node) if default_node is not None else None,
    )


def extract_property_info(node: Any, visibility: Visibility = "public") -> list[PropertyInfo]:
    """Extract one PropertyInfo per declarator of a field declaration."""
    prop_type = node_text(node.child_by_field_name("type"))
    if not prop_type or prop_type in UE_MACRO_NAMES or is_ue_macro_call(node_text(node)):
        return []

    properties = []
    for declarator in node.children_by_field_name("declarator"):
        prop_name, suffix = _declarator_name_and_suffix(
            declarator, ("field_identifier", "identifier")
        )
        if not prop_name:
            continue
        properties.append(
            PropertyInfo(
                name=prop_name,
                type=prop_type + suffix,
                visibility=visibility,
                line=node.start_point[0] + 1,
            )
        )
    return properties


def extract_leading_comments(node: Any) -> list[str]:
    """
    Extract the comment block directly preceding a class.

    UE class macros (`UCLASS(...)`) between the comment and the class are skipped.
    """
    anchor = node
    while (
        anchor.prev_sibling is None
        and anchor.parent is not None
        and anchor.parent.type in _CLASS_WRAPPER_TYPES
    ):
        anchor = anchor.parent

    comments: list[str] = []
    prev = anchor.prev_sibling
    while prev is not None:
        if prev.type == "comment":
            comments.insert(0, node_text(prev).strip())
        elif not is_ue_macro_call(node_text(prev)):
            break
        prev = prev.prev_sibling
    return comments
