"""
API reference synthesis.

Derives documentation-like records from extracted ClassInfo (comments,
inheritance, file location) and scores them against free-text queries.
All functions here are pure; caching lives in the analyzer.
"""

import re
from dataclasses import dataclass, field
from pathlib import PurePath

from .extraction import ClassInfo
from .patterns import LearningResource, PatternInfo, get_learning_resources

API_DOCS_URL = "https://dev.epicgames.com/documentation/en-us/unreal-engine/API"
DEFAULT_API_VERSION = "5.0"
DEFAULT_MODULE = "Core"

API_CATEGORIES = ("Object", "Actor", "Structure", "Component", "Miscellaneous")

# Relevance weights per query term
NAME_WEIGHT = 10
CATEGORY_WEIGHT = 5
MODULE_WEIGHT = 5
TEXT_WEIGHT = 2

_TAGS = ("@example", "@remarks", "@see")
_COMMENT_MARKERS_RE = re.compile(r"/\*+|\*+/|//+|\*")
_CLOSING_MARKER_RE = re.compile(r"\*+/\s*$")


@dataclass
class ApiReference:
    """Documentation record synthesized for a class."""

    class_name: str
    description: str
    syntax: str
    examples: list[str] = field(default_factory=list)
    remarks: list[str] = field(default_factory=list)
    related_classes: list[str] = field(default_factory=list)
    category: str = "Miscellaneous"
    module: str = DEFAULT_MODULE
    version: str = DEFAULT_API_VERSION

    def to_dict(self) -> dict:
        return {
            "class_name": self.class_name,
            "description": self.description,
            "syntax": self.syntax,
            "examples": list(self.examples),
            "remarks": list(self.remarks),
            "related_classes": list(self.related_classes),
            "category": self.category,
            "module": self.module,
            "version": self.version,
        }


@dataclass
class ApiQueryResult:
    """A scored API reference returned by a query."""

    reference: ApiReference
    context: str
    relevance: int
    learning_resources: list[LearningResource] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "class": self.reference.class_name,
            "description": self.reference.description,
            "module": self.reference.module,
            "category": self.reference.category,
            "syntax": self.reference.syntax,
            "examples": list(self.reference.examples),
            "remarks": list(self.reference.remarks),
            "context": self.context,
            "documentation": self.learning_resources[0].url if self.learning_resources else None,
            "learning_resources": [r.to_dict() for r in self.learning_resources],
            "relevance": self.relevance,
        }


# ============================================================================
# Classification
# ============================================================================


def determine_category(class_name: str, superclasses: list[str]) -> str:
    """
    Classify a class by UE naming convention.

    U -> Object, A -> Actor, F -> Structure; otherwise Component if any
    superclass name contains "Component", else Miscellaneous.
    """
    if class_name.startswith("U"):
        return "Object"
    if class_name.startswith("A"):
        return "Actor"
    if class_name.startswith("F"):
        return "Structure"
    if any("Component" in s for s in superclasses):
        return "Component"
    return "Miscellaneous"


def determine_module(file_path: str) -> str:
    """The path component following the first `Runtime` directory, else Core."""
    parts = PurePath(file_path).parts
    if "Runtime" in parts:
        index = parts.index("Runtime")
        if index + 1 < len(parts) - 1:
            return parts[index + 1]
    return DEFAULT_MODULE


# ============================================================================
# Comment processing
# ============================================================================


def extract_description(comments: list[str]) -> str:
    """Join untagged comment lines with comment markers stripped."""
    lines = [c for c in comments if not any(tag in c for tag in _TAGS)]
    text = _COMMENT_MARKERS_RE.sub(" ", " ".join(lines))
    return " ".join(text.split())


def _extract_tagged(comments: list[str], tag: str) -> list[str]:
    """Text following `tag` in each comment that carries it."""
    return [
        _CLOSING_MARKER_RE.sub("", c.split(tag, 1)[1]).strip() for c in comments if tag in c
    ]


def extract_examples(comments: list[str]) -> list[str]:
    return _extract_tagged(comments, "@example")


def extract_remarks(comments: list[str]) -> list[str]:
    return _extract_tagged(comments, "@remarks")


def generate_class_syntax(class_info: ClassInfo) -> str:
    """Render `class Name : public Base1, public Base2`."""
    syntax = f"class {class_info.name}"
    if class_info.superclasses:
        syntax += " : public " + ", public ".join(class_info.superclasses)
    return syntax


# ============================================================================
# Synthesis and scoring
# ============================================================================


def build_api_reference(class_info: ClassInfo) -> ApiReference:
    """Synthesize an ApiReference from extracted class information."""
    related = list(dict.fromkeys([*class_info.superclasses, *class_info.interfaces]))
    return ApiReference(
        class_name=class_info.name,
        description=extract_description(class_info.comments),
        syntax=generate_class_syntax(class_info),
        examples=extract_examples(class_info.comments),
        remarks=extract_remarks(class_info.comments),
        related_classes=related,
        category=determine_category(class_info.name, class_info.superclasses),
        module=determine_module(class_info.file),
    )


def tokenize_query(query: str) -> list[str]:
    """Lower-cased whitespace tokens of a query."""
    return query.lower().split()


def calculate_relevance(api_ref: ApiReference, search_terms: list[str]) -> int:
    """Sum the weighted matches of each search term against the reference."""
    text = " ".join(
        [
            api_ref.class_name,
            api_ref.description,
            api_ref.category,
            api_ref.module,
            *api_ref.related_classes,
            *api_ref.examples,
            *api_ref.remarks,
        ]
    ).lower()
    class_name = api_ref.class_name.lower()
    category = api_ref.category.lower()
    module = api_ref.module.lower()

    score = 0
    for term in search_terms:
        if term in class_name:
            score += NAME_WEIGHT
        if term in category:
            score += CATEGORY_WEIGHT
        if term in module:
            score += MODULE_WEIGHT
        if term in text:
            score += TEXT_WEIGHT
    return score


def generate_api_context(api_ref: ApiReference, include_examples: bool = False) -> str:
    """Render a short plain-text summary of a reference."""
    context = f"{api_ref.class_name} - {api_ref.description}\n"
    context += f"Module: {api_ref.module}\n"
    context += f"Category: {api_ref.category}\n\n"
    context += f"Syntax:\n{api_ref.syntax}\n"

    if include_examples and api_ref.examples:
        context += "\nExamples:\n"
        context += "\n".join(f"{example}\n" for example in api_ref.examples)

    return context


def api_learning_resources(api_ref: ApiReference) -> list[LearningResource]:
    """Learning resources for a class: Epic API docs plus the community wiki."""
    return get_learning_resources(
        PatternInfo(
            name=api_ref.class_name,
            description=api_ref.description,
            best_practices=list(api_ref.remarks),
            documentation=f"{API_DOCS_URL}/{api_ref.module}/{api_ref.class_name}",
            examples=list(api_ref.examples),
            related_patterns=list(api_ref.related_classes),
        )
    )


def rank_api_references(
    references: list[ApiReference],
    query: str,
    *,
    category: str | None = None,
    module: str | None = None,
    include_examples: bool = False,
    max_results: int = 10,
) -> list[ApiQueryResult]:
    """
    Score, filter and rank API references against a query.

    Results with zero relevance are dropped; ties keep the input order.
    A zero or negative `max_results` falls back to the default of 10.
    """
    terms = tokenize_query(query)
    results: list[ApiQueryResult] = []

    for api_ref in references:
        if category and api_ref.category != category:
            continue
        if module and api_ref.module != module:
            continue

        relevance = calculate_relevance(api_ref, terms)
        if relevance <= 0:
            continue
        results.append(
            ApiQueryResult(
                reference=api_ref,
                context=generate_api_context(api_ref, include_examples),
                relevance=relevance,
                learning_resources=api_learning_resources(api_ref),
            )
        )

    results.sort(key=lambda r: r.relevance, reverse=True)
    return results[: max(max_results, 0) or 10]
