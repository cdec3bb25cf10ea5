"""
Unreal Engine pattern detection.

Matches source lines against a fixed catalog of UE idioms (reflection macros,
component setup, delegate binding) and attaches rule-based improvement
suggestions and learning resources. No inference: every decision comes from
the tables in this module.
"""

import re
from dataclasses import dataclass, field
from typing import Literal

ResourceType = Literal["documentation", "tutorial", "video", "blog"]

COMMUNITY_WIKI_URL = "https://unrealcommunity.wiki"


# ============================================================================
# Data Classes
# ============================================================================


@dataclass
class PatternInfo:
    """A catalog entry describing a known UE idiom."""

    name: str
    description: str
    best_practices: list[str] = field(default_factory=list)
    documentation: str = ""
    examples: list[str] = field(default_factory=list)
    related_patterns: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "best_practices": list(self.best_practices),
            "documentation": self.documentation,
            "examples": list(self.examples),
            "related_patterns": list(self.related_patterns),
        }


@dataclass
class LearningResource:
    """A pointer to documentation about a pattern or class."""

    title: str
    type: ResourceType
    url: str
    description: str

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "type": self.type,
            "url": self.url,
            "description": self.description,
        }


@dataclass
class CodePatternMatch:
    """A catalog pattern found on a specific line."""

    pattern: PatternInfo
    file: str
    line: int
    context: str
    suggested_improvements: list[str] = field(default_factory=list)
    learning_resources: list[LearningResource] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "pattern": self.pattern.name,
            "description": self.pattern.description,
            "file": self.file,
            "line": self.line,
            "location": f"{self.file}:{self.line}",
            "context": self.context,
            "suggested_improvements": list(self.suggested_improvements),
            "documentation": self.pattern.documentation,
            "best_practices": list(self.pattern.best_practices),
            "examples": list(self.pattern.examples),
            "learning_resources": [r.to_dict() for r in self.learning_resources],
        }


# ============================================================================
# Pattern Catalog
# ============================================================================

UNREAL_PATTERNS: list[PatternInfo] = [
    PatternInfo(
        name="UPROPERTY Macro",
        description="Property declaration for Unreal reflection system",
        best_practices=[
            "Use appropriate property specifiers (EditAnywhere, BlueprintReadWrite, etc.)",
            "Consider replication needs (Replicated, ReplicatedUsing)",
            "Group related properties with categories",
        ],
        documentation="https://docs.unrealengine.com/5.0/en-US/unreal-engine-uproperty-specifier-reference/",
        examples=[
            'UPROPERTY(EditAnywhere, BlueprintReadWrite, Category = "Combat")\nfloat Health;',
            "UPROPERTY(Replicated)\nFVector Location;",
        ],
        related_patterns=["UFUNCTION Macro", "UCLASS Macro"],
    ),
    PatternInfo(
        name="UFUNCTION Macro",
        description="Function declaration for Unreal reflection system",
        best_practices=[
            "Use BlueprintCallable for functions that can be called from Blueprints",
            "Use BlueprintPure for functions without side effects",
            "Consider using BlueprintNativeEvent for overridable functions",
            "Add categories and tooltips for better organization",
        ],
        documentation="https://docs.unrealengine.com/5.0/en-US/ufunctions-in-unreal-engine/",
        examples=[
            'UFUNCTION(BlueprintCallable, Category = "Combat")\nvoid TakeDamage(float DamageAmount);',
            'UFUNCTION(BlueprintPure, Category = "Stats")\nfloat GetHealthPercentage() const;',
        ],
        related_patterns=["UPROPERTY Macro", "UCLASS Macro"],
    ),
    PatternInfo(
        name="UCLASS Macro",
        description="Class declaration for Unreal reflection system",
        best_practices=[
            "State Blueprint exposure explicitly (Blueprintable or NotBlueprintable)",
            "Use BlueprintType for classes used as Blueprint variables",
            "Keep GENERATED_BODY() as the first line of the class body",
        ],
        documentation="https://docs.unrealengine.com/5.0/en-US/class-specifiers/",
        examples=[
            "UCLASS(Blueprintable, BlueprintType)\nclass AMyActor : public AActor",
        ],
        related_patterns=["UPROPERTY Macro", "UFUNCTION Macro"],
    ),
    PatternInfo(
        name="Component Setup",
        description="Creating and initializing components in constructor",
        best_practices=[
            "Create components in constructor",
            "Set default values in constructor",
            "Use CreateDefaultSubobject for components",
            "Set root component appropriately",
        ],
        documentation="https://docs.unrealengine.com/5.0/en-US/components-in-unreal-engine/",
        examples=[
            'RootComponent = CreateDefaultSubobject<USceneComponent>(TEXT("Root"));',
            'MeshComponent = CreateDefaultSubobject<UStaticMeshComponent>(TEXT("Mesh"));',
        ],
        related_patterns=["Actor Initialization", "Component Registration"],
    ),
    PatternInfo(
        name="Event Binding",
        description="Binding to delegate events and implementing event handlers",
        best_practices=[
            "Bind events in BeginPlay",
            "Unbind events in EndPlay",
            "Use DECLARE_DYNAMIC_MULTICAST_DELEGATE for Blueprint exposure",
            "Consider weak pointer bindings for safety",
        ],
        documentation="https://docs.unrealengine.com/5.0/en-US/delegates-in-unreal-engine/",
        examples=[
            "OnHealthChanged.AddDynamic(this, &AMyActor::HandleHealthChanged);",
            'FScriptDelegate Delegate; Delegate.BindUFunction(this, "OnCustomEvent");',
        ],
        related_patterns=["Delegate Declaration", "Event Dispatching"],
    ),
]

# Per-pattern line matchers
PATTERN_MATCHERS: dict[str, re.Pattern[str]] = {
    "UPROPERTY Macro": re.compile(r"UPROPERTY\s*\([^)]*\)"),
    "UFUNCTION Macro": re.compile(r"UFUNCTION\s*\([^)]*\)"),
    "UCLASS Macro": re.compile(r"UCLASS\s*\([^)]*\)"),
    "Component Setup": re.compile(r"CreateDefaultSubobject\s*<[^>]+>\s*\("),
    "Event Binding": re.compile(r"\.Add(Dynamic|Unique|Raw|Lambda)|BindUFunction"),
}


# ============================================================================
# Best Practices
# ============================================================================

BEST_PRACTICES: dict[str, dict] = {
    "UPROPERTY": {
        "description": "Property declaration for Unreal reflection system",
        "best_practices": [
            "Use appropriate specifiers (EditAnywhere, BlueprintReadWrite)",
            "Consider replication needs (Replicated, ReplicatedUsing)",
            "Group related properties with categories",
            "Use Meta tags for validation and UI customization",
        ],
        "examples": [
            'UPROPERTY(EditAnywhere, BlueprintReadWrite, Category = "Combat")\nfloat Health;',
            'UPROPERTY(Replicated, Meta = (ClampMin = "0.0"))\nfloat Speed;',
        ],
        "documentation": "https://docs.unrealengine.com/5.0/en-US/unreal-engine-uproperty-specifier-reference/",
    },
    "UFUNCTION": {
        "description": "Function declaration for Unreal reflection system",
        "best_practices": [
            "Use BlueprintCallable for functions that can be called from Blueprints",
            "Use BlueprintPure for functions without side effects",
            "Consider using BlueprintNativeEvent for overridable functions",
            "Add categories and tooltips for better organization",
        ],
        "examples": [
            'UFUNCTION(BlueprintCallable, Category = "Combat")\nvoid TakeDamage(float DamageAmount);',
            'UFUNCTION(BlueprintPure, Category = "Stats")\nfloat GetHealthPercentage() const;',
        ],
        "documentation": "https://docs.unrealengine.com/5.0/en-US/ufunctions-in-unreal-engine/",
    },
    "Components": {
        "description": "Component setup and management in Unreal Engine",
        "best_practices": [
            "Create components in constructor using CreateDefaultSubobject",
            "Set up component hierarchy properly",
            "Initialize component properties in constructor",
            "Consider component replication needs",
        ],
        "examples": [
            'MeshComponent = CreateDefaultSubobject<UStaticMeshComponent>(TEXT("Mesh"));\nRootComponent = MeshComponent;',
            "CollisionComponent->SetupAttachment(RootComponent);",
        ],
        "documentation": "https://docs.unrealengine.com/5.0/en-US/components-in-unreal-engine/",
    },
    "Events": {
        "description": "Event handling and delegation in Unreal Engine",
        "best_practices": [
            "Bind events in BeginPlay and unbind in EndPlay",
            "Use weak pointers for delegate bindings",
            "Consider using BlueprintAssignable for Blueprint events",
            "Handle edge cases and null checks",
        ],
        "examples": [
            "DECLARE_DYNAMIC_MULTICAST_DELEGATE_OneParam(FOnHealthChanged, float, NewHealth);",
            "OnHealthChanged.AddDynamic(this, &AMyActor::HandleHealthChanged);",
        ],
        "documentation": "https://docs.unrealengine.com/5.0/en-US/delegates-in-unreal-engine/",
    },
    "Replication": {
        "description": "Network replication in Unreal Engine",
        "best_practices": [
            "Mark properties with Replicated specifier",
            "Implement GetLifetimeReplicatedProps",
            "Use ReplicatedUsing for property change callbacks",
            "Consider replication conditions (COND_*)",
        ],
        "examples": [
            "void GetLifetimeReplicatedProps(TArray<FLifetimeProperty>& OutLifetimeProps) const;",
            "UPROPERTY(ReplicatedUsing = OnRep_Health)\nfloat Health;",
        ],
        "documentation": "https://docs.unrealengine.com/5.0/en-US/networking-overview-for-unreal-engine/",
    },
    "Blueprints": {
        "description": "Blueprint integration and exposure",
        "best_practices": [
            "Use appropriate function and property specifiers",
            "Organize functions and properties into categories",
            "Add tooltips and descriptions",
            "Consider Blueprint/C++ interaction patterns",
        ],
        "examples": [
            "UCLASS(Blueprintable, BlueprintType)",
            "UFUNCTION(BlueprintImplementableEvent)",
        ],
        "documentation": "https://docs.unrealengine.com/5.0/en-US/blueprints-and-cpp-in-unreal-engine/",
    },
}


# ============================================================================
# Pattern Detection Functions
# ============================================================================


def get_pattern(name: str) -> PatternInfo | None:
    """Look up a catalog entry by name."""
    for pattern in UNREAL_PATTERNS:
        if pattern.name == name:
            return pattern
    return None


def is_pattern_match(line: str, pattern_name: str) -> bool:
    """Check a line against the dedicated matcher of a pattern."""
    matcher = PATTERN_MATCHERS.get(pattern_name)
    return bool(matcher and matcher.search(line))


def _matches_example(line: str, pattern: PatternInfo) -> bool:
    """Check whether a line contains the first line of the pattern's first example."""
    if not pattern.examples:
        return False
    first_line = pattern.examples[0].split("\n")[0]
    return bool(first_line) and first_line in line


def line_context(lines: list[str], index: int, radius: int = 2) -> str:
    """Join the lines within `radius` of `index` (0-based)."""
    return "\n".join(lines[max(0, index - radius) : min(len(lines), index + radius + 1)])


def analyze_potential_improvements(context: str, pattern: PatternInfo) -> list[str]:
    """Generate improvement suggestions for a matched pattern."""
    improvements = []

    if pattern.name == "UPROPERTY Macro":
        if "Category" not in context:
            improvements.append("Consider adding a Category specifier for better organization")
        if "BlueprintReadWrite" in context and "Meta" not in context:
            improvements.append("Consider adding Meta specifiers for validation")

    elif pattern.name == "UFUNCTION Macro":
        if "BlueprintCallable" in context and "Category" not in context:
            improvements.append("Consider adding a Category for Blueprint organization")

    elif pattern.name == "UCLASS Macro":
        if "Blueprintable" not in context and "NotBlueprintable" not in context:
            improvements.append("Consider explicitly specifying Blueprintable or NotBlueprintable")

    elif pattern.name == "Component Setup":
        if "RootComponent" not in context and "CreateDefaultSubobject" in context:
            improvements.append("Consider setting up component hierarchy")

    elif pattern.name == "Event Binding":
        lowered = context.lower()
        if "beginplay" not in lowered and "endplay" not in lowered:
            improvements.append("Consider managing event binding/unbinding in BeginPlay/EndPlay")

    return improvements


def community_wiki_url(name: str) -> str:
    """Derive the community wiki URL for a pattern or class name."""
    slug = re.sub(r"\s+", "-", name.lower())
    return f"{COMMUNITY_WIKI_URL}/{slug}"


def get_learning_resources(pattern: PatternInfo) -> list[LearningResource]:
    """Official documentation plus the derived community guide for a pattern."""
    return [
        LearningResource(
            title="Official Documentation",
            type="documentation",
            url=pattern.documentation,
            description=f"Official Unreal Engine documentation for {pattern.name}",
        ),
        LearningResource(
            title="Community Guide",
            type="tutorial",
            url=community_wiki_url(pattern.name),
            description="Community-created guide with practical examples",
        ),
    ]


def detect_patterns(content: str, file_path: str) -> list[CodePatternMatch]:
    """
    Detect catalog patterns in file content.

    Every (pattern, line) pair is checked independently, so one line can
    match several patterns. Results are grouped by pattern in catalog order.

    Args:
        content: File content to analyze
        file_path: Path to the file (for reporting)

    Returns:
        Matches with a ±2 line context, suggestions and learning resources
    """
    matches = []
    lines = content.split("\n")

    for pattern in UNREAL_PATTERNS:
        for i, line in enumerate(lines):
            if not (_matches_example(line, pattern) or is_pattern_match(line, pattern.name)):
                continue

            context = line_context(lines, i)
            matches.append(
                CodePatternMatch(
                    pattern=pattern,
                    file=file_path,
                    line=i + 1,
                    context=context,
                    suggested_improvements=analyze_potential_improvements(context, pattern),
                    learning_resources=get_learning_resources(pattern),
                )
            )

    return matches


def get_best_practices(concept: str) -> dict | None:
    """Get the best-practice entry for a UE concept, or None if unknown."""
    entry = BEST_PRACTICES.get(concept)
    if entry is None:
        return None
    return {"concept": concept, **entry}
