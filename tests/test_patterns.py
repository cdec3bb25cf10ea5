"""Tests for UE pattern detection and best practices."""

from unreal_code_analyzer.cpp_analyzer.patterns import (
    BEST_PRACTICES,
    UNREAL_PATTERNS,
    community_wiki_url,
    detect_patterns,
    get_best_practices,
    get_pattern,
    line_context,
)


class TestPatternDetection:
    """Test catalog matching."""

    def test_detect_uproperty_without_category(self):
        content = """
UPROPERTY(EditAnywhere, BlueprintReadWrite)
float Health = 100.0f;
"""
        matches = detect_patterns(content, "test.h")

        assert len(matches) == 1
        match = matches[0]
        assert match.pattern.name == "UPROPERTY Macro"
        assert match.line == 2
        assert match.file == "test.h"
        assert match.suggested_improvements == [
            "Consider adding a Category specifier for better organization",
            "Consider adding Meta specifiers for validation",
        ]

    def test_detect_ufunction(self):
        content = 'UFUNCTION(BlueprintCallable, Category="Combat")\nvoid TakeDamage(float Amount);\n'
        matches = detect_patterns(content, "test.h")

        assert [m.pattern.name for m in matches] == ["UFUNCTION Macro"]
        assert matches[0].suggested_improvements == []

    def test_detect_component_setup(self):
        content = """void AMyActor::Setup()
{
    MeshComponent = CreateDefaultSubobject<UStaticMeshComponent>(TEXT("Mesh"));
}
"""
        matches = detect_patterns(content, "MyActor.cpp")

        assert [(m.pattern.name, m.line) for m in matches] == [("Component Setup", 3)]
        assert matches[0].suggested_improvements == ["Consider setting up component hierarchy"]

    def test_event_binding_in_begin_play(self):
        content = """void AMyActor::BeginPlay()
{
    OnHit.AddDynamic(this, &AMyActor::HandleHit);
}
"""
        matches = detect_patterns(content, "MyActor.cpp")

        assert [m.pattern.name for m in matches] == ["Event Binding"]
        assert matches[0].suggested_improvements == []

    def test_results_grouped_by_catalog_order(self):
        content = 'OnHit.AddDynamic(this, &A::B);\nUPROPERTY(Category="X")\nint Y;\n'
        matches = detect_patterns(content, "a.h")
        assert [m.pattern.name for m in matches] == ["UPROPERTY Macro", "Event Binding"]

    def test_no_patterns(self):
        assert detect_patterns("int main() { return 0; }", "main.cpp") == []

    def test_match_to_dict(self):
        matches = detect_patterns("UFUNCTION(BlueprintCallable)\nvoid Fire();\n", "Gun.h")
        data = matches[0].to_dict()

        assert data["pattern"] == "UFUNCTION Macro"
        assert data["location"] == "Gun.h:1"
        assert data["suggested_improvements"] == [
            "Consider adding a Category for Blueprint organization"
        ]
        assert [r["type"] for r in data["learning_resources"]] == ["documentation", "tutorial"]


class TestCatalog:
    """Test catalog lookups and helpers."""

    def test_catalog_names(self):
        assert [p.name for p in UNREAL_PATTERNS] == [
            "UPROPERTY Macro",
            "UFUNCTION Macro",
            "UCLASS Macro",
            "Component Setup",
            "Event Binding",
        ]
        assert get_pattern("Event Binding") is UNREAL_PATTERNS[-1]
        assert get_pattern("Nope") is None

    def test_community_wiki_url(self):
        assert community_wiki_url("Component Setup") == "https://unrealcommunity.wiki/component-setup"

    def test_line_context_clamps(self):
        lines = ["a", "b", "c", "d", "e", "f"]
        assert line_context(lines, 0) == "a\nb\nc"
        assert line_context(lines, 3) == "b\nc\nd\ne\nf"
        assert line_context(lines, 5) == "d\ne\nf"

    def test_best_practices(self):
        entry = get_best_practices("Components")
        assert entry["concept"] == "Components"
        assert entry["documentation"].startswith("https://")
        assert get_best_practices("Magic") is None
        assert set(BEST_PRACTICES) == {
            "UPROPERTY",
            "UFUNCTION",
            "Components",
            "Events",
            "Replication",
            "Blueprints",
        }
