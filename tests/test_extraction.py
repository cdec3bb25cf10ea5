"""Tests for tree-sitter based class extraction."""

import tree_sitter_cpp as tscpp
from tree_sitter import Language, Parser, Query

from unreal_code_analyzer.cpp_analyzer.extraction import (
    UE_MACRO_NAMES,
    extract_classes,
    is_interface_name,
    is_ue_macro_call,
    mask_ue_macros,
)
from unreal_code_analyzer.cpp_analyzer.queries import (
    QUERY_PATTERNS,
    build_reference_query,
    get_query_pattern,
    reference_cache_key,
)

LANGUAGE = Language(tscpp.language())
CLASS_QUERY = Query(LANGUAGE, QUERY_PATTERNS["CLASS"])


def extract(source: str, file_path: str = "Test.h"):
    tree = Parser(LANGUAGE).parse(mask_ue_macros(source).encode("utf-8"))
    return extract_classes(tree, file_path, CLASS_QUERY)


class TestClassExtraction:
    """Test class structure extraction."""

    def test_simple_class(self):
        """Name, base, method and property of a one-line class."""
        results = extract("class A : public B { public: void M(); int P; };")

        assert len(results) == 1
        key, info = results[0]
        assert key == "A"
        assert info.name == "A"
        assert info.file == "Test.h"
        assert info.line == 1
        assert info.superclasses == ["B"]
        assert info.interfaces == []
        assert [m.name for m in info.methods] == ["M"]
        assert info.methods[0].return_type == "void"
        assert info.methods[0].parameters == []
        assert [(p.name, p.type, p.visibility) for p in info.properties] == [("P", "int", "public")]

    def test_class_without_base_or_members(self):
        _, info = extract("class Empty {};")[0]
        assert info.superclasses == []
        assert info.methods == []
        assert info.properties == []

    def test_forward_declaration_is_ignored(self):
        """Only definitions with a body are extracted."""
        assert extract("class Fwd;") == []

    def test_multiple_classes_in_file(self):
        results = extract("class First {};\nclass Second : public First {};\n")
        assert [key for key, _ in results] == ["First", "Second"]
        assert results[1][1].line == 2
        assert results[1][1].superclasses == ["First"]

    def test_interfaces_are_subset_of_superclasses(self):
        _, info = extract("class AHero : public ACharacter, public IDamageable {};")[0]
        assert info.superclasses == ["ACharacter", "IDamageable"]
        assert info.interfaces == ["IDamageable"]

    def test_visibility_tracking(self):
        source = """
class Widget {
    int Implicit;
protected:
    float Guarded;
private:
    bool Hidden;
    void Secret();
};
"""
        _, info = extract(source)[0]
        visibility = {p.name: p.visibility for p in info.properties}
        assert visibility == {"Implicit": "public", "Guarded": "protected", "Hidden": "private"}
        assert info.methods[0].name == "Secret"
        assert info.methods[0].visibility == "private"

    def test_virtual_and_override(self):
        source = """
class ADerived : public ABase {
public:
    virtual void Tick(float DeltaTime) override;
    virtual void Reset();
    void Plain();
};
"""
        _, info = extract(source)[0]
        flags = {m.name: (m.is_virtual, m.is_override) for m in info.methods}
        assert flags == {
            "Tick": (True, True),
            "Reset": (True, False),
            "Plain": (False, False),
        }

    def test_parameters(self):
        """Unnamed parameters are dropped; defaults and reference suffixes are kept."""
        source = """
class Api {
public:
    void Call(FString& Name, int Count = 3, float);
};
"""
        _, info = extract(source)[0]
        params = info.methods[0].parameters
        assert [p.name for p in params] == ["Name", "Count"]
        assert params[0].type == "FString&"
        assert params[0].default_value is None
        assert params[1].type == "int"
        assert params[1].default_value == "3"

    def test_inline_method_definition(self):
        _, info = extract("class Counter { public: int Get() { return Value; } int Value; };")[0]
        assert [m.name for m in info.methods] == ["Get"]
        assert info.methods[0].return_type == "int"
        assert [p.name for p in info.properties] == ["Value"]

    def test_pointer_property_and_multiple_declarators(self):
        _, info = extract("class Holder { int* Ptr; int X, Y; };")[0]
        assert [(p.name, p.type) for p in info.properties] == [
            ("Ptr", "int*"),
            ("X", "int"),
            ("Y", "int"),
        ]

    def test_leading_comments(self):
        source = "// Holds things\n// Second line\nclass Box {};\n"
        _, info = extract(source)[0]
        assert info.comments == ["// Holds things", "// Second line"]
        assert info.line == 3

    def test_to_dict(self):
        _, info = extract("class A : public B { public: void M(int X); };")[0]
        data = info.to_dict()
        assert data["name"] == "A"
        assert data["superclasses"] == ["B"]
        assert data["methods"][0]["parameters"] == [
            {"name": "X", "type": "int", "default_value": None}
        ]


ACTOR_WITH_REFLECTION = """// Actor with combat stats
UCLASS(Blueprintable)
class MYGAME_API AMyActor : public AActor
{
    GENERATED_BODY()

public:
    UPROPERTY(EditAnywhere, Category = "Combat", meta = (ClampMin = "0"))
    float Health;

    UPROPERTY(VisibleAnywhere) UStaticMeshComponent* Mesh;

    UFUNCTION(BlueprintCallable, Category = "Combat")
    void TakeDamage(float Amount, AActor* Instigator = nullptr);
};
"""

SPECIFIERS = {"Blueprintable", "EditAnywhere", "VisibleAnywhere", "BlueprintCallable", "Category"}


class TestReflectionMacros:
    """Classes decorated with UCLASS/UPROPERTY/UFUNCTION."""

    def test_reflected_class_members(self):
        _, info = extract(ACTOR_WITH_REFLECTION)[0]

        assert info.name == "AMyActor"
        assert info.line == 3
        assert info.superclasses == ["AActor"]
        assert [(p.name, p.type, p.visibility) for p in info.properties] == [
            ("Health", "float", "public"),
            ("Mesh", "UStaticMeshComponent*", "public"),
        ]
        assert [m.name for m in info.methods] == ["TakeDamage"]
        method = info.methods[0]
        assert method.return_type == "void"
        assert [(p.name, p.type, p.default_value) for p in method.parameters] == [
            ("Amount", "float", None),
            ("Instigator", "AActor*", "nullptr"),
        ]

    def test_no_macro_or_specifier_members(self):
        _, info = extract(ACTOR_WITH_REFLECTION)[0]
        names = {p.name for p in info.properties} | {m.name for m in info.methods}
        types = {p.type for p in info.properties} | {m.return_type for m in info.methods}
        assert not names & (UE_MACRO_NAMES | SPECIFIERS)
        assert not types & (UE_MACRO_NAMES | SPECIFIERS)

    def test_comment_above_uclass_attaches(self):
        _, info = extract(ACTOR_WITH_REFLECTION)[0]
        assert info.comments == ["// Actor with combat stats"]

    def test_single_line_reflected_class(self):
        source = (
            "class AMyActor : public AActor { GENERATED_BODY() public: "
            'UPROPERTY(EditAnywhere, Category="Combat") float Health; '
            "UPROPERTY(VisibleAnywhere) UStaticMeshComponent* Mesh; };"
        )
        _, info = extract(source)[0]
        assert [(p.name, p.type) for p in info.properties] == [
            ("Health", "float"),
            ("Mesh", "UStaticMeshComponent*"),
        ]
        assert info.methods == []


class TestMasking:
    """Test blanking of UE macros before parsing."""

    def test_offsets_and_lines_are_preserved(self):
        source = 'UPROPERTY(meta = (DisplayName = "Gesundheit ä)"))\nfloat Health;\n'
        masked = mask_ue_macros(source)
        assert len(masked.encode("utf-8")) == len(source.encode("utf-8"))
        assert masked.count("\n") == source.count("\n")
        assert masked.splitlines()[0].strip() == ""
        assert masked.splitlines()[1] == "float Health;"

    def test_export_tokens_are_blanked(self):
        masked = mask_ue_macros("class ENGINE_API UWorld {};")
        assert "ENGINE_API" not in masked
        assert masked.split() == ["class", "UWorld", "{};"]

    def test_comments_and_strings_are_kept(self):
        source = 'int X; // UPROPERTY(Hidden)\nconst char* S = "GENERATED_BODY()";\n/* UCLASS() */\n'
        assert mask_ue_macros(source) == source

    def test_unbalanced_macro_is_left_alone(self):
        source = "UPROPERTY(EditAnywhere\nint X;\n"
        assert mask_ue_macros(source) == source

    def test_plain_source_is_unchanged(self):
        source = "class A : public B { void M(); };"
        assert mask_ue_macros(source) is source


class TestHelpers:
    """Test naming helpers and query builders."""

    def test_interface_names(self):
        assert is_interface_name("IInterface")
        assert not is_interface_name("Item")
        assert not is_interface_name("UObject")

    def test_ue_macro_calls(self):
        assert is_ue_macro_call("UPROPERTY(EditAnywhere)")
        assert is_ue_macro_call("  GENERATED_BODY()")
        assert not is_ue_macro_call("void Tick();")

    def test_query_lookup(self):
        assert get_query_pattern("CLASS") == QUERY_PATTERNS["CLASS"]
        assert get_query_pattern("NOPE") is None

    def test_reference_query(self):
        assert "type_identifier" in build_reference_query("AActor", "class")
        assert "(identifier)" in build_reference_query("Health", "variable")
        assert "(identifier)" in build_reference_query("Health")
        assert reference_cache_key("AActor", "class") == "class-AActor"
        assert reference_cache_key("Health", None) == "None-Health"
