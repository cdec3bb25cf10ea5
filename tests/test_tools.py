"""Tests for the MCP tool functions."""

import pytest

from unreal_code_analyzer.errors import ClassNotFoundError, NotInitializedError
from unreal_code_analyzer.tools import cpp


class TestCppTools:
    """Smoke tests over the global analyzer."""

    @pytest.mark.asyncio
    async def test_tools_require_initialization(self, global_analyzer):
        with pytest.raises(NotInitializedError):
            await cpp.analyze_class("AActor")

    @pytest.mark.asyncio
    async def test_engine_workflow(self, global_analyzer, engine_root):
        result = await cpp.set_unreal_path(str(engine_root))
        assert result["success"] is True
        assert result["cached_classes"] == 2

        actor = await cpp.analyze_class("AActor")
        assert actor["name"] == "AActor"
        assert actor["interfaces"] == ["INavAgentInterface"]

        hierarchy = await cpp.find_class_hierarchy("AActor")
        assert hierarchy["superclasses"][0]["class"] == "UObject"

        refs = await cpp.find_references("UObject", "class")
        assert refs["count"] == 2

        search = await cpp.search_code("BeginPlay", file_pattern="*.h")
        assert search["count"] == 1
        assert search["matches"][0]["line"] == 4

        subsystem = await cpp.analyze_subsystem("Rendering")
        assert subsystem["main_classes"] == ["FRenderResource"]

        api = await cpp.query_api("actor")
        assert api["results"][0]["class"] == "AActor"

        with pytest.raises(ClassNotFoundError):
            await cpp.analyze_class("ANope")

    @pytest.mark.asyncio
    async def test_custom_codebase_and_patterns(self, global_analyzer, make_codebase):
        root = make_codebase(
            {"Gun.h": "UFUNCTION(BlueprintCallable)\nvoid Fire();\nclass Gun {};\n"}
        )
        result = await cpp.set_custom_codebase(str(root))
        assert result["success"] is True

        patterns = await cpp.detect_patterns(str(root / "Gun.h"))
        assert patterns["count"] == 1
        assert patterns["patterns"][0]["pattern"] == "UFUNCTION Macro"

    @pytest.mark.asyncio
    async def test_best_practices_tool(self, global_analyzer):
        result = await cpp.get_best_practices("UFUNCTION")
        assert result["concept"] == "UFUNCTION"
        assert result["examples"]
