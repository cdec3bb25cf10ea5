"""Shared fixtures: small C++ source trees on disk and fresh analyzers."""

from pathlib import Path

import pytest

from unreal_code_analyzer.config import Config
from unreal_code_analyzer.cpp_analyzer import CppAnalyzer, set_analyzer

OBJECT_H = """\
// Low level object base
class UObjectBase {
public:
    int InternalIndex;
};

class UObject : public UObjectBase {
public:
    bool IsValidLowLevel();
};
"""

ACTOR_H = """\
/** Actor is the base class for an Object that can be placed in a level. */
class AActor : public UObject, public INavAgentInterface {
public:
    virtual void BeginPlay() override;
    void SetLifeSpan(float InLifespan, int Priority = 0);
    float InitialLifeSpan;
protected:
    int* OwnerIndex;
private:
    bool bHidden;
};
"""

RENDER_RESOURCE_H = """\
class FRenderResource {
public:
    virtual void InitResource();
};
"""

RENDER_RESOURCE_CPP = """\
void FRenderResource::InitResource() {
}
"""


def write_sources(root: Path, files: dict[str, str]) -> Path:
    """Write `{relative path: content}` under root and return root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def engine_root(tmp_path: Path) -> Path:
    """A miniature engine checkout."""
    return write_sources(
        tmp_path / "UE5",
        {
            "Engine/Source/Runtime/CoreUObject/Public/UObject/Object.h": OBJECT_H,
            "Engine/Source/Runtime/Engine/Classes/GameFramework/Actor.h": ACTOR_H,
            "Engine/Source/Runtime/RenderCore/Public/RenderResource.h": RENDER_RESOURCE_H,
            "Engine/Source/Runtime/RenderCore/Private/RenderResource.cpp": RENDER_RESOURCE_CPP,
        },
    )


@pytest.fixture
def make_codebase(tmp_path: Path):
    """Factory writing a custom codebase from a file mapping."""
    counter = iter(range(1000))

    def _make(files: dict[str, str]) -> Path:
        return write_sources(tmp_path / f"codebase{next(counter)}", files)

    return _make


@pytest.fixture
def analyzer() -> CppAnalyzer:
    """A fresh analyzer with default sizes, independent of the environment."""
    return CppAnalyzer(
        Config(
            cpp_source_path=None,
            unreal_engine_path=None,
            cache_max_size=1000,
            scan_batch_size=10,
            search_batch_size=20,
            log_level="INFO",
        )
    )


@pytest.fixture
def global_analyzer(analyzer: CppAnalyzer):
    """Install the fresh analyzer as the global instance used by the tools."""
    set_analyzer(analyzer)
    yield analyzer
    set_analyzer(None)
