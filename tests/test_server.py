"""Tests for server startup helpers."""

from unreal_code_analyzer import server
from unreal_code_analyzer.config import Config, reset_config, set_config


class TestServerStartup:
    """Test CLI parsing and environment initialization."""

    def test_arg_parser_defaults(self):
        args = server._build_arg_parser().parse_args([])
        assert args.transport == "stdio"
        assert args.mcp_port == 8000
        assert args.no_init is False

    def test_initialize_from_environment(self, global_analyzer, engine_root):
        set_config(Config(unreal_engine_path=str(engine_root), cpp_source_path=None))
        try:
            assert server.initialize_from_environment() is True
        finally:
            reset_config()
        assert global_analyzer.is_initialized()
        assert "UObject" in global_analyzer._class_cache

    def test_initialize_reports_bad_paths(self, global_analyzer, tmp_path, capsys):
        set_config(Config(unreal_engine_path=str(tmp_path / "missing"), cpp_source_path=None))
        try:
            assert server.initialize_from_environment() is False
        finally:
            reset_config()
        assert "Failed to init engine source path" in capsys.readouterr().err

    def test_print_config(self, monkeypatch, capsys):
        monkeypatch.setenv("ANALYZER_CACHE_MAX_SIZE", "77")
        # main() writes CLI overrides to os.environ; register them for restore
        monkeypatch.setenv("UNREAL_ENGINE_PATH", "")
        try:
            server.main(["--print-config", "--unreal-engine-path", "/opt/UE5"])
        finally:
            reset_config()
        out = capsys.readouterr().out
        assert "cache_max_size: 77" in out
        assert "unreal_engine_path: /opt/UE5" in out
