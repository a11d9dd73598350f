"""Tests for the Prettier and Biome adapters with the subprocess layer mocked."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from rightdown.core.compiler import biome_config
from rightdown.core.config import RightdownConfig
from rightdown.core.result import ErrorCode
from rightdown.formatters import BiomeFormatter, FormatterRegistry, PrettierFormatter, ProcessOutput, run_tool
from rightdown.formatters.base import match_trailing_newline, parse_version
from rightdown.formatters.biome import build_biome_config

_WHICH = "rightdown.formatters.base.shutil.which"
_RUN = "rightdown.formatters.base.run_tool"


def _ok(stdout: str) -> ProcessOutput:
    return ProcessOutput(returncode=0, stdout=stdout, stderr="")


class TestHelpers:
    def test_parse_version(self) -> None:
        assert parse_version("3.3.3\n") == "3.3.3"
        assert parse_version("Version: 1.9.4\n") == "1.9.4"
        assert parse_version("dev\n") == "dev"

    def test_match_trailing_newline(self) -> None:
        assert match_trailing_newline("a", "a;\n") == "a;"
        assert match_trailing_newline("a\n", "a;\n") == "a;\n"

    @pytest.mark.asyncio
    async def test_run_tool_pipes_stdin(self) -> None:
        output = await run_tool([sys.executable, "-c", "import sys; sys.stdout.write(sys.stdin.read().upper())"], "abc")
        assert output == ProcessOutput(returncode=0, stdout="ABC", stderr="")


class TestAvailability:
    @pytest.mark.asyncio
    async def test_not_installed_is_not_an_error(self) -> None:
        with patch(_WHICH, return_value=None):
            result = await PrettierFormatter().is_available()
        assert result.success
        assert result.data is False

    @pytest.mark.asyncio
    async def test_installed_tool_is_resolved_once(self) -> None:
        formatter = PrettierFormatter()
        run = AsyncMock(return_value=_ok("3.3.3\n"))
        with patch(_WHICH, return_value="/usr/bin/prettier"), patch(_RUN, run):
            available = await formatter.is_available()
            version = await formatter.get_version()

        assert available.success and available.data is True
        assert version.success and version.data == "3.3.3"
        run.assert_awaited_once_with(["/usr/bin/prettier", "--version"])

    @pytest.mark.asyncio
    async def test_broken_install_is_an_error(self) -> None:
        run = AsyncMock(return_value=ProcessOutput(returncode=1, stdout="", stderr="Error: Cannot find module\n"))
        with patch(_WHICH, return_value="/usr/bin/biome"), patch(_RUN, run):
            result = await BiomeFormatter().is_available()

        assert not result.success
        assert result.error.code == ErrorCode.INTERNAL_ERROR
        assert "Cannot find module" in result.error.message

    @pytest.mark.asyncio
    async def test_version_of_missing_tool(self) -> None:
        with patch(_WHICH, return_value=None):
            result = await BiomeFormatter().get_version()
        assert not result.success
        assert result.error.code == ErrorCode.FORMATTER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_shutdown_drops_cached_handle(self) -> None:
        formatter = PrettierFormatter()
        run = AsyncMock(return_value=_ok("3.3.3\n"))
        with patch(_WHICH, return_value="/usr/bin/prettier"), patch(_RUN, run):
            await formatter.is_available()
            await formatter.shutdown()
            await formatter.is_available()
        assert run.await_count == 2


class TestPrettierFormat:
    @pytest.mark.asyncio
    async def test_unsupported_language(self) -> None:
        with patch(_WHICH) as which:
            result = await PrettierFormatter().format("fn main() {}", "rust")
        assert not result.success
        assert result.error.code == ErrorCode.FORMATTER_FAILED
        assert result.error.details == {"language": "rust"}
        which.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_tool(self) -> None:
        with patch(_WHICH, return_value=None):
            result = await PrettierFormatter().format("const x=1", "javascript")
        assert not result.success
        assert result.error.code == ErrorCode.FORMATTER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_formats_through_stdin(self) -> None:
        run = AsyncMock(side_effect=[_ok("3.3.3\n"), _ok("const x = 1;\n")])
        with patch(_WHICH, return_value="/usr/bin/prettier"), patch(_RUN, run):
            result = await PrettierFormatter().format("const x=1", "typescript")

        assert result.success
        assert result.data.formatted == "const x = 1;"
        assert result.data.did_change is True
        argv = run.await_args_list[1].args[0]
        assert argv == ["/usr/bin/prettier", "--stdin-filepath", "snippet.ts", "--parser", "typescript"]
        assert run.await_args_list[1].kwargs == {"stdin": "const x=1"}

    @pytest.mark.asyncio
    async def test_unchanged_code(self) -> None:
        run = AsyncMock(side_effect=[_ok("3.3.3\n"), _ok('{ "a": 1 }\n')])
        with patch(_WHICH, return_value="/usr/bin/prettier"), patch(_RUN, run):
            result = await PrettierFormatter().format('{ "a": 1 }', "json")

        assert result.success
        assert result.data.did_change is False

    @pytest.mark.asyncio
    async def test_options_go_through_temp_config(self) -> None:
        seen: dict[str, str] = {}

        async def fake_run(argv: list[str], stdin: str | None = None) -> ProcessOutput:
            if "--version" in argv:
                return _ok("3.3.3\n")
            config_path = Path(argv[argv.index("--config") + 1])
            seen["path"] = str(config_path)
            seen["content"] = config_path.read_text(encoding="utf-8")
            return _ok("const x = 1\n")

        with patch(_WHICH, return_value="/usr/bin/prettier"), patch(_RUN, side_effect=fake_run):
            result = await PrettierFormatter().format("const x=1", "javascript", {"semi": False})

        assert result.success
        assert seen["content"] == '{"semi": false}'
        assert not Path(seen["path"]).exists()

    @pytest.mark.asyncio
    async def test_syntax_error(self) -> None:
        failed = ProcessOutput(returncode=2, stdout="", stderr="[error] stdin: SyntaxError: Unexpected token (1:7)\n")
        run = AsyncMock(side_effect=[_ok("3.3.3\n"), failed])
        with patch(_WHICH, return_value="/usr/bin/prettier"), patch(_RUN, run):
            result = await PrettierFormatter().format("const = ;", "javascript")

        assert not result.success
        assert result.error.code == ErrorCode.FORMATTER_FAILED
        assert "Unexpected token" in result.error.message
        assert result.error.details is not None
        assert result.error.details["language"] == "javascript"
        assert result.error.details["parser"] == "babel"

    def test_supported_languages(self) -> None:
        languages = PrettierFormatter().get_supported_languages()
        assert "javascript" in languages
        assert "yaml" in languages
        assert "rust" not in languages


class TestBiomeFormat:
    def test_build_biome_config(self) -> None:
        assert build_biome_config({"indentStyle": "space", "quoteStyle": "single", "unknown": 1}) == {
            "formatter": {"enabled": True, "indentStyle": "space"},
            "javascript": {"formatter": {"quoteStyle": "single"}},
        }

    def test_build_biome_config_matches_compiled_overrides(self) -> None:
        options = {"lineWidth": 100, "semicolons": "asNeeded", "trailingComma": "none"}
        compiled = biome_config(
            RightdownConfig.model_validate(
                {"formatters": {"default": "biome"}, "formatterOptions": {"biome": options}}
            )
        )
        built = build_biome_config(options)

        assert compiled is not None
        assert built["javascript"]["formatter"] == {"semicolons": "asNeeded", "trailingComma": "none"}
        for key, value in built["javascript"]["formatter"].items():
            assert compiled["javascript"]["formatter"][key] == value
        assert compiled["formatter"]["lineWidth"] == built["formatter"]["lineWidth"] == 100

    @pytest.mark.asyncio
    async def test_formats_through_stdin(self) -> None:
        run = AsyncMock(side_effect=[_ok("Version: 1.9.4\n"), _ok('{ "a": 1 }\n')])
        with patch(_WHICH, return_value="/usr/bin/biome"), patch(_RUN, run):
            result = await BiomeFormatter().format('{"a":1}', "json")

        assert result.success
        assert result.data.formatted == '{ "a": 1 }'
        argv = run.await_args_list[1].args[0]
        assert argv == ["/usr/bin/biome", "format", "--stdin-file-path=file.json"]

    @pytest.mark.asyncio
    async def test_options_use_config_directory(self) -> None:
        seen: dict[str, str] = {}

        async def fake_run(argv: list[str], stdin: str | None = None) -> ProcessOutput:
            if "--version" in argv:
                return _ok("Version: 1.9.4\n")
            config_dir = Path(argv[-1].split("=", 1)[1])
            seen["dir"] = str(config_dir)
            seen["content"] = (config_dir / "biome.json").read_text(encoding="utf-8")
            return _ok("const x = 1;\n")

        with patch(_WHICH, return_value="/usr/bin/biome"), patch(_RUN, side_effect=fake_run):
            result = await BiomeFormatter().format("const x=1", "typescript", {"lineWidth": 100})

        assert result.success
        assert '"lineWidth": 100' in seen["content"]
        assert not Path(seen["dir"]).exists()

    @pytest.mark.asyncio
    async def test_tsx_uses_tsx_file_path(self) -> None:
        run = AsyncMock(side_effect=[_ok("Version: 1.9.4\n"), _ok("const a = <A />;\n")])
        with patch(_WHICH, return_value="/usr/bin/biome"), patch(_RUN, run):
            result = await BiomeFormatter().format("const a = <A />", "tsx")

        assert result.success
        argv = run.await_args_list[1].args[0]
        assert argv == ["/usr/bin/biome", "format", "--stdin-file-path=file.tsx"]

    @pytest.mark.asyncio
    async def test_css_is_unsupported(self) -> None:
        result = await BiomeFormatter().format("a{}", "css")
        assert not result.success
        assert result.error.code == ErrorCode.FORMATTER_FAILED


class TestRegistry:
    @pytest.mark.asyncio
    async def test_init_keeps_available_formatters(self, make_formatter) -> None:
        missing = PrettierFormatter()
        available = make_formatter(name="mock")
        registry = FormatterRegistry([missing, available])

        with patch(_WHICH, return_value=None):
            status = await registry.init()

        assert status == {"prettier": False, "mock": True}
        assert list(registry) == ["mock"]
        assert registry["mock"] is available
        assert set(registry.registered) == {"prettier", "mock"}

    @pytest.mark.asyncio
    async def test_shutdown_reaches_every_formatter(self, make_formatter) -> None:
        first, second = make_formatter(name="a"), make_formatter(name="b")
        registry = FormatterRegistry([first, second])
        await registry.shutdown()
        assert first.shut_down and second.shut_down
