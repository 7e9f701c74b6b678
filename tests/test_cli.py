"""Tests for the specforge CLI using click's CliRunner."""

import json
import logging
from collections.abc import Iterator

import pytest
from click.testing import CliRunner

from specforge import __version__
from specforge.cli import main
from specforge.domain.models import GenerationStage, new_artifact
from specforge.infrastructure.llm.mock import MockProvider
from specforge.infrastructure.persistence import ArtifactWriter

CODE = "```typescript:src/App.tsx\nexport const App = () => null;\n```"


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch) -> Iterator[None]:
    for var in (
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "SPECFORGE_DATABASE_SCHEMA_FILE",
        "SPECFORGE_DATABASE_TYPE",
    ):
        monkeypatch.delenv(var, raising=False)
    yield
    # setup_logging binds handlers to the runner's temporary streams
    logger = logging.getLogger("specforge")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def use_providers(monkeypatch):
    """Make the CLI use the given providers instead of configured ones."""

    def install(*providers: MockProvider) -> list:
        created: list = []

        def fake_create(settings):
            created.append(settings)
            return list(providers)

        monkeypatch.setattr("specforge.cli.create_providers", fake_create)
        return created

    return install


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_version(runner) -> None:
    result = runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


class TestComponentCommand:
    def test_writes_generated_files(self, runner, use_providers, tmp_path) -> None:
        use_providers(MockProvider(["const a = 1;", "const b = 2;", CODE]))
        spec = tmp_path / "spec.md"
        spec.write_text("A component that renders nothing", encoding="utf-8")
        out = tmp_path / "out"

        result = runner.invoke(
            main, ["component", str(spec), "--constraint", "Use hooks", "-o", str(out)]
        )

        assert result.exit_code == 0, result.output
        assert "src/App.tsx" in result.output
        assert "Wrote 1 file(s)" in result.output
        assert (out / "src/App.tsx").read_text(encoding="utf-8") == (
            "export const App = () => null;"
        )
        assert (out / "artifact.json").exists()

    def test_no_providers_exits_nonzero(self, runner, use_providers, tmp_path) -> None:
        use_providers()
        spec = tmp_path / "spec.md"
        spec.write_text("anything", encoding="utf-8")

        result = runner.invoke(main, ["component", str(spec)])

        assert result.exit_code == 1
        assert "No Providers Available" in result.output
        assert "No files were generated" in result.output

    def test_invalid_settings_file(self, runner, use_providers, tmp_path) -> None:
        use_providers()
        spec = tmp_path / "spec.md"
        spec.write_text("anything", encoding="utf-8")
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({"providers": [{"type": "cohere"}]}), encoding="utf-8")

        result = runner.invoke(main, ["component", str(spec), "--config", str(config)])

        assert result.exit_code == 1
        assert "Invalid settings" in result.output


class TestArchitectureCommand:
    def test_generates_each_listed_file(self, runner, use_providers, tmp_path) -> None:
        provider = MockProvider(
            [
                "```ts:src/types.ts\nexport type Id = string;\n```",
                "```ts:src/main.ts\nimport { Id } from './types';\n```",
            ]
        )
        use_providers(provider)
        arch = tmp_path / "tree.txt"
        arch.write_text("├── src/main.ts\n└── src/types.ts\n", encoding="utf-8")
        out = tmp_path / "out"

        result = runner.invoke(
            main, ["architecture", str(arch), "--constraint", "strict", "-o", str(out)]
        )

        assert result.exit_code == 0, result.output
        assert (out / "src/types.ts").exists()
        assert (out / "src/main.ts").exists()
        assert provider.blueprints[0].constraints["filePath"] == "src/types.ts"
        assert provider.blueprints[0].constraints["additionalConstraints"] == ["strict"]

    def test_database_type_from_settings(self, runner, use_providers, tmp_path) -> None:
        provider = MockProvider(["```ts:src/a.ts\nconst a = 1;\n```"])
        use_providers(provider)
        arch = tmp_path / "tree.txt"
        arch.write_text("src/a.ts", encoding="utf-8")
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({"database_type": "drizzle"}), encoding="utf-8")

        result = runner.invoke(main, ["architecture", str(arch), "--config", str(config)])

        assert result.exit_code == 0, result.output
        assert provider.blueprints[0].constraints["databaseType"] == "drizzle"

    def test_generates_on_top_of_base(self, runner, use_providers, tmp_path) -> None:
        out = tmp_path / "out"
        ArtifactWriter(out).write(
            new_artifact(
                {"src/keep.ts": "const keep = 0;", "src/a.ts": "const a = 0;"},
                "OpenAIProvider",
                GenerationStage.IMPLEMENTATION,
            )
        )
        use_providers(MockProvider(["```ts:src/a.ts\nconst a = 1;\n```"]))
        arch = tmp_path / "tree.txt"
        arch.write_text("src/a.ts", encoding="utf-8")

        result = runner.invoke(
            main, ["architecture", str(arch), "--base", str(out), "-o", str(out)]
        )

        assert result.exit_code == 0, result.output
        assert (out / "src/a.ts").read_text(encoding="utf-8") == "const a = 1;"
        assert (out / "src/keep.ts").read_text(encoding="utf-8") == "const keep = 0;"
        manifest = json.loads((out / "artifact.json").read_text(encoding="utf-8"))
        assert manifest["files"] == ["src/a.ts", "src/keep.ts"]
        assert manifest["provider_used"] == "MockProvider"

    def test_base_without_manifest_fails_before_generating(
        self, runner, use_providers, tmp_path
    ) -> None:
        provider = MockProvider(["```ts:src/a.ts\nconst a = 1;\n```"])
        use_providers(provider)
        arch = tmp_path / "tree.txt"
        arch.write_text("src/a.ts", encoding="utf-8")
        empty = tmp_path / "empty"
        empty.mkdir()

        result = runner.invoke(main, ["architecture", str(arch), "--base", str(empty)])

        assert result.exit_code == 1
        assert "No readable artifact" in result.output
        assert provider.call_count == 0


class TestPipelineCommand:
    def _pipeline_file(self, tmp_path, **extra) -> str:
        path = tmp_path / "pipeline.json"
        path.write_text(
            json.dumps(
                {
                    "phases": [
                        {"name": "design", "prompt_template": "Design {userInput}"},
                        {
                            "name": "code",
                            "prompt_template": "Implement {design}",
                            "retry_count": 0,
                        },
                    ],
                    **extra,
                }
            ),
            encoding="utf-8",
        )
        return str(path)

    def test_runs_phases_and_writes_last_output(
        self, runner, use_providers, tmp_path
    ) -> None:
        provider = MockProvider(["const design = 1;", CODE])
        use_providers(provider)
        out = tmp_path / "out"

        result = runner.invoke(
            main,
            [
                "pipeline",
                self._pipeline_file(tmp_path),
                "--context",
                "userInput=a todo list",
                "-o",
                str(out),
            ],
        )

        assert result.exit_code == 0, result.output
        assert provider.blueprints[0].context == "Design a todo list"
        assert provider.blueprints[1].context == "Implement const design = 1;"
        assert "design" in result.output
        assert (out / "src/App.tsx").exists()

    def test_bad_context_pair(self, runner, use_providers, tmp_path) -> None:
        use_providers()

        result = runner.invoke(
            main, ["pipeline", self._pipeline_file(tmp_path), "--context", "novalue"]
        )

        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_failed_phase_exits_nonzero(self, runner, use_providers, tmp_path) -> None:
        use_providers(MockProvider(["const design = 1;", "bad"]))

        result = runner.invoke(main, ["pipeline", self._pipeline_file(tmp_path)])

        assert result.exit_code == 1
        assert "invalid response format" in result.output
