"""Tests for CodeParsingService parsing tiers and validation."""

from unittest.mock import patch

from specforge.application.code_parsing import CodeParsingService
from specforge.domain.models import Severity


class TestParseCodeBlocks:
    def test_annotated_blocks_take_precedence(self, notifications) -> None:
        service = CodeParsingService(notifications)

        files = service.parse_code_blocks(
            "```typescript:foo.ts\nconst a=1;\n```\n```\nconst b=2;\n```"
        )

        assert files == {"foo.ts": "const a=1;"}

    def test_synthesized_names_in_order(self, notifications) -> None:
        service = CodeParsingService(notifications)

        files = service.parse_code_blocks("```js\nconst a = 1;\n```\n```\nconst b = 2;\n```")

        assert list(files) == ["file1.js", "file2.txt"]

    def test_falls_back_to_any_blocks(self, notifications) -> None:
        service = CodeParsingService(notifications)

        files = service.parse_code_blocks("```c++\nint main() { return 0; }\n```")

        assert files == {"file1.txt": "int main() { return 0; }"}

    def test_falls_back_to_markers(self, notifications) -> None:
        service = CodeParsingService(notifications)

        files = service.parse_code_blocks("Here you go\napp.tsx:\nexport default App;")

        assert files == {"app.tsx": "export default App;"}

    def test_whole_response_fallback(self, notifications) -> None:
        service = CodeParsingService(notifications)

        assert service.parse_code_blocks("no code here") == {"main.txt": "no code here"}

    def test_deterministic(self, notifications) -> None:
        service = CodeParsingService(notifications)
        text = "```ts\na\n```\n```css\nb\n```\n```tsx:x/y.tsx\nc\n```"

        assert service.parse_code_blocks(text) == service.parse_code_blocks(text)

    def test_internal_error_degrades_to_raw_response(self, notifications, notifier) -> None:
        service = CodeParsingService(notifications)

        with patch(
            "specforge.application.code_parsing.EXTRACTION_TIERS",
            (lambda text: 1 / 0,),
        ):
            files = service.parse_code_blocks("raw")

        assert files == {"response.txt": "raw"}
        assert notifier.titles == ["Parsing Error"]
        assert notifier.notifications[0].severity == Severity.ERROR


class TestValidateCode:
    def test_no_files(self, notifications) -> None:
        report = CodeParsingService(notifications).validate_code({})

        assert report.is_valid is False
        assert report.errors

    def test_valid_files(self, notifications) -> None:
        report = CodeParsingService(notifications).validate_code(
            {
                "src/a.ts": "export const a = () => { return [1]; };",
                "package.json": '{"name": "app"}',
                "README.md": "# App",
            }
        )

        assert report.is_valid is True
        assert report.errors == ()

    def test_empty_content(self, notifications) -> None:
        report = CodeParsingService(notifications).validate_code({"a.ts": "  \n"})

        assert report.errors == ("a.ts has empty content.",)

    def test_unbalanced_brackets(self, notifications) -> None:
        report = CodeParsingService(notifications).validate_code(
            {"a.tsx": "function f() { return [1,2; }"}
        )

        assert report.is_valid is False
        assert "a.tsx has unbalanced brackets or parentheses." in report.errors

    def test_invalid_json(self, notifications) -> None:
        report = CodeParsingService(notifications).validate_code({"tsconfig.json": "{,}"})

        assert report.errors == ("tsconfig.json contains invalid JSON.",)

    def test_semicolons_are_a_warning_only(self, notifications) -> None:
        report = CodeParsingService(notifications).validate_code(
            {"a.js": "const a = 1;\nconst b = 2"}
        )

        assert report.is_valid is True
        assert report.warnings == ("a.js has inconsistent semicolon usage.",)

    def test_non_script_files_skip_bracket_check(self, notifications) -> None:
        report = CodeParsingService(notifications).validate_code({"notes.md": "(("})

        assert report.is_valid is True
