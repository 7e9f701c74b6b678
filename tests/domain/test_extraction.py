"""Tests for fenced-block scanning and the extraction tiers."""

import pytest

from specforge.domain.extraction import (
    BlockAnnotation,
    extract_annotated_blocks,
    extract_any_blocks,
    extract_marker_sections,
    parse_annotation,
    scan_fenced_blocks,
    synthesize_filename,
)


class TestScanFencedBlocks:
    def test_returns_blocks_in_order(self) -> None:
        text = "intro\n```ts\nconst a = 1;\n```\ntext\n```\nb\n```"

        blocks = scan_fenced_blocks(text)

        assert [b.info for b in blocks] == ["ts", ""]
        assert [b.body for b in blocks] == ["const a = 1;", "b"]

    def test_no_blocks(self) -> None:
        assert scan_fenced_blocks("just prose") == []

    def test_unterminated_block_ignored(self) -> None:
        assert scan_fenced_blocks("```ts\nconst a = 1;") == []


class TestParseAnnotation:
    @pytest.mark.parametrize(
        "info,expected",
        [
            ("", BlockAnnotation()),
            ("typescript", BlockAnnotation(language="typescript")),
            (
                "typescript:src/app.ts",
                BlockAnnotation(language="typescript", filename="src/app.ts"),
            ),
            ("tsx src/App.tsx", BlockAnnotation(language="tsx", filename="src/App.tsx")),
            ("package.json", BlockAnnotation(filename="package.json")),
        ],
    )
    def test_accepted_forms(self, info: str, expected: BlockAnnotation) -> None:
        assert parse_annotation(info) == expected

    @pytest.mark.parametrize("info", ["c++", "python run this", "lang: spaced"])
    def test_rejected_forms(self, info: str) -> None:
        assert parse_annotation(info) is None


class TestSynthesizeFilename:
    def test_known_language(self) -> None:
        assert synthesize_filename("typescript", 1) == "file1.ts"

    def test_language_is_case_insensitive(self) -> None:
        assert synthesize_filename("JSON", 3) == "file3.json"

    def test_unknown_language_maps_to_txt(self) -> None:
        assert synthesize_filename("rust", 2) == "file2.txt"


class TestAnnotatedBlocks:
    def test_named_block_wins_over_unnamed(self) -> None:
        text = "```typescript:foo.ts\nconst a=1;\n```\n```\nconst b=2;\n```"

        assert extract_annotated_blocks(text) == {"foo.ts": "const a=1;"}

    def test_unnamed_blocks_numbered_in_order(self) -> None:
        text = "```js\nconst a = 1;\n```\n```\nconst b = 2;\n```"

        files = extract_annotated_blocks(text)

        assert list(files) == ["file1.js", "file2.txt"]
        assert files["file2.txt"] == "const b = 2;"

    def test_paths_with_directories(self) -> None:
        text = "```tsx:src/components/Button.tsx\nexport {}\n```"

        assert "src/components/Button.tsx" in extract_annotated_blocks(text)

    def test_same_name_last_writer_wins(self) -> None:
        text = "```ts:a.ts\nfirst\n```\n```ts:a.ts\nsecond\n```"

        assert extract_annotated_blocks(text) == {"a.ts": "second"}

    def test_unaccepted_info_yields_nothing(self) -> None:
        assert extract_annotated_blocks("```c++\nint main() {}\n```") == {}


class TestAnyBlocks:
    def test_every_block_becomes_txt(self) -> None:
        text = "```c++\nint a;\n```\n```python main.py extra\nx = 1\n```"

        assert extract_any_blocks(text) == {"file1.txt": "int a;", "file2.txt": "x = 1"}


class TestMarkerSections:
    def test_sections_split_on_markers(self) -> None:
        text = "index.ts:\nconst a = 1;\nconst b = 2;\nstyles.css:\nbody {}\n"

        files = extract_marker_sections(text)

        assert files["index.ts"] == "const a = 1;\nconst b = 2;"
        assert files["styles.css"] == "body {}\n"

    def test_marker_without_content_skipped(self) -> None:
        text = "one.ts:\ntwo.ts:\nconst x = 1;"

        assert extract_marker_sections(text) == {"two.ts": "const x = 1;"}

    def test_lines_before_first_marker_ignored(self) -> None:
        assert extract_marker_sections("preamble\nmain.js:\nrun();") == {
            "main.js": "run();"
        }

    def test_unknown_extension_is_not_a_marker(self) -> None:
        assert extract_marker_sections("main.py:\nprint(1)") == {}
