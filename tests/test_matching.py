"""Tests for matching candidate paths against resolved output patterns."""

from __future__ import annotations

from outparams import FileCheckpointParam, OutputMatcher
from outparams.file_param import FileMatchOptions


def test_literal_pattern() -> None:
    matcher = OutputMatcher(["output.txt"])
    assert matcher.matches("output.txt")
    assert not matcher.matches("other.txt")
    assert not matcher.matches("sub/output.txt")


def test_wildcard_stays_in_one_component() -> None:
    matcher = OutputMatcher(["*.txt"])
    assert matcher.matches("a.txt")
    assert not matcher.matches("sub/a.txt")
    assert not matcher.matches("a.csv")


def test_wildcard_does_not_match_inside_matched_dir() -> None:
    matcher = OutputMatcher(["out*"])
    assert matcher.matches("out", is_dir=True)
    assert not matcher.matches("out/a.txt")


def test_double_star_crosses_dirs() -> None:
    matcher = OutputMatcher(["results/**/*.vcf"])
    assert matcher.matches("results/a.vcf")
    assert matcher.matches("results/x/y/b.vcf")
    assert not matcher.matches("other/b.vcf")


def test_double_star_defaults_to_files() -> None:
    matcher = OutputMatcher(["data/**"])
    assert matcher.matches("data/a/b.txt")
    assert not matcher.matches("data/a", is_dir=True)


def test_hidden_files_excluded_by_default() -> None:
    matcher = OutputMatcher(["*"])
    assert matcher.matches("visible.txt")
    assert not matcher.matches(".hidden")


def test_hidden_files_included() -> None:
    matcher = OutputMatcher(["*"], FileMatchOptions(include_hidden=True))
    assert matcher.matches(".hidden")


def test_dot_pattern_matches_hidden() -> None:
    matcher = OutputMatcher([".log*"])
    assert matcher.matches(".log1")


def test_literal_hidden_name_always_matches() -> None:
    matcher = OutputMatcher([".command.out"])
    assert matcher.matches(".command.out")


def test_escaped_literal() -> None:
    matcher = OutputMatcher(["sample\\[1\\].txt"])
    assert matcher.matches("sample[1].txt")
    assert not matcher.matches("sample1.txt")


def test_literal_with_trailing_slash_matches_dir_or_file() -> None:
    matcher = OutputMatcher(["results/"])
    assert matcher.matches("results", is_dir=True)
    assert matcher.matches("results")
    assert not matcher.matches("results/a.txt")


def test_leading_bang_is_not_negation() -> None:
    matcher = OutputMatcher(["!*.txt"])
    assert matcher.matches("!a.txt")
    assert not matcher.matches("a.txt")


def test_path_type_filter() -> None:
    dirs_only = OutputMatcher(["out*"], FileMatchOptions(path_type="dir"))
    assert dirs_only.matches("out1", is_dir=True)
    assert not dirs_only.matches("out2")
    files_only = OutputMatcher(["out*"], FileMatchOptions(path_type="file"))
    assert files_only.matches("out2")
    assert not files_only.matches("out1", is_dir=True)


def test_max_depth() -> None:
    matcher = OutputMatcher(["**/*.txt"], FileMatchOptions(max_depth=1))
    assert matcher.matches("a.txt")
    assert matcher.matches("x/a.txt")
    assert not matcher.matches("x/y/a.txt")


def test_inputs_excluded_unless_included() -> None:
    matcher = OutputMatcher(["*.fq"], inputs={"reads.fq"})
    assert not matcher.matches("reads.fq")
    assert matcher.matches("trimmed.fq")
    including = OutputMatcher(["*.fq"], FileMatchOptions(include_inputs=True), inputs={"reads.fq"})
    assert including.matches("reads.fq")


def test_filter_preserves_order() -> None:
    matcher = OutputMatcher(["*.txt", "logs"])
    paths = ["b.txt", "logs", "c.csv", "a.txt"]
    assert matcher.filter(paths, dirs={"logs"}) == ["b.txt", "logs", "a.txt"]


def test_matcher_from_resolved_param() -> None:
    param = FileCheckpointParam().bind("/work/ab12/*.bam:/work/ab12/summary.txt").hidden(True)
    patterns = param.get_file_patterns({}, "/work/ab12")
    matcher = OutputMatcher(patterns, param.options)
    assert matcher.filter([".x.bam", "a.bam", "summary.txt", "notes.md"]) == [
        ".x.bam",
        "a.bam",
        "summary.txt",
    ]
