"""
Tests for the command-line entry point and settings loading.

Tests cover:
- load_settings() defaults, overrides and unknown keys
- --dir mode end to end (output table, quarantine, worker message)
- --input mode merging and re-normalizing vocabularies
- Exit codes for bad usage, bad settings and fatal errors
"""

import sys
from pathlib import Path

import pytest
import yaml

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from corpus_vocab.config import DEFAULT_SETTINGS, load_settings
from corpus_vocab.main import main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run each CLI test from an empty directory with default settings."""
    monkeypatch.chdir(tmp_path)
    settings = tmp_path / "settings.yaml"
    settings.write_text("vocab: {}\n", encoding='utf-8')
    return tmp_path


class TestLoadSettings:

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "absent.yaml") == DEFAULT_SETTINGS

    def test_values_override_defaults(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("vocab:\n  lowercase: true\n  sort: alpha\n", encoding='utf-8')
        settings = load_settings(path)
        assert settings['lowercase'] is True
        assert settings['sort'] == "alpha"
        assert settings['filter_punct'] == DEFAULT_SETTINGS['filter_punct']

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("vocab:\n  colour: blue\nother: 1\n", encoding='utf-8')
        assert load_settings(path) == DEFAULT_SETTINGS

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding='utf-8')
        assert load_settings(path) == DEFAULT_SETTINGS

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("vocab: [unclosed\n", encoding='utf-8')
        with pytest.raises(yaml.YAMLError):
            load_settings(path)

    def test_section_must_be_mapping(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("vocab: 3\n", encoding='utf-8')
        with pytest.raises(ValueError):
            load_settings(path)

    @pytest.mark.parametrize("line", [
        'lowercase: "false"',
        "filter_punct: 1",
        'max_workers: "4"',
        "max_workers: true",
        "max_workers: 2.5",
        "output: 42",
        "quarantine_dir: [a, b]",
        "sort: 3",
    ])
    def test_wrong_value_types_rejected(self, tmp_path, line):
        path = tmp_path / "settings.yaml"
        path.write_text(f"vocab:\n  {line}\n", encoding='utf-8')
        with pytest.raises(ValueError, match="invalid value"):
            load_settings(path)

    def test_well_typed_values_accepted(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "vocab:\n  lowercase: false\n  filter_punct: true\n  max_workers: 4\n"
            "  sort: null\n  output: out.txt\n  quarantine_dir: q\n",
            encoding='utf-8',
        )
        settings = load_settings(path)
        assert settings['lowercase'] is False
        assert settings['filter_punct'] is True
        assert settings['max_workers'] == 4
        assert settings['sort'] is None

    def test_defaults_not_mutated(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("vocab:\n  output: elsewhere.txt\n", encoding='utf-8')
        load_settings(path)
        assert DEFAULT_SETTINGS['output'] == "vocab_processed.txt"


class TestDirectoryMode:

    def test_builds_alpha_sorted_vocabulary(self, workdir, capsys):
        corpus = workdir / "docs"
        corpus.mkdir()
        (corpus / "a.txt").write_text("Hello, world!", encoding='utf-8')
        (corpus / "b.txt").write_text("world peace.", encoding='utf-8')

        code = main([
            "--dir", str(corpus), "--output", "vocab.txt", "--sort", "alpha",
            "--lowercase", "--filter-punct", "--max-workers", "2",
            "--config", "settings.yaml",
        ])

        assert code == 0
        assert (workdir / "vocab.txt").read_text(encoding='utf-8') == "hello 1\npeace 1\nworld 2\n"
        out = capsys.readouterr().out
        assert "Using 2 workers" in out
        assert "Progress: 2/2 files processed (100.00%)" in out
        assert "Vocabulary saved to vocab.txt" in out

    def test_defaults_to_cpu_count_workers(self, workdir, capsys):
        import os

        corpus = workdir / "docs"
        corpus.mkdir()
        code = main(["--dir", str(corpus), "--config", "settings.yaml"])

        assert code == 0
        assert f"Using {os.cpu_count() or 1} workers" in capsys.readouterr().out
        assert (workdir / "vocab_processed.txt").exists()
        assert (workdir / "vocab_errors" / "vocab_errors.log").exists()

    def test_failed_file_is_reported_not_fatal(self, workdir, capsys):
        corpus = workdir / "docs"
        corpus.mkdir()
        (corpus / "ok.txt").write_text("fine", encoding='utf-8')
        (corpus / "bad.txt.gz").write_bytes(b"not gzip")

        code = main([
            "--dir", str(corpus), "--quarantine-dir", "q",
            "--output", "v.txt", "--config", "settings.yaml",
        ])

        assert code == 0
        assert "1 file(s) failed" in capsys.readouterr().err
        assert (workdir / "q" / "bad.txt.gz").exists()
        assert (workdir / "v.txt").read_text(encoding='utf-8') == "fine 1\n"

    def test_missing_directory_exits_with_error(self, workdir, capsys):
        code = main(["--dir", "no_such_dir", "--config", "settings.yaml"])
        assert code == 1
        assert "Error: error reading directory" in capsys.readouterr().err

    def test_settings_file_supplies_options(self, workdir):
        corpus = workdir / "docs"
        corpus.mkdir()
        (corpus / "a.txt").write_text("B a A!", encoding='utf-8')
        (workdir / "custom.yaml").write_text(
            "vocab:\n  lowercase: true\n  filter_punct: true\n  sort: freq\n  output: out.txt\n",
            encoding='utf-8',
        )

        assert main(["--dir", str(corpus), "--config", "custom.yaml"]) == 0
        assert (workdir / "out.txt").read_text(encoding='utf-8') == "a 2\nb 1\n"


class TestPostProcessMode:

    def test_merges_and_normalizes(self, workdir, capsys):
        (workdir / "va.txt").write_text("Cat 3\n! 4\n", encoding='utf-8')
        (workdir / "vb.txt").write_text("cat 2\ndog 1\n", encoding='utf-8')

        code = main([
            "--input", "va.txt", "vb.txt", "--lowercase", "--filter-punct",
            "--sort", "freq", "--output", "merged.txt", "--config", "settings.yaml",
        ])

        assert code == 0
        assert (workdir / "merged.txt").read_text(encoding='utf-8') == "cat 5\ndog 1\n"
        assert "Processed vocabulary saved to merged.txt" in capsys.readouterr().out

    def test_unreadable_input_exits_with_error(self, workdir, capsys):
        code = main(["--input", "missing.txt", "--config", "settings.yaml"])
        assert code == 1
        assert "Error:" in capsys.readouterr().err
        assert not (workdir / "vocab_processed.txt").exists()


class TestUsageErrors:

    def test_no_mode_given(self, workdir, capsys):
        assert main([]) == 1
        assert "Either --dir or --input must be specified." in capsys.readouterr().err

    def test_both_modes_rejected(self, workdir):
        with pytest.raises(SystemExit) as exc_info:
            main(["--dir", "d", "--input", "v.txt"])
        assert exc_info.value.code == 2

    def test_invalid_sort_choice_rejected(self, workdir):
        with pytest.raises(SystemExit):
            main(["--dir", "d", "--sort", "random"])

    def test_quoted_boolean_in_settings_file(self, workdir, capsys):
        corpus = workdir / "docs"
        corpus.mkdir()
        (corpus / "a.txt").write_text("Hello", encoding='utf-8')
        (workdir / "bad.yaml").write_text('vocab:\n  lowercase: "false"\n', encoding='utf-8')

        assert main(["--dir", str(corpus), "--config", "bad.yaml", "--output", "v.txt"]) == 1
        assert "Error: invalid settings" in capsys.readouterr().err
        assert not (workdir / "v.txt").exists()

    def test_quoted_worker_count_in_settings_file(self, workdir, capsys):
        corpus = workdir / "docs"
        corpus.mkdir()
        (workdir / "bad.yaml").write_text('vocab:\n  max_workers: "4"\n', encoding='utf-8')

        assert main(["--dir", str(corpus), "--config", "bad.yaml"]) == 1
        assert "Error: invalid settings" in capsys.readouterr().err

    def test_bad_sort_in_settings_file(self, workdir, capsys):
        (workdir / "bad.yaml").write_text("vocab:\n  sort: random\n", encoding='utf-8')
        assert main(["--dir", ".", "--config", "bad.yaml"]) == 1
        assert "invalid settings" in capsys.readouterr().err
