# tests/test_ignore.py
from pathlib import Path

import pytest

from tokencount.config import DEFAULT_EXCLUDE_PATTERNS, ConfigurationError, ScanOptions
from tokencount.core.ignore import GitIgnoreRules, PathFilter, read_base_ignore

# --- PathFilter ---

@pytest.fixture
def default_filter():
    return PathFilter(DEFAULT_EXCLUDE_PATTERNS)


def test_default_filter_matches_vcs_and_dependency_dirs(default_filter):
    assert default_filter.matches(".git", is_directory=True)
    assert default_filter.matches("frontend/node_modules", is_directory=True)
    assert default_filter.matches(Path("target"), is_directory=True)
    assert default_filter.matches("pkg/__pycache__", is_directory=True)


def test_default_filter_matches_files_below_excluded_dirs(default_filter):
    # Files are checked again on their own, whatever the walk already pruned
    assert default_filter.matches("node_modules/lib/Main.elm")
    assert default_filter.matches(Path(".git/HEAD"))


def test_default_filter_leaves_sources_alone(default_filter):
    assert not default_filter.matches("src/Main.elm")
    assert not default_filter.matches("src", is_directory=True)
    # "build/" only applies to directories
    assert not default_filter.matches("build")


def test_user_patterns(tmp_path):
    path_filter = PathFilter(["generated/", "*.min.elm"])
    assert path_filter.matches("src/generated", is_directory=True)
    assert path_filter.matches("src/App.min.elm")
    assert not path_filter.matches("src/App.elm")


def test_invalid_pattern_is_a_configuration_error():
    with pytest.raises(ConfigurationError) as exc:
        PathFilter(["ok/", "broken\\"])
    assert "invalid glob pattern" in str(exc.value)


# --- GitIgnoreRules ---

def test_root_gitignore(tmp_path):
    (tmp_path / ".gitignore").write_text("*.gen.elm\nout/\n", encoding="utf-8")
    rules = GitIgnoreRules(tmp_path, home=tmp_path / "nohome")
    rules.load_dir("", tmp_path)

    assert rules.is_ignored("Api.gen.elm")
    assert rules.is_ignored("src/Api.gen.elm")
    assert rules.is_ignored("out", is_directory=True)
    assert not rules.is_ignored("src/Main.elm")


def test_nested_gitignore_takes_precedence(tmp_path):
    sub = tmp_path / "lib"
    sub.mkdir()
    (tmp_path / ".gitignore").write_text("*.elm\n", encoding="utf-8")
    (sub / ".gitignore").write_text("!Keep.elm\n", encoding="utf-8")

    rules = GitIgnoreRules(tmp_path, home=tmp_path / "nohome")
    rules.load_dir("", tmp_path)
    rules.load_dir("lib", sub)

    assert rules.is_ignored("Main.elm")
    assert rules.is_ignored("lib/Other.elm")
    assert not rules.is_ignored("lib/Keep.elm")


def test_nested_gitignore_is_relative_to_its_directory(tmp_path):
    sub = tmp_path / "lib"
    sub.mkdir()
    (sub / ".gitignore").write_text("/Local.elm\n", encoding="utf-8")

    rules = GitIgnoreRules(tmp_path, home=tmp_path / "nohome")
    rules.load_dir("lib", sub)

    assert rules.is_ignored("lib/Local.elm")
    assert not rules.is_ignored("Local.elm")


def test_info_exclude_and_global_ignore(tmp_path):
    info = tmp_path / ".git" / "info"
    info.mkdir(parents=True)
    (info / "exclude").write_text("scratch/\n", encoding="utf-8")
    home = tmp_path / "home"
    (home / ".config" / "git").mkdir(parents=True)
    (home / ".config" / "git" / "ignore").write_text("*.bak.elm\n", encoding="utf-8")

    lines = read_base_ignore(tmp_path, home=home)
    assert "scratch/" in lines
    assert "*.bak.elm" in lines

    rules = GitIgnoreRules(tmp_path, home=home)
    assert rules.is_ignored("scratch", is_directory=True)
    assert rules.is_ignored("src/Old.bak.elm")


def test_gitignore_negation_overrides_base_rules(tmp_path):
    info = tmp_path / ".git" / "info"
    info.mkdir(parents=True)
    (info / "exclude").write_text("*.elm\n", encoding="utf-8")
    (tmp_path / ".gitignore").write_text("!Main.elm\n", encoding="utf-8")

    rules = GitIgnoreRules(tmp_path, home=tmp_path / "nohome")
    rules.load_dir("", tmp_path)

    assert not rules.is_ignored("Main.elm")
    assert rules.is_ignored("Other.elm")


def test_broken_gitignore_is_skipped_with_warning(tmp_path, caplog):
    (tmp_path / ".gitignore").write_text("bad\\\n", encoding="utf-8")
    rules = GitIgnoreRules(tmp_path, home=tmp_path / "nohome")

    with caplog.at_level("WARNING", logger="tokencount"):
        rules.load_dir("", tmp_path)

    assert not rules.is_ignored("bad")
    assert "ignoring rules from" in caplog.text


def test_user_negation_overrides_defaults():
    options = ScanOptions(exclude=("!build/",))
    path_filter = PathFilter(options.exclude_patterns)
    assert not path_filter.matches("build", is_directory=True)
    assert path_filter.matches("dist", is_directory=True)
