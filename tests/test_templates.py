"""Tests for PR template lookup."""

import time

import pytest

from git_scribe import templates
from git_scribe.errors import ContentError
from git_scribe.templates import (
    TemplateResult,
    collect_errors,
    create_default_template,
    default_template,
    has_errors,
    list_templates,
    load_files_from_dirs,
    load_template,
    load_templates_parallel,
    successful_contents,
)


class TestDefaultTemplate:
    """Test the bundled default template."""

    def test_has_standard_sections(self):
        text = default_template()
        for header in (
            "# Description",
            "# Changelog",
            "# Test Evidence",
            "# Additional Notes",
        ):
            assert header in text


class TestLoadTemplate:
    """Test template lookup by name and path."""

    def test_search_order_prefers_working_directory(self, tmp_path):
        (tmp_path / "templates").mkdir()
        (tmp_path / "feature.md").write_text("root")
        (tmp_path / "templates" / "feature.md").write_text("templates")

        assert load_template("feature", root=tmp_path) == "root"

    def test_templates_directory(self, tmp_path):
        (tmp_path / "templates").mkdir()
        (tmp_path / "templates" / "feature.md").write_text("templates")

        assert load_template("feature", root=tmp_path) == "templates"

    def test_github_and_gitlab_directories(self, tmp_path):
        (tmp_path / ".gitlab" / "templates").mkdir(parents=True)
        (tmp_path / ".gitlab" / "templates" / "bug.md").write_text("gitlab")
        assert load_template("bug", root=tmp_path) == "gitlab"

        (tmp_path / ".github" / "templates").mkdir(parents=True)
        (tmp_path / ".github" / "templates" / "bug.md").write_text("github")
        assert load_template("bug", root=tmp_path) == "github"

    def test_extension_order(self, tmp_path):
        """All directories are tried for .md before any .txt file is used."""
        (tmp_path / "templates").mkdir()
        (tmp_path / "bug.txt").write_text("txt in root")
        (tmp_path / "templates" / "bug.md").write_text("md in templates")

        assert load_template("bug", root=tmp_path) == "md in templates"

    def test_extensionless_file(self, tmp_path):
        (tmp_path / "templates").mkdir()
        (tmp_path / "templates" / "plain").write_text("plain")

        assert load_template("plain", root=tmp_path) == "plain"

    def test_custom_templates_dir(self, tmp_path):
        (tmp_path / "pr").mkdir()
        (tmp_path / "pr" / "feature.md").write_text("custom")

        assert load_template("feature", templates_dir="pr", root=tmp_path) == "custom"

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "elsewhere" / "my-template.md"
        path.parent.mkdir()
        path.write_text("explicit")

        assert load_template(str(path)) == "explicit"

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(ContentError, match="not found"):
            load_template(str(tmp_path / "missing.md"))

    def test_default_falls_back_to_built_in(self, tmp_path):
        assert load_template("default", root=tmp_path) == default_template()

    def test_default_on_disk_wins(self, tmp_path):
        (tmp_path / "templates").mkdir()
        (tmp_path / "templates" / "default.md").write_text("# Mine\n")

        assert load_template("default", root=tmp_path) == "# Mine\n"

    def test_unknown_name(self, tmp_path):
        with pytest.raises(ContentError, match="template 'nope' not found"):
            load_template("nope", root=tmp_path)


class TestListAndCreate:
    """Test listing and creating templates."""

    def test_list_templates(self, tmp_path):
        (tmp_path / "templates").mkdir()
        (tmp_path / "templates" / "feature.md").write_text("x")
        (tmp_path / "templates" / "bug.txt").write_text("x")
        (tmp_path / "templates" / "notes.json").write_text("{}")
        (tmp_path / ".github" / "templates").mkdir(parents=True)
        (tmp_path / ".github" / "templates" / "feature.md").write_text("x")
        (tmp_path / ".github" / "templates" / "release.tmpl").write_text("x")
        (tmp_path / "README.md").write_text("not a template")

        assert list_templates(root=tmp_path) == ["bug", "feature", "release"]

    def test_list_templates_empty(self, tmp_path):
        assert list_templates(root=tmp_path) == []

    def test_create_default_template(self, tmp_path):
        path = create_default_template(root=tmp_path)

        assert path == tmp_path / "templates" / "default.md"
        assert path.read_text() == default_template()

    def test_create_default_template_keeps_existing(self, tmp_path):
        (tmp_path / "templates").mkdir()
        existing = tmp_path / "templates" / "default.md"
        existing.write_text("mine")

        create_default_template(root=tmp_path)

        assert existing.read_text() == "mine"


class TestParallelLoading:
    """Test concurrent template loading."""

    def test_results_follow_input_order(self, tmp_path):
        dirs = []
        for index in range(5):
            directory = tmp_path / f"dir{index}"
            directory.mkdir()
            (directory / "pr.md").write_text(f"content {index}")
            dirs.append(str(directory))

        results = load_files_from_dirs(dirs, "pr.md")

        assert [r.dir_path for r in results] == dirs
        assert successful_contents(results) == [f"content {i}" for i in range(5)]
        assert not has_errors(results)

    def test_order_kept_when_lookups_finish_out_of_order(self, monkeypatch):
        dirs = ["slow", "medium", "fast"]
        delays = {"slow": 0.05, "medium": 0.02, "fast": 0.0}

        def loader(dir_path: str) -> str:
            time.sleep(delays[dir_path])
            return dir_path.upper()

        results = templates._load_parallel(dirs, loader)

        assert [r.content for r in results] == ["SLOW", "MEDIUM", "FAST"]

    def test_errors_reported_per_directory(self, tmp_path):
        good = tmp_path / "good"
        good.mkdir()
        (good / "pr.md").write_text("ok")
        missing = tmp_path / "missing"

        results = load_files_from_dirs([str(missing), str(good)], "pr.md")

        assert has_errors(results)
        assert not results[0].ok
        assert isinstance(results[0].error, ContentError)
        assert results[1].content == "ok"
        assert successful_contents(results) == ["ok"]
        errors = collect_errors(results)
        assert len(errors) == 1
        assert errors[0].startswith(f"{missing}: ")

    def test_templates_by_name_across_directories(self, tmp_path):
        (tmp_path / "team-a").mkdir()
        (tmp_path / "team-a" / "feature.md").write_text("A")
        (tmp_path / "team-b").mkdir()

        results = load_templates_parallel(["team-a", "team-b"], "feature", root=tmp_path)

        assert results[0].content == "A"
        assert not results[1].ok

    def test_empty_input(self):
        assert load_files_from_dirs([], "pr.md") == []
        assert not has_errors([])
        assert collect_errors([]) == []

    def test_template_result_ok(self):
        assert TemplateResult(dir_path="x", content="y").ok
        assert not TemplateResult(dir_path="x", error=ContentError("boom")).ok
