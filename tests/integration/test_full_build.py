"""
Integration tests for the complete build workflow.
"""

import shutil

import pytest

from postbuild.cli import main
from postbuild.config import BuildConfig
from postbuild.core import PostBuilder

HAS_PANDOC = shutil.which("pandoc") is not None


@pytest.mark.integration
class TestFullBuildWorkflow:
    """
    End-to-end tests for the blog build:
    1. Discover posts under the posts root
    2. Convert each post with pandoc (stand-in)
    3. Run the highlighter filter and swap the page in place
    4. Read the page back and report on it
    """

    def test_build_then_rebuild_only_changed(self, fake_pandoc, posts_root, capsys):
        args = [str(posts_root), "--pandoc", str(fake_pandoc)]

        assert main(args) == 0
        first = capsys.readouterr().out
        assert first.count("Building 'index.html'...") == 2

        assert main(args + ["--changed-only"]) == 0
        second = capsys.readouterr().out
        assert "Done: 0 built, 2 skipped, 0 errors" in second

    def test_env_file_drives_the_build(self, fake_pandoc, posts_root, tmp_path):
        env_file = tmp_path / "blog.env"
        env_file.write_text(
            f"POSTBUILD_PANDOC={fake_pandoc}\n"
            "POSTBUILD_OUTPUT=page.html\n"
            "POSTBUILD_TOC_DEPTH=3\n"
        )

        assert main([str(posts_root), "--env-file", str(env_file)]) == 0

        html = (posts_root / "second-post" / "page.html").read_text()
        assert "--toc-depth=3" in html
        assert 'class="python highlighted"' in html


@pytest.mark.integration
@pytest.mark.pandoc
@pytest.mark.skipif(not HAS_PANDOC, reason="pandoc is not installed")
class TestRealPandoc:
    """Builds against a real pandoc install."""

    def test_real_pandoc_build(self, posts_root, post_dir):
        """Given valid Markdown, the build writes a non-empty page with TOC and MathML."""
        builder = PostBuilder(BuildConfig())

        result = builder.build(str(post_dir))

        assert result.bytes_written > 0
        assert result.summary.toc_entries >= 2
        assert result.summary.math_elements >= 1
        assert result.summary.code_blocks == 1
        html = (post_dir / "index.html").read_text()
        assert "highlighted" in html

    def test_real_pandoc_version(self):
        from postbuild.converters.pandoc_converter import PandocConverter
        assert PandocConverter().version().startswith("pandoc")

