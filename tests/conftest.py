"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from pathlib import Path
import pytest

# Add the project root to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from postbuild.config import BuildConfig
from postbuild.core import PostBuilder
from tests.fixtures import (
    SAMPLE_POST_MD,
    SECOND_POST_MD,
    TEMPLATE_HTML,
    FAKE_PANDOC_SH,
    HIGHLIGHT_FILTER_SH,
    write_executable,
    create_post,
)


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "integration: mark as integration test")
    config.addinivalue_line("markers", "pandoc: mark as requiring a real pandoc install")


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep POSTBUILD_* variables and stray .env files out of every test."""
    for name in list(os.environ):
        if name.startswith("POSTBUILD_"):
            monkeypatch.delenv(name, raising=False)
    work = tmp_path / "cwd"
    work.mkdir()
    monkeypatch.chdir(work)


# ============================================================================
# Tool Fixtures
# ============================================================================


@pytest.fixture
def bin_dir(tmp_path):
    """Directory for stand-in executables."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def fake_pandoc(bin_dir):
    """A pandoc stand-in that writes a small page."""
    return write_executable(bin_dir / "pandoc", FAKE_PANDOC_SH)


# ============================================================================
# Posts Fixtures
# ============================================================================


@pytest.fixture
def posts_root(tmp_path):
    """A posts root with the shared template, the highlighter and two posts."""
    root = tmp_path / "posts"
    root.mkdir()
    (root / "template.html").write_text(TEMPLATE_HTML)
    write_executable(root / "htmlhl", HIGHLIGHT_FILTER_SH)
    create_post(root, "fourier-series", SAMPLE_POST_MD)
    create_post(root, "second-post", SECOND_POST_MD)
    (root / "drafts-without-content").mkdir()
    return root


@pytest.fixture
def post_dir(posts_root):
    """A single post inside posts_root."""
    return posts_root / "fourier-series"


@pytest.fixture
def config(fake_pandoc):
    """Default configuration pointed at the pandoc stand-in."""
    return BuildConfig(pandoc=str(fake_pandoc))


@pytest.fixture
def builder(config):
    """A post builder using the pandoc stand-in."""
    return PostBuilder(config)
