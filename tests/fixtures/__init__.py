# Test fixtures
from .sample_posts import (
    SAMPLE_POST_MD,
    SECOND_POST_MD,
    TEMPLATE_HTML,
    FAKE_PANDOC_SH,
    WARNING_PANDOC_SH,
    FAILING_PANDOC_SH,
    EMPTY_PANDOC_SH,
    HIGHLIGHT_FILTER_SH,
    FAILING_FILTER_SH,
    SILENT_FILTER_SH,
    SELECTIVE_FILTER_SH,
    write_executable,
    create_post,
    set_mtime,
)

__all__ = [
    "SAMPLE_POST_MD",
    "SECOND_POST_MD",
    "TEMPLATE_HTML",
    "FAKE_PANDOC_SH",
    "WARNING_PANDOC_SH",
    "FAILING_PANDOC_SH",
    "EMPTY_PANDOC_SH",
    "HIGHLIGHT_FILTER_SH",
    "FAILING_FILTER_SH",
    "SILENT_FILTER_SH",
    "SELECTIVE_FILTER_SH",
    "write_executable",
    "create_post",
    "set_mtime",
]
