"""
Postbuild Core Engine

Builds blog posts. A post is a directory holding a Markdown file
(content.md); building it writes index.html next to it:

    pandoc -> index.html -> highlighter filter -> index.html

The template and the filter live in the posts root and are referenced
relative to the post directory (../template.html, ../htmlhl).
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from .config import BuildConfig, looks_like_path
from .converters.pandoc_converter import PandocConverter
from .converters.filter_converter import FilterConverter
from .converters.html_inspector import PageSummary, inspect_file


class BuildError(Exception):
    """Raised when a post cannot be built."""
    pass


@dataclass
class BuildResult:
    """Outcome of building one post."""
    post_dir: str
    input_path: str
    output_path: str
    command: list[str]
    filtered: bool
    bytes_written: int
    summary: PageSummary
    built_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class BuildPlan:
    """What a build would run, without running it."""
    post_dir: str
    command: list[str]
    filter_command: Optional[list[str]]


@dataclass
class BatchReport:
    """Outcome of building several posts."""
    results: list[BuildResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class PostBuilder:
    """
    Main build engine.

    Runs the per-post pipeline and walks a posts root to build every post.
    """

    def __init__(self, config: BuildConfig = None):
        self.config = config or BuildConfig()
        self.converter = PandocConverter(self.config)

    def build(self, post_dir: str) -> BuildResult:
        """
        Build one post.

        Args:
            post_dir: Directory containing the Markdown input

        Returns:
            The BuildResult

        Raises:
            FileNotFoundError: If the input or template is missing
            ConversionError: If pandoc fails
            FilterError: If the highlighter filter fails
            BuildError: If the build leaves an empty page
        """
        post_dir = os.path.abspath(post_dir)
        input_name = self.config.input_name
        output_name = self.config.output_name
        input_path = os.path.join(post_dir, input_name)
        output_path = os.path.join(post_dir, output_name)

        if not os.path.isdir(post_dir):
            raise FileNotFoundError(f"Post directory not found: {post_dir}")
        if not os.path.isfile(input_path):
            raise FileNotFoundError(f"Markdown file not found: {input_path}")
        self._check_template(post_dir)

        print(f"Building '{output_name}'...")

        command = self.converter.convert(input_name, output_name, cwd=post_dir)
        print(f"[BUILD] {os.path.relpath(input_path)} -> {output_name}")

        filtered = False
        if self.config.filter_command:
            hl = FilterConverter(self.config.filter_command, base_dir=post_dir)
            print(f"[FILTER] {hl}")
            hl.apply(output_path)
            filtered = True

        if not os.path.isfile(output_path) or os.path.getsize(output_path) == 0:
            raise BuildError(f"Build produced an empty file: {output_path}")

        summary = inspect_file(output_path)
        if summary.is_empty:
            raise BuildError(f"Build produced a page with no content: {output_path}")

        print(f"Done. Output written to {output_name}")

        return BuildResult(
            post_dir=post_dir,
            input_path=input_path,
            output_path=output_path,
            command=command,
            filtered=filtered,
            bytes_written=os.path.getsize(output_path),
            summary=summary,
        )

    def plan(self, post_dir: str) -> BuildPlan:
        """Return the commands build() would run for a post."""
        post_dir = os.path.abspath(post_dir)
        filter_argv = None
        if self.config.filter_command:
            hl = FilterConverter(self.config.filter_command, base_dir=post_dir)
            filter_argv = [*hl.argv, self.config.output_name]

        return BuildPlan(
            post_dir=post_dir,
            command=self.converter.build_command(self.config.input_name, self.config.output_name),
            filter_command=filter_argv,
        )

    def is_stale(self, post_dir: str) -> bool:
        """True when the output is missing or older than its input or template."""
        output_path = os.path.join(post_dir, self.config.output_name)
        if not os.path.isfile(output_path):
            return True

        built = os.path.getmtime(output_path)
        sources = [os.path.join(post_dir, self.config.input_name)]
        template = self._template_path(post_dir)
        if template:
            sources.append(template)

        return any(os.path.isfile(s) and os.path.getmtime(s) > built for s in sources)

    def discover(self, root: str) -> list[str]:
        """
        Find post directories under root.

        root itself is a post when it holds the input file; otherwise
        every immediate subdirectory that holds one is a post.
        """
        if not os.path.isdir(root):
            raise FileNotFoundError(f"Directory not found: {root}")

        if os.path.isfile(os.path.join(root, self.config.input_name)):
            return [root]

        posts = []
        for name in sorted(os.listdir(root)):
            post_dir = os.path.join(root, name)
            if os.path.isfile(os.path.join(post_dir, self.config.input_name)):
                posts.append(post_dir)
        return posts

    def build_all(
        self,
        root: str,
        keep_going: bool = False,
        changed_only: bool = False,
    ) -> BatchReport:
        """
        Build every post under root.

        The first failure propagates unless keep_going is set, in which
        case failures are recorded in the report and the rest still build.
        """
        report = BatchReport()
        posts = self.discover(root)
        if not posts:
            raise BuildError(f"No posts with {self.config.input_name} found in: {root}")

        for post_dir in posts:
            if changed_only and not self.is_stale(post_dir):
                print(f"[SKIP] {post_dir} is up to date")
                report.skipped.append(post_dir)
                continue

            try:
                report.results.append(self.build(post_dir))
            except Exception as e:
                if not keep_going:
                    raise
                report.failures[post_dir] = str(e)

        return report

    def _template_path(self, post_dir: str) -> Optional[str]:
        template = self.config.template
        # bare names are looked up by pandoc in its own data directory
        if not template or not looks_like_path(template):
            return None
        return os.path.normpath(os.path.join(post_dir, template))

    def _check_template(self, post_dir: str) -> None:
        template = self._template_path(post_dir)
        if template and not os.path.isfile(template):
            raise FileNotFoundError(f"Template not found: {template}")
