"""
HTML Post-processing Filter

Runs the blog's external highlighter over a generated page. The filter
reads the HTML file named on its command line and writes the processed
page to stdout; the result goes to a temporary file which then replaces
the original.
"""

import os
import shlex
import shutil
import subprocess

from ..config import looks_like_path


class FilterError(Exception):
    """Raised when the post-processing filter is missing or fails."""
    pass


class FilterConverter:
    """Pipes a generated HTML file through an external filter command."""

    TEMP_SUFFIX = ".tmp"

    def __init__(self, command: str, base_dir: str = None):
        """
        Args:
            command: Filter command line, e.g. "../htmlhl" or "htmlhl --inline"
            base_dir: Directory that relative filter paths are resolved against
        """
        self.argv = shlex.split(command or "")
        if not self.argv:
            raise FilterError("Filter command is empty")
        self.base_dir = base_dir or os.getcwd()

    def resolve(self) -> list[str]:
        """Return the argv with the executable resolved, or raise FilterError."""
        program, *rest = self.argv

        if looks_like_path(program):
            path = os.path.normpath(os.path.join(self.base_dir, program))
            if not os.path.isfile(path):
                raise FilterError(f"Filter not found: {path}")
            if not os.access(path, os.X_OK):
                raise FilterError(f"Filter is not executable: {path}")
        else:
            path = shutil.which(program)
            if not path:
                raise FilterError(f"Filter not found on PATH: {program}")

        return [path, *rest]

    def apply(self, html_path: str) -> str:
        """
        Filter html_path in place.

        Returns:
            The path that was rewritten

        Raises:
            FileNotFoundError: If html_path does not exist
            FilterError: If the filter is missing, fails, or prints nothing
        """
        if not os.path.isfile(html_path):
            raise FileNotFoundError(f"HTML file not found: {html_path}")

        argv = self.resolve()
        tmp_path = html_path + self.TEMP_SUFFIX

        try:
            with open(tmp_path, "wb") as out:
                proc = subprocess.run(
                    [*argv, os.path.basename(html_path)],
                    cwd=os.path.dirname(os.path.abspath(html_path)),
                    stdout=out,
                    stderr=subprocess.PIPE,
                )

            if proc.returncode != 0:
                stderr = proc.stderr.decode("utf-8", errors="replace").strip()
                raise FilterError(
                    f"Filter {self.argv[0]} failed (exit {proc.returncode}): "
                    f"{stderr or 'no diagnostics'}"
                )

            if os.path.getsize(tmp_path) == 0:
                raise FilterError(f"Filter {self.argv[0]} produced no output")

            os.replace(tmp_path, html_path)
        finally:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)

        return html_path

    def __str__(self) -> str:
        return shlex.join(self.argv)
