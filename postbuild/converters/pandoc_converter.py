"""
Markdown-to-HTML Converter

Hands a post's Markdown to pandoc with the configured flag set.
Parsing, math rendering and templating are entirely pandoc's job;
this class only assembles the command line and reports failures.
"""

import os
import shutil
import subprocess

from ..config import BuildConfig


class ConversionError(Exception):
    """Raised when pandoc is missing or exits with an error."""

    def __init__(self, message: str, returncode: int = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class PandocConverter:
    """Converts Markdown files to standalone HTML via pandoc."""

    SUPPORTED_EXTENSIONS = {".md", ".markdown", ".mdown", ".mkd"}

    def __init__(self, config: BuildConfig = None):
        self.config = config or BuildConfig()

    @staticmethod
    def can_handle(file_path: str) -> bool:
        _, ext = os.path.splitext(file_path.lower())
        return ext in PandocConverter.SUPPORTED_EXTENSIONS

    def find_executable(self) -> str:
        """Resolve the pandoc executable, raising ConversionError if absent."""
        executable = shutil.which(self.config.pandoc)
        if not executable:
            raise ConversionError(
                f"pandoc executable not found: {self.config.pandoc}\n"
                f"Install pandoc (https://pandoc.org/installing.html) or set POSTBUILD_PANDOC."
            )
        # pandoc runs from the post directory, so a relative path must be pinned here
        return os.path.abspath(executable)

    def build_command(self, input_path: str, output_path: str) -> list[str]:
        """Return the full pandoc command line for one conversion."""
        return [
            self.config.pandoc,
            input_path,
            *self.config.pandoc_args(),
            "-o",
            output_path,
        ]

    def convert(self, input_path: str, output_path: str, cwd: str = None) -> list[str]:
        """
        Run pandoc on a Markdown file.

        Args:
            input_path: Markdown file, absolute or relative to cwd
            output_path: HTML file to write, absolute or relative to cwd
            cwd: Directory pandoc runs in; relative template paths resolve here

        Returns:
            The command that was run

        Raises:
            FileNotFoundError: If the input file does not exist
            ConversionError: If pandoc is missing or fails
        """
        base = cwd or os.getcwd()
        if not os.path.isfile(os.path.join(base, input_path)):
            raise FileNotFoundError(f"Markdown file not found: {os.path.join(base, input_path)}")

        executable = self.find_executable()
        command = self.build_command(input_path, output_path)

        proc = subprocess.run(
            [executable, *command[1:]],
            cwd=base,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
        if proc.stderr.strip() and proc.returncode == 0:
            # pandoc reports warnings (e.g. unresolved citations) on stderr
            for line in proc.stderr.strip().splitlines():
                print(f"[PANDOC] {line}")

        if proc.returncode != 0:
            raise ConversionError(
                f"pandoc failed (exit {proc.returncode}): {proc.stderr.strip() or 'no diagnostics'}",
                returncode=proc.returncode,
                stderr=proc.stderr,
            )

        return command

    def version(self) -> str:
        """Return the first line of `pandoc --version`."""
        executable = self.find_executable()
        proc = subprocess.run(
            [executable, "--version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
        if proc.returncode != 0:
            raise ConversionError(
                f"pandoc --version failed (exit {proc.returncode})",
                returncode=proc.returncode,
                stderr=proc.stderr,
            )
        lines = proc.stdout.strip().splitlines()
        return lines[0] if lines else ""
