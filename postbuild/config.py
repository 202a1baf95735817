"""
Build configuration.

The defaults reproduce the blog's build flags exactly:

    pandoc content.md --standalone --no-highlight --mathml
        --template=../template.html --toc --toc-depth=2 -o index.html

Every setting can be overridden from the environment (or a .env file)
and then again from the command line.
"""

import os
import shlex
from dataclasses import dataclass, field, asdict, replace as dc_replace
from typing import Optional

from dotenv import dotenv_values, find_dotenv


MATH_MODES = ("mathml", "mathjax", "katex", "webtex", "none")

ENV_PREFIX = "POSTBUILD_"


def _env_flag(name: str, raw: Optional[str], default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean (true/false, yes/no, on/off, 1/0), got {raw!r}")


def looks_like_path(value: str) -> bool:
    """True for values naming a file by path rather than a bare command or name."""
    return os.sep in value or "/" in value or value.startswith(".")


@dataclass
class BuildConfig:
    """Flags and file names used to build a single post."""
    pandoc: str = "pandoc"
    input_name: str = "content.md"
    output_name: str = "index.html"
    standalone: bool = True
    highlight_style: Optional[str] = None  # None -> --no-highlight
    math: str = "mathml"
    template: Optional[str] = "../template.html"  # relative to the post dir
    toc: bool = True
    toc_depth: int = 2  # include only h2 in the table of contents
    filter_command: Optional[str] = "../htmlhl"
    extra_args: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "BuildConfig":
        """
        Build a config from POSTBUILD_* environment variables.

        Args:
            env_file: Explicit .env file. When omitted, the nearest .env
                from the working directory upwards is used, if any.

        Raises:
            ValueError: If a numeric, boolean or argument-list variable is malformed.
        """
        if env_file:
            if not os.path.isfile(env_file):
                raise FileNotFoundError(f"Environment file not found: {env_file}")
        else:
            env_file = find_dotenv(usecwd=True)

        # The process environment wins over the file; os.environ is left untouched.
        file_values = dotenv_values(env_file) if env_file else {}

        def get(name: str) -> Optional[str]:
            key = ENV_PREFIX + name
            if key in os.environ:
                return os.environ[key]
            return file_values.get(key)

        defaults = cls()
        config = cls(
            pandoc=get("PANDOC") or defaults.pandoc,
            input_name=get("INPUT") or defaults.input_name,
            output_name=get("OUTPUT") or defaults.output_name,
            standalone=_env_flag("STANDALONE", get("STANDALONE"), defaults.standalone),
            highlight_style=get("HIGHLIGHT_STYLE") or defaults.highlight_style,
            math=(get("MATH") or defaults.math).lower(),
            toc=_env_flag("TOC", get("TOC"), defaults.toc),
        )

        extra_args = get("EXTRA_ARGS") or ""
        try:
            config.extra_args = shlex.split(extra_args)
        except ValueError as e:
            raise ValueError(f"{ENV_PREFIX}EXTRA_ARGS cannot be parsed ({e}): {extra_args!r}")

        # An empty value switches these off, so only a missing one means default.
        template = get("TEMPLATE")
        config.template = defaults.template if template is None else (template or None)
        filter_command = get("FILTER")
        config.filter_command = (
            defaults.filter_command if filter_command is None else (filter_command or None)
        )

        toc_depth = get("TOC_DEPTH")
        if toc_depth:
            try:
                config.toc_depth = int(toc_depth)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}TOC_DEPTH must be an integer, got {toc_depth!r}")

        return config

    def replace(self, **overrides) -> "BuildConfig":
        """Return a copy with the given overrides applied. None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dc_replace(self, **changes)

    def validate(self) -> list[str]:
        """Return a list of configuration errors (empty when valid)."""
        errors = []

        if not self.pandoc:
            errors.append("pandoc executable must not be empty")

        if self.math not in MATH_MODES:
            errors.append(
                f"math mode must be one of {', '.join(MATH_MODES)}, got {self.math!r}"
            )

        if self.toc and not 1 <= self.toc_depth <= 6:
            errors.append(f"toc depth must be between 1 and 6, got {self.toc_depth}")

        for label, name in (("input", self.input_name), ("output", self.output_name)):
            if not name or os.path.basename(name) != name:
                errors.append(f"{label} name must be a plain file name, got {name!r}")

        if self.input_name == self.output_name:
            errors.append("input and output names must differ")

        if self.filter_command:
            try:
                if not shlex.split(self.filter_command):
                    errors.append("filter command must not be blank")
            except ValueError as e:
                errors.append(f"filter command cannot be parsed ({e}): {self.filter_command!r}")

        if not all(isinstance(arg, str) and arg for arg in self.extra_args):
            errors.append(f"extra pandoc arguments must be non-empty strings, got {self.extra_args!r}")

        return errors

    def pandoc_args(self) -> list[str]:
        """Return pandoc flags in the order the blog has always passed them."""
        args = []
        if self.standalone:
            args.append("--standalone")

        if self.highlight_style:
            args.append(f"--highlight-style={self.highlight_style}")
        else:
            args.append("--no-highlight")

        if self.math != "none":
            args.append(f"--{self.math}")

        if self.template:
            args.append(f"--template={self.template}")

        if self.toc:
            args.append("--toc")
            args.append(f"--toc-depth={self.toc_depth}")

        args.extend(self.extra_args)
        return args

    def as_dict(self) -> dict:
        return asdict(self)
