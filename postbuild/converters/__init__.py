from .pandoc_converter import PandocConverter, ConversionError
from .filter_converter import FilterConverter, FilterError
from .html_inspector import PageSummary, inspect_html, inspect_file

__all__ = [
    "PandocConverter",
    "ConversionError",
    "FilterConverter",
    "FilterError",
    "PageSummary",
    "inspect_html",
    "inspect_file",
]
