"""
Postbuild - Static Blog Post Builder

Turns each post's Markdown into a standalone HTML page by handing it to
pandoc with the blog's fixed flag set, then running the page through the
blog's code highlighter filter. Parsing, math and highlighting all stay
with the external tools.
"""

__version__ = "1.0.0"
