"""Command Documentation Generator.

Walks a CLI command tree and renders Markdown reference pages for
every command, either with a fixed layout or a Jinja2 template.
"""

__version__ = "0.1.0"
