"""Entry point for the Command Documentation Generator.

Allows running the CLI with ``python -m cmddoc.main``.
"""

from cmddoc.cli.commands import cmddoc


def main() -> None:
    """Launch the CLI."""
    cmddoc(prog_name="cmddoc")


if __name__ == "__main__":
    main()
