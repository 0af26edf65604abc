"""
depconvert CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import convert


@click.group()
@click.version_option(package_name="depconvert")
def main():
    """depconvert: Convert legacy Go dependency metadata.

    Turns glide, godep and vndr configuration into a normalized
    manifest (constraints and ignores) and lock (resolved versions).

    \b
    Quick Start:
      depconvert import . --root github.com/me/project
      depconvert import . --root github.com/me/project --json
    """
    pass


# Register commands
main.add_command(convert.import_command)

if __name__ == "__main__":
    main()
