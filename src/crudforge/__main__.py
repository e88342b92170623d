"""Allow ``python -m crudforge``."""

from crudforge.cli.main import cli

if __name__ == "__main__":
    cli()
