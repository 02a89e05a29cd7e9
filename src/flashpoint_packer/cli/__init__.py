"""
Flashpoint packer CLI

Unified command-line interface for building and verifying archive bundles.
"""

from .main import cli

__all__ = ["cli"]


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
