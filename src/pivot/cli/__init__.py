"""Pivot CLI layer."""

__all__ = ["cli"]


def cli() -> None:
    """Lazy import and run the CLI."""
    from pivot.cli.main import main

    main()
