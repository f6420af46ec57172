"""Downscale CLI - safe node group downscaling for search clusters."""

from downscale_core.cli.downscale import downscale_app

app = downscale_app


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
