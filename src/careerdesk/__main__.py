"""careerdesk CLI entry point."""

from careerdesk.cli import app

if __name__ == "__main__":
    app()
