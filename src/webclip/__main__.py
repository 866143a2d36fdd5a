"""Allow ``python -m webclip``."""

from webclip.cli import app

if __name__ == "__main__":
    app()
