"""Allow running devtree as ``python -m devtree``."""

from devtree.cli.main import app

if __name__ == "__main__":
    app()
