# billdash/__main__.py
# Entry point for `python -m billdash`.
from billdash.cli import cli

if __name__ == "__main__":
    cli()
