"""Allow ``python -m mycelia <command>`` as an alias of the ``mycelia`` command."""

from .cli import run

if __name__ == "__main__":
    run()
