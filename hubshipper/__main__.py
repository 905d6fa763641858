"""Allow hubshipper to be executable through `python -m hubshipper`."""
from hubshipper.cli import cli


if __name__ == "__main__":  # pragma: no cover
    cli(prog_name="hubshipper")
