"""Allows running the CLI as: python -m projnav"""

from projnav.navigator.main import cli_main

if __name__ == "__main__":
    cli_main()
