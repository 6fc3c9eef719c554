"""Allow ``python -m mosdrones``."""

from mosdrones.cli.main import main

main()
