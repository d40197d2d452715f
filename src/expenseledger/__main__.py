"""Allow ``python -m expenseledger``."""

from .cli import main

main()
