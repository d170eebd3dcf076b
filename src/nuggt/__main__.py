"""Run with: python -m nuggt"""

from nuggt.cli import main

main()
