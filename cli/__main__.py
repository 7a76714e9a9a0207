"""Allows ``python -m cli`` from a checkout"""

from cli.main import main

main()
