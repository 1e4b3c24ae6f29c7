"""
Entry point for running recall as a module.

Usage:
    python -m recall add "Mitochondria is the powerhouse of the cell"
    python -m recall list
    python -m recall --help
"""
from .cli import main

if __name__ == "__main__":
    main()
