"""
PR Documentator package entry point.

Allows running prdocumentator as a module:
    python -m prdocumentator
"""

from prdocumentator.cli import main

if __name__ == "__main__":
    main()
