"""
Entry point for running hardcode-replacer as a module: python -m hardcode_replacer
"""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
