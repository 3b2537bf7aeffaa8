"""
hardcode-replacer: find hardcoded colors and class patterns in web codebases
and match colors against a design-token palette.
"""

__version__ = "2.0.0"
