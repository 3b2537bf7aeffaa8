"""Scan commands: colors, compare, tailwind, patterns."""
