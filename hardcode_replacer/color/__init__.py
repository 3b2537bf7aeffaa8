"""Color parsing, matching and suggestion primitives."""
