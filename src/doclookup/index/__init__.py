"""Search index loading, storage and lookup."""
