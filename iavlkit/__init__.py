"""Building blocks for a versioned AVL+ key-value store: encodings, caches, stores, batches and export compression."""

__version__ = "0.1.0"