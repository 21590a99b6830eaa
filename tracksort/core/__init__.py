"""Core grouping engine: vectorizer, k-means, labeler and helpers."""
