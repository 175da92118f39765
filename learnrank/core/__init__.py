"""Core building blocks: query documents and the template engine."""
