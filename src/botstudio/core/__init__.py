"""Cross-cutting configuration, logging, and error primitives."""
