"""Platform-specific I/O enrichment collectors."""
