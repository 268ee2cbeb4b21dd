"""Application layer: configuration, record sources, monitoring and reporting."""
