"""Command line drivers for headless play."""
