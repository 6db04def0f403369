"""Command line interface for archgraph."""
