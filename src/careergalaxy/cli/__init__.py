"""Command line interface for careergalaxy."""
