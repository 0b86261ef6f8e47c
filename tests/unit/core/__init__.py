"""Tests for careergalaxy core modules."""
