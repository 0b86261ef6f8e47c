"""Tests for the galaxy CLI."""
