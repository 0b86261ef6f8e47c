"""
careergalaxy: radial career-taxonomy engine.

Merges AI-proposed career paths into a static role taxonomy, lays the result
out as a radial galaxy, and drives progressive disclosure and pan/zoom for a
UI shell.
"""

__version__ = "0.1.0"
