"""Repository layer: statement building, value tagging and result wrapping.

Keep functions thin and focused, so callers never hand-assemble SQL strings.
"""
from __future__ import annotations
