"""Command-line interface for ruletag."""
from __future__ import annotations
