"""Unit tests for certified_algebraics modules."""
