"""
Test suite for certified_algebraics

Contains:
- tests/unit/          : Unit tests for individual modules
"""
