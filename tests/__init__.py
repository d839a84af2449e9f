"""
Test suite for finseries

Contains:
- tests/unit/          : Unit tests for individual modules
"""
