"""Architecture validation tests.

These tests check layering and coding conventions across src/specforge.
"""
