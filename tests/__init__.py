"""Test suite for broken-md-links.

Tests mirror the package layout: ``tests/core`` covers the checking engine and
``tests/cli`` the command-line runtime.
"""
