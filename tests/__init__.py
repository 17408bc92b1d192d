"""Test suite for the jafar package.

This package contains unit and integration tests validating value
inspection, expectations, tree building, execution semantics, test
file discovery and loading, reporting, and the command-line runner.
"""
