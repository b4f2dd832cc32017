"""
Test suite for navvault

Contains:
- tests/unit/          : Unit tests for individual modules and the Vault facade
"""
