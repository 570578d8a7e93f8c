"""
Test suite for em-currency-per-event

Contains:
- tests/unit/          : Unit tests for individual modules and hook scenarios
"""
