"""
Core domain models, formatting primitives, and contracts.

This module contains the building blocks that are independent of the host
booking system: the currency catalogue, settings and override models, price
formatting, and JSON Schema contracts for data crossing the host boundary.
"""
