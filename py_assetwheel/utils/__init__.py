"""
Seeded random streams and retry helpers.
"""
