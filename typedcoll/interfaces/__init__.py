"""
Protocols and callable aliases shared across the package.
"""
