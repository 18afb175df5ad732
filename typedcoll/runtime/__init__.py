"""
Runtime support: lock helpers and the process-wide type registry.
"""
