"""
Core package providing type descriptors, value identity and the shared
container plumbing.

Architecture:
- Type descriptors are interned through the runtime registry
- Value hashes decide element identity for every container
- Errors and configuration are shared by all packages
"""
