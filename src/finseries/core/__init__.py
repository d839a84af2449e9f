"""
Core domain models, calendar arithmetic and numerical primitives.

Everything here is in-memory and synchronous; there is no I/O apart from
loading the bundled JSON Schema contracts.
"""
