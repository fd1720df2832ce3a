"""Concrete analysis tools, discovered by tools.registry."""
