"""Protocols the views depend on instead of concrete adapters."""
