"""
Utilities package for Baserow Bindings.

Exports shared helpers for logging and name normalization. Keep this package
lightweight and free of domain-specific logic.
"""

from baserow_bindings.utils.logging import configure_logging, get_logger
from baserow_bindings.utils.naming import module_name, safe_identifier, to_pascal, to_snake

__all__ = [
    "configure_logging",
    "get_logger",
    "module_name",
    "safe_identifier",
    "to_pascal",
    "to_snake",
]
