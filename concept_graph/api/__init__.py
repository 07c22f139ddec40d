"""
API layer package.

Provides HTTP endpoint routing, dependency providers and error handling.
"""

from concept_graph.api.errors import handle_endpoint_error, register_exception_handlers

__all__ = ["handle_endpoint_error", "register_exception_handlers"]
