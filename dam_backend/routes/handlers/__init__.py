"""
Route handlers.
"""
from .bulk_actions import register_bulk_action_routes

__all__ = ["register_bulk_action_routes"]
