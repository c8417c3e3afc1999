"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from evenly.domain.itemizer import Itemizer
from evenly.domain.ledger import Ledger


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ledger(request: Request) -> Ledger:
    """Provide the app's Ledger instance"""
    return request.app.state.ledger


def get_itemizer(request: Request) -> Itemizer:
    """Provide the app's Itemizer instance"""
    return request.app.state.itemizer
