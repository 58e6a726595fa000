"""HTTP surface of the invoicing backend (FastAPI)."""

from invoice_api.app import create_app

__all__ = ["create_app"]
