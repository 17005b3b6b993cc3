# invoice_api/__init__.py
"""
Invoice API: customers, products, invoices and their line items.

The ASGI application is exposed at package level:
    uvicorn invoice_api:app
or, bound to the configured host/port:
    python -m invoice_api
"""

from .main import app

__all__ = ["app"]
