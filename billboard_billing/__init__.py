# billboard_billing/__init__.py
"""
Billboard rental contracts: rate-card pricing and customer billing.

The FastAPI application lives in ``billboard_billing.main``:
    uvicorn app:app --reload
"""

__version__ = "0.1.0"
