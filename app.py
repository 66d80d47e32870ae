# app.py
"""
Thin entrypoint for the API.

Usage example:
    uvicorn app:app --reload
"""

from invoicedesk.main import app  # re-export FastAPI instance
