"""API v1 module."""

from fastapi import APIRouter

from invoice_numbering.api.v1.endpoints import counters, invoice_numbers, numbering_schemes

api_router = APIRouter()

api_router.include_router(numbering_schemes.router, tags=["Numbering Schemes"])
api_router.include_router(invoice_numbers.router, tags=["Invoice Numbers"])
api_router.include_router(counters.router, prefix="/internal", tags=["Internal"])
