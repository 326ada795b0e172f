from fastapi import APIRouter

from pdf_summarizer.api.v1.endpoints import auth, documents, summaries

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(summaries.router, prefix="/summaries", tags=["Summaries"])

__all__ = ["api_router"]
