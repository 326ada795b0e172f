from pdf_summarizer.repositories.document_repository import DocumentRepository
from pdf_summarizer.repositories.summary_repository import SummaryRepository
from pdf_summarizer.repositories.user_repository import UserRepository

__all__ = ["DocumentRepository", "SummaryRepository", "UserRepository"]
