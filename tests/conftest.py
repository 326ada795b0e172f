"""Pytest configuration and shared fixtures."""

import os
import tempfile

# Settings are read at import time; point storage at a scratch directory and
# give the model client a key before the application is imported.
_TEST_ROOT = tempfile.mkdtemp(prefix="pdf_summarizer_tests_")
os.environ["OPENAI_API_KEY"] = "sk-test-key"
os.environ["JWT_SECRET"] = "test-secret-key-for-jwt-signing-0123456789"
os.environ["DB_STORAGE"] = os.path.join(_TEST_ROOT, "database.json")
os.environ["UPLOAD_PATH"] = os.path.join(_TEST_ROOT, "uploads")

from typing import List, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from pdf_summarizer.core.config import AuthSettings, LLMSettings, StorageSettings  # noqa: E402
from pdf_summarizer.core.database import JsonRecordStore  # noqa: E402
from pdf_summarizer.core.exceptions import UpstreamError  # noqa: E402
from pdf_summarizer.core.llm_client import InvocationResult  # noqa: E402
from pdf_summarizer.core.security import AuthManager  # noqa: E402
from pdf_summarizer.dependencies import (  # noqa: E402
    get_llm_client,
    get_pdf_service,
    get_record_store,
    get_storage_service,
)
from pdf_summarizer.main import app  # noqa: E402
from pdf_summarizer.services.pdf_service import ExtractedPDF  # noqa: E402
from pdf_summarizer.services.storage_service import StorageService  # noqa: E402

# Minimal PDF header; content is never parsed because extraction is stubbed
SAMPLE_PDF_BYTES = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<<\n/Type /Catalog\n>>\nendobj\n"


class FakeInvoker:
    """Model invoker stub that records every prompt it receives.

    Args:
        reply: Text returned for every call (or a callable of the prompt)
        fail_when: Optional predicate; calls whose prompt matches raise UpstreamError
    """

    def __init__(self, reply="Generated summary.", fail_when=None):
        self.reply = reply
        self.fail_when = fail_when
        self.prompts: List[str] = []
        self.calls: List[dict] = []

    async def invoke(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> InvocationResult:
        self.prompts.append(prompt)
        self.calls.append(
            {"model": model, "temperature": temperature, "max_output_tokens": max_output_tokens}
        )
        if self.fail_when is not None and self.fail_when(prompt):
            raise UpstreamError("Model API error 500: boom")

        text = self.reply(prompt) if callable(self.reply) else self.reply
        return InvocationResult(text=text, model=model or "gpt-3.5-turbo", elapsed_ms=1)


class FakePDFService:
    """PDF extractor stub returning fixed text, or raising a given error."""

    def __init__(self, text: str = "Extracted document text.", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.paths: List[str] = []

    def extract(self, file_path: str) -> ExtractedPDF:
        self.paths.append(file_path)
        if self.error is not None:
            raise self.error
        return ExtractedPDF(text=self.text, page_count=2, metadata={"source": file_path})


@pytest.fixture
def fake_invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture
def llm_settings() -> LLMSettings:
    """Model settings with a key and the production thresholds."""
    return LLMSettings(api_key="sk-test-key", default_model="gpt-3.5-turbo")


@pytest.fixture
def small_llm_settings() -> LLMSettings:
    """Model settings with tiny thresholds so large-input strategies trigger on short text."""
    return LLMSettings(
        api_key="sk-test-key",
        default_model="gpt-3.5-turbo",
        token_threshold=100,
        chunk_size=200,
        chunk_overlap=20,
        max_concurrency=2,
    )


@pytest.fixture
def storage_settings(tmp_path) -> StorageSettings:
    return StorageSettings(
        db_path=str(tmp_path / "database.json"),
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def auth_manager() -> AuthManager:
    return AuthManager(AuthSettings(jwt_secret="unit-test-secret-0123456789abcdef0123"))


@pytest.fixture
def record_store(tmp_path) -> JsonRecordStore:
    return JsonRecordStore(str(tmp_path / "database.json"))


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def fake_pdf_service() -> FakePDFService:
    return FakePDFService()


@pytest.fixture
def test_client(
    record_store: JsonRecordStore,
    fake_invoker: FakeInvoker,
    fake_pdf_service: FakePDFService,
    storage_settings: StorageSettings,
) -> TestClient:
    """FastAPI test client backed by a fresh record store and a stub model.

    Returns:
        TestClient: FastAPI test client instance
    """
    app.dependency_overrides[get_record_store] = lambda: record_store
    app.dependency_overrides[get_llm_client] = lambda: fake_invoker
    app.dependency_overrides[get_pdf_service] = lambda: fake_pdf_service
    app.dependency_overrides[get_storage_service] = lambda: StorageService(storage_settings)
    with TestClient(app) as client:
        yield client


def register_user(client: TestClient, username: str = "alice", password: str = "secret123") -> dict:
    response = client.post(
        "/api/v1/auth/register",
        json={
            "full_name": f"{username.title()} Example",
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def auth_headers(test_client: TestClient) -> dict:
    data = register_user(test_client)
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def make_invoker():
    """Factory for ``FakeInvoker`` instances with custom replies or failures."""
    return FakeInvoker


@pytest.fixture
def make_pdf_service():
    """Factory for ``FakePDFService`` instances."""
    return FakePDFService


@pytest.fixture
def register(test_client: TestClient):
    """Register a user through the API and return ``{"user": ..., "token": ...}``."""

    def _register(username: str = "alice", password: str = "secret123") -> dict:
        return register_user(test_client, username=username, password=password)

    return _register


@pytest.fixture
def sample_pdf_content() -> bytes:
    """Sample PDF content for upload tests."""
    return SAMPLE_PDF_BYTES
