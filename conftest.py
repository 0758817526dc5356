import copy
import pytest
from fastapi.testclient import TestClient

import main
import llm_services
from auth import SessionRegistry
from editor import DraftRegistry
from portfolio_store import PortfolioStore

# Pytest puts app/backend on the path via pyproject.toml, so the backend
# modules import the same way they do when the server runs.

ADMIN_TEST_PASSWORD = "s3cret"

SAMPLE_PORTFOLIO = {
    "personalDetails": {
        "name": "Jane Doe",
        "title": "Software Engineer",
        "email": "jane@example.com",
        "phone": "",
        "linkedin": "https://www.linkedin.com/in/janedoe",
        "github": "https://github.com/janedoe",
        "summary": "Engineer who ships reliable backend systems.",
        "profilePictureUrl": "",
    },
    "education": [
        {"institution": "State University", "degree": "BSc", "fieldOfStudy": "Computer Science", "startDate": "2015", "endDate": "2019", "description": ""}
    ],
    "workExperience": [
        {"company": "Acme Corp", "jobTitle": "Software Engineer", "startDate": "2019", "endDate": "Present", "responsibilities": ["Built APIs serving 2M requests a day", "Cut deploy time by 40%"]}
    ],
    "skills": [
        {"category": "Programming Languages", "name": "Python", "level": 85},
        {"category": "Programming Languages", "name": "Go", "level": 70},
    ],
    "projects": [
        {"name": "Portfolio", "description": "Personal site", "technologies": ["FastAPI", "React"], "link": "https://janedoe.dev", "imageUrl": ""}
    ],
    "achievements": [{"title": "Hackathon Winner", "description": "First place at City Hack 2021"}],
    "certifications": [],
    "seo": {"title": "Jane Doe | Software Engineer", "description": "Portfolio of Jane Doe."},
}


@pytest.fixture
def sample_portfolio():
    return copy.deepcopy(SAMPLE_PORTFOLIO)

@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(llm_services, "GEMINI_API_KEY", "test-key")

@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.setattr(llm_services, "GEMINI_API_KEY", None)

@pytest.fixture
def store(tmp_path):
    return PortfolioStore(str(tmp_path / "data" / "portfolio.json"))

@pytest.fixture
def client(monkeypatch, store):
    """App client with an isolated store, fresh sessions and a known admin password."""
    monkeypatch.setattr(main, "store", store)
    monkeypatch.setattr(main, "sessions", SessionRegistry(ADMIN_TEST_PASSWORD))
    monkeypatch.setattr(main, "drafts", DraftRegistry())
    return TestClient(main.app)

@pytest.fixture
def auth_headers(client):
    res = client.post("/api/auth/login", json={"password": ADMIN_TEST_PASSWORD})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}
