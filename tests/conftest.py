"""Shared test fixtures for ResumeAI tests."""

from unittest.mock import MagicMock

import pytest

from user_store import UserStore


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    """Fixed signing secret so tests never write data/.jwt-secret."""
    monkeypatch.setenv("JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")
    return "test-secret-key-that-is-long-enough-for-hs256"


@pytest.fixture
def tmp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def test_config():
    """Create a test configuration dictionary."""
    return {
        "app": {
            "name": "ResumeAI",
            "cors_origins": ["http://localhost:5173"],
        },
        "ats": {
            "models": ["model-a", "model-b", "model-c"],
            "max_tokens": 1024,
            "min_resume_text_chars": 50,
            "max_upload_bytes": 1024 * 1024,
        },
        "auth": {
            "token_expiry_days": 7,
            "identity_provider": {
                "name": "google",
                "userinfo_url": "https://idp.example.com/userinfo",
            },
        },
        "emphasis": {"extra_keywords": []},
        "storage": {"users_file": "users.json"},
    }


@pytest.fixture
def mock_claude_client():
    """Create a mock Claude client that returns predictable responses."""
    client = MagicMock()
    client.complete_with_fallback.return_value = (
        '{"score": 72, "matchLevel": "Good", "missingKeywords": ["Docker"], '
        '"strengths": ["React experience"], "improvements": ["Add metrics"]}',
        "model-a",
    )
    client.get_token_usage.return_value = {
        "input_tokens": 100,
        "output_tokens": 50,
        "total_tokens": 150,
    }
    return client


@pytest.fixture
def user_store(test_config, tmp_data_dir):
    """Create a UserStore using a temporary directory."""
    return UserStore(test_config, data_dir=tmp_data_dir)


@pytest.fixture
def sample_resume():
    """A resume snapshot as the editor sends it."""
    return {
        "personal": {
            "name": "Asha Verma",
            "email": "asha@example.com",
            "phone": "+91 98765 43210",
            "linkedin": "https://linkedin.com/in/asha",
            "github": "https://github.com/asha",
            "portfolio": "",
        },
        "summary": "Full-stack developer who enjoys building responsive web apps.",
        "skills": {
            "languages": ["JavaScript", "Python"],
            "frameworks": ["React", "Express"],
            "tools": ["Git", "MongoDB"],
            "soft": ["Communication"],
        },
        "experience": [
            {
                "title": "Web Developer Intern",
                "company": "Acme Labs",
                "duration": "Jun 2024 - Aug 2024",
                "description": "Built React dashboards backed by Node.js APIs\nWrote unit tests",
            }
        ],
        "projects": [
            {
                "title": "ShopEasy",
                "description": "An e-commerce store with a shopping cart and checkout",
                "tech": "MERN",
                "duration": "2024",
                "liveLink": "https://shopeasy.example.com",
            }
        ],
        "education": [
            {
                "degree": "Bachelor of Technology in CSE",
                "institution": "State University",
                "year": "2021 - 2025",
                "score": "8.7",
                "location": "Pune",
            }
        ],
        "achievements": ["Winner, campus hackathon 2023"],
        "certificates": ["AWS Cloud Practitioner (Mar 2024)"],
    }
