"""Shared setup for the API tests.

Import this module before anything from ``resume_builder`` so settings are
read from the test environment.
"""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

_TMP_DIR = tempfile.mkdtemp(prefix="resume-builder-tests-")

os.environ["DATABASE_PATH"] = os.path.join(_TMP_DIR, "test.db")
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["AI_ENABLED"] = "0"
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["SEED_TEMPLATES"] = "0"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("SMTP_HOST", None)
os.environ.pop("SENTRY_DSN", None)

from resume_builder.core.security import USERS, create_access_token, hash_password  # noqa: E402
from resume_builder.db import store  # noqa: E402

RESUME_TEXT = (
    "Jane Doe\n"
    "jane@example.com | +1 555 123 4567\n"
    "EXPERIENCE\n"
    "Senior Backend Engineer, Acme Corp\n"
    "- Developed Python microservices with FastAPI and PostgreSQL serving 2M users.\n"
    "- Led migration to Docker and Kubernetes, reducing deploy time by 40%.\n"
    "- Implemented CI pipelines and improved test coverage to 90%.\n"
    "EDUCATION\n"
    "B.Sc. Computer Science, State University\n"
    "SKILLS\n"
    "Python, SQL, Docker, Kubernetes, AWS, React\n"
)

JOB_DESCRIPTION = (
    "We are hiring a backend engineer with strong Python and SQL skills. "
    "Experience with Docker, Kubernetes and AWS is required. "
    "Knowledge of Terraform and GraphQL is a plus."
)


def clear_database() -> None:
    store.clear_database()


def make_user(
    username: str = "jane",
    email: str | None = None,
    *,
    password: str = "secret123",
    role: str = "user",
    verified: bool = True,
) -> dict:
    return store.insert_document(
        USERS,
        {
            "username": username,
            "email": email or f"{username}@example.com",
            "first_name": username.capitalize(),
            "last_name": "Tester",
            "password_hash": hash_password(password),
            "role": role,
            "is_email_verified": verified,
            "profile_picture": None,
            "otp": None,
            "otp_expiry": None,
            "google_id": None,
            "github_id": None,
        },
    )


def auth_headers(user: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user['id'])}"}


def resume_payload(name: str = "My Resume") -> dict:
    return {
        "name": name,
        "sections": [
            {
                "type": "header",
                "title": "Jane Doe",
                "content": "jane@example.com | +1 555 123 4567",
                "style": {"fontFamily": "Georgia", "fontSize": 14, "fontWeight": "bold", "color": "#333"},
            },
            {
                "type": "experience",
                "title": "Experience",
                "content": [
                    "Developed Python microservices with FastAPI serving 2M users",
                    "Led migration to Docker and Kubernetes",
                ],
            },
            {
                "type": "skills",
                "title": "Skills",
                "content": {"languages": "Python, SQL", "tools": ["Docker", "Kubernetes", "AWS"]},
            },
        ],
    }
