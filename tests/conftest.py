# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides sample store rows for listings, inquiries and articles
# - Resets the shared rate limiter between tests
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ADMIN_EMAILS", "admin@staylo.com")
os.environ.setdefault("ADMIN_EMAIL", "admin@staylo.com")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import time

import pytest
from jose import jwt

from app.auth.models import AuthUser
from app.config import settings
from app.middleware import limiter

LISTING_ID = "11111111-1111-4111-8111-111111111111"
INQUIRY_ID = "22222222-2222-4222-8222-222222222222"
ARTICLE_ID = "33333333-3333-4333-8333-333333333333"
ADMIN_USER_ID = "44444444-4444-4444-8444-444444444444"


def make_token(
    sub: str = ADMIN_USER_ID,
    email: str = "admin@staylo.com",
    expires_in: int = 3600,
    secret: str | None = None,
    audience: str = "authenticated",
) -> str:
    """Sign a Supabase-style access token with the test secret."""
    payload = {
        "sub": sub,
        "email": email,
        "aud": audience,
        "role": "authenticated",
        "exp": int(time.time()) + expires_in,
    }
    return jwt.encode(payload, secret or settings.SUPABASE_JWT_SECRET, algorithm="HS256")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Every test starts with an empty request budget."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def admin_user():
    """The signed-in admin used by API and page tests."""
    return AuthUser(id=ADMIN_USER_ID, email="admin@staylo.com")


@pytest.fixture
def sample_listing_row():
    """Sample listing row as returned by the store."""
    return {
        "id": LISTING_ID,
        "name": "Sunrise Hostel",
        "location": "Ayeduase, Kumasi",
        "price": 3500,
        "description": "Two minutes from the main gate.",
        "amenities": ["WiFi", "Security"],
        "owner_name": "Kwame Mensah",
        "owner_contact": "+233 24 000 0000",
        "owner_email": None,
        "status": "active",
        "images": ["https://cdn.example.com/sunrise-1.jpg"],
        "views": 12,
        "created_at": "2024-01-15T10:00:00+00:00",
        "updated_at": "2024-01-15T10:00:00+00:00",
    }


@pytest.fixture
def sample_inquiry_row():
    """Sample inquiry row as returned by the store."""
    return {
        "id": INQUIRY_ID,
        "student_name": "Ama Owusu",
        "email": "ama@example.com",
        "phone": "+233 20 000 0000",
        "hostel_interested": "Sunrise Hostel",
        "message": "Is a two-in-a-room available?",
        "date": "2024-02-01T09:30:00+00:00",
        "status": "unread",
        "created_at": "2024-02-01T09:30:00+00:00",
        "updated_at": "2024-02-01T09:30:00+00:00",
    }


@pytest.fixture
def sample_article_row():
    """Sample published article row as returned by the store."""
    return {
        "id": ARTICLE_ID,
        "title": "Top 5 Study Spots on Campus",
        "slug": "top-5-study-spots-on-campus",
        "excerpt": "Where to get work done between lectures.",
        "content": "The library is only the start.",
        "author": "Staylo Team",
        "category": "Student Life",
        "tags": ["study", "campus"],
        "featured_image": "https://cdn.example.com/study.jpg",
        "images": [],
        "status": "published",
        "views": 40,
        "published_at": "2024-03-01T08:00:00+00:00",
        "created_at": "2024-02-28T08:00:00+00:00",
        "updated_at": "2024-03-01T08:00:00+00:00",
    }
