"""Shared fixtures: a small hand-built taxonomy."""

import pytest

from careergalaxy.core.taxonomy import TaxonomyStore

SMALL_TAXONOMY = [
    {"id": "tech", "name": "Technology", "level": 0, "color": "#8b5cf6"},
    {"id": "biz", "name": "Business", "level": 0, "color": "#10b981"},
    {"id": "software", "name": "Software Industry", "level": 1, "parent_id": "tech", "color": "#8b5cf6"},
    {"id": "data", "name": "Data Industry", "level": 1, "parent_id": "tech", "color": "#0ea5e9"},
    {"id": "consulting", "name": "Consulting", "level": 1, "parent_id": "biz", "color": "#10b981"},
    {"id": "web", "name": "Web Development", "level": 2, "parent_id": "software"},
    {"id": "science", "name": "Data Science", "level": 2, "parent_id": "data"},
    {"id": "frontend", "name": "Frontend Family", "level": 3, "parent_id": "web"},
    {
        "id": "fe-dev",
        "name": "Frontend Engineer",
        "level": 4,
        "parent_id": "frontend",
        "description": "Builds user interfaces",
        "job_search_keywords": ["react developer"],
        "typical_salary": "£40k - £60k",
        "experience_level": "mid",
    },
    {"id": "ui-dev", "name": "UI Engineer", "level": 4, "parent_id": "frontend"},
]


@pytest.fixture
def store() -> TaxonomyStore:
    return TaxonomyStore.from_records(SMALL_TAXONOMY)


@pytest.fixture
def tiny_store() -> TaxonomyStore:
    """Root R with a single child I."""
    return TaxonomyStore.from_records([
        {"id": "R", "name": "Root", "level": 0, "color": "#111111"},
        {"id": "I", "name": "Industry", "level": 1, "parent_id": "R", "color": "#111111"},
    ])
