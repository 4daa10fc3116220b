"""Shared fixtures for Podium tests."""

import pytest

from podium.schemas import OutlineDraft, Section
from podium.session import InMemoryOutlineStore, SQLiteOutlineStore


def make_draft(section_count: int = 3, title: str = "Quarterly review") -> OutlineDraft:
    return OutlineDraft(
        title=title,
        description="Numbers, wins and next steps",
        sections=[
            Section(title=f"Part {i + 1}", content=f"- point {i + 1}", duration=5 + i)
            for i in range(section_count)
        ],
    )


@pytest.fixture
def draft() -> OutlineDraft:
    return make_draft()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Each store implementation, so contract tests run against both."""
    if request.param == "memory":
        return InMemoryOutlineStore()
    return SQLiteOutlineStore(tmp_path / "outlines.db")
