"""Shared fixtures for devdash tests."""

from datetime import datetime, timedelta

import pytest

from devdash.database import InMemoryAnalysisStore, LocalSqliteStore
from devdash.models import FileAnalysisRecord


PORTFOLIO_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta name="description" content="Portfolio">
  <title>Portfolio</title>
</head>
<body>
  <header><nav><a href="/">Home</a></nav></header>
  <main>
    <h1>Hi</h1>
    <section><h2>Work</h2><img src="a.png" alt="A"><img src="b.png" alt=""></section>
    <article><h3>Post</h3><img src="c.png"></article>
    <div><p>text</p></div>
  </main>
  <footer><p>bye</p></footer>
</body>
</html>
"""


@pytest.fixture
def make_record():
    """Factory for FileAnalysisRecord with every structure check passing."""

    def _make(**overrides):
        values = dict(
            file_path="index.html",
            file_name="index.html",
            has_doctype=True,
            has_lang_attribute=True,
            has_meta_charset=True,
            has_meta_viewport=True,
            has_meta_description=True,
            has_title=True,
            has_proper_heading_hierarchy=True,
            uses_main_element=True,
            total_elements=100,
        )
        values.update(overrides)
        return FileAnalysisRecord(**values)

    return _make


@pytest.fixture
def memory_store():
    store = InMemoryAnalysisStore()
    yield store
    store.close()


@pytest.fixture
def sqlite_store(tmp_path):
    store = LocalSqliteStore(db_url=f"sqlite:///{tmp_path / 'history.db'}")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    """Each store implementation in turn."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def add_session():
    """Append a session with one repository holding the given records."""

    base_time = datetime(2024, 1, 1, 12, 0, 0)

    def _add(store, username, records, days_offset=0, total_repositories=1):
        session_id = store.append_session(
            username=username,
            total_repositories=total_repositories,
            total_html_files=len(records),
            created_at=base_time + timedelta(days=days_offset),
        )
        repo_id = store.append_repository_analysis(session_id, "site", language="HTML")
        for record in records:
            store.append_file_record(repo_id, record)
        return session_id

    return _add


@pytest.fixture
def portfolio_page():
    return PORTFOLIO_PAGE
