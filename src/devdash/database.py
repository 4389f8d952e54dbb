# src/devdash/database.py
"""Analysis history storage supporting local SQLite and in-memory backends."""

import sqlite3
from abc import ABC, abstractmethod
from dataclasses import fields, replace
from datetime import datetime
from typing import Dict, List, Optional
import logging

from devdash.config import settings
from devdash.models import (
    AnalysisSession,
    FileAnalysisRecord,
    RepositoryAnalysis,
    SessionSnapshot,
)

logger = logging.getLogger(__name__)

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS analysis_sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TIMESTAMP NOT NULL,
    username TEXT NOT NULL,
    total_repositories INTEGER NOT NULL DEFAULT 0,
    total_html_files INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_sessions_username_created
    ON analysis_sessions (username, created_at);

CREATE TABLE IF NOT EXISTS repository_analyses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id INTEGER NOT NULL REFERENCES analysis_sessions(id),
    repository_name TEXT NOT NULL,
    language TEXT,
    last_updated TIMESTAMP,
    is_static INTEGER NOT NULL DEFAULT 0,
    html_files_count INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS file_analysis_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    repository_analysis_id INTEGER NOT NULL REFERENCES repository_analyses(id),
    file_path TEXT NOT NULL,
    file_name TEXT,
    file_size INTEGER,
    analyzed_at TIMESTAMP,

    -- Document structure
    has_doctype INTEGER,
    has_lang_attribute INTEGER,
    has_meta_charset INTEGER,
    has_meta_viewport INTEGER,
    has_meta_description INTEGER,
    has_title INTEGER,

    -- Semantic HTML
    semantic_elements_count INTEGER,
    semantic_ratio REAL,
    uses_main_element INTEGER,
    uses_nav_element INTEGER,
    uses_header_element INTEGER,
    uses_footer_element INTEGER,

    -- Accessibility
    total_images INTEGER,
    images_without_alt INTEGER,
    alt_tag_coverage REAL,

    -- Headings
    total_headings INTEGER,
    has_proper_heading_hierarchy INTEGER,

    -- Totals and issue summary
    total_elements INTEGER,
    issues_count INTEGER,
    critical_issues INTEGER,
    warning_issues INTEGER
);
"""

# Columns written for each file record, in table order
FILE_RECORD_COLUMNS = [
    f.name for f in fields(FileAnalysisRecord)
    if f.name not in ("id", "repository_analysis_id")
]

# Written alongside the counts for ad-hoc SQL; recomputed on read
DERIVED_FILE_COLUMNS = ["semantic_ratio", "alt_tag_coverage"]

_BOOLEAN_FILE_COLUMNS = {
    f.name for f in fields(FileAnalysisRecord) if f.type is bool
}


class AbstractAnalysisStore(ABC):
    """Persistence port for analysis history.

    Sessions, repository analyses and file records are append-only and
    addressed by id. Children carry their parent's id.
    """

    @abstractmethod
    def append_session(
        self,
        username: str,
        total_repositories: int,
        total_html_files: int,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Record a new analysis session and return its id."""
        pass

    @abstractmethod
    def append_repository_analysis(
        self,
        session_id: int,
        repository_name: str,
        language: str = "Unknown",
        last_updated: Optional[datetime] = None,
        is_static: bool = False,
        html_files_count: int = 0,
    ) -> int:
        """Record a repository summary under a session and return its id."""
        pass

    @abstractmethod
    def append_file_record(self, repository_analysis_id: int, record: FileAnalysisRecord) -> int:
        """Record one file's flattened metrics and return its id."""
        pass

    @abstractmethod
    def query_recent_sessions(self, username: str, limit: int) -> List[SessionSnapshot]:
        """Return up to `limit` sessions for a user, newest first.

        Args:
            username: Account whose history is read
            limit: Maximum number of sessions

        Returns:
            SessionSnapshots ordered by created_at descending
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
        pass


class InMemoryAnalysisStore(AbstractAnalysisStore):
    """Append-only in-process store keyed by integer ids."""

    def __init__(self):
        self._sessions: Dict[int, AnalysisSession] = {}
        self._repositories: Dict[int, RepositoryAnalysis] = {}
        self._files: Dict[int, FileAnalysisRecord] = {}
        self._repositories_by_session: Dict[int, List[int]] = {}
        self._files_by_repository: Dict[int, List[int]] = {}

    def append_session(self, username, total_repositories, total_html_files, created_at=None):
        session_id = len(self._sessions) + 1
        self._sessions[session_id] = AnalysisSession(
            id=session_id,
            created_at=created_at or datetime.now(),
            username=username,
            total_repositories=total_repositories,
            total_html_files=total_html_files,
        )
        self._repositories_by_session[session_id] = []
        return session_id

    def append_repository_analysis(
        self,
        session_id,
        repository_name,
        language="Unknown",
        last_updated=None,
        is_static=False,
        html_files_count=0,
    ):
        if session_id not in self._sessions:
            raise KeyError(f"Unknown session id: {session_id}")

        repo_id = len(self._repositories) + 1
        self._repositories[repo_id] = RepositoryAnalysis(
            id=repo_id,
            session_id=session_id,
            repository_name=repository_name,
            language=language,
            last_updated=last_updated,
            is_static=is_static,
            html_files_count=html_files_count,
        )
        self._repositories_by_session[session_id].append(repo_id)
        self._files_by_repository[repo_id] = []
        return repo_id

    def append_file_record(self, repository_analysis_id, record):
        if repository_analysis_id not in self._repositories:
            raise KeyError(f"Unknown repository analysis id: {repository_analysis_id}")

        file_id = len(self._files) + 1
        self._files[file_id] = replace(
            record, id=file_id, repository_analysis_id=repository_analysis_id
        )
        self._files_by_repository[repository_analysis_id].append(file_id)
        return file_id

    def query_recent_sessions(self, username, limit):
        sessions = sorted(
            (s for s in self._sessions.values() if s.username == username),
            key=lambda s: (s.created_at, s.id),
            reverse=True,
        )[:limit]

        snapshots = []
        for session in sessions:
            snapshot = SessionSnapshot(session=session)
            for repo_id in self._repositories_by_session[session.id]:
                snapshot.repositories[repo_id] = self._repositories[repo_id]
                snapshot.files_by_repository[repo_id] = [
                    self._files[file_id] for file_id in self._files_by_repository[repo_id]
                ]
            snapshots.append(snapshot)
        return snapshots


def _to_db_value(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


class LocalSqliteStore(AbstractAnalysisStore):
    """SQLite implementation of the analysis store."""

    def __init__(self, db_url: Optional[str] = None):
        """Initialize local SQLite store.

        Args:
            db_url: Database URL (sqlite:///path/to/db.db). Defaults to settings.DATABASE_URL.
        """
        self.db_url = db_url or settings.DATABASE_URL
        self.db_path = self.db_url.replace("sqlite:///", "")
        self.conn: Optional[sqlite3.Connection] = None
        self.connect()
        self.create_schema()

    def connect(self) -> None:
        """Establish SQLite connection."""
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON;")
        logger.debug(f"Connected to local SQLite database: {self.db_path}")

    def close(self) -> None:
        """Close SQLite connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.debug("Closed local SQLite connection")

    def create_schema(self) -> None:
        """Create the history tables if they don't exist."""
        with self.conn:
            self.conn.executescript(CREATE_TABLES_SQL)
        logger.debug("Schema verified/created for local SQLite")

    def append_session(self, username, total_repositories, total_html_files, created_at=None):
        created_at = created_at or datetime.now()
        with self.conn:
            cursor = self.conn.execute(
                "INSERT INTO analysis_sessions "
                "(created_at, username, total_repositories, total_html_files) "
                "VALUES (?, ?, ?, ?)",
                (created_at.isoformat(), username, total_repositories, total_html_files),
            )
        logger.debug(f"Saved session {cursor.lastrowid} for user: {username}")
        return cursor.lastrowid

    def append_repository_analysis(
        self,
        session_id,
        repository_name,
        language="Unknown",
        last_updated=None,
        is_static=False,
        html_files_count=0,
    ):
        with self.conn:
            cursor = self.conn.execute(
                "INSERT INTO repository_analyses "
                "(session_id, repository_name, language, last_updated, is_static, html_files_count) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    session_id,
                    repository_name,
                    language,
                    _to_db_value(last_updated),
                    int(is_static),
                    html_files_count,
                ),
            )
        return cursor.lastrowid

    def append_file_record(self, repository_analysis_id, record):
        written = FILE_RECORD_COLUMNS + DERIVED_FILE_COLUMNS
        columns = ["repository_analysis_id"] + written
        values = [repository_analysis_id] + [
            _to_db_value(getattr(record, column)) for column in written
        ]
        placeholders = ', '.join('?' for _ in columns)
        insert_sql = (
            f"INSERT INTO file_analysis_records ({', '.join(columns)}) VALUES ({placeholders})"
        )

        with self.conn:
            cursor = self.conn.execute(insert_sql, values)
        return cursor.lastrowid

    def query_recent_sessions(self, username, limit):
        cursor = self.conn.execute(
            "SELECT * FROM analysis_sessions WHERE username = ? "
            "ORDER BY created_at DESC, id DESC LIMIT ?",
            (username, limit),
        )
        return [self._load_snapshot(row) for row in cursor.fetchall()]

    def _load_snapshot(self, session_row: sqlite3.Row) -> SessionSnapshot:
        snapshot = SessionSnapshot(
            session=AnalysisSession(
                id=session_row['id'],
                created_at=_parse_timestamp(session_row['created_at']),
                username=session_row['username'],
                total_repositories=session_row['total_repositories'],
                total_html_files=session_row['total_html_files'],
            )
        )

        repo_rows = self.conn.execute(
            "SELECT * FROM repository_analyses WHERE session_id = ? ORDER BY id",
            (snapshot.session.id,),
        ).fetchall()

        for repo_row in repo_rows:
            repo = RepositoryAnalysis(
                id=repo_row['id'],
                session_id=repo_row['session_id'],
                repository_name=repo_row['repository_name'],
                language=repo_row['language'],
                last_updated=_parse_timestamp(repo_row['last_updated']),
                is_static=bool(repo_row['is_static']),
                html_files_count=repo_row['html_files_count'],
            )
            snapshot.repositories[repo.id] = repo

            file_rows = self.conn.execute(
                "SELECT * FROM file_analysis_records WHERE repository_analysis_id = ? ORDER BY id",
                (repo.id,),
            ).fetchall()
            snapshot.files_by_repository[repo.id] = [
                self._row_to_file_record(row) for row in file_rows
            ]

        return snapshot

    @staticmethod
    def _row_to_file_record(row: sqlite3.Row) -> FileAnalysisRecord:
        values = {column: row[column] for column in FILE_RECORD_COLUMNS}
        for column in _BOOLEAN_FILE_COLUMNS:
            values[column] = bool(values[column])
        values['analyzed_at'] = _parse_timestamp(values['analyzed_at'])
        return FileAnalysisRecord(
            id=row['id'],
            repository_analysis_id=row['repository_analysis_id'],
            **values,
        )


def get_store(
    backend: Optional[str] = None,
    **kwargs,
) -> AbstractAnalysisStore:
    """Factory function to create the appropriate analysis store.

    Args:
        backend: Storage backend ('local' or 'memory'). Defaults to settings.DB_BACKEND.
        **kwargs: Additional arguments passed to the store constructor.

    Returns:
        An AbstractAnalysisStore implementation

    Raises:
        ValueError: If an unknown backend is specified.
    """
    backend = backend or settings.DB_BACKEND

    if backend == "local":
        logger.info("Using local SQLite storage backend")
        return LocalSqliteStore(**kwargs)
    elif backend == "memory":
        logger.info("Using in-memory storage backend")
        return InMemoryAnalysisStore(**kwargs)
    else:
        raise ValueError(
            f"Unknown storage backend: '{backend}'. "
            "Supported backends: 'local', 'memory'"
        )
