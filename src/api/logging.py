"""SQLite request logging for API."""

import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from fastapi import Request

REQUEST_LOG_SCHEMA = """
    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        username TEXT,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL
    )
"""


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    username: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def create_request_log_table(db_path: Path) -> None:
    """Create the database file and request log table if missing."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(REQUEST_LOG_SCHEMA)
        conn.commit()
    finally:
        conn.close()


def log_request(log: RequestLog, db_path: Path) -> None:
    """Write request log to SQLite database."""
    create_request_log_table(db_path)
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            """
            INSERT INTO api_requests (
                request_id, timestamp, endpoint, method, client_ip, username,
                status_code, error_code, error_message, processing_time_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                log.request_id,
                log.timestamp,
                log.endpoint,
                log.method,
                log.client_ip,
                log.username,
                log.status_code,
                log.error_code,
                log.error_message,
                log.processing_time_ms,
            ),
        )
        conn.commit()
    finally:
        conn.close()
