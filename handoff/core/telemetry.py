from __future__ import annotations

from pathlib import Path

import duckdb

from handoff.core.config import get_settings


class TelemetryStore:
    """인계 이벤트를 저장하는 DuckDB 텔레메트리 저장소

    기본 경로는 ``:memory:``이므로 프로세스 종료 시 함께 사라진다.
    """

    _instance: "TelemetryStore | None" = None

    def __new__(cls) -> "TelemetryStore":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init_db()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """싱글턴 연결을 닫고 초기화"""
        if cls._instance is not None:
            cls._instance._conn.close()
        cls._instance = None

    def _init_db(self) -> None:
        settings = get_settings()
        if settings.duckdb_path != ":memory:":
            Path(settings.duckdb_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = duckdb.connect(settings.duckdb_path)
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS logs (
                timestamp TIMESTAMP,
                level VARCHAR,
                event VARCHAR,
                patient_id VARCHAR,
                stage VARCHAR,
                error_code VARCHAR,
                message VARCHAR,
                category VARCHAR,
                entry_count INTEGER
            )
            """
        )

    def insert_log(self, record: dict) -> None:
        """로그 레코드를 저장

        Args:
            record: 로그 레코드 딕셔너리
        """
        self._conn.execute(
            """
            INSERT INTO logs (timestamp, level, event, patient_id, stage, error_code, message, category, entry_count)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                record.get("timestamp"),
                record.get("level"),
                record.get("event"),
                record.get("patient_id"),
                record.get("stage"),
                record.get("error_code"),
                record.get("message"),
                record.get("category"),
                record.get("entry_count"),
            ],
        )

    def query_logs(self, where: str, params: list) -> list[tuple]:
        """조건절(WHERE)을 사용해 로그를 조회

        Args:
            where: SQL WHERE 절
            params: 파라미터 목록

        Returns:
            행 목록
        """
        query = "SELECT * FROM logs"
        if where:
            query += f" WHERE {where}"
        return self._conn.execute(query, params).fetchall()
