from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from tale.domain.errors import SaveError
from tale.domain.repositories import SaveRepository


logger = logging.getLogger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS saves (
    slot VARCHAR(64) PRIMARY KEY,
    game_time BIGINT NOT NULL,
    document TEXT NOT NULL
)
"""


class SqlSaveRepository(SaveRepository):
    """Save slots in a `saves` table, one JSON document per slot."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self.SessionLocal = session_factory
        with self.SessionLocal.begin() as session:
            session.execute(text(_CREATE_TABLE))

    def save(self, slot: str, document: Dict[str, Any]) -> None:
        payload = json.dumps(document, sort_keys=True)
        with self.SessionLocal.begin() as session:
            dialect = session.bind.dialect.name if session.bind is not None else "sqlite"
            if dialect == "mysql":
                statement = text(
                    """
                    INSERT INTO saves (slot, game_time, document)
                    VALUES (:slot, :game_time, :document)
                    ON DUPLICATE KEY UPDATE
                        game_time = VALUES(game_time),
                        document = VALUES(document)
                    """
                )
            else:
                statement = text(
                    """
                    INSERT INTO saves (slot, game_time, document)
                    VALUES (:slot, :game_time, :document)
                    ON CONFLICT(slot) DO UPDATE SET
                        game_time = excluded.game_time,
                        document = excluded.document
                    """
                )
            session.execute(
                statement,
                {"slot": slot, "game_time": int(document.get("time", 0)), "document": payload},
            )
        logger.info("Stored save slot %s", slot)

    def load(self, slot: str) -> Optional[Dict[str, Any]]:
        with self.SessionLocal() as session:
            row = session.execute(
                text("SELECT document FROM saves WHERE slot = :slot"),
                {"slot": slot},
            ).first()
        if row is None:
            return None
        try:
            document = json.loads(row.document)
        except json.JSONDecodeError as exc:
            raise SaveError(f"Save slot {slot} holds invalid JSON") from exc
        logger.info("Read save slot %s", slot)
        return document

    def list_slots(self) -> List[str]:
        with self.SessionLocal() as session:
            rows = session.execute(text("SELECT slot FROM saves ORDER BY slot")).all()
        return [str(row.slot) for row in rows]

    def delete(self, slot: str) -> bool:
        with self.SessionLocal.begin() as session:
            result = session.execute(text("DELETE FROM saves WHERE slot = :slot"), {"slot": slot})
            deleted = bool(result.rowcount)
        if deleted:
            logger.info("Deleted save slot %s", slot)
        return deleted
