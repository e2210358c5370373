import sqlite3
import threading
from contextlib import closing
from pathlib import Path
from typing import Any, Dict, List

TABLE_NAME = "orders"
COLUMNS = (
    "id",
    "name",
    "email",
    "product",
    "price",
    "paymentId",
    "paymentStatus",
    "envelopeId",
    "envelopeStatus",
    "createdAt",
)
DEFAULT_LIST_LIMIT = 100

_CREATE_TABLE = f"""CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
  id TEXT PRIMARY KEY,
  name TEXT,
  email TEXT,
  product TEXT,
  price REAL,
  paymentId TEXT,
  paymentStatus TEXT,
  envelopeId TEXT,
  envelopeStatus TEXT,
  createdAt TEXT
)"""

_INSERT = (
    f"INSERT INTO {TABLE_NAME} ({', '.join(COLUMNS)}) "
    f"VALUES ({', '.join(':' + column for column in COLUMNS)})"
)


class OrderRepository:
    def __init__(self, path: str) -> None:
        self.path = path
        self._write_lock = threading.Lock()

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self.path, timeout=30)
        connection.row_factory = sqlite3.Row
        return connection

    def initialize(self) -> None:
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        with self._write_lock, closing(self._connect()) as connection:
            connection.execute(_CREATE_TABLE)
            connection.commit()

    def insert(self, record: Dict[str, Any]) -> None:
        row = {column: record.get(column) for column in COLUMNS}
        with self._write_lock, closing(self._connect()) as connection:
            connection.execute(_INSERT, row)
            connection.commit()

    def list_recent(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Dict[str, Any]]:
        with closing(self._connect()) as connection:
            rows = connection.execute(
                f"SELECT * FROM {TABLE_NAME} ORDER BY createdAt DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [dict(row) for row in rows]
