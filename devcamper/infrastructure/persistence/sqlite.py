import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from ...domain.errors import DuplicateFieldError, StoreError, ValidationError
from ...domain.models import Bootcamp, Role, User
from ...domain.ports.persistence import PersistenceGateway

_USER_COLUMNS = "id, name, email, role, reset_password_token, reset_password_expire, created_at"
_BOOTCAMP_FIELDS = (
    "name",
    "description",
    "website",
    "phone",
    "email",
    "address",
    "careers",
    "average_rating",
    "average_cost",
    "photo",
    "housing",
    "job_assistance",
    "job_guarantee",
    "accept_gi",
)
_BOOLEAN_FIELDS = {"housing", "job_assistance", "job_guarantee", "accept_gi"}


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway."""

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        roles = ", ".join(f"'{role.value}'" for role in Role)
        with self._conn:
            self._conn.executescript(
                f"""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ({roles})),
                    reset_password_token TEXT,
                    reset_password_expire TEXT,
                    created_at TEXT NOT NULL,
                    CHECK ((reset_password_token IS NULL) = (reset_password_expire IS NULL))
                );

                CREATE INDEX IF NOT EXISTS idx_users_reset_token
                    ON users(reset_password_token);

                CREATE TABLE IF NOT EXISTS bootcamps (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT NOT NULL,
                    website TEXT,
                    phone TEXT,
                    email TEXT,
                    address TEXT NOT NULL,
                    careers TEXT NOT NULL,
                    average_rating REAL,
                    average_cost REAL,
                    photo TEXT NOT NULL DEFAULT 'no-photo.jpg',
                    housing INTEGER NOT NULL DEFAULT 0,
                    job_assistance INTEGER NOT NULL DEFAULT 0,
                    job_guarantee INTEGER NOT NULL DEFAULT 0,
                    accept_gi INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                );
                """
            )

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def _write(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                with self._conn:
                    yield self._conn
            except sqlite3.IntegrityError as exc:
                if "UNIQUE" in str(exc):
                    raise DuplicateFieldError() from exc
                raise ValidationError(str(exc)) from exc
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc

    def _fetch_one(self, query: str, params: tuple) -> Optional[sqlite3.Row]:
        with self._lock:
            try:
                cur = self._conn.execute(query, params)
                return cur.fetchone()
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc

    def _fetch_all(self, query: str, params: tuple) -> List[sqlite3.Row]:
        with self._lock:
            try:
                cur = self._conn.execute(query, params)
                return cur.fetchall()
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc

    # UserRepository API ----------------------------------------------------
    def get_user_by_email(self, email: str, *, include_password: bool = False) -> Optional[User]:
        row = self._fetch_one(
            f"SELECT {self._user_columns(include_password)} FROM users WHERE email = ?",
            (email.strip().lower(),),
        )
        return self._row_to_user(row) if row else None

    def get_user_by_id(self, user_id: int, *, include_password: bool = False) -> Optional[User]:
        row = self._fetch_one(
            f"SELECT {self._user_columns(include_password)} FROM users WHERE id = ?",
            (user_id,),
        )
        return self._row_to_user(row) if row else None

    def consume_reset_token(self, token_hash: str, now: datetime, password_hash: str) -> Optional[User]:
        """Swap in ``password_hash`` for the holder of an unexpired reset token.

        The match and the update happen in one transaction, so a token can be
        redeemed at most once. Returns ``None`` when no account holds the token.
        """
        with self._write() as conn:
            row = conn.execute(
                """
                SELECT id FROM users
                WHERE reset_password_token = ? AND reset_password_expire > ?
                """,
                (token_hash, self._format_datetime(now)),
            ).fetchone()
            if not row:
                return None
            conn.execute(
                """
                UPDATE users
                SET password_hash = ?, reset_password_token = NULL, reset_password_expire = NULL
                WHERE id = ? AND reset_password_token = ?
                """,
                (password_hash, row["id"], token_hash),
            )
        return self.get_user_by_id(row["id"])

    def list_users(self, offset: int, limit: int) -> List[User]:
        rows = self._fetch_all(
            f"SELECT {_USER_COLUMNS} FROM users ORDER BY id ASC LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return [self._row_to_user(row) for row in rows]

    def count_users(self) -> int:
        row = self._fetch_one("SELECT COUNT(*) AS total FROM users", ())
        return row["total"] if row else 0

    def create_user(self, name: str, email: str, password_hash: str, role: Role = Role.USER) -> User:
        with self._write() as conn:
            cur = conn.execute(
                """
                INSERT INTO users (name, email, password_hash, role, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name.strip(), email.strip().lower(), password_hash, Role(role).value, self._now()),
            )
            user_id = cur.lastrowid
        user = self.get_user_by_id(user_id)
        if not user:
            raise StoreError("Failed to persist user.")
        return user

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> Optional[User]:
        updates = []
        params: List[Any] = []
        if name is not None:
            updates.append("name = ?")
            params.append(name.strip())
        if email is not None:
            updates.append("email = ?")
            params.append(email.strip().lower())
        if role is not None:
            updates.append("role = ?")
            params.append(Role(role).value)

        if updates:
            params.append(user_id)
            statement = f"UPDATE users SET {', '.join(updates)} WHERE id = ?"
            with self._write() as conn:
                conn.execute(statement, params)
        return self.get_user_by_id(user_id)

    def update_user_password(self, user_id: int, password_hash: str) -> User:
        with self._write() as conn:
            conn.execute(
                """
                UPDATE users
                SET password_hash = ?, reset_password_token = NULL, reset_password_expire = NULL
                WHERE id = ?
                """,
                (password_hash, user_id),
            )
        user = self.get_user_by_id(user_id)
        if not user:
            raise StoreError(f"User {user_id} not found.")
        return user

    def set_reset_token(
        self,
        user_id: int,
        token_hash: Optional[str],
        expires_at: Optional[datetime],
    ) -> None:
        expire = self._format_datetime(expires_at) if expires_at else None
        with self._write() as conn:
            conn.execute(
                "UPDATE users SET reset_password_token = ?, reset_password_expire = ? WHERE id = ?",
                (token_hash, expire, user_id),
            )

    def delete_user(self, user_id: int) -> bool:
        with self._write() as conn:
            cur = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            return cur.rowcount > 0

    # BootcampRepository API ------------------------------------------------
    def create_bootcamp(self, fields: Dict[str, Any]) -> Bootcamp:
        values = self._bootcamp_values(fields)
        values["created_at"] = self._now()
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        with self._write() as conn:
            cur = conn.execute(
                f"INSERT INTO bootcamps ({columns}) VALUES ({placeholders})",
                tuple(values.values()),
            )
            bootcamp_id = cur.lastrowid
        bootcamp = self.get_bootcamp(bootcamp_id)
        if not bootcamp:
            raise StoreError("Failed to persist bootcamp.")
        return bootcamp

    def update_bootcamp(self, bootcamp_id: int, fields: Dict[str, Any]) -> Optional[Bootcamp]:
        values = self._bootcamp_values(fields)
        if values:
            assignments = ", ".join(f"{column} = ?" for column in values)
            with self._write() as conn:
                conn.execute(
                    f"UPDATE bootcamps SET {assignments} WHERE id = ?",
                    (*values.values(), bootcamp_id),
                )
        return self.get_bootcamp(bootcamp_id)

    def delete_bootcamp(self, bootcamp_id: int) -> bool:
        with self._write() as conn:
            cur = conn.execute("DELETE FROM bootcamps WHERE id = ?", (bootcamp_id,))
            return cur.rowcount > 0

    def get_bootcamp(self, bootcamp_id: int) -> Optional[Bootcamp]:
        row = self._fetch_one("SELECT * FROM bootcamps WHERE id = ?", (bootcamp_id,))
        return self._row_to_bootcamp(row) if row else None

    def list_bootcamps(self, offset: int, limit: int) -> List[Bootcamp]:
        rows = self._fetch_all(
            "SELECT * FROM bootcamps ORDER BY id ASC LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return [self._row_to_bootcamp(row) for row in rows]

    def count_bootcamps(self) -> int:
        row = self._fetch_one("SELECT COUNT(*) AS total FROM bootcamps", ())
        return row["total"] if row else 0

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def _user_columns(include_password: bool) -> str:
        return f"{_USER_COLUMNS}, password_hash" if include_password else _USER_COLUMNS

    @staticmethod
    def _bootcamp_values(fields: Dict[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for key in _BOOTCAMP_FIELDS:
            if key not in fields:
                continue
            value = fields[key]
            if key == "careers":
                value = json.dumps(list(value), ensure_ascii=False)
            elif key in _BOOLEAN_FIELDS:
                value = int(bool(value))
            values[key] = value
        return values

    @staticmethod
    def _now() -> str:
        return SQLitePersistence._format_datetime(datetime.now(timezone.utc))

    @staticmethod
    def _format_datetime(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(microsecond=0).isoformat()

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_user(self, row: sqlite3.Row) -> User:
        expire = row["reset_password_expire"]
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            role=Role(row["role"]),
            created_at=self._parse_datetime(row["created_at"]),
            password_hash=row["password_hash"] if "password_hash" in row.keys() else None,
            reset_password_token=row["reset_password_token"],
            reset_password_expire=self._parse_datetime(expire) if expire else None,
        )

    def _row_to_bootcamp(self, row: sqlite3.Row) -> Bootcamp:
        return Bootcamp(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            address=row["address"],
            careers=json.loads(row["careers"]),
            created_at=self._parse_datetime(row["created_at"]),
            website=row["website"],
            phone=row["phone"],
            email=row["email"],
            average_rating=row["average_rating"],
            average_cost=row["average_cost"],
            photo=row["photo"],
            housing=bool(row["housing"]),
            job_assistance=bool(row["job_assistance"]),
            job_guarantee=bool(row["job_guarantee"]),
            accept_gi=bool(row["accept_gi"]),
        )
