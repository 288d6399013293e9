"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper. UserStore is the repository; _row_to_user
is the mapper. Route and workflow code never touches SQL directly.

Every method is a single unit of work: one connection, one statement, one
commit. Nothing spans multiple records.

Security:
  All queries use bound parameters. No f-strings in SQL.

  Email uniqueness is checked by the workflow before insert, but the column
  also carries a UNIQUE constraint so two concurrent registrations that both
  pass the pre-check cannot both land. The loser gets an IntegrityError.

Layer rule: no imports from api/ or cache/.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event, select, text
from sqlalchemy.engine import Engine

from auth.models import Role, User

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "ApplicationUsers",
    _metadata,
    Column("id", String(36), primary_key=True),
    Column("first_name", String(255), nullable=False, server_default=""),
    Column("last_name", String(255), nullable=False, server_default=""),
    Column("email", String(255), nullable=False, unique=True),
    Column("password", Text, nullable=False),  # plaintext
    Column("role", String(20), nullable=False, server_default=Role.USER.value),
)


class UserRepository(Protocol):
    """Contract shared by UserStore and the cache wrapper in cache/store.py."""

    def add(self, user: User) -> None: ...

    def get_by_email(self, email: str) -> User | None: ...

    def get_by_id(self, user_id: str) -> User | None: ...

    def exists(self, email: str) -> bool: ...

    def update(self, user: User) -> None: ...

    def delete(self, user_id: str) -> None: ...


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User records.

    Usage:
        store = UserStore("sqlite:///users.db")
        store.add(User(email="ada@example.com", password="..."))
        user = store.get_by_email("ada@example.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def add(self, user: User) -> None:
        """Insert a new user.

        Raises sqlalchemy.exc.IntegrityError if the id or email already exists.
        No existence check happens here -- that is the caller's job.
        """
        with self.engine.connect() as conn:
            conn.execute(_users.insert().values(id=user.id, **_user_columns(user)))
            conn.commit()

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: str) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def exists(self, email: str) -> bool:
        with self.engine.connect() as conn:
            row = conn.execute(select(_users.c.id).where(_users.c.email == email).limit(1)).fetchone()
        return row is not None

    def update(self, user: User) -> None:
        """Replace every mutable column of the row identified by user.id.

        Raises LookupError if no row has that id.
        """
        with self.engine.connect() as conn:
            result = conn.execute(_users.update().where(_users.c.id == user.id).values(**_user_columns(user)))
            if result.rowcount == 0:
                conn.rollback()
                raise LookupError(f"User {user.id} does not exist")
            conn.commit()

    def delete(self, user_id: str) -> None:
        """Permanently delete a user record. Deleting an unknown id is a no-op."""
        with self.engine.connect() as conn:
            conn.execute(_users.delete().where(_users.c.id == user_id))
            conn.commit()

    def ping(self) -> bool:
        """Return True if the database answers a trivial query. Used by /health."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _user_columns(user: User) -> dict:
    return {
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "password": user.password,
        "role": Role(user.role).value,
    }


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        password=row.password,
        role=Role(row.role),
    )
