"""
MySQL connection helper. Uses PyMySQL; one connection per call (no pool) for simplicity.
A Database instance is created once in index.create_app and handed to the stores;
nothing here reads global state.
"""
import pymysql
from pymysql.cursors import DictCursor

from errors import StorageUnavailable

# Raised by PyMySQL when the server is unreachable, credentials are wrong or the link drops
_UNAVAILABLE_ERRORS = (pymysql.err.OperationalError, pymysql.err.InterfaceError)


class Database:
    def __init__(self, settings):
        self.settings = dict(settings)

    def get_connection(self):
        """Return a new connection (caller must close or use context manager)."""
        if not self.settings.get("host") or not self.settings.get("database"):
            raise StorageUnavailable("storage_unavailable", "MySQL host/database not configured")
        try:
            return pymysql.connect(
                host=self.settings["host"],
                port=self.settings.get("port", 3306),
                user=self.settings.get("user"),
                password=self.settings.get("password", ""),
                database=self.settings["database"],
                connect_timeout=self.settings.get("connect_timeout", 5),
                cursorclass=DictCursor,
                autocommit=True,
            )
        except _UNAVAILABLE_ERRORS as e:
            raise StorageUnavailable("storage_unavailable", str(e)) from e

    def query(self, sql, args=None):
        """Execute SELECT and return list of dicts (rows)."""
        conn = self.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, args or ())
                return cur.fetchall()
        except _UNAVAILABLE_ERRORS as e:
            raise StorageUnavailable("storage_unavailable", str(e)) from e
        finally:
            conn.close()

    def query_one(self, sql, args=None):
        """Execute SELECT and return first row (dict) or None."""
        rows = self.query(sql, args)
        return rows[0] if rows else None

    def execute(self, sql, args=None):
        """Execute INSERT/UPDATE/DELETE; returns (lastrowid, rowcount)."""
        conn = self.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, args or ())
                return cur.lastrowid, cur.rowcount
        except _UNAVAILABLE_ERRORS as e:
            raise StorageUnavailable("storage_unavailable", str(e)) from e
        finally:
            conn.close()

    def ping(self):
        """Open and close one connection; raises StorageUnavailable on failure."""
        self.get_connection().close()
