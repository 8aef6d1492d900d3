"""
Create the MySQL database (e.g. licensing) and load schema.sql. Run once before first start.
Uses the same MYSQL_* settings as the app (.env). Run from project root: python setup_db.py
"""
import logging
import sys
from pathlib import Path

# Load config from src
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))
import config
import pymysql

logger = logging.getLogger("setup_db")

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def split_statements(sql):
    """Split a schema file into statements. Full-line '--' comments are dropped first
    so semicolons inside them do not split incorrectly."""
    lines = [line for line in sql.splitlines() if not line.strip().startswith("--")]
    return [s.strip() for s in "\n".join(lines).split(";") if s.strip()]


def main():
    logging.basicConfig(stream=sys.stderr, level=config.LOG_LEVEL)
    settings = config.MYSQL
    db_name = settings["database"]
    if not SCHEMA_PATH.exists():
        logger.error("Schema file not found: %s", SCHEMA_PATH)
        sys.exit(1)
    statements = split_statements(SCHEMA_PATH.read_text(encoding="utf-8"))

    # Connect without database to create it
    conn = pymysql.connect(
        host=settings["host"],
        port=settings["port"],
        user=settings["user"],
        password=settings["password"],
        connect_timeout=settings["connect_timeout"],
    )
    try:
        with conn.cursor() as cur:
            cur.execute(f"CREATE DATABASE IF NOT EXISTS `{db_name}` CHARACTER SET utf8mb4")
        conn.select_db(db_name)
        with conn.cursor() as cur:
            for stmt in statements:
                cur.execute(stmt)
        conn.commit()
        logger.info("Database '%s' ready: %d statements from %s", db_name, len(statements), SCHEMA_PATH.name)
    finally:
        conn.close()


if __name__ == "__main__":
    try:
        main()
    except pymysql.err.MySQLError as e:
        logger.error("setup_db failed: %s", e)
        sys.exit(1)
