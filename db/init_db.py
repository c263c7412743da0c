"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import ConnectionProvider, get_provider
from utils.logger import get_logger

logger = get_logger(__name__)

POSTGRES_SCHEMA_SQL = """
-- Projects: one row per tracked DIY project
CREATE TABLE IF NOT EXISTS project (
    project_id      SERIAL PRIMARY KEY,
    project_name    VARCHAR(128) NOT NULL,
    estimated_hours NUMERIC(7,2),
    actual_hours    NUMERIC(7,2),
    difficulty      INT,
    notes           TEXT
);

-- Categories: shared labels, related to projects through project_category
CREATE TABLE IF NOT EXISTS category (
    category_id     SERIAL PRIMARY KEY,
    category_name   VARCHAR(128) NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS project_category (
    project_id      INT NOT NULL REFERENCES project(project_id) ON DELETE CASCADE,
    category_id     INT NOT NULL REFERENCES category(category_id) ON DELETE CASCADE,
    UNIQUE (project_id, category_id)
);

-- Steps: ordered instructions belonging to one project
CREATE TABLE IF NOT EXISTS step (
    step_id         SERIAL PRIMARY KEY,
    project_id      INT NOT NULL REFERENCES project(project_id) ON DELETE CASCADE,
    step_text       TEXT NOT NULL,
    step_order      INT NOT NULL
);

-- Materials: things to buy for one project
CREATE TABLE IF NOT EXISTS material (
    material_id     SERIAL PRIMARY KEY,
    project_id      INT NOT NULL REFERENCES project(project_id) ON DELETE CASCADE,
    material_name   VARCHAR(128) NOT NULL,
    num_required    INT,
    cost            NUMERIC(7,2)
);

CREATE INDEX IF NOT EXISTS idx_step_project ON step(project_id);
CREATE INDEX IF NOT EXISTS idx_material_project ON material(project_id);
"""

SQLITE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS project (
    project_id      INTEGER PRIMARY KEY AUTOINCREMENT,
    project_name    VARCHAR(128) NOT NULL,
    estimated_hours NUMERIC(7,2),
    actual_hours    NUMERIC(7,2),
    difficulty      INT,
    notes           TEXT
);

CREATE TABLE IF NOT EXISTS category (
    category_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    category_name   VARCHAR(128) NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS project_category (
    project_id      INT NOT NULL REFERENCES project(project_id) ON DELETE CASCADE,
    category_id     INT NOT NULL REFERENCES category(category_id) ON DELETE CASCADE,
    UNIQUE (project_id, category_id)
);

CREATE TABLE IF NOT EXISTS step (
    step_id         INTEGER PRIMARY KEY AUTOINCREMENT,
    project_id      INT NOT NULL REFERENCES project(project_id) ON DELETE CASCADE,
    step_text       TEXT NOT NULL,
    step_order      INT NOT NULL
);

CREATE TABLE IF NOT EXISTS material (
    material_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    project_id      INT NOT NULL REFERENCES project(project_id) ON DELETE CASCADE,
    material_name   VARCHAR(128) NOT NULL,
    num_required    INT,
    cost            NUMERIC(7,2)
);

CREATE INDEX IF NOT EXISTS idx_step_project ON step(project_id);
CREATE INDEX IF NOT EXISTS idx_material_project ON material(project_id);
"""

SCHEMAS = {
    "postgres": POSTGRES_SCHEMA_SQL,
    "sqlite": SQLITE_SCHEMA_SQL,
}


def create_tables(provider: ConnectionProvider) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).

    Args:
        provider: Connection provider for the target backend.
    """
    sql = SCHEMAS[provider.name]
    with provider.connection() as conn:
        try:
            provider.execute_script(conn, sql)
            logger.info(f"Database schema initialized successfully ({provider.name}).")
        except Exception as e:
            logger.error(f"Failed to initialize schema: {e}")
            raise


if __name__ == "__main__":
    create_tables(get_provider())
    print("Database schema created successfully.")
