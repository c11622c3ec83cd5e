"""SQLite storage for pedigree chart input records."""

from pathlib import Path
import sqlite3

from models import Person, Relationship


def create_database(db_path: Path) -> sqlite3.Connection:
    """Create SQLite database with person and relationship tables."""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS person (
            id TEXT PRIMARY KEY,
            given_names TEXT,
            surnames TEXT,
            is_living INTEGER NOT NULL DEFAULT 1,
            profile_photo TEXT
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS relationship (
            id TEXT PRIMARY KEY,
            type TEXT NOT NULL,
            person_id1 TEXT NOT NULL,
            person_id2 TEXT NOT NULL,
            status TEXT,
            position INTEGER NOT NULL,
            FOREIGN KEY (person_id1) REFERENCES person(id),
            FOREIGN KEY (person_id2) REFERENCES person(id)
        )
    """)

    conn.commit()
    return conn


def store_data(conn: sqlite3.Connection, people: list[Person], relationships: list[Relationship]):
    """Insert people and relationships into the database, replacing existing rows."""
    cursor = conn.cursor()

    cursor.executemany(
        """
        INSERT OR REPLACE INTO person (id, given_names, surnames, is_living, profile_photo)
        VALUES (?, ?, ?, ?, ?)
        """,
        [(p.id, p.given_names, p.surnames, int(p.is_living), p.profile_photo) for p in people],
    )

    # position keeps the recorded order, which the layout traversal depends on
    cursor.executemany(
        """
        INSERT OR REPLACE INTO relationship (id, type, person_id1, person_id2, status, position)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        [
            (r.id, r.type, r.person_id1, r.person_id2, r.status, i)
            for i, r in enumerate(relationships)
        ],
    )

    conn.commit()


def load_data(conn: sqlite3.Connection) -> tuple[list[Person], list[Relationship]]:
    """Read all people and relationships back in their stored order."""
    cursor = conn.cursor()

    cursor.execute("SELECT id, given_names, surnames, is_living, profile_photo FROM person ORDER BY id")
    people = [
        Person(
            id=row[0],
            given_names=row[1],
            surnames=row[2],
            is_living=bool(row[3]),
            profile_photo=row[4],
        )
        for row in cursor.fetchall()
    ]

    cursor.execute(
        "SELECT id, type, person_id1, person_id2, status FROM relationship ORDER BY position"
    )
    relationships = [
        Relationship(id=row[0], type=row[1], person_id1=row[2], person_id2=row[3], status=row[4])
        for row in cursor.fetchall()
    ]

    return people, relationships
