"""Repository layer responsible for all database access."""

from __future__ import annotations

import random
import sqlite3
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence
from uuid import uuid4

from backend.domain.models import (
    ApartmentConfig,
    Bed,
    Bedroom,
    Reservation,
    StudentProfile,
)
from backend.domain.questionnaire import COMPATIBILITY_QUESTIONS
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)

_STUDENT_COLUMNS = """
    user_id,
    full_name,
    age,
    university,
    major,
    gender,
    profile_photo_url,
    compatibility_test_completed,
    advanced_compatibility_enabled,
    needs_roommate_current_place,
    needs_roommate_new_dorm,
    accommodation_status
"""


def _row_to_student(row: sqlite3.Row) -> StudentProfile:
    return StudentProfile(
        user_id=str(row["user_id"]),
        full_name=str(row["full_name"]),
        age=int(row["age"]) if row["age"] is not None else None,
        university=row["university"],
        major=row["major"],
        gender=row["gender"],
        profile_photo_url=row["profile_photo_url"],
        compatibility_test_completed=bool(row["compatibility_test_completed"]),
        advanced_compatibility_enabled=bool(row["advanced_compatibility_enabled"]),
        needs_roommate_current_place=bool(row["needs_roommate_current_place"]),
        needs_roommate_new_dorm=bool(row["needs_roommate_new_dorm"]),
        accommodation_status=row["accommodation_status"],
    )


def _row_to_reservation(row: sqlite3.Row) -> Reservation:
    return Reservation(
        id=str(row["id"]),
        reservation_level=row["reservation_level"],
        status=str(row["status"]),
        apartment_id=row["apartment_id"],
        bedroom_id=row["bedroom_id"],
        bed_id=row["bed_id"],
    )


class DataRepository:
    """Encapsulates SQLite access so business logic stays storage-agnostic."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON;")
        return connection

    def initialize_database(self) -> None:
        """Create all persistence artifacts before API startup."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Students (
                        user_id TEXT PRIMARY KEY,
                        full_name TEXT NOT NULL,
                        age INTEGER,
                        university TEXT,
                        major TEXT,
                        gender TEXT,
                        profile_photo_url TEXT,
                        compatibility_test_completed INTEGER NOT NULL DEFAULT 0,
                        advanced_compatibility_enabled INTEGER NOT NULL DEFAULT 0,
                        needs_roommate_current_place INTEGER NOT NULL DEFAULT 0,
                        needs_roommate_new_dorm INTEGER NOT NULL DEFAULT 0,
                        accommodation_status TEXT,
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS PersonalityResponses (
                        user_id TEXT NOT NULL,
                        question_id INTEGER NOT NULL,
                        response INTEGER NOT NULL CHECK (response BETWEEN 1 AND 5),
                        PRIMARY KEY (user_id, question_id),
                        FOREIGN KEY (user_id) REFERENCES Students(user_id)
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Apartments (
                        id TEXT PRIMARY KEY,
                        name TEXT NOT NULL DEFAULT '',
                        enable_full_apartment_reservation INTEGER NOT NULL DEFAULT 1,
                        enable_bedroom_reservation INTEGER NOT NULL DEFAULT 1,
                        enable_bed_reservation INTEGER NOT NULL DEFAULT 0
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Bedrooms (
                        id TEXT PRIMARY KEY,
                        apartment_id TEXT NOT NULL,
                        name TEXT NOT NULL DEFAULT '',
                        position INTEGER NOT NULL,
                        FOREIGN KEY (apartment_id) REFERENCES Apartments(id)
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Beds (
                        id TEXT PRIMARY KEY,
                        bedroom_id TEXT NOT NULL,
                        label TEXT NOT NULL DEFAULT '',
                        available INTEGER NOT NULL DEFAULT 1,
                        position INTEGER NOT NULL,
                        FOREIGN KEY (bedroom_id) REFERENCES Bedrooms(id)
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Reservations (
                        id TEXT PRIMARY KEY,
                        reservation_level TEXT NOT NULL
                            CHECK (reservation_level IN ('apartment', 'bedroom', 'bed')),
                        apartment_id TEXT,
                        bedroom_id TEXT,
                        bed_id TEXT,
                        status TEXT NOT NULL DEFAULT 'pending',
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_reservations_apartment_status
                    ON Reservations(apartment_id, status);
                    """
                )
                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_bedrooms_apartment
                    ON Bedrooms(apartment_id, position);
                    """
                )
                conn.commit()
            logger.info("Database initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Database initialization failed: {exc}") from exc

    def seed_synthetic_data(self) -> None:
        """Seed deterministic demo students and apartments only when tables are empty."""
        rng = random.Random(self._settings.synthetic_random_seed)
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) AS count FROM Students;")
                if int(cursor.fetchone()["count"]) > 0:
                    logger.info("Synthetic data already present; skipping seed")
                    return

                universities = ("AUB", "LAU", "USJ", "LU", "NDU")
                majors = ("Computer Science", "Medicine", "Architecture", "Business", "Law")
                student_rows = []
                response_rows = []
                for index in range(self._settings.synthetic_student_count):
                    user_id = f"student-{index + 1:03d}"
                    needs_current = index % 3 == 0
                    student_rows.append(
                        (
                            user_id,
                            f"Student {index + 1:03d}",
                            rng.randint(18, 26),
                            rng.choice(universities),
                            rng.choice(majors),
                            rng.choice(("male", "female")),
                            None,
                            1,
                            1 if index % 4 == 0 else 0,
                            1 if needs_current else 0,
                            0 if needs_current else 1,
                            "have_dorm" if needs_current else "need_dorm",
                        )
                    )
                    for question in COMPATIBILITY_QUESTIONS:
                        response_rows.append((user_id, question.id, rng.randint(1, 5)))

                cursor.executemany(
                    f"""
                    INSERT INTO Students ({_STUDENT_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
                    """,
                    student_rows,
                )
                cursor.executemany(
                    """
                    INSERT INTO PersonalityResponses (user_id, question_id, response)
                    VALUES (?, ?, ?);
                    """,
                    response_rows,
                )

                bed_count = 0
                for apartment_index in range(self._settings.synthetic_apartment_count):
                    apartment_id = f"apt-{apartment_index + 1}"
                    cursor.execute(
                        """
                        INSERT INTO Apartments (
                            id,
                            name,
                            enable_full_apartment_reservation,
                            enable_bedroom_reservation,
                            enable_bed_reservation
                        )
                        VALUES (?, ?, 1, 1, ?);
                        """,
                        (apartment_id, f"A{apartment_index + 1}", apartment_index % 2),
                    )
                    for bedroom_index in range(rng.randint(1, 3)):
                        bedroom_id = f"{apartment_id}-br{bedroom_index + 1}"
                        cursor.execute(
                            """
                            INSERT INTO Bedrooms (id, apartment_id, name, position)
                            VALUES (?, ?, ?, ?);
                            """,
                            (bedroom_id, apartment_id, f"Bedroom {bedroom_index + 1}", bedroom_index),
                        )
                        for bed_index in range(rng.randint(1, 2)):
                            cursor.execute(
                                """
                                INSERT INTO Beds (id, bedroom_id, label, available, position)
                                VALUES (?, ?, ?, 1, ?);
                                """,
                                (
                                    f"{bedroom_id}-bed{bed_index + 1}",
                                    bedroom_id,
                                    f"Bed {chr(65 + bed_index)}",
                                    bed_index,
                                ),
                            )
                            bed_count += 1
                conn.commit()
            logger.info(
                "Synthetic seed completed | students=%s | apartments=%s | beds=%s",
                len(student_rows),
                self._settings.synthetic_apartment_count,
                bed_count,
            )
        except sqlite3.Error as exc:
            raise RuntimeError(f"Synthetic data seeding failed: {exc}") from exc

    # --- Students & questionnaire responses ---

    def create_student(self, profile: StudentProfile) -> str:
        """Insert or replace a student profile and return its id."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                INSERT OR REPLACE INTO Students ({_STUDENT_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    profile.user_id,
                    profile.full_name,
                    profile.age,
                    profile.university,
                    profile.major,
                    profile.gender,
                    profile.profile_photo_url,
                    int(profile.compatibility_test_completed),
                    int(profile.advanced_compatibility_enabled),
                    int(profile.needs_roommate_current_place),
                    int(profile.needs_roommate_new_dorm),
                    profile.accommodation_status,
                ),
            )
            conn.commit()
        return profile.user_id

    def get_student(self, user_id: str) -> Optional[StudentProfile]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_STUDENT_COLUMNS} FROM Students WHERE user_id = ?;",
                (user_id,),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return _row_to_student(row)

    def list_students(self, completed_only: bool = False) -> list[StudentProfile]:
        """Return student profiles in deterministic order."""
        query = f"SELECT {_STUDENT_COLUMNS} FROM Students"
        if completed_only:
            query += " WHERE compatibility_test_completed = 1"
        query += " ORDER BY user_id ASC;"
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(query)
            return [_row_to_student(row) for row in cursor.fetchall()]

    def save_responses(self, user_id: str, responses: Mapping[int, int]) -> None:
        """Upsert questionnaire answers for a student."""
        if not responses:
            return
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.executemany(
                """
                INSERT OR REPLACE INTO PersonalityResponses (user_id, question_id, response)
                VALUES (?, ?, ?);
                """,
                [
                    (user_id, int(question_id), int(response))
                    for question_id, response in responses.items()
                ],
            )
            conn.commit()

    def get_responses(self, user_id: str) -> dict[int, int]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT question_id, response
                FROM PersonalityResponses
                WHERE user_id = ?
                ORDER BY question_id ASC;
                """,
                (user_id,),
            )
            return {int(row["question_id"]): int(row["response"]) for row in cursor.fetchall()}

    def get_responses_for_users(self, user_ids: Sequence[str]) -> dict[str, dict[int, int]]:
        """Group recorded answers by user; users without answers are absent."""
        if not user_ids:
            return {}
        placeholders = ",".join("?" for _ in user_ids)
        grouped: dict[str, dict[int, int]] = {}
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT user_id, question_id, response
                FROM PersonalityResponses
                WHERE user_id IN ({placeholders})
                ORDER BY user_id ASC, question_id ASC;
                """,
                tuple(user_ids),
            )
            for row in cursor.fetchall():
                grouped.setdefault(str(row["user_id"]), {})[int(row["question_id"])] = int(
                    row["response"]
                )
        return grouped

    # --- Apartments & reservations ---

    def create_apartment(self, apartment: ApartmentConfig) -> str:
        """Persist a full apartment -> bedrooms -> beds configuration."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO Apartments (
                    id,
                    name,
                    enable_full_apartment_reservation,
                    enable_bedroom_reservation,
                    enable_bed_reservation
                )
                VALUES (?, ?, ?, ?, ?);
                """,
                (
                    apartment.id,
                    apartment.name,
                    int(apartment.enable_full_apartment_reservation),
                    int(apartment.enable_bedroom_reservation),
                    int(apartment.enable_bed_reservation),
                ),
            )
            for bedroom_position, bedroom in enumerate(apartment.bedrooms):
                cursor.execute(
                    """
                    INSERT INTO Bedrooms (id, apartment_id, name, position)
                    VALUES (?, ?, ?, ?);
                    """,
                    (bedroom.id, apartment.id, bedroom.name, bedroom_position),
                )
                cursor.executemany(
                    """
                    INSERT INTO Beds (id, bedroom_id, label, available, position)
                    VALUES (?, ?, ?, ?, ?);
                    """,
                    [
                        (bed.id, bedroom.id, bed.label, int(bed.available), bed_position)
                        for bed_position, bed in enumerate(bedroom.beds)
                    ],
                )
            conn.commit()
        return apartment.id

    def _load_bedrooms(self, conn: sqlite3.Connection, apartment_id: str) -> tuple[Bedroom, ...]:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT id, name
            FROM Bedrooms
            WHERE apartment_id = ?
            ORDER BY position ASC;
            """,
            (apartment_id,),
        )
        bedroom_rows = cursor.fetchall()
        bedrooms: list[Bedroom] = []
        for bedroom_row in bedroom_rows:
            cursor.execute(
                """
                SELECT id, label, available
                FROM Beds
                WHERE bedroom_id = ?
                ORDER BY position ASC;
                """,
                (bedroom_row["id"],),
            )
            beds = tuple(
                Bed(id=str(row["id"]), label=str(row["label"]), available=bool(row["available"]))
                for row in cursor.fetchall()
            )
            bedrooms.append(
                Bedroom(id=str(bedroom_row["id"]), name=str(bedroom_row["name"]), beds=beds)
            )
        return tuple(bedrooms)

    def _row_to_apartment(self, conn: sqlite3.Connection, row: sqlite3.Row) -> ApartmentConfig:
        return ApartmentConfig(
            id=str(row["id"]),
            name=str(row["name"]),
            enable_full_apartment_reservation=bool(row["enable_full_apartment_reservation"]),
            enable_bedroom_reservation=bool(row["enable_bedroom_reservation"]),
            enable_bed_reservation=bool(row["enable_bed_reservation"]),
            bedrooms=self._load_bedrooms(conn, str(row["id"])),
        )

    def get_apartment(self, apartment_id: str) -> Optional[ApartmentConfig]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM Apartments WHERE id = ?;", (apartment_id,))
            row = cursor.fetchone()
            if row is None:
                return None
            return self._row_to_apartment(conn, row)

    def list_apartments(self) -> list[ApartmentConfig]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM Apartments ORDER BY id ASC;")
            rows = cursor.fetchall()
            return [self._row_to_apartment(conn, row) for row in rows]

    def create_reservation(
        self,
        reservation_level: str,
        status: str,
        apartment_id: Optional[str] = None,
        bedroom_id: Optional[str] = None,
        bed_id: Optional[str] = None,
        reservation_id: Optional[str] = None,
    ) -> str:
        """Insert reservation row and return the created id."""
        new_id = reservation_id or str(uuid4())
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO Reservations (
                    id,
                    reservation_level,
                    apartment_id,
                    bedroom_id,
                    bed_id,
                    status
                )
                VALUES (?, ?, ?, ?, ?, ?);
                """,
                (new_id, reservation_level, apartment_id, bedroom_id, bed_id, status),
            )
            conn.commit()
        return new_id

    def list_reservations(self, apartment_id: Optional[str] = None) -> list[Reservation]:
        """Return reservations of every status; status filtering belongs to the rules."""
        query = """
            SELECT id, reservation_level, apartment_id, bedroom_id, bed_id, status
            FROM Reservations
        """
        params: tuple[str, ...] = ()
        if apartment_id is not None:
            query += " WHERE apartment_id = ?"
            params = (apartment_id,)
        query += " ORDER BY created_at ASC, id ASC;"
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [_row_to_reservation(row) for row in cursor.fetchall()]

    def update_reservation_status(self, reservation_ids: Iterable[str], status: str) -> None:
        ids = list(reservation_ids)
        if not ids:
            return
        placeholders = ",".join("?" for _ in ids)
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE Reservations SET status = ? WHERE id IN ({placeholders});",
                (status, *ids),
            )
            conn.commit()

    def count_students(self) -> int:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS count FROM Students;")
            return int(cursor.fetchone()["count"])
