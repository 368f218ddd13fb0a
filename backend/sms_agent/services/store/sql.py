"""SQLAlchemy-backed check-in store."""
from __future__ import annotations

import json
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool, StaticPool
from sqlalchemy.sql import insert, select, update

from ...core.logging_utils import log_event
from .base import (
    BaseCheckinStore,
    CheckinRecord,
    CheckinStoreError,
    EmergencyContact,
    UserProfile,
)

metadata = MetaData()

user_profiles = Table(
    "user_profiles", metadata,
    Column("id", String(64), primary_key=True),
    Column("phone", String(32), nullable=False, index=True),
    Column("full_name", String(200), nullable=True),
    Column("preferred_language", String(30), nullable=True),
    Column("voice_sms_consent", Boolean, nullable=False, default=False),
    Column("created_at", DateTime, nullable=False),
)

daily_checkin = Table(
    "daily_checkin", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("date", Date, nullable=False),
    Column("voice_transcript", Text, nullable=True),
    Column("symptoms_json", Text, nullable=False),
    Column("risk_level", String(10), nullable=False),
    Column("ai_insights_json", Text, nullable=True),
    Column("created_at", DateTime, nullable=False),
)

emergency_contacts = Table(
    "emergency_contacts", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("name", String(200), nullable=True),
    Column("phone", String(32), nullable=False),
    Column("is_primary", Boolean, nullable=False, default=False),
)


def create_store_engine(database_url: str) -> Engine:
    """Create an engine suited to the given URL."""
    if database_url.startswith("sqlite"):
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty database.
            return create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url, pool_pre_ping=True, poolclass=NullPool)


def _row_to_profile(row: Any) -> UserProfile:
    data = row._mapping
    return UserProfile(
        id=data["id"],
        phone=data["phone"],
        full_name=data["full_name"],
        preferred_language=data["preferred_language"],
        voice_sms_consent=bool(data["voice_sms_consent"]),
    )


class SQLCheckinStore(BaseCheckinStore):
    """Check-in store over the ``user_profiles``/``daily_checkin``/``emergency_contacts`` tables."""

    def __init__(self, database_url: str = "sqlite:///d2buff.db", engine: Engine | None = None):
        self.engine = engine if engine is not None else create_store_engine(database_url)

    def init_db(self) -> None:
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as err:
            raise CheckinStoreError(f"Failed to create tables: {err}") from err
        log_event(component="checkin_store", event="schema_ready")

    def find_user_by_phone(self, phone: str) -> UserProfile | None:
        try:
            with self.engine.begin() as conn:
                row = conn.execute(
                    select(user_profiles).where(user_profiles.c.phone == phone)
                ).first()
        except SQLAlchemyError as err:
            raise CheckinStoreError(f"Failed to look up user profile: {err}") from err
        if row is None:
            return None
        return _row_to_profile(row)

    def store_checkin(self, record: CheckinRecord) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(daily_checkin).values(
                    user_id=record.user_id,
                    date=record.checkin_date,
                    voice_transcript=record.original_text,
                    symptoms_json=json.dumps(list(record.symptoms)),
                    risk_level=record.risk_level,
                    ai_insights_json=json.dumps(dict(record.insights)),
                    created_at=record.created_at,
                ))
        except SQLAlchemyError as err:
            raise CheckinStoreError(f"Failed to store check-in: {err}") from err

    def update_sms_consent(self, phone: str, consent: bool) -> bool:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    update(user_profiles)
                    .where(user_profiles.c.phone == phone)
                    .values(voice_sms_consent=consent)
                )
        except SQLAlchemyError as err:
            raise CheckinStoreError(f"Failed to update SMS consent: {err}") from err
        return result.rowcount > 0

    def has_sms_consent(self, user_id: str) -> bool:
        try:
            with self.engine.begin() as conn:
                value = conn.execute(
                    select(user_profiles.c.voice_sms_consent).where(user_profiles.c.id == user_id)
                ).scalar()
        except SQLAlchemyError as err:
            raise CheckinStoreError(f"Failed to read SMS consent: {err}") from err
        return bool(value)

    def get_primary_emergency_contact(self, user_id: str) -> EmergencyContact | None:
        try:
            with self.engine.begin() as conn:
                row = conn.execute(
                    select(emergency_contacts)
                    .where(emergency_contacts.c.user_id == user_id)
                    .where(emergency_contacts.c.is_primary.is_(True))
                    .order_by(emergency_contacts.c.id)
                ).first()
        except SQLAlchemyError as err:
            raise CheckinStoreError(f"Failed to look up emergency contact: {err}") from err
        if row is None:
            return None
        data = row._mapping
        return EmergencyContact(
            user_id=data["user_id"],
            name=data["name"],
            phone=data["phone"],
            is_primary=bool(data["is_primary"]),
        )

    def add_user_profile(
        self,
        phone: str,
        full_name: str | None = None,
        preferred_language: str | None = None,
        voice_sms_consent: bool = True,
        user_id: str | None = None,
    ) -> UserProfile:
        """Register a phone number; used by onboarding and fixtures."""
        profile = UserProfile(
            id=user_id or str(uuid.uuid4()),
            phone=phone,
            full_name=full_name,
            preferred_language=preferred_language,
            voice_sms_consent=voice_sms_consent,
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(user_profiles).values(
                    id=profile.id,
                    phone=profile.phone,
                    full_name=profile.full_name,
                    preferred_language=profile.preferred_language,
                    voice_sms_consent=profile.voice_sms_consent,
                    created_at=datetime.now(),
                ))
        except SQLAlchemyError as err:
            raise CheckinStoreError(f"Failed to add user profile: {err}") from err
        return profile

    def add_emergency_contact(
        self,
        user_id: str,
        phone: str,
        name: str | None = None,
        is_primary: bool = True,
    ) -> EmergencyContact:
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(emergency_contacts).values(
                    user_id=user_id,
                    name=name,
                    phone=phone,
                    is_primary=is_primary,
                ))
        except SQLAlchemyError as err:
            raise CheckinStoreError(f"Failed to add emergency contact: {err}") from err
        return EmergencyContact(user_id=user_id, name=name, phone=phone, is_primary=is_primary)

    def fetch_checkins(self, user_id: str) -> list[CheckinRecord]:
        try:
            with self.engine.begin() as conn:
                rows = conn.execute(
                    select(daily_checkin)
                    .where(daily_checkin.c.user_id == user_id)
                    .order_by(daily_checkin.c.created_at, daily_checkin.c.id)
                ).fetchall()
        except SQLAlchemyError as err:
            raise CheckinStoreError(f"Failed to fetch check-ins: {err}") from err

        records: list[CheckinRecord] = []
        for row in rows:
            data = row._mapping
            records.append(CheckinRecord(
                user_id=data["user_id"],
                checkin_date=data["date"],
                original_text=data["voice_transcript"] or "",
                symptoms=tuple(json.loads(data["symptoms_json"] or "[]")),
                risk_level=data["risk_level"],
                created_at=data["created_at"],
                insights=json.loads(data["ai_insights_json"] or "{}"),
            ))
        return records
