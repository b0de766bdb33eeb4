import os
from datetime import time
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tutorledger.api.routes import dashboard, insights, invoices, misc, sessions, slots, students
from tutorledger.core.constants import Category
from tutorledger.db import models
from tutorledger.db.session import Base, get_db
from tutorledger.db.store import EntityStore
from tutorledger.services import lifecycle_service


def create_student(store, name="Alice", hourly_rate=40, category=Category.gym):
    return store.insert(
        models.Student, name=name, hourly_rate=Decimal(str(hourly_rate)), category=category
    )


def create_slot(store, student, day_of_week=1, start_time=time(9, 0), duration_minutes=60, price=40):
    return store.insert(
        models.ScheduleSlot,
        student_id=student.id,
        day_of_week=day_of_week,
        start_time=start_time,
        duration_minutes=duration_minutes,
        category=student.category,
        price=Decimal(str(price)),
    )


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db_session):
    return EntityStore(db_session)


@pytest.fixture()
def make_student(store):
    return lambda **kwargs: create_student(store, **kwargs)


@pytest.fixture()
def make_slot(store):
    return lambda student, **kwargs: create_slot(store, student, **kwargs)


@pytest.fixture()
def guard():
    return lifecycle_service.InFlightGuard()


@pytest.fixture()
def api_client():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    TestingSessionLocal = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    test_app = FastAPI()
    for module in (students, slots, sessions, dashboard, insights, invoices, misc):
        test_app.include_router(module.router, prefix="/api/v1")
    test_app.dependency_overrides[get_db] = override_get_db

    with TestClient(test_app) as client:
        yield client, TestingSessionLocal

    test_app.dependency_overrides.clear()
