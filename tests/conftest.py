import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from billing.db import create_db_engine, get_db
from billing.main import app
from billing.models import Base, Company, Customer


@pytest.fixture()
def engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_db_engine(f"sqlite+pysqlite:///{db_path}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def SessionLocal(engine):
    # Every transaction takes SQLite's write lock, so seeded rows must stay
    # readable after commit without opening a new one.
    return sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )


@pytest.fixture()
def db_session(SessionLocal):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(SessionLocal):
    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def company(db_session):
    company = Company(name="Acme Recycling Ltd", vat_number="GB123456789")
    db_session.add(company)
    db_session.commit()
    return company


@pytest.fixture()
def customer(db_session, company):
    customer = Customer(
        company_id=company.id, display_name="Northside Builders", email="ap@northside.test"
    )
    db_session.add(customer)
    db_session.commit()
    return customer
