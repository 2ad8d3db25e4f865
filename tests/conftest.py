import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from storefront.database.connection import Base
from storefront.models import cart, ornament, pricing_config, tracking_log, user  # noqa: F401
from storefront.models.ornament import Ornament
from storefront.models.pricing_config import PricingConfig
from storefront.services.email_service import EmailSender

TEST_DB_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def create_test_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    connection = engine.connect()
    trans = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


class FakeEmailSender(EmailSender):
    """Records outgoing mail; set ``fail_with`` to make ``send`` raise."""

    def __init__(self):
        self.sent = []
        self.fail_with = None

    def send(self, email):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(email)


@pytest.fixture()
def email_sender():
    return FakeEmailSender()


@pytest.fixture()
def pricing(db):
    config = PricingConfig(
        gold_prices={"14K": 4200.0, "18K": 6000.0, "22K": 7200.0},
        platinum_price_per_gram=3500.0,
        silver925_price_per_gram=90.0,
        diamond_price_per_carat=40000.0,
        gemstone_prices={"ruby": 15000.0, "sapphire": 12000.0},
    )
    db.add(config)
    db.commit()
    return config


@pytest.fixture()
def make_ornament(db):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        values = dict(
            sku=f"GO-W-RIN-{counter['n']:03d}",
            name=f"Test Ring {counter['n']}",
            category_type="Gold",
            category="Rings",
            type="Rings",
            gender="Women",
            metal_type="18K Yellow Gold",
            purity="18K",
            weight=5.0,
            price=30000.0,
            original_price=30000.0,
            cover_image="https://cdn.example.com/ring.jpg",
        )
        values.update(overrides)
        item = Ornament(**values)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make
