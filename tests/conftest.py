import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('JWT_SECRET_KEY', 'ecohub-test-secret-key-for-hs256-signing')

from ecohub.auth import jwt_handler  # noqa: E402
from ecohub.auth.password import hash_password  # noqa: E402
from ecohub.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from ecohub.main import app  # noqa: E402
from ecohub.models.challenge import Challenge  # noqa: E402
from ecohub.models.order import Order  # noqa: E402
from ecohub.models.product import Product  # noqa: E402
from ecohub.models.user import User  # noqa: E402

DEFAULT_PASSWORD = 'GreenPass123'


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f'sqlite:///{tmp_path / "ecohub-test.db"}',
        connect_args={'check_same_thread': False},
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db, username: str, role: str = 'user', password: str = DEFAULT_PASSWORD, **fields) -> User:
    user = User(
        username=username,
        email=fields.pop('email', f'{username}@example.com'),
        password=hash_password(password),
        first_name=username.title(),
        last_name='Tester',
        gender='other',
        role=role,
        **fields,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_product(db, name: str = 'Bamboo Toothbrush', status: str = 'pending', **fields) -> Product:
    product = Product(name=name, price=fields.pop('price', 4.5), status=status, **fields)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def make_challenge(db, title: str = 'Plastic Free Week', **fields) -> Challenge:
    challenge = Challenge(
        title=title,
        points_reward=fields.pop('points_reward', 50),
        duration_days=fields.pop('duration_days', 7),
        **fields,
    )
    db.add(challenge)
    db.commit()
    db.refresh(challenge)
    return challenge


def make_order(db, user: User, **fields) -> Order:
    order = Order(user_id=user.id, total_amount=fields.pop('total_amount', 25.0), **fields)
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def auth_header(user: User) -> dict:
    token = jwt_handler.create_access_token(user.id, user.email, user.role)
    return {'Authorization': f'Bearer {token}'}
