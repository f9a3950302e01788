"""
Loja Social - Test Configuration and Fixtures
"""
import os

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Set testing environment before the app reads its settings
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['CREATE_TABLES_ON_STARTUP'] = 'false'
os.environ['LOG_LEVEL'] = 'WARNING'

from main import app  # noqa: E402
from db import get_session  # noqa: E402
from models import Colaborador, Produto  # noqa: E402
from routers.auth import create_session_token, hash_password  # noqa: E402

fake = Faker('pt_PT')

TEST_PASSWORD = 'segredo-de-teste-123'


@pytest.fixture(name="session")
def session_fixture():
    """Fresh in-memory database for each test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Test client whose requests use the test session"""
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app, raise_server_exceptions=False)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def colaborador(session: Session) -> Colaborador:
    colaborador = Colaborador(
        nome=fake.name(),
        email=fake.email(),
        password_hash=hash_password(TEST_PASSWORD),
    )
    session.add(colaborador)
    session.commit()
    session.refresh(colaborador)
    return colaborador


@pytest.fixture
def auth_headers(colaborador: Colaborador) -> dict:
    token = create_session_token(colaborador.id)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def produto(session: Session) -> Produto:
    produto = Produto(nome="Arroz", categoria="Alimentar")
    session.add(produto)
    session.commit()
    session.refresh(produto)
    return produto
