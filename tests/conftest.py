from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import models  # noqa: F401  registers the settings table
from database import Base
from app import app, get_client, get_db
from client import RemoteServiceError
from conditions import ConditionStore, SqlKeyValueStore
from schemas import MinedBlock, PendingTransaction


class FakeChainClient:
    """In-memory stand-in for the remote chain service."""

    def __init__(self):
        self.pending = []
        self.chain = []
        self.mine_calls = 0
        self._next_id = 1

    def get_chain(self):
        return list(self.chain)

    def get_pending_transactions(self):
        return list(self.pending)

    def create_transaction(self, tx):
        new = PendingTransaction(**tx.model_dump(exclude={"id"}), id=f"tx{self._next_id}")
        self._next_id += 1
        self.pending.append(new)
        return "Transaction will be added to Block"

    def _index_of(self, tx_id):
        for i, tx in enumerate(self.pending):
            if tx.id == tx_id:
                return i
        raise RemoteServiceError(f"transaction {tx_id} not found", status_code=404)

    def update_transaction(self, tx_id, tx):
        i = self._index_of(tx_id)
        self.pending[i] = PendingTransaction(**tx.model_dump(exclude={"id"}), id=tx_id)
        return "Transaction updated successfully."

    def delete_transaction(self, tx_id):
        del self.pending[self._index_of(tx_id)]
        return "Transaction deleted successfully."

    def mine(self):
        self.mine_calls += 1
        self.chain.append(MinedBlock(
            index=len(self.chain) + 1,
            timestamp=datetime.now(timezone.utc),
            previous_hash="0" * 64,
            proof=35293,
            transactions=[tx.model_dump() for tx in self.pending],
        ))
        self.pending = []
        return "New Block Forged"

    def clear(self):
        self.chain = []
        self.pending = []
        return "Blockchain cleared"


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def store(session_factory):
    db = session_factory()
    yield ConditionStore(SqlKeyValueStore(db))
    db.close()


@pytest.fixture
def fake_chain():
    return FakeChainClient()


@pytest.fixture
def api(session_factory, fake_chain):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_client] = lambda: fake_chain
    yield TestClient(app)
    app.dependency_overrides.clear()
