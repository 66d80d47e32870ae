from datetime import date

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from invoicedesk.api.deps import get_identity_provider, get_store, get_view_cache, require_session
from invoicedesk.db.engine import build_engine
from invoicedesk.db.schema import customers, invoices, metadata, revenue
from invoicedesk.errors import IdentityError
from invoicedesk.main import app
from invoicedesk.models.actions import AuthSession
from invoicedesk.services.revalidation import ViewCache
from invoicedesk.store.sql import SqlStore


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.sqlite'}")
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return SqlStore(engine)


@pytest.fixture
def add_customer(engine):
    def _add(customer_id: str, name: str, email: str, image_url: str = None):
        with engine.begin() as conn:
            conn.execute(
                customers.insert().values(
                    id=customer_id, name=name, email=email, image_url=image_url
                )
            )
        return customer_id

    return _add


@pytest.fixture
def add_invoice(engine):
    def _add(invoice_id: str, customer_id: str, amount: int, status: str, day: str):
        with engine.begin() as conn:
            conn.execute(
                invoices.insert().values(
                    id=invoice_id,
                    customer_id=customer_id,
                    amount=amount,
                    status=status,
                    date=date.fromisoformat(day),
                )
            )
        return invoice_id

    return _add


@pytest.fixture
def add_revenue(engine):
    def _add(month: str, amount: int):
        with engine.begin() as conn:
            conn.execute(revenue.insert().values(month=month, revenue=amount))

    return _add


class FakeIdentityProvider:
    def __init__(self, password: str = "123456", fail_sign_out: bool = False):
        self.password = password
        self.fail_sign_out = fail_sign_out
        self.sign_ins = []
        self.sign_outs = []

    def sign_in_with_password(self, email, password):
        self.sign_ins.append(email)
        if email != "user@nextmail.com" or password != self.password:
            raise IdentityError("Invalid login credentials")
        return AuthSession(access_token="token-123", refresh_token="refresh-123", expires_in=3600)

    def sign_out(self, access_token):
        if self.fail_sign_out:
            raise IdentityError("network down")
        self.sign_outs.append(access_token)


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def view_cache():
    return ViewCache()


@pytest.fixture
def client(store, identity_provider, view_cache):
    def _store(token=Depends(require_session)):
        return store

    app.dependency_overrides[get_store] = _store
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_view_cache] = lambda: view_cache
    yield TestClient(app, follow_redirects=False)
    app.dependency_overrides.clear()
