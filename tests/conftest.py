import os
import tempfile

# environment must be in place before app.core.config is imported
_TMP = tempfile.mkdtemp(prefix="rdv-tests-")
os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["PDF_OUTPUT_DIR"] = os.path.join(_TMP, "pdfs")

import pytest
from fastapi.testclient import TestClient

from main import app
from app.core.db import drop_models, engine, session_scope
from app.constants.roles import ADMIN_ROLE
from app.core.security import hash_password
from app.models.users.user_models import User

PASSWORD = "secret123"


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
        c.portal.call(drop_models)
        c.portal.call(engine.dispose)


class Api:
    """Shortcuts for building fixtures through the HTTP surface."""

    def __init__(self, client: TestClient):
        self.client = client

    # ---------- auth ----------
    def register(self, email="traveler@rdv.com", name="Traveler", password=PASSWORD):
        res = self.client.post(
            "/auth/register",
            json={
                "name": name,
                "email": email,
                "password": password,
                "confirm_password": password,
            },
        )
        assert res.status_code == 201, res.text
        return res.json()["data"]

    def headers(self, email="traveler@rdv.com", name="Traveler"):
        token = self.register(email=email, name=name)["access_token"]
        # requests carry the bearer token explicitly
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {token}"}

    def admin_headers(self, email="admin@rdv.com"):
        async def _create():
            async with session_scope() as session:
                session.add(
                    User(
                        email=email,
                        name="Admin",
                        password_hash=hash_password(PASSWORD),
                        role=ADMIN_ROLE,
                    )
                )

        self.client.portal.call(_create)
        res = self.client.post("/auth/login", json={"email": email, "password": PASSWORD})
        assert res.status_code == 200, res.text
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {res.json()['data']['access_token']}"}

    # ---------- masters ----------
    def category(self, headers, name="Hotel", color="#ec4899"):
        res = self.client.post(
            "/categories/",
            json={"name": name, "color": color, "icon": "bed"},
            headers=headers,
        )
        assert res.status_code == 201, res.text
        return res.json()["data"]

    def vehicle(self, headers, identification="ABC1D23", rate="0.90", **extra):
        body = {
            "type": "pessoal",
            "brand": "Fiat",
            "model": "Argo",
            "fuel": "flex",
            "identification": identification,
            "rate_per_km": rate,
            **extra,
        }
        res = self.client.post("/vehicles/", json=body, headers=headers)
        assert res.status_code == 201, res.text
        return res.json()["data"]

    # ---------- reports / expenses ----------
    def report(self, headers, advance="0", **extra):
        body = {
            "title": "Visita cliente SP",
            "start_date": "2024-03-01",
            "end_date": "2024-03-05",
            "destination": "São Paulo",
            "advance": advance,
            **extra,
        }
        res = self.client.post("/reports/", json=body, headers=headers)
        assert res.status_code == 201, res.text
        return res.json()["data"]

    def expense(self, headers, report_id, category_id, amount="100.00", **extra):
        body = {
            "report_id": report_id,
            "category_id": category_id,
            "expense_date": "2024-03-02",
            "description": "Diária",
            "amount": amount,
            **extra,
        }
        res = self.client.post("/expenses/", json=body, headers=headers)
        assert res.status_code == 201, res.text
        return res.json()["data"]


@pytest.fixture
def api(client):
    return Api(client)


@pytest.fixture
def headers(api):
    return api.headers()
