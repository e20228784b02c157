import pytest
from fastapi.testclient import TestClient

from app import models


class TestSignup:

    def test_signup_seeds_default_books(self, client: TestClient, db_session):
        response = client.post("/auth/signup", json={
            "email": "new@example.com",
            "password": "secret123",
            "company_name": "New Co",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["display_name"] == "new@example.com"

        user = db_session.query(models.User).filter_by(email="new@example.com").one()
        codes = sorted(a.code for a in db_session.query(models.Account).filter_by(user_id=user.id))
        assert codes == ["1000", "1010", "1200", "2000", "3000", "4000", "5000"]
        names = {c.name for c in db_session.query(models.Category).filter_by(user_id=user.id)}
        assert names == {"Office Supplies", "Travel", "Marketing", "Software", "Utilities", "Sales", "Services"}

    def test_duplicate_email_is_rejected(self, client, test_user):
        response = client.post("/auth/signup", json={"email": test_user.email, "password": "secret123"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    def test_short_password_is_rejected(self, client):
        response = client.post("/auth/signup", json={"email": "x@example.com", "password": "123"})
        assert response.status_code == 422


class TestLogin:

    def test_login_and_me(self, client, test_user):
        response = client.post("/auth/login", json={"email": test_user.email, "password": "testpass123"})
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert me.status_code == 200
        assert me.json()["id"] == str(test_user.id)
        assert me.json()["company_name"] == "Owner Co"

    def test_wrong_password(self, client, test_user):
        response = client.post("/auth/login", json={"email": test_user.email, "password": "nope12345"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect email or password"

    def test_me_without_token(self, client):
        assert client.get("/auth/me").status_code in (401, 403)

    def test_me_with_garbage_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
