import pytest


class TestBudgets:

    def _spend(self, client, headers, account_id, category_id, amount, on):
        response = client.post("/transactions", headers=headers, json={
            "description": "Spend", "amount": amount, "account_id": str(account_id),
            "category_id": str(category_id), "transaction_date": on,
        })
        assert response.status_code == 200
        return response.json()

    def test_budget_tracks_transactions(self, client, auth_headers, cash_account, travel_category):
        created = client.post("/budgets", headers=auth_headers, json={
            "name": "Travel January", "amount": "200", "budget_type": "monthly",
            "category_id": str(travel_category.id), "start_date": "2024-01-01", "end_date": "2024-01-31",
        })
        assert created.status_code == 200
        assert created.json()["spent_amount"] == "0.00"

        self._spend(client, auth_headers, cash_account.id, travel_category.id, "-50", "2024-01-15")
        self._spend(client, auth_headers, cash_account.id, travel_category.id, "-50", "2024-02-15")
        taxi = self._spend(client, auth_headers, cash_account.id, travel_category.id, "-120", "2024-01-20")

        budget = client.get("/budgets", headers=auth_headers).json()[0]
        assert budget["spent_amount"] == "170.00"
        assert budget["progress"] == 85.0
        assert budget["status"] == "warning"
        assert budget["category_name"] == "Travel"

        client.delete(f"/transactions/{taxi['id']}", headers=auth_headers)
        budget = client.get("/budgets", headers=auth_headers).json()[0]
        assert budget["spent_amount"] == "50.00"
        assert budget["status"] == "good"

    def test_inverted_window_is_rejected(self, client, auth_headers):
        response = client.post("/budgets", headers=auth_headers, json={
            "name": "Bad", "amount": "100", "start_date": "2024-02-01", "end_date": "2024-01-01",
        })
        assert response.status_code == 422

    def test_non_positive_amount_is_rejected(self, client, auth_headers):
        response = client.post("/budgets", headers=auth_headers, json={"name": "Zero", "amount": "0"})
        assert response.status_code == 422

    def test_update_budget(self, client, auth_headers, travel_budget):
        response = client.patch(f"/budgets/{travel_budget.id}", headers=auth_headers, json={"amount": "750"})

        assert response.status_code == 200
        assert response.json()["amount"] == "750.00"

    @pytest.mark.parametrize("field", ["start_date", "end_date", "name", "amount", "is_active"])
    def test_required_fields_cannot_be_nulled(self, client, auth_headers, travel_budget, field):
        response = client.patch(f"/budgets/{travel_budget.id}", headers=auth_headers, json={field: None})

        assert response.status_code == 422
        budget = client.get("/budgets", headers=auth_headers).json()[0]
        assert budget["start_date"] == "2024-01-01"
        assert budget["name"] == "Travel January"

    def test_category_can_be_cleared(self, client, auth_headers, travel_budget):
        response = client.patch(f"/budgets/{travel_budget.id}", headers=auth_headers, json={"category_id": None})

        assert response.status_code == 200
        assert response.json()["category_id"] is None

    def test_recompute(self, client, auth_headers, db_session, travel_budget):
        from decimal import Decimal
        travel_budget.spent_amount = Decimal("42.00")
        db_session.commit()

        response = client.post("/budgets/recompute", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"budgets_updated": 1}
        db_session.refresh(travel_budget)
        assert travel_budget.spent_amount == Decimal("0.00")
