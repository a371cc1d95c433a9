"""
Integration tests for the Client Banking API
Tests end-to-end workflows using FastAPI TestClient
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from client_banking.api import BankingSystem, create_app


@pytest.fixture
def system():
    """A fresh banking system per test, nothing shared between tests"""
    return BankingSystem()


@pytest.fixture
def client(system):
    """Create a test client bound to the test banking system"""
    return TestClient(create_app(system))


def create(client, account_id, balance="0", with_credit_score=False, verify=True):
    r = client.post("/accounts", json={
        "account_id": account_id,
        "client_name": f"Client {account_id}",
        "initial_balance": balance,
        "with_credit_score": with_credit_score
    })
    assert r.status_code == 201
    if verify:
        assert client.post(f"/accounts/{account_id}/verify").status_code == 200
    return r.json()["account"]


class TestHealthEndpoints:
    """Test basic health and root endpoints"""

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        data = r.json()
        assert data["name"] == "Client Banking API"
        assert "endpoints" in data


class TestAccountEndpoints:
    """Account creation, lookup and lifecycle"""

    def test_create_account(self, client):
        r = client.post("/accounts", json={
            "account_id": 7,
            "client_name": "Jane Smith",
            "initial_balance": "150.00"
        })
        assert r.status_code == 201
        data = r.json()
        assert data["message"] == "Account created successfully"
        assert data["account"]["card_number"] == "0007 0007 0007 0007"
        assert data["account"]["status"] == "unverified"

    def test_create_duplicate_account(self, client):
        create(client, 1, verify=False)
        r = client.post("/accounts", json={"account_id": 1})
        assert r.status_code == 400
        assert "already exists" in r.json()["detail"]

    def test_create_negative_balance(self, client):
        r = client.post("/accounts", json={"account_id": 2, "initial_balance": "-5"})
        assert r.status_code == 400

    def test_create_balance_above_maximum(self, client):
        r = client.post("/accounts", json={"account_id": 2, "initial_balance": "1e30"})
        assert r.status_code == 400
        assert client.get("/accounts/2").status_code == 404

    def test_create_negative_id(self, client):
        r = client.post("/accounts", json={"account_id": -1})
        assert r.status_code == 422

    def test_get_account(self, client):
        create(client, 3, "40", with_credit_score=True)
        r = client.get("/accounts/3")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "verified"
        assert data["credit_score"] == 700

    def test_get_missing_account(self, client):
        r = client.get("/accounts/999")
        assert r.status_code == 404
        assert r.json()["detail"] == "Account not found"

    def test_lifecycle(self, client):
        """Test verify, suspend, appeal and close through the API"""
        create(client, 4, verify=False)

        r = client.post("/accounts/4/verify")
        assert r.json()["message"] == "Account verified"
        r = client.post("/accounts/4/suspend")
        assert r.json()["message"] == "Account suspended"
        assert r.json()["account"]["status"] == "suspended"
        r = client.post("/accounts/4/appeal")
        assert r.json()["message"] == "Appeal accepted"
        r = client.post("/accounts/4/close")
        assert r.json()["account"]["status"] == "closed"

    def test_rejected_transition(self, client):
        create(client, 5, verify=False)

        r = client.post("/accounts/5/appeal")

        assert r.status_code == 400
        assert r.json()["detail"] == {
            "message": "Appeal failed",
            "reason": "transition_rejected"
        }
        assert client.get("/accounts/5").json()["status"] == "unverified"

    def test_unknown_action(self, client):
        create(client, 6)
        assert client.post("/accounts/6/freeze").status_code == 404

    def test_statement(self, client):
        create(client, 8, "1234.5", with_credit_score=True)

        r = client.get("/accounts/8/statement")

        statement = r.json()["statement"]
        assert "Client Name: Client 8" in statement
        assert "Balance: $1234.50" in statement
        assert "Status: Verified" in statement
        assert "Transaction Limit: $7000.00" in statement

    def test_statement_for_maximum_balance(self, client):
        create(client, 12, "999999999999999.99")

        r = client.get("/accounts/12/statement")

        assert r.status_code == 200
        assert "Balance: $999999999999999.99" in r.json()["statement"]

    def test_operations(self, client):
        create(client, 9, verify=False)

        assert client.get("/accounts/9/operations/deposit").json()["allowed"] is True
        assert client.get("/accounts/9/operations/withdraw").json()["allowed"] is False
        assert client.get("/accounts/9/operations/teleport").json()["allowed"] is False

    def test_recalculate_credit_score(self, client):
        create(client, 10, "6000", with_credit_score=True)
        create(client, 11)

        r = client.post("/accounts/10/credit-score/recalculate")
        assert r.status_code == 200
        assert r.json()["credit_score"] == 760

        r = client.post("/accounts/11/credit-score/recalculate")
        assert r.status_code == 400


class TestTransactionEndpoints:
    """Deposit, withdraw and transfer through the API"""

    def test_deposit(self, client):
        create(client, 1, verify=False)

        r = client.post("/transactions/deposit", json={"account_id": 1, "amount": "100"})

        assert r.status_code == 200
        assert r.json()["message"] == "Deposit successful"
        assert Decimal(r.json()["account"]["balance"]) == Decimal("100")

    def test_deposit_invalid_amount(self, client):
        create(client, 1)

        r = client.post("/transactions/deposit", json={"account_id": 1, "amount": "-10"})

        assert r.status_code == 400
        assert r.json()["detail"] == {"message": "Deposit failed", "reason": "invalid_amount"}

    def test_unparsable_amount(self, client):
        create(client, 1)
        r = client.post("/transactions/deposit", json={"account_id": 1, "amount": "ten"})
        assert r.status_code == 400

    def test_deposit_missing_account(self, client):
        r = client.post("/transactions/deposit", json={"account_id": 42, "amount": "10"})
        assert r.status_code == 404

    def test_withdraw(self, client):
        create(client, 1, "500")

        r = client.post("/transactions/withdraw", json={"account_id": 1, "amount": "200"})
        assert r.json()["message"] == "Withdrawal successful"

        r = client.post("/transactions/withdraw", json={"account_id": 1, "amount": "400"})
        assert r.status_code == 400
        assert r.json()["detail"]["reason"] == "invalid_amount"

    def test_withdraw_unverified(self, client):
        create(client, 1, "500", verify=False)

        r = client.post("/transactions/withdraw", json={"account_id": 1, "amount": "10"})

        assert r.status_code == 400
        assert r.json()["detail"]["reason"] == "invalid_state"

    def test_transfer(self, client):
        create(client, 1, "1000")
        recipient = create(client, 2, verify=False)

        r = client.post("/transactions/transfer", json={
            "account_id": 1,
            "recipient_card_number": recipient["card_number"],
            "amount": "300",
            "description": "Rent"
        })

        assert r.status_code == 200
        assert r.json()["message"] == "Transfer successful"
        assert Decimal(client.get("/accounts/2").json()["balance"]) == Decimal("300")

    def test_transfer_to_closed_recipient(self, client):
        create(client, 1, "1000")
        recipient = create(client, 2)
        client.post("/accounts/2/close")

        r = client.post("/transactions/transfer", json={
            "account_id": 1,
            "recipient_card_number": recipient["card_number"],
            "amount": "300"
        })

        assert r.status_code == 400
        assert r.json()["detail"]["reason"] == "recipient_unavailable"
        assert Decimal(client.get("/accounts/1").json()["balance"]) == Decimal("1000")

    def test_transaction_history(self, client):
        create(client, 1, "1000")
        recipient = create(client, 2)
        client.post("/transactions/deposit", json={"account_id": 1, "amount": "50"})
        client.post("/transactions/transfer", json={
            "account_id": 1,
            "recipient_card_number": recipient["card_number"],
            "amount": "25"
        })

        sender_history = client.get("/accounts/1/transactions").json()["transactions"]
        recipient_history = client.get("/accounts/2/transactions").json()["transactions"]

        assert [t["transaction_type"] for t in sender_history] == ["transfer", "deposit"]
        assert len(recipient_history) == 1
        assert recipient_history[0]["amount"] == "25.00"

    def test_systems_are_isolated(self, client):
        """Test each application owns its own store"""
        create(client, 1)
        other = TestClient(create_app(BankingSystem()))
        assert other.get("/accounts/1").status_code == 404
