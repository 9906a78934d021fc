"""
Tests for calculator, URL and comparison API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from finclamp.config import get_settings
from finclamp.main import app
from finclamp.db.models import ComparisonRecord

# Database setup is handled by conftest.py


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def pinned_comparison(db_session):
    """Create a pinned comparison."""
    record = ComparisonRecord(
        calculator_id="emi",
        title="EMI Calculator",
        inputs={"loanAmount": "120000", "tenure": "1"},
        result={"installment": 10000},
        share_url="http://localhost:8000/?in=emi&emi_loanAmount=120000&emi_tenure=1",
    )
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record


class TestHealthAPI:
    """Test health endpoint."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCalculatorsAPI:
    """Test calculator endpoints."""

    def test_list_calculators(self, client):
        """Test listing calculators."""
        response = client.get("/api/calculate/")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == len(data["calculators"])
        assert "emi" in [c["id"] for c in data["calculators"]]

    def test_list_calculators_by_formula(self, client):
        """Test filtering calculators by formula."""
        response = client.get("/api/calculate/", params={"formula": "amortization"})
        ids = {c["id"] for c in response.json()["calculators"]}
        assert ids == {"emi", "mortgage", "personal-loan"}

    def test_get_calculator(self, client):
        response = client.get("/api/calculate/income-tax")
        assert response.status_code == 200
        data = response.json()
        assert data["namespace"] == "tax_"
        regime = next(f for f in data["fields"] if f["name"] == "taxRegime")
        assert regime["choices"] == ["new", "old"]

    def test_get_unknown_calculator(self, client):
        response = client.get("/api/calculate/lottery")
        assert response.status_code == 404

    def test_calculate(self, client):
        """Test computing from field edits."""
        response = client.post(
            "/api/calculate/emi",
            json={"fields": {"loanAmount": "120000", "tenure": "1"}, "query": "in=emi"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["result"]["installment"] == 10000
        assert data["query"] == "in=emi&emi_loanAmount=120000&emi_tenure=1"

    def test_calculate_from_query(self, client):
        """Test hydrating fields from an existing query string."""
        response = client.post(
            "/api/calculate/rd",
            json={
                "query": "?in=rd&rd_monthlyDeposit=5000&rd_interestRate=7&emi_tenure=2",
                "fields": {"timePeriod": "5"},
            },
        )
        data = response.json()
        assert data["fields"]["monthlyDeposit"] == "5000"
        assert len(data["result"]["yearly"]) == 5
        assert "emi_tenure=2" in data["query"]

    def test_calculate_incomplete(self, client):
        response = client.post("/api/calculate/emi", json={"fields": {"loanAmount": "1000"}})
        assert response.status_code == 200
        assert response.json()["result"] is None

    def test_calculate_unknown_field(self, client):
        response = client.post("/api/calculate/emi", json={"fields": {"downPayment": "1"}})
        assert response.status_code == 422
        assert "downPayment" in response.json()["detail"]


class TestUrlAPI:
    """Test query-string codec endpoints."""

    def test_decode(self, client):
        response = client.post(
            "/api/url/decode",
            json={"calculator_id": "emi", "query": "in=emi&emi_loanAmount=5000&emi_bogus=1&rd_x=2"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["route"] == "emi"
        assert data["params"] == {"loanAmount": "5000", "bogus": "1"}
        assert data["fields"]["loanAmount"] == "5000"
        assert "bogus" not in data["fields"]

    def test_encode(self, client):
        response = client.post(
            "/api/url/encode",
            json={
                "calculator_id": "emi",
                "fields": {"loanAmount": "500000", "calculationType": "emi"},
                "query": "in=emi&rd_monthlyDeposit=5000",
            },
        )
        assert response.json()["query"] == "in=emi&rd_monthlyDeposit=5000&emi_loanAmount=500000"

    def test_share(self, client):
        response = client.post(
            "/api/url/share",
            json={
                "calculator_id": "sip",
                "fields": {"monthlyInvestment": "5000", "annualReturn": "12"},
                "base_url": "https://finclamp.com/",
            },
        )
        assert response.json()["url"] == "https://finclamp.com/?in=sip&sip_monthlyInvestment=5000"


class TestComparisonsAPI:
    """Test comparison tray endpoints."""

    def test_list_empty(self, client):
        response = client.get("/api/comparisons/")
        assert response.status_code == 200
        assert response.json() == {"comparisons": [], "total": 0}

    def test_add_comparison(self, client):
        """Test pinning a calculation."""
        response = client.post(
            "/api/comparisons/",
            json={"calculator_id": "income-tax", "fields": {"annualIncome": "900000"}},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Income Tax Calculator"
        assert data["result"]["total_tax_with_cess"] == 46800
        assert data["share_url"].endswith("?in=income-tax&tax_annualIncome=900000")

    def test_add_comparison_without_result(self, client):
        response = client.post(
            "/api/comparisons/", json={"calculator_id": "emi", "fields": {"tenure": "2"}}
        )
        assert response.status_code == 422

    def test_add_comparison_unknown_calculator(self, client):
        response = client.post("/api/comparisons/", json={"calculator_id": "lottery"})
        assert response.status_code == 404

    def test_list_comparisons(self, client, pinned_comparison):
        client.post(
            "/api/comparisons/",
            json={"calculator_id": "rd", "query": "rd_monthlyDeposit=5000&rd_interestRate=7&rd_timePeriod=5"},
        )
        response = client.get("/api/comparisons/")
        data = response.json()
        assert data["total"] == 2
        assert [c["calculator_id"] for c in data["comparisons"]] == ["emi", "rd"]

        filtered = client.get("/api/comparisons/", params={"calculator_id": "rd"}).json()
        assert filtered["total"] == 1

    def test_remove_comparison(self, client, pinned_comparison, db_session):
        """Test soft delete."""
        response = client.delete(f"/api/comparisons/{pinned_comparison.id}")
        assert response.status_code == 200

        db_session.expire_all()
        record = db_session.query(ComparisonRecord).filter(ComparisonRecord.id == pinned_comparison.id).first()
        assert record.is_deleted
        assert client.get("/api/comparisons/").json()["total"] == 0

    def test_remove_missing_comparison(self, client):
        response = client.delete("/api/comparisons/missing")
        assert response.status_code == 404

    def test_clear_comparisons(self, client, pinned_comparison):
        response = client.delete("/api/comparisons/")
        assert response.json() == {"deleted": 1}
        assert client.get("/api/comparisons/").json()["total"] == 0

    def test_full_tray_refuses_new_pins(self, client, monkeypatch):
        """Pins past the tray limit are refused until one is removed."""
        monkeypatch.setattr(get_settings(), "comparison_tray_limit", 2)
        pin = {"calculator_id": "emi", "fields": {"loanAmount": "120000", "tenure": "1"}}

        first = client.post("/api/comparisons/", json=pin).json()
        assert client.post("/api/comparisons/", json=pin).status_code == 201

        response = client.post("/api/comparisons/", json=pin)
        assert response.status_code == 422
        assert "full" in response.json()["detail"]

        listed = client.get("/api/comparisons/").json()
        assert listed["total"] == 2
        assert listed["comparisons"][0]["id"] == first["id"]

        client.delete(f"/api/comparisons/{first['id']}")
        assert client.post("/api/comparisons/", json=pin).status_code == 201
