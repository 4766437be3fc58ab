from decimal import Decimal


def _money(value):
    return Decimal(str(value))


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


class TestCustomersApi:
    def test_list(self, client):
        body = client.get("/customers/").json()
        assert [c["id"] for c in body] == ["C1", "C2"]
        assert body[0]["contact_email"] == "billing@acme.example"

    def test_get_and_missing(self, client):
        assert client.get("/customers/C2").json()["name"] == "Beta Foods"
        assert client.get("/customers/C9").status_code == 404

    def test_resolve(self, client):
        assert client.get("/customers/resolve", params={"name": "ACME TRADING"}).json() == {
            "id": "C1",
            "name": "ACME TRADING",
        }
        assert client.get("/customers/resolve", params={"name": "Nobody"}).status_code == 404


class TestContractsApi:
    def test_list_with_status(self, client):
        body = client.get("/contracts/", params={"status": "expiring"}).json()
        assert [c["number"] for c in body] == ["1"]
        assert body[0]["status"] == "expiring_soon"
        assert body[0]["days_remaining"] == 16

    def test_list_as_of_another_day(self, client):
        body = client.get("/contracts/", params={"status": "active", "as_of": "2024-04-01"}).json()
        assert [c["number"] for c in body] == ["3"]

    def test_unknown_status_filter(self, client):
        resp = client.get("/contracts/", params={"status": "running"})
        assert resp.status_code == 400
        assert resp.json()["field"] == "status"

    def test_stats(self, client):
        body = client.get("/contracts/stats").json()
        assert body["counts"]["all"] == 3
        assert body["as_of"] == "2024-01-15"

    def test_get_contract(self, client):
        body = client.get("/contracts/2").json()
        assert body["status"] == "expired"
        assert body["days_remaining"] is None
        assert client.get("/contracts/42").status_code == 404

    def test_create_priced(self, client):
        resp = client.post("/contracts/", json={
            "customer_name": "Beta Foods",
            "ad_type": "Juice",
            "start_date": "2024-02-01",
            "end_date": "2024-04-30",
            "billboard_ids": ["B1", "B2"],
            "months": 3,
        })
        assert resp.status_code == 201
        body = resp.json()
        assert _money(body["rent_cost"]) == Decimal("6900")
        assert body["customer"]["id"] == "C2"
        assert body["status"] == "upcoming"

    def test_create_missing_dates(self, client):
        resp = client.post("/contracts/", json={"customer_id": "C1", "billboard_ids": ["B1"]})
        assert resp.status_code == 400
        assert resp.json()["field"] == "start_date"

    def test_renewal_plan_and_renew(self, client):
        plan = client.post("/contracts/1/renewal-plan", json={}).json()
        assert plan["start_date"] == "2024-01-15"
        assert plan["end_date"] == "2024-04-15"
        assert plan["months"] == 3

        resp = client.post("/contracts/1/renew", json={"keep_cost": False})
        assert resp.status_code == 201
        assert _money(resp.json()["rent_cost"]) == Decimal("6900")


class TestRateCardApi:
    def test_list(self, client):
        body = client.get("/rate-card/").json()
        assert len(body) == 1
        assert body[0]["category"] == "regular"

    def test_quote_uses_default_category(self, client):
        body = client.post("/rate-card/quote", json={"billboard_ids": ["B1", "B2"], "months": 3}).json()
        assert body["category"] == "regular"
        assert [line["source"] for line in body["lines"]] == ["rate_card", "fallback"]
        assert _money(body["total"]) == Decimal("6900")

    def test_quote_bad_months(self, client):
        resp = client.post("/rate-card/quote", json={"billboard_ids": ["B1"], "months": 0})
        assert resp.status_code == 400


class TestPaymentsAndBillingApi:
    def test_receipt_response(self, client):
        resp = client.post("/payments/", json={
            "customer_id": "C1",
            "amount": "3000",
            "contract_number": "1",
            "method": "cash",
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["payment"]["paid_at"] == "2024-01-15"
        assert body["payment"]["is_account_level"] is False
        assert _money(body["customer_balance"]) == Decimal("10000")
        assert _money(body["remaining_after_payment"]) == Decimal("7000")

    def test_receipt_for_unknown_contract(self, client):
        resp = client.post("/payments/", json={"customer_id": "C1", "amount": "10", "contract_number": "77"})
        assert resp.status_code == 404

    def test_zero_amount(self, client):
        resp = client.post("/payments/", json={"customer_id": "C1", "amount": "0", "entry_type": "debt"})
        assert resp.status_code == 400
        assert resp.json()["field"] == "amount"

    def test_update_and_delete(self, client):
        created = client.post("/payments/", json={
            "customer_id": "C1", "amount": "500", "entry_type": "account_payment",
        }).json()["payment"]
        updated = client.patch(f"/payments/{created['id']}", json={"amount": "600"}).json()
        assert _money(updated["amount"]) == Decimal("600")
        assert client.delete(f"/payments/{created['id']}").status_code == 204
        assert client.delete(f"/payments/{created['id']}").status_code == 404

    def test_summary_and_statement(self, client):
        client.post("/payments/", json={"customer_id": "C1", "amount": "3000", "contract_number": "1"})
        client.post("/payments/", json={
            "customer_id": "C1", "amount": "2000", "entry_type": "debt", "paid_at": "2023-12-01",
        })

        summary = client.get("/billing/summary", params={"customer_name": "acme"}).json()
        assert _money(summary["total_rent"]) == Decimal("13000")
        assert _money(summary["total_paid"]) == Decimal("5000")
        assert _money(summary["customer_balance"]) == Decimal("8000")
        assert _money(summary["account_balance"]) == Decimal("2000")
        assert _money(summary["per_contract"]["1"]["remaining"]) == Decimal("7000")
        assert summary["entry_count"] == 2

        statement = client.get("/billing/statement", params={"customer_id": "C1"}).json()
        assert [e["paid_at"] for e in statement["entries"]] == ["2023-12-01", "2024-01-15"]

    def test_summary_needs_customer(self, client):
        assert client.get("/billing/summary").status_code == 400

    def test_rent_invoice(self, client):
        client.post("/payments/", json={"customer_id": "C1", "amount": "2000", "entry_type": "debt"})
        body = client.post("/billing/invoice", json={
            "customer_id": "C1",
            "lines": [{"contract_number": "1", "quantity": 1}, {"contract_number": "2", "quantity": 0}],
            "include_account_balance": True,
        }).json()
        assert [line["contract_number"] for line in body["lines"]] == ["1"]
        assert _money(body["lines_total"]) == Decimal("10000")
        assert _money(body["total"]) == Decimal("12000")
        assert body["issued_on"] == "2024-01-15"

    def test_rent_invoice_foreign_contract(self, client):
        resp = client.post("/billing/invoice", json={
            "customer_id": "C1", "lines": [{"contract_number": "3"}],
        })
        assert resp.status_code == 400

    def test_print_invoice(self, client):
        body = client.post("/billing/print-invoice", json={
            "customer_id": "C1",
            "lines": [{"contract_number": "1", "price_per_unit": "75"}],
            "reason": "Reprint after storm damage",
        }).json()
        assert body["lines"][0]["quantity"] == 2
        assert _money(body["total"]) == Decimal("150")
        assert body["reason"] == "Reprint after storm damage"

    def test_print_invoice_needs_reason(self, client):
        resp = client.post("/billing/print-invoice", json={
            "customer_id": "C1", "lines": [{"contract_number": "1", "price_per_unit": "75"}],
        })
        assert resp.status_code == 400
        assert resp.json()["field"] == "reason"
