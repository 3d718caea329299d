"""Partner Routes — HTTP surface over PartnerRepository.

Tests cover:
    - POST applies defaults, generates an id, stamps createdAt = updatedAt
    - Request validation → 400 VALIDATION_ERROR (schema and nested dates)
    - GET/PUT on absent ids → 404; DELETE idempotent → 204
    - PUT merges fields, keeps createdAt, advances updatedAt
    - List sorted newest first with optional pagination
    - Storage exhaustion → 503 with the operation code, marked retryable
    - Corrupt stored record → 503 naming the failing field, not retryable
    - Re-creating a deleted id → 409; deleting an unknown id never blocks a create
    - Records stored without createdAt list by updatedAt
"""

from datetime import datetime, timedelta, timezone

MINIMAL = {"partnerName": "Acme Energy", "pamOwner": "pam@example.com"}


# ─── Create ──────────────────────────────────────────────────────

async def test_create_partner_applies_defaults(client):
    res = await client.post("/api/v1/partners", json=MINIMAL)

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["id"].startswith("partner-")
    assert data["contractType"] == "Other"
    assert data["tier"] == "tier-2"
    assert data["currentGate"] == "pre-contract"
    assert data["ccv"] == 0
    assert data["gates"] == {}
    assert data["createdAt"] == data["updatedAt"]
    assert data["createdAt"].endswith("Z")


async def test_create_partner_persists(client, partner_repo):
    res = await client.post("/api/v1/partners", json={**MINIMAL, "id": "p1", "ccv": 1000})

    stored = await partner_repo.get_partner("p1")
    assert res.status_code == 201
    assert stored["ccv"] == 1000
    assert isinstance(stored["createdAt"], datetime)


async def test_create_partner_with_gate_progress(client):
    body = {
        **MINIMAL,
        "id": "p1",
        "currentGate": "gate-0",
        "gates": {
            "pre-contract": {
                "gateId": "pre-contract",
                "status": "passed",
                "startedDate": "2024-01-01T00:00:00Z",
                "approvals": [
                    {"approvedBy": "pam@example.com", "approvedByRole": "PAM",
                     "approvedAt": "2024-01-05T12:00:00+02:00"},
                ],
            },
        },
    }
    res = await client.post("/api/v1/partners", json=body)

    gate = res.json()["data"]["gates"]["pre-contract"]
    assert gate["startedDate"] == "2024-01-01T00:00:00.000Z"
    assert gate["approvals"][0]["approvedAt"] == "2024-01-05T10:00:00.000Z"


async def test_create_partner_drops_tpm_owner(client):
    res = await client.post(
        "/api/v1/partners", json={**MINIMAL, "tpmOwner": "tpm@example.com"},
    )
    assert "tpmOwner" not in res.json()["data"]


async def test_create_partner_requires_pam_owner(client):
    res = await client.post("/api/v1/partners", json={"partnerName": "Acme"})

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(d["field"].endswith("pamOwner") for d in error["details"])


async def test_create_partner_rejects_negative_ccv(client):
    res = await client.post("/api/v1/partners", json={**MINIMAL, "ccv": -1})
    assert res.status_code == 400


async def test_create_partner_rejects_unknown_tier(client):
    res = await client.post("/api/v1/partners", json={**MINIMAL, "tier": "tier-9"})
    assert res.status_code == 400


async def test_create_partner_rejects_bad_gate_date(client):
    body = {**MINIMAL, "gates": {"gate-0": {"startedDate": "whenever"}}}

    res = await client.post("/api/v1/partners", json=body)

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "gates.gate-0.startedDate" in error["message"]
    assert error["field"] == "gates.gate-0.startedDate"


# ─── Read / Update / Delete ──────────────────────────────────────

async def test_get_partner(client):
    await client.post("/api/v1/partners", json={**MINIMAL, "id": "p1"})

    res = await client.get("/api/v1/partners/p1")

    assert res.status_code == 200
    assert res.json()["data"]["partnerName"] == "Acme Energy"


async def test_get_missing_partner_returns_404(client):
    res = await client.get("/api/v1/partners/missing")

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_update_merges_and_stamps(client, partner_repo, make_partner):
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    await partner_repo.save_partner(
        make_partner(createdAt=created, updatedAt=created),
    )

    res = await client.put("/api/v1/partners/p1", json={"ccv": 5000, "tier": "tier-0"})

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["ccv"] == 5000
    assert data["tier"] == "tier-0"
    assert data["partnerName"] == "Acme Energy"
    assert data["createdAt"] == "2024-01-01T00:00:00.000Z"
    assert data["updatedAt"] > data["createdAt"]
    assert data["gates"]["pre-contract"]["status"] == "passed"


async def test_update_missing_partner_returns_404(client):
    res = await client.put("/api/v1/partners/missing", json={"ccv": 1})
    assert res.status_code == 404


async def test_update_rejects_invalid_field(client, partner_repo, make_partner):
    await partner_repo.save_partner(make_partner())
    res = await client.put("/api/v1/partners/p1", json={"ccv": -5})
    assert res.status_code == 400


async def test_delete_partner_is_idempotent(client):
    await client.post("/api/v1/partners", json={**MINIMAL, "id": "p1"})

    first = await client.delete("/api/v1/partners/p1")
    second = await client.delete("/api/v1/partners/p1")

    assert first.status_code == 204
    assert second.status_code == 204
    assert (await client.get("/api/v1/partners/p1")).status_code == 404


# ─── List ────────────────────────────────────────────────────────

async def test_list_newest_first(client, partner_repo, make_partner):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for offset, partner_id in enumerate(["p1", "p2", "p3"]):
        when = base + timedelta(days=offset)
        await partner_repo.save_partner(
            make_partner(partner_id, createdAt=when, updatedAt=when),
        )

    body = (await client.get("/api/v1/partners")).json()

    assert body["success"] is True
    assert body["count"] == 3
    assert [p["id"] for p in body["data"]] == ["p3", "p2", "p1"]


async def test_list_paginated(client, partner_repo, make_partner):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for offset, partner_id in enumerate(["p1", "p2", "p3"]):
        when = base + timedelta(days=offset)
        await partner_repo.save_partner(
            make_partner(partner_id, createdAt=when, updatedAt=when),
        )

    body = (await client.get("/api/v1/partners?page=2&page_size=2")).json()

    assert [p["id"] for p in body["data"]] == ["p1"]
    assert body["page"] == 2
    assert body["pageSize"] == 2
    assert body["totalCount"] == 3
    assert body["totalPages"] == 2


# ─── Storage failures ────────────────────────────────────────────

async def test_storage_exhaustion_returns_503(client, partner_store, sleep):
    partner_store.always_fail.add("list")

    res = await client.get("/api/v1/partners")

    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "LIST_PARTNERS_ERROR"
    assert error["category"] == "storage"
    assert sleep.delays == [1.0, 2.0, 3.0]


async def test_get_failure_reports_partner_key(client, partner_store):
    partner_store.always_fail.add("get")

    res = await client.get("/api/v1/partners/p1")

    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "GET_PARTNER_ERROR"
    assert error["context"] == {"store": "partners", "key": "p1"}


async def test_storage_failure_is_marked_retryable(client, partner_store):
    partner_store.always_fail.add("set")

    res = await client.post("/api/v1/partners", json={**MINIMAL, "id": "p1"})

    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "SAVE_PARTNER_ERROR"
    assert error["severity"] == "critical"
    assert error["retryable"] is True


async def test_corrupt_stored_partner_reports_field(client, partner_store):
    await partner_store.inner.set("p1", '{"id": "p1", "updatedAt": "yesterday"}')

    res = await client.get("/api/v1/partners/p1")

    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "GET_PARTNER_ERROR"
    assert error["field"] == "updatedAt"
    assert error["retryable"] is False


# ─── Id reuse ────────────────────────────────────────────────────

async def test_recreating_deleted_partner_returns_409(client):
    await client.post("/api/v1/partners", json={**MINIMAL, "id": "p1"})
    await client.delete("/api/v1/partners/p1")

    res = await client.post("/api/v1/partners", json={**MINIMAL, "id": "p1"})

    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "SAVE_PARTNER_ERROR"
    assert error["severity"] == "error"
    assert error["retryable"] is False


async def test_delete_of_unknown_id_does_not_block_create(client):
    assert (await client.delete("/api/v1/partners/fresh")).status_code == 204

    res = await client.post("/api/v1/partners", json={**MINIMAL, "id": "fresh"})

    assert res.status_code == 201
    assert (await client.get("/api/v1/partners/fresh")).status_code == 200


async def test_list_includes_records_without_created_at(client, partner_repo, make_partner):
    later = datetime(2024, 3, 1, tzinfo=timezone.utc)
    await partner_repo.save_partner(make_partner("p1"))
    await partner_repo.save_partner({"id": "p2", "ccv": 1000, "updatedAt": later})

    body = (await client.get("/api/v1/partners")).json()

    assert [p["id"] for p in body["data"]] == ["p2", "p1"]
