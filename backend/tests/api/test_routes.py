"""API Routes — end-to-end tests for the HTTP surface.

Tests cover:
    - Health probe
    - Graph listing, lookup, compute (ordered nodes, default extras, 404/400 errors)
    - Review template validate/resolve, including parse and schema errors
    - Weighted score and ranking, including disqualification
    - Request validation errors use the structured 400 envelope
"""

import json


TEMPLATE = json.dumps({"messages": [
    {"role": "system", "content": "{{systemPrompt}}"},
    {"role": "user", "content": [
        {"type": "text", "text": "Theme: {{theme}} {{unknown}}"},
        {"type": "image_url", "image_url": {"url": "https://img/{{theme}}.png"}},
    ]},
]})


# ─── Health ──────────────────────────────────────────────────────

async def test_health_check(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "healthy"
    assert body["graphs"] == 4


# ─── Generation graphs ───────────────────────────────────────────

async def test_list_graphs(client):
    res = await client.get("/api/v1/graphs")
    assert res.status_code == 200
    assert "kling" in res.json()["graphs"]


async def test_lookup_graph(client):
    res = await client.get(
        "/api/v1/graphs/lookup", params={"ecosystem": "SDXL", "workflow": "img2img:upscale"},
    )
    assert res.status_code == 200
    assert res.json()["graph_key"] == "image-upscale"


async def test_compute_graph_returns_ordered_nodes(client):
    res = await client.post(
        "/api/v1/graphs/stable-diffusion/compute",
        json={"context": {"ecosystem": "SD1", "workflow": "txt2img"}},
    )
    assert res.status_code == 200
    nodes = res.json()["nodes"]
    assert nodes[0]["key"] == "model"
    assert nodes[-1]["key"] == "denoise"
    by_key = {n["key"]: n for n in nodes}
    assert by_key["aspectRatio"]["default_value"]["width"] == 512
    assert by_key["aspectRatio"]["kind"] == "aspect_ratio"


async def test_compute_graph_uses_configured_resource_limit(client):
    res = await client.post(
        "/api/v1/graphs/stable-diffusion/compute",
        json={"context": {"ecosystem": "SDXL", "workflow": "txt2img"}},
    )
    by_key = {n["key"]: n for n in res.json()["nodes"]}
    assert by_key["resources"]["meta"]["limit"] == 4


async def test_compute_graph_caller_extras_win(client):
    res = await client.post(
        "/api/v1/graphs/stable-diffusion/compute",
        json={
            "context": {"ecosystem": "SDXL", "workflow": "txt2img"},
            "extras": {"limits": {"max_resources": 12}},
        },
    )
    by_key = {n["key"]: n for n in res.json()["nodes"]}
    assert by_key["resources"]["meta"]["limit"] == 12


async def test_compute_unknown_graph_returns_404(client):
    res = await client.post("/api/v1/graphs/flux/compute", json={"context": {}})
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "GRAPH_NOT_FOUND"


async def test_compute_missing_context_returns_400(client):
    res = await client.post(
        "/api/v1/graphs/kling/compute", json={"context": {"ecosystem": "Kling"}},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "CONTEXT_INCOMPLETE"


# ─── Review templates ────────────────────────────────────────────

async def test_validate_template(client):
    res = await client.post("/api/v1/review-templates/validate", json={"template": TEMPLATE})
    assert res.status_code == 200
    assert res.json() == {
        "valid": True,
        "message_count": 2,
        "variables": ["systemPrompt", "theme", "unknown"],
    }


async def test_validate_malformed_template_returns_400(client):
    res = await client.post("/api/v1/review-templates/validate", json={"template": "{oops"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "TEMPLATE_PARSE_ERROR"


async def test_validate_schema_mismatch_returns_details(client):
    bad = json.dumps({"messages": [{"role": "robot", "content": "x"}]})
    res = await client.post("/api/v1/review-templates/validate", json={"template": bad})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "TEMPLATE_INVALID"
    assert error["details"]


async def test_resolve_template(client):
    res = await client.post("/api/v1/review-templates/resolve", json={
        "template": TEMPLATE,
        "variables": {"systemPrompt": "Judge fairly", "theme": "cats"},
    })
    assert res.status_code == 200
    body = res.json()
    assert body["messages"][0] == {"role": "system", "content": "Judge fairly"}
    text, image = body["messages"][1]["content"]
    assert text == {"type": "text", "text": "Theme: cats {{unknown}}"}
    assert image["image_url"]["url"] == "https://img/cats.png"
    assert body["unresolved"] == ["unknown"]


# ─── Scoring ─────────────────────────────────────────────────────

async def test_weighted_score(client):
    res = await client.post("/api/v1/scores/weighted", json={
        "theme": 10, "aesthetic": 10, "humor": 10, "wittiness": 10,
    })
    assert res.status_code == 200
    body = res.json()
    assert body["disqualified"] is False
    assert abs(body["weighted_score"] - 10.0) < 1e-9


async def test_weighted_score_disqualified(client):
    res = await client.post("/api/v1/scores/weighted", json={
        "theme": 1, "aesthetic": 10, "humor": 10, "wittiness": 10,
    })
    assert res.json() == {"weighted_score": None, "disqualified": True}


async def test_rank_entries(client):
    def score(theme):
        return {"theme": theme, "aesthetic": 5, "humor": 5, "wittiness": 5}

    res = await client.post("/api/v1/scores/rank", json={"entries": [
        {"entry_id": "low", "score": score(5)},
        {"entry_id": "out", "score": score(0)},
        {"entry_id": "high", "score": score(9)},
    ]})
    assert res.status_code == 200
    body = res.json()
    assert [r["entry_id"] for r in body["ranked"]] == ["high", "low"]
    assert [r["rank"] for r in body["ranked"]] == [1, 2]
    assert body["disqualified"] == ["out"]


async def test_invalid_request_body_returns_structured_400(client):
    res = await client.post("/api/v1/scores/weighted", json={"theme": 5})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert {d["field"] for d in error["details"]} >= {"body.aesthetic"}
