"""Health Routes — liveness endpoints answer without a session."""


async def test_ping(client):
    res = await client.get("/ping")
    assert res.status_code == 200
    assert res.text == "pong"


async def test_health(client):
    res = await client.get("/api/health")
    assert res.json() == {"status": "ok", "service": "invitegate-api"}
