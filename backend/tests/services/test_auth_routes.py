"""Auth Routes — tests for /login, /callback and /api/logout.

Tests cover:
    - /login redirects to the provider and stores pending OAuth state
    - /callback validates state, records the user and sets the session
    - Upstream failures surface as 502 envelopes
    - Logout clears the session identity
"""

from urllib.parse import parse_qs, urlparse

from tests.services.fake_upstreams import login


async def test_login_redirects_to_provider(client):
    res = await client.get("/login")
    assert res.status_code == 302
    location = urlparse(res.headers["location"])
    assert location.netloc == "twitter.com"
    params = parse_qs(location.query)
    assert params["code_challenge_method"] == ["S256"]
    assert params["redirect_uri"][0].endswith("/callback")
    assert "set-cookie" in res.headers


async def test_login_without_client_id_is_configuration_error(client, services):
    services.twitter.client_id = None
    res = await client.get("/login")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "CONFIGURATION_ERROR"
    assert "CLIENT_ID" in res.json()["error"]["message"]


async def test_callback_records_user_and_sets_session(client, services, twitter_api):
    res = await login(client)

    assert res.status_code == 302
    assert res.headers["location"] == "/"
    record = await services.directory.get("1001")
    assert record.eligible is True
    assert record.tokens.access_token == "access-token-1"

    me = await client.get("/api/me")
    assert me.status_code == 200
    assert me.json()["user"]["username"] == "alice"


async def test_callback_sends_stored_verifier(client, twitter_api):
    await login(client)
    token_request = next(r for r in twitter_api.requests if r.url.path == "/2/oauth2/token")
    form = parse_qs(token_request.content.decode())
    assert form["code"] == ["auth-code-1"]
    assert len(form["code_verifier"][0]) >= 43


async def test_callback_missing_params(client):
    res = await client.get("/callback", params={"code": "x"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "OAUTH_STATE_INVALID"
    assert res.json()["error"]["message"] == "Missing state or code"


async def test_callback_without_login_is_rejected(client):
    res = await client.get("/callback", params={"state": "s", "code": "c"})
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Invalid or expired state"


async def test_callback_state_mismatch(client, services):
    await client.get("/login")
    res = await client.get("/callback", params={"state": "forged", "code": "c"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "OAUTH_STATE_INVALID"
    assert await services.directory.get("1001") is None


async def test_callback_state_is_single_use(client):
    res = await client.get("/login")
    state = parse_qs(urlparse(res.headers["location"]).query)["state"][0]
    first = await client.get("/callback", params={"state": state, "code": "c"})
    replay = await client.get("/callback", params={"state": state, "code": "c"})
    assert first.status_code == 302
    assert replay.status_code == 400


async def test_token_exchange_failure_is_502(client, twitter_api, services):
    twitter_api.token_status = 400
    res = await login(client)
    assert res.status_code == 502
    assert res.json()["error"]["code"] == "UPSTREAM_TRANSPORT_ERROR"
    assert await services.directory.get("1001") is None


async def test_empty_profile_is_502(client, twitter_api):
    twitter_api.user = None
    res = await login(client)
    assert res.status_code == 502
    assert res.json()["error"]["code"] == "UPSTREAM_PROTOCOL_ERROR"


async def test_logout_clears_session(logged_in):
    res = await logged_in.post("/api/logout")
    assert res.status_code == 200
    assert res.json() == {"ok": True}

    me = await logged_in.get("/api/me")
    assert me.status_code == 401
    assert me.json()["error"]["code"] == "NOT_CONNECTED"


async def test_logout_without_session_is_ok(client):
    res = await client.post("/api/logout")
    assert res.json() == {"ok": True}
