import datetime as dt

from idlerealms import create_app
from idlerealms.models import db, Character
from idlerealms.models.base import utcnow
from idlerealms.seed import seed_catalog
from idlerealms.services.afk import start_session

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "AUTO_CREATE_TABLES": True,
    "AFK_REWARD_CHANCE": 0.0,
}


def setup_app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.drop_all(); db.create_all()
        seed_catalog()
    return app


def register(client, name, membership_type="free"):
    r = client.post("/api/auth/register", json={
        "username": name,
        "email": f"{name}@example.com",
        "password": "secret1",
        "membership_type": membership_type,
    })
    assert r.status_code == 201
    return r.get_json()


def new_character(client, name):
    r = client.post("/api/characters", json={"name": name})
    assert r.status_code == 201
    return r.get_json()


def test_healthcheck():
    app = setup_app()
    with app.test_client() as client:
        r = client.get("/api/healthcheck")
        assert r.status_code == 200
        assert r.get_json()["status"] == "ok"


def test_register_login_and_me():
    app = setup_app()
    with app.test_client() as client:
        assert client.get("/api/auth/me").status_code == 401
        user = register(client, "alice")
        assert user["membership_type"] == "free"
        assert client.get("/api/auth/me").get_json()["user_id"] == user["user_id"]
        assert client.post("/api/auth/logout").status_code == 200
        assert client.get("/api/auth/me").status_code == 401

        r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong!"})
        assert r.status_code == 401
        r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret1"})
        assert r.status_code == 200
        assert r.get_json()["last_login_at"] is not None


def test_register_validation():
    app = setup_app()
    with app.test_client() as client:
        register(client, "alice")
        r = client.post("/api/auth/register", json={"username": "alice", "email": "other@example.com", "password": "secret1"})
        assert r.status_code == 409
        r = client.post("/api/auth/register", json={"username": "a!", "email": "x@example.com", "password": "secret1"})
        assert r.status_code == 400
        r = client.post("/api/auth/register", json={"username": "bobby", "email": "bob@example.com", "password": "123"})
        assert r.status_code == 400
        r = client.post("/api/auth/register", json={"username": "carol", "email": "c@example.com", "password": "secret1", "membership_type": "gold"})
        assert r.status_code == 400


def test_character_creation():
    app = setup_app()
    with app.test_client() as client:
        assert client.post("/api/characters", json={"name": "Hero"}).status_code == 401
        user = register(client, "alice")
        ch = new_character(client, "Hero")
        assert ch["level"] == 1 and ch["current_realm"] == "earth"
        assert ch["afk_state"] == "idle"
        assert client.post("/api/characters", json={"name": "H"}).status_code == 400

        r = client.get(f"/api/users/{user['user_id']}/characters")
        assert [c["character_id"] for c in r.get_json()] == [ch["character_id"]]
        profs = client.get(f"/api/characters/{ch['character_id']}/professions").get_json()
        assert sorted(p["type"] for p in profs) == ["chopping", "mining"]
        r = client.get("/api/characters/nope")
        assert r.status_code == 404 and r.get_json()["error"] == "not_found"
        r = client.get("/api/users/nobody/characters")
        assert r.status_code == 404 and r.get_json()["error"] == "not_found"
        r = client.get("/api/characters/nope/professions")
        assert r.status_code == 404 and r.get_json()["error"] == "not_found"


def test_inventory_routes():
    app = setup_app()
    with app.test_client() as client:
        register(client, "alice")
        cid = new_character(client, "Hero")["character_id"]
        url = f"/api/characters/{cid}/inventory"

        r = client.post(url, json={"item_id": "iron_ore", "quantity": 4})
        assert r.status_code == 200 and r.get_json()["quantity"] == 4
        r = client.post(url, json={"item_id": "iron_sword", "quantity": 1, "is_equipped": True})
        assert r.get_json()["is_equipped"] is True

        items = client.get(url).get_json()["items"]
        assert items[0]["item_id"] == "iron_sword"
        assert items[0]["item"]["equipment_slot"] == "weapon"

        r = client.post(url, json={"item_id": "iron_ore", "quantity": 0})
        assert r.get_json()["quantity"] == 0
        r = client.post(url, json={"item_id": "iron_ore", "quantity": 0})
        assert r.status_code == 400 and r.get_json()["error"] == "invalid_state"
        r = client.post(url, json={"item_id": "iron_ore", "quantity": 10**20})
        assert r.status_code == 400 and r.get_json()["error"] == "invalid_state"
        r = client.post(url, json={"item_id": "iron_ore", "quantity": "lots"})
        assert r.status_code == 400 and r.get_json()["error"] == "invalid_request"
        r = client.post(url, json={"item_id": "iron_sword", "quantity": 1, "is_equipped": "yes"})
        assert r.status_code == 400 and r.get_json()["error"] == "invalid_request"
        r = client.post(url, json={"item_id": "dragon_egg", "quantity": 1})
        assert r.status_code == 404 and r.get_json()["error"] == "not_found"
        assert client.get("/api/characters/nope/inventory").status_code == 404


def test_afk_routes():
    app = setup_app()
    with app.test_client() as client:
        register(client, "alice")
        cid = new_character(client, "Hero")["character_id"]

        r = client.post("/api/afk/start", json={"character_id": cid, "duration_hours": 8})
        assert r.status_code == 403 and r.get_json()["error"] == "limit_exceeded"
        r = client.post("/api/afk/start", json={"character_id": cid, "duration_hours": 0})
        assert r.status_code == 400

        r = client.post("/api/afk/start", json={"character_id": cid, "duration_hours": 2})
        assert r.status_code == 201
        session = r.get_json()
        assert session["status"] == "running"

        r = client.post("/api/afk/start", json={"character_id": cid, "duration_hours": 1})
        assert r.status_code == 409 and r.get_json()["error"] == "already_afk"

        r = client.post(f"/api/afk/{session['id']}/complete")
        assert r.status_code == 200
        assert r.get_json() == {"ok": False, "session": None}

        status = client.get(f"/api/characters/{cid}/afk").get_json()
        assert status["afk_state"] == "running"
        assert status["active"]["id"] == session["id"]


def test_afk_completion_route():
    app = setup_app()
    with app.test_client() as client:
        register(client, "alice")
        cid = new_character(client, "Hero")["character_id"]
        with app.app_context():
            session_id = start_session(cid, 1, now=utcnow() - dt.timedelta(hours=2)).id

        r = client.post(f"/api/afk/{session_id}/complete")
        data = r.get_json()
        assert data["ok"] is True
        assert data["session"]["experience_gained"] == 50
        assert data["character"]["experience"] == 50
        assert data["character"]["is_afk"] is False

        r = client.post(f"/api/afk/{session_id}/complete")
        assert r.get_json()["ok"] is False


def test_market_routes():
    app = setup_app()
    seller_client, buyer_client = app.test_client(), app.test_client()
    register(seller_client, "seller")
    register(buyer_client, "buyer")
    sid = new_character(seller_client, "Smith")["character_id"]
    bid = new_character(buyer_client, "Trader")["character_id"]
    seller_client.post(f"/api/characters/{sid}/inventory", json={"item_id": "iron_ore", "quantity": 2})

    r = seller_client.post("/api/market/listings", json={"seller_id": sid, "item_id": "iron_ore", "quantity": 3, "price_per_unit": "50.25"})
    assert r.status_code == 409 and r.get_json()["error"] == "insufficient_stock"
    r = seller_client.post("/api/market/listings", json={"seller_id": sid, "item_id": "iron_ore", "quantity": 2})
    assert r.status_code == 400

    r = seller_client.post("/api/market/listings", json={"seller_id": sid, "item_id": "iron_ore", "quantity": 2, "price_per_unit": 50.25})
    assert r.status_code == 201
    listing = r.get_json()
    assert listing["total_price"] == "100.50"

    board = buyer_client.get("/api/market/listings").get_json()
    assert board[0]["seller_name"] == "Smith"
    assert board[0]["item"]["item_id"] == "iron_ore"

    r = buyer_client.post(f"/api/market/listings/{listing['id']}/purchase", json={})
    assert r.status_code == 400

    r = buyer_client.post(f"/api/market/listings/{listing['id']}/purchase", json={"buyer_id": bid})
    data = r.get_json()
    assert data["ok"] is True
    assert data["listing"]["is_active"] is False
    assert data["listing"]["buyer_id"] == bid

    r = buyer_client.post(f"/api/market/listings/{listing['id']}/purchase", json={"buyer_id": bid})
    assert r.status_code == 200 and r.get_json() == {"ok": False, "listing": None}
    assert buyer_client.get("/api/market/listings").get_json() == []

    items = buyer_client.get(f"/api/characters/{bid}/inventory").get_json()["items"]
    assert [(i["item_id"], i["quantity"]) for i in items] == [("iron_ore", 2)]


def test_catalog_routes():
    app = setup_app()
    with app.test_client() as client:
        items = client.get("/api/items").get_json()
        assert len(items) == 7
        assert items[0]["rarity"] == "common"
        assert items[-1]["item_id"] == "lunar_plate"

        realms = client.get("/api/realms").get_json()
        assert [r["name"] for r in realms] == ["earth", "moon", "mars"]
        monsters = client.get("/api/realms/moon/monsters").get_json()
        assert {m["name"] for m in monsters} == {"Crater Crawler", "Lunar Wyrm"}
        r = client.get("/api/realms/pluto/monsters")
        assert r.status_code == 404 and r.get_json() == {"error": "not_found", "message": "Unknown realm"}


def test_chat_routes():
    app = setup_app()
    with app.test_client() as client:
        user = register(client, "alice")
        r = client.post("/api/chat", json={"user_id": user["user_id"], "message": "hello"})
        assert r.status_code == 201
        assert r.get_json()["username"] == "alice"
        client.post("/api/chat", json={"user_id": user["user_id"], "message": "anyone mining?"})

        history = client.get("/api/chat").get_json()
        assert [m["message"] for m in history] == ["anyone mining?", "hello"]
        assert len(client.get("/api/chat?limit=1").get_json()) == 1

        r = client.post("/api/chat", json={"user_id": "ghost", "message": "boo"})
        assert r.status_code == 404 and r.get_json()["error"] == "not_found"
        r = client.get("/api/chat?limit=many")
        assert r.status_code == 400 and r.get_json()["error"] == "invalid_request"
        assert client.post("/api/chat", json={"user_id": user["user_id"], "message": ""}).status_code == 400
        assert client.post("/api/chat", json={"user_id": user["user_id"], "message": "x" * 501}).status_code == 400


def test_character_lookup_after_afk_start():
    app = setup_app()
    with app.test_client() as client:
        register(client, "alice")
        cid = new_character(client, "Hero")["character_id"]
        client.post("/api/afk/start", json={"character_id": cid, "duration_hours": 1})
        ch = client.get(f"/api/characters/{cid}").get_json()
        assert ch["is_afk"] is True
        with app.app_context():
            assert db.session.get(Character, cid).afk_end_time is not None


def test_afk_completion_uses_configured_realm_tables():
    app = create_app({**TEST_CONFIG, "AFK_REWARD_TABLES": {"earth": [[100, "oak_log", [3, 3]]]}})
    with app.app_context():
        db.drop_all(); db.create_all()
        seed_catalog()
    with app.test_client() as client:
        register(client, "alice")
        cid = new_character(client, "Hero")["character_id"]
        with app.app_context():
            session_id = start_session(cid, 2, now=utcnow() - dt.timedelta(hours=3)).id

        data = client.post(f"/api/afk/{session_id}/complete").get_json()
        assert data["ok"] is True
        assert data["session"]["items_found"] == [{"item_id": "oak_log", "quantity": 3}] * 2
        items = client.get(f"/api/characters/{cid}/inventory").get_json()["items"]
        assert [(i["item_id"], i["quantity"]) for i in items] == [("oak_log", 6)]
