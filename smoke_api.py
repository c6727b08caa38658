# smoke_api.py: end-to-end smoke against a running server (register → trade → afk)
import os, sys, json, uuid, argparse
from typing import Dict, Any, List
import requests

# ---------- CLI / ENV ----------

def make_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Idle Realms API smoke tests")
    p.add_argument("--base", default=os.environ.get("BASE_URL", "http://localhost:5000"),
                   help="API base URL (default: http://localhost:5000)")
    p.add_argument("--item", default=os.environ.get("SMOKE_ITEM", "iron_ore"),
                   help="Item to trade (must be seeded; default: iron_ore)")
    p.add_argument("--price", default="50.25", help="Listing price per unit (default 50.25)")
    p.add_argument("--timeout", type=int, default=15, help="HTTP timeout seconds (default 15)")
    return p

# ---------- HTTP helpers ----------

def ok(status: int) -> bool:
    return 200 <= status < 300

def jdump(obj) -> str:
    try: return json.dumps(obj, indent=2)
    except Exception: return str(obj)

def get_json(resp: requests.Response):
    try: return resp.json()
    except ValueError: return {"_raw": resp.text}

def http_get(s: requests.Session, base: str, path: str, timeout: int):
    url = f"{base.rstrip('/')}{path}"
    print(f"[GET] {url}")
    r = s.get(url, timeout=timeout)
    print(f"  -> {r.status_code}")
    return r, get_json(r)

def http_post(s: requests.Session, base: str, path: str, body: Dict[str, Any], timeout: int):
    url = f"{base.rstrip('/')}{path}"
    print(f"[POST] {url}")
    r = s.post(url, json=body, timeout=timeout)
    print(f"  -> {r.status_code}")
    return r, get_json(r)

def assert_true(cond: bool, msg: str, errs: List[str]):
    if not cond: errs.append(msg)

# ---------- Flows ----------

def new_player(base: str, timeout: int, tag: str) -> tuple[requests.Session, Dict[str, Any]] | None:
    s = requests.Session()
    suffix = uuid.uuid4().hex[:6]
    body = {
        "username": f"smoke_{tag}_{suffix}",
        "email": f"smoke_{tag}_{suffix}@example.com",
        "password": "hunter22",
    }
    r, data = http_post(s, base, "/api/auth/register", body, timeout)
    if not ok(r.status_code):
        print(jdump(data)); return None
    r, ch = http_post(s, base, "/api/characters", {"name": f"{tag.title()}{suffix[:4]}"}, timeout)
    if not ok(r.status_code):
        print(jdump(ch)); return None
    return s, ch

def run(args: argparse.Namespace) -> bool:
    BASE = args.base
    TIMEOUT = args.timeout
    errs: List[str] = []

    print("=== Idle Realms API smoke ===")
    print("BASE=", BASE)

    r, data = http_get(requests.Session(), BASE, "/api/healthcheck", TIMEOUT)
    if not ok(r.status_code) or data.get("status") != "ok":
        print("Healthcheck failed ❌"); return False

    seller = new_player(BASE, TIMEOUT, "seller")
    buyer = new_player(BASE, TIMEOUT, "buyer")
    if seller is None or buyer is None:
        print("Player setup failed ❌"); return False
    s_sess, s_char = seller
    b_sess, b_char = buyer
    sid, bid = s_char["character_id"], b_char["character_id"]

    # ---- inventory
    r, entry = http_post(s_sess, BASE, f"/api/characters/{sid}/inventory",
                         {"item_id": args.item, "quantity": 5}, TIMEOUT)
    assert_true(ok(r.status_code) and entry.get("quantity") == 5, f"seed inventory: {jdump(entry)}", errs)

    # ---- market
    r, data = http_post(s_sess, BASE, "/api/market/listings",
                        {"seller_id": sid, "item_id": args.item, "quantity": 9, "price_per_unit": args.price},
                        TIMEOUT)
    assert_true(r.status_code == 409, f"oversized listing should be 409, got {r.status_code}", errs)

    r, listing = http_post(s_sess, BASE, "/api/market/listings",
                           {"seller_id": sid, "item_id": args.item, "quantity": 2, "price_per_unit": args.price},
                           TIMEOUT)
    if not ok(r.status_code):
        print(jdump(listing)); print("Listing failed ❌"); return False
    print(f"  listing_id: {listing['id']}  total: {listing['total_price']}")

    r, data = http_post(b_sess, BASE, f"/api/market/listings/{listing['id']}/purchase", {"buyer_id": bid}, TIMEOUT)
    assert_true(data.get("ok") is True, f"purchase: {jdump(data)}", errs)
    r, data = http_post(b_sess, BASE, f"/api/market/listings/{listing['id']}/purchase", {"buyer_id": bid}, TIMEOUT)
    assert_true(data.get("ok") is False, "second purchase of the same listing must be a no-op", errs)

    r, inv = http_get(b_sess, BASE, f"/api/characters/{bid}/inventory", TIMEOUT)
    held = {row["item_id"]: row["quantity"] for row in inv.get("items", [])}
    assert_true(held.get(args.item) == 2, f"buyer inventory: {jdump(inv)}", errs)

    # ---- afk
    r, session = http_post(b_sess, BASE, "/api/afk/start", {"character_id": bid, "duration_hours": 1}, TIMEOUT)
    if not ok(r.status_code):
        print(jdump(session)); print("AFK start failed ❌"); return False
    r, data = http_post(b_sess, BASE, "/api/afk/start", {"character_id": bid, "duration_hours": 1}, TIMEOUT)
    assert_true(r.status_code == 409, f"double AFK start should be 409, got {r.status_code}", errs)
    r, data = http_post(b_sess, BASE, f"/api/afk/{session['id']}/complete", {}, TIMEOUT)
    assert_true(data.get("ok") is False, "early completion must be a no-op", errs)

    if errs:
        print("\n=== FAILURES ===")
        for e in errs:
            print("-", e)
        print("\nRESULT: FAIL ❌")
        return False

    print("\nRESULT: PASS ✅")
    return True

# ---------- main ----------

if __name__ == "__main__":
    args = make_parser().parse_args()
    ok_all = run(args)
    sys.exit(0 if ok_all else 1)
