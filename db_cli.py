# db_cli.py: Idle Realms DB CLI
import os, sys, json, argparse, datetime
from typing import List

# Ensure local package import works when running directly
sys.path.insert(0, os.path.abspath("."))

# Make sure dev bootstrap doesn't fight migrations
os.environ.setdefault("AUTO_CREATE_TABLES", "0")

from idlerealms import create_app  # type: ignore
from idlerealms.config import MEMBERSHIP_TYPES  # type: ignore
from idlerealms.errors import GameError  # type: ignore
from idlerealms.models import db, User, Character, InventoryEntry  # type: ignore
from idlerealms.seed import seed_catalog  # type: ignore
from idlerealms.services.afk import complete_due_sessions  # type: ignore
from idlerealms.services.inventory import credit  # type: ignore
from idlerealms.services.rewards import table_from_config  # type: ignore


def _fmt_dt(dt):
    if not dt: return None
    if isinstance(dt, (datetime.datetime, datetime.date)):
        return dt.isoformat()
    return str(dt)

def print_rows(rows: List[tuple], headers: List[str]) -> None:
    if not rows:
        print("(no rows)")
        return
    widths = [len(h) for h in headers]
    for r in rows:
        for i, v in enumerate(r):
            widths[i] = max(widths[i], len("" if v is None else str(v)))
    line = " | ".join(h.ljust(widths[i]) for i,h in enumerate(headers))
    print(line)
    print("-+-".join("-"*w for w in widths))
    for r in rows:
        print(" | ".join(("" if v is None else str(v)).ljust(widths[i]) for i,v in enumerate(r)))

# --------------------
# Commands
# --------------------

def cmd_init(args):
    db.create_all()
    print(json.dumps({"ok": True, "tables": sorted(db.metadata.tables)}, indent=2))

def cmd_seed(args):
    counts = seed_catalog()
    print(json.dumps({
        "ok": True,
        **{k: {"created": c, "updated": u} for k, (c, u) in counts.items()},
    }, indent=2))

def cmd_users(args):
    q = User.query
    if args.email:
        q = q.filter(User.email.like(f"%{args.email}%"))
    rows = []
    for u in q.order_by(User.created_at.desc()).all():
        rows.append((
            u.user_id, u.username, u.email, u.membership_type,
            _fmt_dt(u.created_at), _fmt_dt(u.last_login_at), u.characters.count(),
        ))
    print_rows(rows, ["user_id","username","email","tier","created_at","last_login","#chars"])

def cmd_set_membership(args):
    u = User.query.filter_by(email=args.email).first()
    if not u:
        print("User not found.")
        return
    u.membership_type = args.tier
    db.session.commit()
    print(json.dumps({"ok": True, "user_id": u.user_id, "membership_type": u.membership_type}, indent=2))

def cmd_characters(args):
    q = Character.query
    if args.email:
        u = User.query.filter_by(email=args.email).first()
        if not u:
            print("No such user.")
            return
        q = q.filter(Character.user_id == u.user_id)
    rows = []
    for c in q.order_by(Character.created_at.desc()).all():
        rows.append((
            c.character_id, c.name, c.level, c.experience, c.current_realm,
            c.afk_state.value, _fmt_dt(c.afk_end_time), _fmt_dt(c.created_at),
        ))
    print_rows(rows, ["character_id","name","lvl","xp","realm","afk","afk_until","created_at"])

def cmd_grant(args):
    try:
        if db.session.get(Character, args.character) is None:
            raise SystemExit("Character not found.")
        credit(args.character, args.item, args.quantity)
        db.session.commit()
    except GameError as e:
        db.session.rollback()
        raise SystemExit(e.message)
    entry = db.session.get(InventoryEntry, (args.character, args.item))
    print(json.dumps({"ok": True, "character_id": args.character, "item_id": args.item,
                      "quantity": entry.quantity}, indent=2))

def cmd_complete_due(args):
    from flask import current_app
    settled, failed = complete_due_sessions(reward_table=table_from_config(current_app.config))
    rows = [(s.id, s.character_id, s.realm, s.experience_gained, len(s.items_found or []))
            for s in settled]
    print_rows(rows, ["session_id","character_id","realm","xp","drops"])
    if failed:
        print(f"\n{len(failed)} session(s) failed to settle:")
        print_rows([(sid, e.code, e.message) for sid, e in failed], ["session_id","error","message"])

def build_parser():
    p = argparse.ArgumentParser(description="Idle Realms DB CLI")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("init", help="Create all tables (dev only; prefer migrations)")
    s.set_defaults(func=cmd_init)

    s = sub.add_parser("seed", help="Seed realms, monsters and items")
    s.set_defaults(func=cmd_seed)

    s = sub.add_parser("users", help="List users")
    s.add_argument("--email", help="Filter by email contains")
    s.set_defaults(func=cmd_users)

    s = sub.add_parser("set-membership", help="Change a user's membership tier")
    s.add_argument("--email", required=True)
    s.add_argument("--tier", required=True, choices=MEMBERSHIP_TYPES)
    s.set_defaults(func=cmd_set_membership)

    s = sub.add_parser("characters", help="List characters")
    s.add_argument("--email", help="Limit to a user's characters")
    s.set_defaults(func=cmd_characters)

    s = sub.add_parser("grant", help="Add items to a character's inventory")
    s.add_argument("--character", required=True, help="character_id")
    s.add_argument("--item", required=True, help="item_id")
    s.add_argument("--quantity", type=int, default=1)
    s.set_defaults(func=cmd_grant)

    s = sub.add_parser("complete-due", help="Settle every AFK session whose end time has passed")
    s.set_defaults(func=cmd_complete_due)

    return p

def main():
    app = create_app()
    with app.app_context():
        args = build_parser().parse_args()
        args.func(args)

if __name__ == "__main__":
    main()
