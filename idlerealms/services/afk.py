"""AFK session engine.

A character starts a time-boxed session, then later asks for it to be
settled. There is no scheduler: ``complete_session`` is pull based and is a
no-op (returns ``None``) until the session's end time has passed.

Settlement writes the session rewards, bumps the character's experience,
credits found items to the inventory and clears the character's AFK window,
all in one transaction.
"""
from __future__ import annotations

import datetime as dt
import logging
import random

import sqlalchemy as sa

from ..config import MIN_AFK_HOURS, REALM_XP_PER_HOUR, TIER_DURATION_CAPS
from ..errors import Conflict, GameError, InvalidState, LimitExceeded, NotFound
from ..models import db, AfkSession, AfkState, Character, User
from ..models.base import utcnow
from .inventory import credit
from .rewards import DEFAULT_REWARD_TABLE, RewardTable, merge_drops

logger = logging.getLogger(__name__)

HOUR = dt.timedelta(hours=1)


def duration_cap(membership_type: str) -> int:
    return TIER_DURATION_CAPS.get(membership_type, TIER_DURATION_CAPS["free"])


def elapsed_hours(start: dt.datetime, end: dt.datetime) -> int:
    return max(0, (end - start) // HOUR)


def experience_for(realm: str, hours: int) -> int:
    return hours * REALM_XP_PER_HOUR[realm]


def start_session(character_id: str, duration_hours: int, *, now: dt.datetime | None = None) -> AfkSession:
    """Put a character into AFK mode for ``duration_hours``.

    Raises:
        InvalidState: duration is not a whole number of hours >= 1.
        NotFound: unknown character.
        Conflict: the character is already AFK.
        LimitExceeded: duration above the owner's membership cap.
    """
    if isinstance(duration_hours, bool) or not isinstance(duration_hours, int):
        raise InvalidState("duration_hours must be an integer")
    if duration_hours < MIN_AFK_HOURS:
        raise InvalidState(f"duration_hours must be at least {MIN_AFK_HOURS}")

    start = now or utcnow()
    end = start + duration_hours * HOUR
    try:
        char = db.session.execute(
            sa.select(Character).where(Character.character_id == character_id).with_for_update()
        ).scalar_one_or_none()
        if not char:
            raise NotFound("Character not found")
        if char.is_afk:
            raise Conflict("Character is already AFK", code="already_afk")

        user = db.session.get(User, char.user_id)
        tier = user.membership_type if user else "free"
        cap = duration_cap(tier)
        if duration_hours > cap:
            raise LimitExceeded(f"Duration exceeds {cap}h limit for {tier} membership")

        claimed = db.session.execute(
            sa.update(Character)
            .where(Character.character_id == character_id, Character.afk_end_time.is_(None))
            .values(afk_start_time=start, afk_end_time=end, updated_at=start)
            .execution_options(synchronize_session="fetch")
        ).rowcount
        if claimed != 1:
            raise Conflict("Character is already AFK", code="already_afk")

        session = AfkSession(
            character_id=character_id,
            start_time=start,
            end_time=end,
            realm=char.current_realm,
            status=AfkState.RUNNING,
            experience_gained=0,
            items_found=[],
        )
        db.session.add(session)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "afk_start character_id=%s session_id=%s hours=%s realm=%s tier=%s",
        character_id,
        session.id,
        duration_hours,
        session.realm,
        tier,
    )
    return session


def complete_session(
    session_id: int,
    *,
    now: dt.datetime | None = None,
    rng: random.Random | None = None,
    reward_table: RewardTable | None = None,
) -> AfkSession | None:
    """Settle a finished session.

    Returns ``None`` without touching anything when the session does not
    exist, is already completed, or has not reached its end time.
    """
    now = now or utcnow()
    rng = rng or random.Random()
    table = reward_table or DEFAULT_REWARD_TABLE
    try:
        session = db.session.execute(
            sa.select(AfkSession).where(AfkSession.id == session_id).with_for_update()
        ).scalar_one_or_none()
        if session is None or session.is_completed:
            db.session.rollback()
            logger.info("afk_complete_skipped session_id=%s reason=not_found_or_done", session_id)
            return None
        if now < session.end_time:
            end_time = session.end_time
            db.session.rollback()
            logger.info(
                "afk_complete_skipped session_id=%s reason=not_ready end_time=%s",
                session_id,
                end_time.isoformat(),
            )
            return None

        character_id = session.character_id
        realm = session.realm
        hours = elapsed_hours(session.start_time, session.end_time)
        experience = experience_for(realm, hours)
        drops = []
        for hour in range(hours):
            drops.extend(table.roll(realm, hour, rng))

        claimed = db.session.execute(
            sa.update(AfkSession)
            .where(AfkSession.id == session_id, AfkSession.status == AfkState.RUNNING.value)
            .values(
                status=AfkState.COMPLETED.value,
                experience_gained=experience,
                items_found=[d.as_dict() for d in drops],
                completed_at=now,
            )
            .execution_options(synchronize_session="fetch")
        ).rowcount
        if claimed != 1:
            db.session.rollback()
            logger.info("afk_complete_skipped session_id=%s reason=lost_race", session_id)
            return None

        db.session.execute(
            sa.update(Character)
            .where(Character.character_id == character_id)
            .values(
                experience=Character.experience + experience,
                afk_start_time=None,
                afk_end_time=None,
                updated_at=now,
            )
            .execution_options(synchronize_session="fetch")
        )
        for item_id, quantity in merge_drops(drops).items():
            credit(character_id, item_id, quantity)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "afk_complete session_id=%s character_id=%s hours=%s realm=%s experience=%s drops=%s",
        session_id,
        character_id,
        hours,
        realm,
        experience,
        len(drops),
    )
    return db.session.get(AfkSession, session_id)


def get_active_session(character_id: str) -> AfkSession | None:
    return (
        db.session.query(AfkSession)
        .filter(
            AfkSession.character_id == character_id,
            AfkSession.status == AfkState.RUNNING.value,
        )
        .first()
    )


def list_sessions(character_id: str, limit: int = 20) -> list[AfkSession]:
    if db.session.get(Character, character_id) is None:
        raise NotFound("Character not found")
    return (
        db.session.query(AfkSession)
        .filter(AfkSession.character_id == character_id)
        .order_by(AfkSession.start_time.desc(), AfkSession.id.desc())
        .limit(limit)
        .all()
    )


def complete_due_sessions(
    *,
    now: dt.datetime | None = None,
    rng: random.Random | None = None,
    reward_table: RewardTable | None = None,
) -> tuple[list[AfkSession], list[tuple[int, GameError]]]:
    """Settle every running session whose end time has passed.

    A session that fails to settle is rolled back on its own and reported;
    the sweep carries on with the rest. Returns ``(settled, failed)`` where
    ``failed`` pairs each session id with the error it raised.
    """
    now = now or utcnow()
    due_ids = [
        row.id
        for row in db.session.query(AfkSession.id).filter(
            AfkSession.status == AfkState.RUNNING.value,
            AfkSession.end_time <= now,
        )
    ]
    settled, failed = [], []
    for session_id in due_ids:
        try:
            session = complete_session(session_id, now=now, rng=rng, reward_table=reward_table)
        except GameError as e:
            logger.warning("afk_complete_failed session_id=%s reason=%s", session_id, e.code)
            failed.append((session_id, e))
            continue
        if session is not None:
            settled.append(session)
    return settled, failed
