"""
Challenges and point submissions.

A connection's `points` column is a running total kept in step with its
point submissions. Every adjustment is a read followed by a write with no
transaction around them, so two concurrent awards can lose one update.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from bittle.models.base import parse_entities, parse_entity
from bittle.models.challenge import Challenge
from bittle.models.point_submission import PointSubmission
from bittle.queries.base import fetch_rows, fetch_single, first_inserted, run_query

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# ============================================================
# CHALLENGES
# ============================================================

def get_challenges(client: Any, family_tree_id: str) -> list[Challenge]:
    rows = fetch_rows(
        client.table("challenges")
        .select("*")
        .eq("family_tree_id", family_tree_id)
        .order("created_at"),
        "fetching challenges",
    )
    return parse_entities(Challenge, rows)


def get_challenge(client: Any, challenge_id: str) -> Challenge:
    row = fetch_single(
        client.table("challenges").select("*").eq("id", challenge_id).single(),
        "fetching challenge",
    )
    return parse_entity(Challenge, row)


def create_challenge(
    client: Any,
    family_tree_id: str,
    prompt: str,
    point_value: Optional[int],
    deadline: Optional[datetime],
) -> Challenge:
    response = run_query(
        client.table("challenges").insert({
            "family_tree_id": family_tree_id,
            "prompt": prompt,
            "point_value": point_value,
            "deadline": _iso(deadline),
        }),
        "creating challenge",
    )
    return parse_entity(Challenge, first_inserted(response, "creating challenge"))


def update_challenge(
    client: Any,
    challenge_id: str,
    prompt: str,
    point_value: Optional[int],
    deadline: Optional[datetime],
) -> None:
    run_query(
        client.table("challenges")
        .update({"prompt": prompt, "point_value": point_value, "deadline": _iso(deadline)})
        .eq("id", challenge_id),
        "updating challenge",
    )


def delete_challenge(client: Any, challenge_id: str) -> None:
    run_query(
        client.table("challenges").delete().eq("id", challenge_id),
        "deleting challenge",
    )


# ============================================================
# POINT SUBMISSIONS
# ============================================================

def get_point_submissions(client: Any, connection_id: str) -> list[PointSubmission]:
    rows = fetch_rows(
        client.table("point_submission").select("*").eq("connection_id", connection_id),
        "fetching point submissions",
    )
    return parse_entities(PointSubmission, rows)


def get_challenge_submissions(client: Any, challenge_id: str) -> list[PointSubmission]:
    rows = fetch_rows(
        client.table("point_submission").select("*").eq("challenge_id", challenge_id),
        "fetching point submissions",
    )
    return parse_entities(PointSubmission, rows)


def _adjust_connection_points(client: Any, connection_id: str, delta: int) -> int:
    row = fetch_single(
        client.table("connections").select("points").eq("id", connection_id).single(),
        "fetching connection",
    )
    total = (row.get("points") or 0) + delta
    run_query(
        client.table("connections").update({"points": total}).eq("id", connection_id),
        "updating connection points",
    )
    return total


def _insert_submission(
    client: Any,
    connection_id: str,
    prompt: Optional[str],
    point: Optional[int],
    challenge_id: Optional[str],
) -> PointSubmission:
    response = run_query(
        client.table("point_submission").insert({
            "connection_id": connection_id,
            "prompt": prompt,
            "point": point,
            "challenge_id": challenge_id,
        }),
        "creating point submission",
    )
    return parse_entity(PointSubmission, first_inserted(response, "creating point submission"))


def create_point_submission(
    client: Any,
    connection_id: str,
    prompt: Optional[str],
    point: Optional[int],
    challenge_id: Optional[str] = None,
) -> PointSubmission:
    """Award custom points to a pairing."""
    submission = _insert_submission(client, connection_id, prompt, point, challenge_id)
    total = _adjust_connection_points(client, connection_id, point or 0)
    logger.info("Connection %s now has %s points", connection_id, total)
    return submission


def create_point_submission_with_challenge(
    client: Any,
    connection_id: str,
    challenge_id: str,
) -> PointSubmission:
    """Award a challenge's points to a pairing."""
    challenge = get_challenge(client, challenge_id)
    submission = _insert_submission(
        client, connection_id, challenge.prompt, challenge.point_value, challenge.id
    )
    total = _adjust_connection_points(client, connection_id, challenge.point_value or 0)
    logger.info(
        "Connection %s completed challenge %s, now %s points",
        connection_id, challenge_id, total,
    )
    return submission


def delete_point_submission(client: Any, submission_id: str) -> None:
    row = fetch_single(
        client.table("point_submission")
        .select("connection_id, point")
        .eq("id", submission_id)
        .single(),
        "fetching point submission",
    )
    _adjust_connection_points(client, row["connection_id"], -(row.get("point") or 0))
    run_query(
        client.table("point_submission").delete().eq("id", submission_id),
        "deleting point submission",
    )
