from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from bittle.core.codes import generate_form_code, normalize_code
from bittle.models.base import parse_entities, parse_entity
from bittle.models.form import Form
from bittle.queries.base import fetch_rows, fetch_single, first_inserted, run_query


def get_forms(client: Any, author_id: str) -> list[Form]:
    """All forms authored by one organization user, newest first."""
    rows = fetch_rows(
        client.table("form")
        .select("*")
        .eq("author", author_id)
        .order("created_at", desc=True),
        "fetching the forms for organization",
    )
    return parse_entities(Form, rows)


def get_codes(client: Any) -> list[str]:
    rows = fetch_rows(client.table("form").select("code"), "fetching codes")
    return [row["code"] for row in rows]


def create_form(
    client: Any,
    author_id: str,
    title: str,
    code: Optional[str] = None,
    description: Optional[str] = None,
    deadline: Optional[datetime] = None,
) -> Form:
    """
    Insert a form. A missing code is generated; a supplied code is
    normalized and must not already be taken.
    """
    existing = get_codes(client)
    if code:
        code = normalize_code(code)
        if code in {normalize_code(c) for c in existing}:
            raise ValueError(f'Form code "{code}" is already in use')
    else:
        code = generate_form_code(existing)

    payload = {
        "author": author_id,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "deadline": deadline.isoformat() if deadline else None,
        "code": code,
        "description": description,
        "title": title,
    }
    response = run_query(client.table("form").insert(payload), "creating form")
    return parse_entity(Form, first_inserted(response, "creating form"))


def get_form_by_code(client: Any, code: str) -> Form:
    row = fetch_single(
        client.table("form").select("*").eq("code", normalize_code(code)).single(),
        "fetching form by code",
    )
    return parse_entity(Form, row)


def get_form_title(client: Any, code: str) -> Optional[str]:
    return get_form_by_code(client, code).title


def get_form_id_by_code(client: Any, code: str) -> str:
    row = fetch_single(
        client.table("form").select("id").eq("code", normalize_code(code)).single(),
        "fetching form ID from form code",
    )
    return str(row["id"])


def delete_form(client: Any, form_id: str) -> None:
    run_query(client.table("form").delete().eq("id", form_id), "deleting form")
