from typing import Iterable, Literal, Mapping

from pydantic import BaseModel

from bittle.models.connection import Connection

SortOption = Literal["alphabetical", "points-desc", "points-asc"]

UNKNOWN = "Unknown"


class Pairing(BaseModel):
    id: str
    big: str
    little: str
    points: int = 0


def build_pairings(
    connections: Iterable[Connection],
    identifiers: Mapping[str, str],
) -> list[Pairing]:
    return [
        Pairing(
            id=c.id,
            big=identifiers.get(c.big_id, UNKNOWN),
            little=identifiers.get(c.little_id, UNKNOWN),
            points=c.points or 0,
        )
        for c in connections
    ]


def sort_pairings(pairings: Iterable[Pairing], sort_by: SortOption = "alphabetical") -> list[Pairing]:
    if sort_by == "points-desc":
        return sorted(pairings, key=lambda p: p.points, reverse=True)
    if sort_by == "points-asc":
        return sorted(pairings, key=lambda p: p.points)
    return sorted(pairings, key=lambda p: p.big.casefold())
