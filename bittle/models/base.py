from __future__ import annotations

from typing import Any, Iterable, Type, TypeVar

from pydantic import BaseModel, ValidationError

from bittle.errors import EntityValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _failed_fields(exc: ValidationError) -> list[str]:
    fields: list[str] = []
    for err in exc.errors():
        name = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
        if name not in fields:
            fields.append(name)
    return fields


def parse_entity(model: Type[ModelT], record: Any) -> ModelT:
    """
    Validate one untyped record from the store against its entity model.
    Raises EntityValidationError naming every offending field.
    """
    try:
        return model.model_validate(record)
    except ValidationError as exc:
        raise EntityValidationError(model.__name__, _failed_fields(exc)) from exc


def parse_entities(model: Type[ModelT], records: Iterable[Any] | None) -> list[ModelT]:
    return [parse_entity(model, r) for r in (records or [])]
