"""Build value objects from decoded fields, translating validation failures
into the codec error of the wire form they came from."""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from eqr.domain.shared.error import DecodeError, DocumentParseError

M = TypeVar("M", bound=BaseModel)


def _first_error(e: PydanticValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(part) for part in err["loc"])
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def build_decoded(model: type[M], **fields: Any) -> M:
    try:
        return model(**fields)
    except PydanticValidationError as e:
        raise DecodeError(f"invalid {model.__name__} in stream: {_first_error(e)}") from e


def build_parsed(model: type[M], location: str, **fields: Any) -> M:
    try:
        return model(**fields)
    except PydanticValidationError as e:
        raise DocumentParseError(
            f"invalid {model.__name__}: {_first_error(e)}", location=location
        ) from e
