"""Token-level helpers shared by the document decoders."""

from eqr.domain.shared.error import DocumentParseError
from eqr.domain.shared.port.document import DocumentParser, Token


def ensure_expected_token(expected: Token, actual: Token | None, location: str) -> None:
    """Raise DocumentParseError unless ``actual`` is ``expected``."""
    if actual is not expected:
        found = actual.value if actual is not None else "end of document"
        raise DocumentParseError(
            f"expected [{expected.value}] but found [{found}]",
            expected=expected,
            location=location,
        )


def ensure_start_object(parser: DocumentParser) -> None:
    """Position the parser on a START_OBJECT, advancing only from the initial state."""
    if parser.current_token is None:
        parser.next_token()
    ensure_expected_token(Token.START_OBJECT, parser.current_token, parser.token_location)


def read_string_array(parser: DocumentParser) -> list[str]:
    """Read the array the current token opens as a list of strings."""
    ensure_expected_token(Token.START_ARRAY, parser.current_token, parser.token_location)
    values: list[str] = []
    while (token := parser.next_token()) is not Token.END_ARRAY:
        ensure_expected_token(Token.VALUE_STRING, token, parser.token_location)
        values.append(parser.text())
    return values


def missing_field(field: str, location: str) -> DocumentParseError:
    return DocumentParseError(f"required field [{field}] is missing", location=location)
