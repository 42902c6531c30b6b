"""Render command: binary response to JSON."""

import sys
from pathlib import Path

import cyclopts

from eqr.cli.console import get_console
from eqr.cli.util import build_codec
from eqr.domain.shared.error import EQRError

app = cyclopts.App(name="render", help="Render a binary response as a JSON document")


@app.default
def render(path: Path, /, *, pretty: bool = False, strict: bool = False) -> None:
    """Decode a binary response file and print it as JSON.

    Args:
        path: Binary response file
        pretty: Indent the JSON output
        strict: Reject conflicting variants, out-of-range percents and trailing bytes
    """
    console = get_console()
    codec = build_codec(pretty=pretty or None, strict=strict or None)

    try:
        response = codec.from_bytes(path.read_bytes())
    except OSError as e:
        console.error(f"Cannot read {path}: {e.strerror}")
        sys.exit(1)
    except EQRError as e:
        console.error(f"Cannot decode {path}: {e.message}", hint=e.code)
        sys.exit(1)

    console.raw(codec.to_json(response))
