"""Encode command: JSON response to binary."""

import sys
from pathlib import Path

import cyclopts

from eqr.cli.console import get_console
from eqr.cli.util import build_codec
from eqr.domain.shared.error import EQRError

app = cyclopts.App(name="encode", help="Encode a JSON response document as binary")


@app.default
def encode(
    path: Path,
    /,
    *,
    output: Path | None = None,
    strict: bool = False,
) -> None:
    """Parse a JSON response file and write its binary form.

    Args:
        path: JSON response file
        output: Destination file (defaults to the input path with a .bin suffix)
        strict: Reject documents carrying more than one result variant
    """
    console = get_console()
    codec = build_codec(strict=strict or None)
    output = output or path.with_suffix(".bin")

    try:
        response = codec.from_json(path.read_bytes())
        data = codec.to_bytes(response)
        output.write_bytes(data)
    except OSError as e:
        console.error(f"I/O error: {e.strerror}", hint=str(e.filename))
        sys.exit(1)
    except EQRError as e:
        console.error(f"Cannot encode {path}: {e.message}", hint=e.code)
        sys.exit(1)

    console.success(f"Wrote {len(data)} bytes to {output}")
