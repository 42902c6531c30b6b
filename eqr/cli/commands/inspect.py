"""Inspect command: summarize a response file."""

import sys
from pathlib import Path

import cyclopts

from eqr.cli.console import get_console
from eqr.cli.util import build_codec, load_response
from eqr.domain.shared.error import EQRError

app = cyclopts.App(name="inspect", help="Summarize a binary or JSON response")


@app.default
def inspect(path: Path, /) -> None:
    """Print took, timeout, total and a table of the result entries.

    Args:
        path: Response file (.json for documents, anything else is read as binary)
    """
    console = get_console()
    codec = build_codec()

    try:
        response = load_response(path, codec)
    except OSError as e:
        console.error(f"Cannot read {path}: {e.strerror}")
        sys.exit(1)
    except EQRError as e:
        console.error(f"Cannot load {path}: {e.message}", hint=e.code)
        sys.exit(1)

    console.response_summary(response)
