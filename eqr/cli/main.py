"""Main CLI application using Cyclopts.

Converts query responses between the binary transport form and the JSON
document form, and summarizes them.
"""

import cyclopts

from eqr.cli.commands import encode, inspect, render

app = cyclopts.App(
    name="eqr",
    help="Event query responses - CLI",
)

app.command(render.app, name="render")
app.command(encode.app, name="encode")
app.command(inspect.app, name="inspect")
