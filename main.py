"""Local entrypoint.

Runs the engine's JSON surface for a UI on the same machine.
"""

from golden_ticket import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=8000, debug=False)
