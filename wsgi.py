"""WSGI entrypoint for Gunicorn.

Usage:
  gunicorn -w 1 -b 127.0.0.1:8000 wsgi:app

Use a single worker: the result poller and the sign-in state live in-process.
"""

from golden_ticket import create_app

app = create_app()
