import json
import os
import sys

from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app

"""Smoke script for /convert.

Posts the same amount through the static reference table and through the
external-http provider, showing the (likely) different result or the typed
failure returned when the live API cannot be reached.

NOTE: This is a lightweight diagnostic and not a formal test.
"""

PAYLOAD = {
    "from": {"currency_code": "USD", "units": 65, "nanos": 500000000},
    "to": "EUR",
}


def run():
    out = {}
    for kind in ("static", "external-http"):
        settings = Settings(exchange_rate_provider=kind)
        client = TestClient(create_app(settings_override=settings))
        r = client.post("/convert", json=PAYLOAD)
        out[kind] = {"status": r.status_code, "body": r.json()}
    print(json.dumps(out, indent=2))


if __name__ == "__main__":
    sys.path.append(os.getcwd())
    run()
