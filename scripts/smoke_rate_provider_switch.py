import json

from fastapi.testclient import TestClient
from fxcache.main import create_app
from fxcache.core.config import Settings

"""Smoke test for provider switch.
Refreshes and converts 1000 JPY to USD under the 'static' provider and under
'external-http', showing either differing rates or the graceful fallback.
"""


def run():
    out = {}
    for kind in ("static", "external-http"):
        settings = Settings(exchange_rate_provider=kind, log_json=False)
        client = TestClient(create_app(settings_override=settings))
        refreshed = client.post("/rates/refresh", params={"force": True}).json()
        converted = client.get(
            "/rates/convert",
            params={"amount": 1000, "from_currency": "JPY", "to_currency": "USD"},
        ).json()
        out[kind] = {"rates": refreshed, "convert_1000_jpy": converted}

    print(json.dumps(out, indent=2))


if __name__ == "__main__":
    run()
