import json
import os
import sys
import tempfile

from fastapi.testclient import TestClient

"""Smoke script for the external-http provider.

Starts the app against a temp data dir, triggers two refresh cycles against the
real provider and prints what the store ended up with. The second cycle should
normally report "unchanged".

NOTE: needs network access; this is a diagnostic, not a formal test.
"""


def run():
    from kurswatch.core.config import Settings
    from kurswatch.main import create_app

    with tempfile.TemporaryDirectory() as d:
        settings = Settings(
            data_dir=d, rate_provider="external-http", scheduler_enabled=False
        )
        settings.init_post_load()
        app = create_app(settings_override=settings)
        with TestClient(app) as client:
            first = client.post("/rates/refresh").json()
            second = client.post("/rates/refresh").json()
            history = client.get("/rates/history").json()

        print(
            json.dumps(
                {"first": first, "second": second, "history": history}, indent=2
            )
        )


if __name__ == "__main__":
    sys.path.append(os.getcwd())
    run()
