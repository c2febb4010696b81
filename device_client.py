# device_client.py
"""Client a greenhouse device (e.g. a Raspberry Pi) uses against /api.

Run ``python device_client.py --greenhouse 1`` to poll pending commands
once, apply them through ``handler`` and acknowledge each one.
"""
import argparse
import base64
import logging
import os
import time

import requests

log = logging.getLogger(__name__)


class DeviceClient:

    def __init__(self, base_url, api_key, greenhouse_id, timeout=5, session=None):
        self.base_url = base_url.rstrip("/")
        self.greenhouse_id = greenhouse_id
        self.timeout = timeout
        self.http = session or requests.Session()
        self.http.headers["X-API-Key"] = api_key

    def _url(self, path):
        return f"{self.base_url}/api{path}"

    def _post(self, path, payload=None):
        r = self.http.post(self._url(path), json=payload or {}, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def send_reading(self, **values):
        return self._post("/sensor-data", dict(values, greenhouse_id=self.greenhouse_id))

    def pending_commands(self):
        r = self.http.get(self._url(f"/greenhouse/{self.greenhouse_id}/commands"), timeout=self.timeout)
        r.raise_for_status()
        return r.json().get("commands", [])

    def acknowledge(self, command_id):
        return self._post(f"/greenhouse/{self.greenhouse_id}/commands/{command_id}/acknowledge")

    def send_image(self, image_bytes, lang="en"):
        payload = {"image": base64.b64encode(image_bytes).decode("ascii")}
        return self._post(f"/greenhouse/{self.greenhouse_id}/image?lang={lang}", payload)

    def process_commands(self, handler):
        """Apply every pending command with ``handler(device, action)`` and ack it.

        A command whose handler raises is left pending for the next poll.
        """
        done = []
        for cmd in self.pending_commands():
            try:
                handler(cmd["device"], cmd["action"])
            except Exception:
                log.exception("Command %s (%s:%s) failed", cmd["id"], cmd["device"], cmd["action"])
                continue
            self.acknowledge(cmd["id"])
            done.append(cmd["id"])
        return done


def _log_handler(device, action):
    log.info("Would switch %s -> %s", device, action)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Poll and acknowledge greenhouse commands")
    parser.add_argument("--url", default=os.environ.get("SERVER_URL", "http://localhost:3000"))
    parser.add_argument("--api-key", default=os.environ.get("API_KEY", ""))
    parser.add_argument("--greenhouse", type=int, required=True)
    parser.add_argument("--interval", type=float, default=0,
                        help="seconds between polls; 0 polls once")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    client = DeviceClient(args.url, args.api_key, args.greenhouse)
    while True:
        try:
            done = client.process_commands(_log_handler)
            log.info("Executed %d command(s)", len(done))
        except requests.RequestException as e:
            log.error("Polling failed: %s", e)
        if not args.interval:
            break
        time.sleep(args.interval)


if __name__ == "__main__":
    main()
