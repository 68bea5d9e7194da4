"""
lightwave_client.py

A small API client for the Lightwave rental backend, for scripts and bots.

What it provides:
- Basic-auth requests against the backend (POST /auth/login to check credentials)
- Timeline, inventory, bundle and crew reads
- The event editor wizard: open a draft, book items or bundles, save

Environment variables expected:
- LIGHTWAVE_API_URL: e.g. "https://your-domain.com/api"
- LIGHTWAVE_API_USER: username (or the configured admin bypass user)
- LIGHTWAVE_API_PASSWORD: password

Dependencies:
- requests (pip install requests)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests


class ApiError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class LightwaveApiClient:
    base_url: str
    username: str
    password: str
    timeout: float = 30

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        resp = requests.request(
            method,
            self._url(path),
            json=json,
            auth=(self.username, self.password),
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        if resp.status_code >= 400:
            raise ApiError(f"{method} {path} failed ({resp.status_code}): {resp.text}", resp.status_code)
        if resp.status_code == 204:
            return None
        return resp.json()

    def login(self) -> Dict[str, Any]:
        """
        Calls: POST /auth/login
        Returns the account (id, username, role) or raises ApiError on 401.
        """
        return self._request(
            "POST", "/auth/login", json={"username": self.username, "password": self.password}
        )

    # ----------------------------
    # Reads
    # ----------------------------

    def timeline(self) -> List[Dict[str, Any]]:
        """Events ordered by start."""
        return self._request("GET", "/events/")

    def inventory(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/inventory/")

    def bundles(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/bundles/")

    def crew(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/users/")

    # ----------------------------
    # Owner-only writes
    # ----------------------------

    def add_inventory_item(self, *, name: str, rent_price: float = 0.0, stock: int = 1) -> Dict[str, Any]:
        return self._request("POST", "/inventory/", json={"name": name, "rent_price": rent_price, "stock": stock})

    def create_bundle(self, *, name: str, items: Dict[str, int]) -> Dict[str, Any]:
        """items: inventory item id -> quantity"""
        payload = {
            "name": name,
            "items": [{"inventory_item_id": k, "quantity": q} for k, q in items.items()],
        }
        return self._request("POST", "/bundles/", json=payload)

    def delete_event(self, event_id: str) -> None:
        self._request("DELETE", f"/events/{event_id}")

    # ----------------------------
    # Event editor (drafts)
    # ----------------------------

    def open_draft(self, event_id: Optional[str] = None) -> Dict[str, Any]:
        return self._request("POST", "/drafts/", json={"event_id": event_id})

    def draft_action(self, key: str, action: str, **fields: Any) -> Dict[str, Any]:
        return self._request("POST", f"/drafts/{key}/actions", json={"type": action, **fields})

    def save_draft(self, key: str) -> Dict[str, Any]:
        return self._request("POST", f"/drafts/{key}/save")

    def abandon_draft(self, key: str) -> None:
        self._request("DELETE", f"/drafts/{key}")

    def book_event(
        self,
        *,
        title: str,
        location: str = "",
        items: Optional[Dict[str, int]] = None,
        bundle_ids: Optional[List[str]] = None,
        event_start: Optional[str] = None,
        event_end: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Runs the whole wizard: title/schedule, bundles, single items, save.
        items: inventory item id -> number of increments (capped at stock server-side)
        """
        draft = self.open_draft()
        key = draft["key"]
        try:
            self.draft_action(key, "set_field", field="title", value=title)
            self.draft_action(key, "set_field", field="location", value=location)
            if event_start:
                self.draft_action(key, "set_field", field="event_start", value=event_start)
            if event_end:
                self.draft_action(key, "set_field", field="event_end", value=event_end)
            self.draft_action(key, "next_step")
            for bundle_id in bundle_ids or []:
                self.draft_action(key, "merge_bundle", bundle_id=bundle_id)
            for item_id, count in (items or {}).items():
                for _ in range(count):
                    self.draft_action(key, "increment", inventory_item_id=item_id)
            return self.save_draft(key)
        except ApiError:
            self.abandon_draft(key)
            raise


def make_client_from_env() -> LightwaveApiClient:
    base_url = os.getenv("LIGHTWAVE_API_URL", "").strip()
    username = os.getenv("LIGHTWAVE_API_USER", "").strip()
    password = os.getenv("LIGHTWAVE_API_PASSWORD", "").strip()

    if not base_url:
        raise RuntimeError("Missing LIGHTWAVE_API_URL")
    if not username:
        raise RuntimeError("Missing LIGHTWAVE_API_USER")
    if not password:
        raise RuntimeError("Missing LIGHTWAVE_API_PASSWORD")

    return LightwaveApiClient(base_url=base_url, username=username, password=password)


if __name__ == "__main__":
    client = make_client_from_env()
    account = client.login()
    print(f"OK: logged in as {account['username']} ({account['role']})")
    for ev in client.timeline():
        print(f"{ev['short_ref']}  {ev['event_start'] or '---'}  {ev['title']}  {ev['total_price']:.2f}")
