"""
Pytest configuration for the spelling game.

Provides an in-memory stand-in for the GitHub contents API so the remote
mirror can be exercised without network access.
"""

import base64
import json

import pytest
import requests

from config import Settings


class FakeResponse:
    def __init__(self, status_code, body=None, headers=None, content=b""):
        self.status_code = status_code
        self._body = body
        self.headers = headers or {}
        self.content = content

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeGitHub:
    """One file on the contents API, with sha checking on writes."""

    def __init__(self, text=None):
        self.text = text
        self.revision = 1
        self.sha = "sha-1" if text is not None else None
        self.gets = []
        self.puts = []
        self.network_down = False
        self.fail_next_put = None
        self.on_put = None
        self.large = False

    def set_entries(self, records):
        self.text = json.dumps(records)
        self.revision += 1
        self.sha = f"sha-{self.revision}"

    def records(self):
        return json.loads(self.text)

    def get(self, url, headers=None, params=None, timeout=None):
        self.gets.append({"url": url, "headers": headers, "params": params})
        if self.network_down:
            raise requests.ConnectionError("network down")
        if self.text is None:
            return FakeResponse(404, {"message": "Not Found"})
        if (headers or {}).get("Accept") == "application/vnd.github.raw+json":
            return FakeResponse(200, content=self.text.encode("utf-8"))
        if self.large:
            # over 1 MB: metadata only
            return FakeResponse(200, {"sha": self.sha, "content": "", "encoding": "none"})
        encoded = base64.b64encode(self.text.encode("utf-8")).decode("ascii")
        # GitHub wraps base64 at 60 columns
        chunked = "\n".join(encoded[i:i + 60] for i in range(0, len(encoded), 60)) + "\n"
        return FakeResponse(200, {"sha": self.sha, "content": chunked, "encoding": "base64"})

    def put(self, url, headers=None, json=None, timeout=None):
        self.puts.append({"url": url, "headers": headers, "json": json})
        if self.on_put is not None:
            self.on_put()
        if self.network_down:
            raise requests.ConnectionError("network down")
        if self.fail_next_put is not None:
            status, self.fail_next_put = self.fail_next_put, None
            return FakeResponse(status, {"message": "failed"})

        given = json.get("sha")
        if self.text is not None and given != self.sha:
            return FakeResponse(409, {"message": "sha does not match"})
        if self.text is None and given:
            return FakeResponse(422, {"message": "sha given for new file"})

        created = self.text is None
        self.text = base64.b64decode(json["content"]).decode("utf-8")
        self.revision += 1
        self.sha = f"sha-{self.revision}"
        return FakeResponse(201 if created else 200, {"content": {"sha": self.sha}})


class FakeClock:
    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now


RECORDS = [
    {"id": 1, "word": "CAT", "category": "ANIMALS", "imageData": "data:image/png;base64,Y2F0"},
    {"id": 2, "word": "DOG", "category": "ANIMALS", "imageData": "data:image/png;base64,ZG9n"},
    {"id": 3, "word": "APPLE", "category": "FRUITS", "imageData": "data:image/png;base64,YXBwbGU="},
]


@pytest.fixture
def records():
    return [dict(r) for r in RECORDS]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings(tmp_path):
    return Settings(storage_dir=tmp_path, success_delay=0.8, failure_delay=0.7)


@pytest.fixture
def remote_settings(tmp_path):
    return Settings(
        storage_dir=tmp_path,
        github_owner="family",
        github_repo="spelling-words",
        github_path="data/words.json",
        github_branch="main",
        github_token="test-token",
    )


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def response_factory():
    return FakeResponse
