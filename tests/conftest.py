import json
from typing import List, Optional

import httpx
import pytest

from blogwriter.config import get_config_manager


@pytest.fixture(autouse=True)
def config_dir(tmp_path):
    """Keep every test away from the real ~/.blogwriter."""
    path = tmp_path / "config"
    get_config_manager(path)
    return path


def gemini_response(text: Optional[str]) -> dict:
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": "STOP",
            }
        ]
    }


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers the requests it served."""

    def __init__(self, status_code: int = 200, body=None, content: Optional[bytes] = None, exc=None):
        self.requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if exc is not None:
                raise exc("simulated failure", request=request)
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=body)

        super().__init__(handler)

    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def article_transport():
    return RecordingTransport(body=gemini_response("# Remote Work\n\nIt is **here** to stay."))
