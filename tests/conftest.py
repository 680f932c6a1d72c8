import pytest

from anti_search.schemas import UpstreamResponse


@pytest.fixture
def clean_env(monkeypatch):
    """Remove gateway settings so defaults apply."""
    for key in ("ANTI_BASE_URL", "ANTI_API_KEY", "ANTI_MODEL", "ANTI_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def grounded_payload():
    """A generateContent reply with three sources and overlapping citations."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": "Python 3.13 was released in October 2024."}]},
                "groundingMetadata": {
                    "webSearchQueries": ["python 3.13 release date"],
                    "groundingChunks": [
                        {"web": {"uri": "https://python.org/downloads", "title": "Python.org", "domain": "python.org"}},
                        {"web": {"uri": "https://en.wikipedia.org/wiki/Python", "title": "Wikipedia"}},
                        {"web": {"uri": "https://peps.python.org/pep-0719/"}},
                    ],
                    "groundingSupports": [
                        {"segment": {"text": "Python 3.13 was released"}, "groundingChunkIndices": [0, 1]},
                        {"segment": {"text": "in October 2024."}, "groundingChunkIndices": [0]},
                    ],
                },
            }
        ]
    }


def make_response(payload: dict) -> UpstreamResponse:
    return UpstreamResponse.model_validate(payload)
