"""
Per-session OpenAI API keys for MCP connections.

SSE clients may send their own key in the ``x-openai-api-key`` header; it is
kept by session id, and the most recent key also under ``_latest`` for
calls that carry no session.
"""

LATEST_KEY = "_latest"

session_api_keys: dict[str, str] = {}


def get_session_api_key(session_id: str | None = None) -> str | None:
    """Get the API key for a session, or the latest if session_id is None."""
    if session_id and session_id in session_api_keys:
        return session_api_keys[session_id]
    return session_api_keys.get(LATEST_KEY)


def set_session_api_key(session_id: str | None, api_key: str) -> None:
    """Store an API key for a session."""
    if session_id:
        session_api_keys[session_id] = api_key
    session_api_keys[LATEST_KEY] = api_key


def clear_session_api_keys() -> None:
    session_api_keys.clear()
