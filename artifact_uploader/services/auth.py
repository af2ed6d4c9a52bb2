"""HTTP Basic credential encoding."""
import base64


def encode_auth_token(username: str, password: str) -> str:
    """Return base64 of ``username:password``. Empty values are allowed."""
    raw = f"{username}:{password}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def basic_auth_header(username: str, password: str) -> str:
    return "Basic " + encode_auth_token(username, password)
