from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from .errors import InvalidParams


def validate_param(value: Any, name: str) -> None:
    if value is None or value == "":
        raise InvalidParams(f"Parameter {name} must not be empty")


def is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def validate_url(url: str) -> None:
    validate_param(url, "url")
    if not isinstance(url, str) or not is_valid_url(url):
        raise InvalidParams(f"Invalid URL: {url}")


def validate_filename(filename: str) -> None:
    if filename in {".", ".."} or "/" in filename or "\\" in filename:
        raise InvalidParams(f"Invalid filename: {filename}")
