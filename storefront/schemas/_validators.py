from typing import Any, Optional

from pydantic import AnyHttpUrl, TypeAdapter

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def strip_or_none(v: Any) -> Any:
    """Trim strings and turn blank ones into None."""
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


def normalize_category_name(v: Any) -> Any:
    v = strip_or_none(v)
    if isinstance(v, str):
        return v.lower()
    return v


def check_http_url(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    try:
        _HTTP_URL.validate_python(v)
    except ValueError:
        raise ValueError("Please enter a valid URL")
    return v
