from __future__ import annotations

from functools import wraps
from typing import Optional
from urllib.parse import urlsplit

from flask import flash, redirect, request, session, url_for


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            flash("Please log in to continue.", "warning")
            return redirect(url_for("login", next=request.path))
        return view(*args, **kwargs)

    return wrapper


def safe_local_url(target: Optional[str]) -> Optional[str]:
    """Return target only when it is a path on this site."""
    if target and target.startswith("/") and not target.startswith("//") and "\\" not in target:
        return target
    return None


def _local_referrer() -> Optional[str]:
    ref = request.referrer
    if not ref:
        return None
    parts = urlsplit(ref)
    if parts.scheme not in ("", "http", "https") or (parts.netloc and parts.netloc != request.host):
        return None
    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    return safe_local_url(path)


def _parent_url_key() -> str:
    return f"{session.get('user_id')}.parentURL"


def remember_parent_url() -> None:
    """Store where the user came from, once per edit flow. Off-site referrers are ignored."""
    key = _parent_url_key()
    if key in session:
        return
    ref = _local_referrer()
    if ref:
        session[key] = ref


def pop_parent_url(default: str) -> str:
    return safe_local_url(session.pop(_parent_url_key(), None)) or default


def query_filters(*names: str) -> dict[str, str]:
    """Non-empty query-string values for the given filter names."""
    out: dict[str, str] = {}
    for name in names:
        value = request.args.get(name, "").strip()
        if value:
            out[name] = value
    return out


def page_arg(name: str = "page") -> int:
    raw: Optional[str] = request.args.get(name)
    try:
        return max(int(raw or 1), 1)
    except ValueError:
        return 1
