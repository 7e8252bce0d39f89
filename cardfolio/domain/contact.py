"""Contact form rules shared by the API and the client form."""
from __future__ import annotations

import re
from typing import Optional

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def contact_problem(name: str, email: str, message: str) -> Optional[str]:
    """Return the message shown for an incomplete form, or None when it may be sent."""
    if not ((name or "").strip() and (email or "").strip() and (message or "").strip()):
        return "Name, email, and message are required"
    if not EMAIL_RE.match(email.strip()):
        return "Please provide a valid email address"
    return None
