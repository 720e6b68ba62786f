from typing import Optional

from app.modules.billing.schemas import Tier
from app.modules.profiles.schemas import ProfileDisplay


def first_name(username: Optional[str]) -> str:
    """First word of a display name, capitalised. Email-like names use the local part."""
    if not username:
        return "Learner"
    name = username.split("@")[0] if "@" in username else username
    first = name.split(" ")[0]
    return first[:1].upper() + first[1:]


def initials(username: Optional[str]) -> str:
    return (username or "")[:2].upper()


def profile_display(username: Optional[str], tier: Optional[Tier] = None) -> ProfileDisplay:
    name = first_name(username)
    return ProfileDisplay(
        first_name=name,
        initial=name[:1].upper(),
        initials=initials(username),
        is_pro=tier == Tier.PRO,
    )
