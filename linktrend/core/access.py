"""
Access rules.

Admin status is a predicate over configuration (`ADMIN_EMAIL`), not a role
column. Viewing rights for premium videos come from the user's unlocked set.
"""
from linktrend.core.config import settings


def is_admin(user) -> bool:
    if user is None or not user.email:
        return False
    return user.email.lower() == settings.ADMIN_EMAIL.lower()


def can_view(video, user) -> bool:
    if not video.is_premium:
        return True
    if user is None:
        return False
    return user.has_unlocked(video.id)
