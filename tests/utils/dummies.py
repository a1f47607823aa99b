import uuid
from datetime import datetime, timedelta, timezone

from utils.fetch_profiles import ProfileBundle

LONG_BIO = (
    "Late-night techno regular, usually at the warehouse parties on Saturdays. "
    "Into leather, good coffee and honest conversation before anything else."
)


def full_public_profile(**overrides):
    """Public row that passes every completeness check it can."""
    profile = {
        "id": str(uuid.uuid4()),
        "city": "London",
        "position": "vers",
        "looking_for": ["hookup", "dates"],
        "relationship_status": "single",
        "time_horizon": "tonight",
        "smoking": "no",
        "drinking": "social",
        "fitness": "gym",
        "scene_affinity": ["leather", "techno"],
        "photos": ["a.jpg", "b.jpg"],
        "bio": LONG_BIO,
        "tags": ["dj", "vinyl"],
        "verified": True,
        "last_seen": (datetime.now(timezone.utc) - timedelta(minutes=2)).isoformat(),
        "last_lat": 51.5155,
        "last_lng": -0.0922,
    }
    profile.update(overrides)
    return profile


def full_private_profile(**overrides):
    profile = {
        "kinks": ["bondage", "leather"],
        "hard_limits": [],
        "position": "top",
        "chem_visibility_enabled": False,
        "chem_friendly": None,
        "hosting": None,
    }
    profile.update(overrides)
    return profile


class DummyAuthUser:
    def __init__(self, id="auth-viewer", email="viewer@example.com"):
        self.id = id
        self.email = email


class FakeProfileRepository:
    """In-memory stand-in for ProfileRepository."""

    def __init__(self, users=None, private=None, embeddings=None, valid_tokens=None, fail=None):
        self.users = users or {}
        self.private = private or {}
        self.embeddings = embeddings or {}
        self.valid_tokens = valid_tokens or {}
        self.fail = fail

    async def authenticate(self, token):
        return self.valid_tokens.get(token)

    async def get_viewer(self, auth_user):
        if self.fail:
            raise self.fail
        return next((u for u in self.users.values() if u.get("auth_user_id") == auth_user.id), None)

    async def get_user(self, target_id=None, target_email=None):
        if target_id:
            return self.users.get(target_id)
        return next((u for u in self.users.values() if u.get("email") == (target_email or "").lower()), None)

    async def get_bundle(self, user):
        return ProfileBundle(
            public=user,
            private=self.private.get(user["id"], {}),
            embedding=self.embeddings.get(user["id"]),
        )
