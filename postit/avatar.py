"""
Avatar assignment for new and re-addressed users.

Avatars are rendered by an external DiceBear-compatible service; this
module only builds the image URL and the embeddable ``<img>`` tag.

By default every call injects fresh randomness (style and seed tokens), so
regenerating an avatar for the same email yields a different image.  With
``AVATAR_DETERMINISTIC_SEED`` enabled both are derived from a SHA-256 of the
normalised email instead.
"""
import hashlib
import random
import re
import string
from urllib.parse import quote

from postit.config import settings
from postit.exceptions import ValidationError

AVATAR_STYLES: tuple[str, ...] = (
    "adventurer",
    "adventurer-neutral",
    "avataaars",
    "avataaars-neutral",
    "big-ears",
    "big-ears-neutral",
    "big-smile",
    "bottts",
    "bottts-neutral",
    "croodles",
    "croodles-neutral",
    "fun-emoji",
    "icons",
    "identicon",
    "initials",
    "lorelei",
    "lorelei-neutral",
    "micah",
    "miniavs",
    "open-peeps",
    "personas",
    "pixel-art",
    "pixel-art-neutral",
    "shapes",
    "thumbs",
)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_TOKEN_ALPHABET = string.ascii_lowercase + string.digits
_TOKEN_LENGTH = 5


def _random_token() -> str:
    return "".join(random.choices(_TOKEN_ALPHABET, k=_TOKEN_LENGTH))


def _random_style_and_seed(email: str) -> tuple[str, str]:
    at_token = f"-{_random_token()}-"
    dot_token = f"-{_random_token()}-"
    seed = email.replace("@", at_token, 1).replace(".", dot_token)
    return random.choice(AVATAR_STYLES), seed


def _hashed_style_and_seed(email: str) -> tuple[str, str]:
    digest = hashlib.sha256(email.lower().encode("utf-8")).hexdigest()
    style = AVATAR_STYLES[int(digest[:8], 16) % len(AVATAR_STYLES)]
    return style, digest[:16]


def validate_email(email: str) -> str:
    """Return the trimmed *email*, raising ``ValidationError`` if malformed."""
    email = email.strip()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email")
    return email


def generate_avatar_url(email: str) -> str:
    """
    Return an avatar image URL for *email*.

    The URL is parameterised by style, seed, size and corner radius, e.g.
    ``https://api.dicebear.com/5.x/bottts/svg?seed=a-x1y2z-b-q9w8e-com&size=200&radius=50``.
    """
    email = validate_email(email)
    if settings.AVATAR_DETERMINISTIC_SEED:
        style, seed = _hashed_style_and_seed(email)
    else:
        style, seed = _random_style_and_seed(email)
    base_url = settings.AVATAR_BASE_URL.rstrip("/")
    return (
        f"{base_url}/{style}/svg?seed={quote(seed, safe='')}"
        f"&size={settings.AVATAR_SIZE}&radius={settings.AVATAR_RADIUS}"
    )


def generate_avatar_tag(username: str, avatar_url: str) -> str:
    """Return the ``<img>`` markup embedding *avatar_url* for *username*."""
    return f'<img src="{avatar_url}" alt="Avatar for {username}" />'
