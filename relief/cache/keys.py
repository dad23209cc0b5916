"""Cache keys and lifetimes for the external lookups made by store consumers."""

import base64

SOCIAL_MEDIA_TTL_HOURS = 0.25
OFFICIAL_UPDATES_TTL_HOURS = 1
IMAGE_VERIFICATION_TTL_HOURS = 24
GEOCODE_TTL_HOURS = 72


def social_media_key(disaster_id: int) -> str:
    return f"social-media-{disaster_id}"


def official_updates_key(disaster_id: int) -> str:
    return f"official-updates-{disaster_id}"


def image_verification_key(image_url: str) -> str:
    # Standard base64 of the UTF-8 url, padding kept
    encoded = base64.b64encode(image_url.encode("utf-8")).decode("ascii")
    return f"image-verification-{encoded}"


def geocode_key(location: str) -> str:
    return f"geocode-{location.lower()}"
