"""Service endpoints and credential resolution."""

import logging
from dataclasses import dataclass

from catbox_client.exceptions import CredentialMissingError

logger = logging.getLogger(__name__)

BASE_URL = "https://catbox.moe"

API_URL = f"{BASE_URL}/user/api.php"
LOGIN_URL = f"{BASE_URL}/user/dologin.php"
ACCOUNT_URL = f"{BASE_URL}/user/manage.php"
ALBUM_VIEW_URL = f"{BASE_URL}/user/manage_albums.php"
USER_VIEW_URL = f"{BASE_URL}/user/view.php"

# Canonical album URLs are ALBUM_BASE_URL/<short>
ALBUM_BASE_URL = f"{BASE_URL}/c"
ALBUM_HOST_MARKER = "catbox.moe/c/"
FILE_HOST_MARKER = "files.catbox.moe"

USER_HASH_LABEL = "Your userhash is:"

DEFAULT_MAX_CONCURRENT_UPLOADS = 5
REQUEST_TIMEOUT = 30.0

USERNAME_ENV = "CATBOX_USERNAME"
PASSWORD_ENV = "CATBOX_PASSWORD"


@dataclass(frozen=True)
class Credentials:
    """Username and password for a catbox account."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


def resolve_credentials(username: str | None, password: str | None) -> Credentials:
    """Build credentials from values supplied by the caller.

    Args:
        username: Account name, usually from an option or CATBOX_USERNAME
        password: Account password, usually from an option or CATBOX_PASSWORD

    Returns:
        Credentials for logging in

    Raises:
        CredentialMissingError: If either value is missing or empty
    """
    if not username:
        raise CredentialMissingError("username")
    if not password:
        raise CredentialMissingError("password")
    logger.debug(f"Resolved credentials for user '{username}'")
    return Credentials(username=username, password=password)
