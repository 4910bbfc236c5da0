"""OAuth token persistence for google-service-mcp.

Stores a single ``authorized_user`` token as plain JSON. The file is written
with owner-only permissions; no encryption is applied.

Storage Location: GOOGLE_TOKEN_PATH (default ./token.json)
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from google_service_mcp.auth.models import SavedToken, TokenStatus

logger = logging.getLogger(__name__)


class TokenStorage:
    """Simple JSON-based storage for the OAuth refresh token.

    Attributes:
        token_path: Path to the token file.

    Example:
        ```python
        storage = TokenStorage(Path("token.json"))

        storage.store(
            SavedToken(client_id="id", client_secret="secret", refresh_token="1//abc")
        )

        saved = storage.retrieve()
        if saved:
            print(saved.refresh_token)
        ```
    """

    def __init__(self, token_path: Path) -> None:
        """Initialize token storage.

        Args:
            token_path: Path of the token file. Its parent directory is created
                on first write if it does not exist.
        """
        self.token_path = token_path

    def _ensure_parent_dir(self) -> None:
        """Create the token directory with secure permissions if needed."""
        parent = self.token_path.parent
        if not parent.exists():
            parent.mkdir(parents=True, mode=0o700)

    def exists(self) -> bool:
        """Return True if a token file is present (valid or not)."""
        return self.token_path.exists()

    def _load(self) -> dict | None:
        if not self.token_path.exists():
            return None

        try:
            with open(self.token_path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading saved token: {e}")
            return None

        return data if isinstance(data, dict) else None

    def store(self, token: SavedToken) -> None:
        """Persist a token, replacing any previous one.

        Args:
            token: Token to write.
        """
        self._ensure_parent_dir()

        with open(self.token_path, "w") as f:
            json.dump(token.model_dump(), f, indent=2)

        # Set file permissions to owner read/write only (600)
        self.token_path.chmod(0o600)
        logger.info("OAuth credentials saved successfully")

    def retrieve(self) -> SavedToken | None:
        """Load the stored token.

        Returns:
            SavedToken if present and well-formed, None otherwise.
        """
        data = self._load()
        if data is None:
            return None

        try:
            return SavedToken.model_validate(data)
        except ValidationError:
            # Token is corrupted or invalid
            return None

    def get_status(self) -> TokenStatus:
        """Get the status of the stored token.

        Returns:
            TokenStatus indicating the token file's current state.
        """
        if not self.token_path.exists():
            return TokenStatus.MISSING

        if self.retrieve() is None:
            return TokenStatus.INVALID

        return TokenStatus.VALID

    def delete(self) -> bool:
        """Delete the stored token.

        Returns:
            True if the token was deleted, False if it didn't exist.
        """
        if not self.token_path.exists():
            return False

        self.token_path.unlink()
        return True
