"""Base service class with shared functionality.

No Rich imports, no console output. Returns structured data; raises typed
exceptions.
"""

import logging

from claude_client import ClaudeClient
from config_loader import load_config
from user_store import UserStore

logger = logging.getLogger(__name__)


class BaseService:
    """Base class for all services with shared functionality.

    Services log instead of printing.
    """

    def __init__(
        self,
        config: dict | None = None,
        user_store: UserStore | None = None,
        client: ClaudeClient | None = None,
    ):
        """Initialize the service.

        Args:
            config: Configuration dictionary. If None, loads from config.json.
            user_store: UserStore instance. If None, creates one from config.
            client: ClaudeClient instance. If None, one is created on first use,
                so services that never call Claude work without an API key.
        """
        self.config = config or load_config()
        self.user_store = user_store or UserStore(self.config)
        self._client = client

    @property
    def client(self) -> ClaudeClient:
        """Claude client, created lazily.

        Raises:
            ValueError: If ANTHROPIC_API_KEY is not set.
        """
        if self._client is None:
            self._client = ClaudeClient()
        return self._client
