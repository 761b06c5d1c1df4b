from shared.helper.HelperConfig import HelperConfig
from shared.clients.cache.CacheClientInterface import CacheClientInterface


class CacheClientManager:
    """
    Manager class to instantiate the cache client selected by configuration.
    """

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """
        Reads the cache engine from ENV configuration (CACHE_ENGINE, defaults to "http").

        Returns:
            str: The engine name with the first letter uppercased, e.g. "Http".
        """
        engine = self.helper_config.get_string_val("CACHE_ENGINE", default="http")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> CacheClientInterface:
        """
        Instantiates the cache client for the configured engine.

        Raises:
            ValueError: If the engine is not supported.
        """
        engine = self._get_engine_from_env()
        className = f"CacheClient{engine}"
        try:
            module = __import__(
                f"shared.clients.cache.{engine.lower()}.{className}",
                fromlist=[className],
            )
            client_class = getattr(module, className)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported cache engine specified: '{engine}'. Error: {e}")
        client = client_class(helper_config=self.helper_config)
        self.logging.debug(f"Instantiated cache client for engine: {engine}")
        return client

    def get_client(self) -> CacheClientInterface:
        """
        Returns the instantiated cache client.
        """
        return self.client
