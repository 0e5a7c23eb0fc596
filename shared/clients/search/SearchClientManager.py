from shared.helper.HelperConfig import HelperConfig
from shared.clients.search.SearchClientInterface import SearchClientInterface

class SearchClientManager:
    """
    Manager class to handle the Search client based on configuration.
    """

    def __init__(self, helper_config: HelperConfig, host: str | None = None, port: str | None = None):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self._host = host
        self._port = port
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """
        Reads the Search engine from ENV configuration.

        Returns:
            str: The name of the Search engine, e.g. "Elasticsearch".
        """
        engine = self.helper_config.get_string_val("SEARCH_ENGINE", default="elasticsearch")

        #lowercase all and uppcercase first letter for better comparison and display
        engine = engine.strip().lower()
        engine = engine.capitalize()
        return engine

    def _initialize_client(self) -> SearchClientInterface:
        """
        Initializes the Search client based on the engine specified in the configuration.

        Returns:
            SearchClientInterface: An instance of the Search client that implements the SearchClientInterface.

        Raises:
            ValueError: If the specified engine has no client implementation.
        """
        engine = self._get_engine_from_env()
        className = f"SearchClient{engine}"
        # try to import the class from shared.clients.search.{engine}
        try:
            module = __import__(
                f"shared.clients.search.{engine.lower()}.{className}",
                fromlist=[className],
            )
            client_class = getattr(module, className)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported Search engine specified: '{engine}'. Error: {e}")

        client = client_class(helper_config=self.helper_config, host=self._host, port=self._port)
        self.logging.debug(f"Instantiated Search client for engine: {engine}")
        return client

    def get_client(self) -> SearchClientInterface:
        """
        Returns the instantiated Search client.

        Returns:
            SearchClientInterface: The Search client instance.
        """
        return self.client
