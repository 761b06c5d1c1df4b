from shared.clients.cache.CacheClientInterface import CacheClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.cache import CACHE_KEY_INSTALLMENTS, CACHE_KEY_BANK_STATEMENTS, CACHE_KEY_ORDEN_TIENDA_MAP

_RECORDS_ENDPOINTS: dict[str, tuple[str, str]] = {
    CACHE_KEY_INSTALLMENTS: ("/api/cache/installments", "installments"),
    CACHE_KEY_BANK_STATEMENTS: ("/api/cache/bank-statements", "bankStatements"),
    CACHE_KEY_ORDEN_TIENDA_MAP: ("/api/cache/orden-tienda-map", "mappings"),
}


class CacheClientHttp(CacheClientInterface):
    """
    Cache client for the dashboard's HTTP JSON cache API.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Http"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
        ]

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return self._get_endpoint_metadata()

    def _get_endpoint_metadata(self) -> str:
        return "/api/cache/metadata"

    def _get_endpoint_metadata_update(self) -> str:
        return "/api/cache/metadata/update"

    def _get_endpoint_invalidate(self) -> str:
        return "/api/cache/invalidate"

    def _get_endpoint_update_statuses(self) -> str:
        return "/api/cache/installments/update-statuses"

    def _get_endpoint_records(self, cache_key: str) -> tuple[str, str]:
        if cache_key not in _RECORDS_ENDPOINTS:
            raise ValueError(f"No records endpoint for cache key '{cache_key}'.")
        return _RECORDS_ENDPOINTS[cache_key]
