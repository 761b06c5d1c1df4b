from abc import abstractmethod
from datetime import datetime
from typing import Any

from pydantic_core import to_jsonable_python

from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.models.cache import CacheMetadataResponse, UpdateStatusesResponse


class CacheClientInterface(ClientInterface):
    """
    Raw requests against a remote cache store. All methods raise on transport errors or
    non-2xx responses; turning failures into results is up to the caller.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "cache"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_metadata(self) -> str:
        """
        Returns the endpoint path for reading the metadata of all cache keys (e.g. "/api/cache/metadata").
        """
        pass

    @abstractmethod
    def _get_endpoint_metadata_update(self) -> str:
        """
        Returns the endpoint path for updating the metadata hash of one cache key.
        """
        pass

    @abstractmethod
    def _get_endpoint_invalidate(self) -> str:
        """
        Returns the endpoint path for invalidating one cache key.
        """
        pass

    @abstractmethod
    def _get_endpoint_update_statuses(self) -> str:
        """
        Returns the endpoint path for the time-based installment status update.
        """
        pass

    @abstractmethod
    def _get_endpoint_records(self, cache_key: str) -> tuple[str, str]:
        """
        Returns the endpoint path and the body field name used to save the records of a cache key.

        Args:
            cache_key (str): The cache key, e.g. "installments".

        Returns:
            tuple[str, str]: (endpoint path, body field), e.g. ("/api/cache/installments", "installments")

        Raises:
            ValueError: If the cache key has no records endpoint.
        """
        pass

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _parse_endpoint_metadata(self, response: dict) -> CacheMetadataResponse:
        return CacheMetadataResponse.model_validate(response)

    def _parse_endpoint_update_statuses(self, response: dict) -> UpdateStatusesResponse:
        return UpdateStatusesResponse.model_validate(response)

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def get_metadata(self) -> CacheMetadataResponse:
        """
        Reads the stored metadata of all cache keys.

        Raises:
            httpx.HTTPError: On transport failure.
            ClientRequestError: On a non-2xx response.
            pydantic.ValidationError: If the response does not match the expected shape.
        """
        response = await self.do_request(method="GET", endpoint=self._get_endpoint_metadata(), raise_on_error=True)
        return self._parse_endpoint_metadata(response.json())

    async def post_invalidate(self, cache_key: str) -> None:
        await self.do_request(
            method="POST",
            endpoint=self._get_endpoint_invalidate(),
            json={"cacheKey": cache_key},
            raise_on_error=True,
        )

    async def post_records(self, cache_key: str, records: list[Any]) -> None:
        """
        Writes the full records snapshot of a cache key.

        Args:
            cache_key (str): The cache key.
            records (list[Any]): Records as dicts or pydantic models; dates are sent as ISO strings.
        """
        endpoint, body_field = self._get_endpoint_records(cache_key)
        await self.do_request(
            method="POST",
            endpoint=endpoint,
            json={body_field: to_jsonable_python(records)},
            raise_on_error=True,
        )

    async def post_metadata_update(self, cache_key: str, source_data_hash: str) -> None:
        await self.do_request(
            method="POST",
            endpoint=self._get_endpoint_metadata_update(),
            json={"cacheKey": cache_key, "sourceDataHash": source_data_hash},
            raise_on_error=True,
        )

    async def post_update_statuses(self, current_date: datetime) -> UpdateStatusesResponse:
        response = await self.do_request(
            method="POST",
            endpoint=self._get_endpoint_update_statuses(),
            json={"currentDate": current_date.isoformat()},
            raise_on_error=True,
        )
        return self._parse_endpoint_update_statuses(response.json())
