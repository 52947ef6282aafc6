# geotrack/client/api_client.py
"""
HTTP-клиент Location API (то, что мобильное приложение делает через fetch).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from geotrack.shared.models.location_dto import LocationRecord


class BaseClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self.client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def _post(self, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        response = await self.client.post(path, json=json)
        response.raise_for_status()
        return response.json()


class LocationApiClient(BaseClient):
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if base_url is None or timeout is None:
            from geotrack.config import settings
            base_url = base_url or settings.reporter.API_URL
            timeout = timeout or settings.reporter.REQUEST_TIMEOUT
        super().__init__(base_url, timeout=timeout, transport=transport)

    async def post_location(
        self,
        latitude: float,
        longitude: float,
        accuracy: Optional[float] = None,
        timestamp: Optional[str] = None,
    ) -> LocationRecord:
        """Отправить точку; возвращает запись с id, назначенным сервером."""
        body: Dict[str, Any] = {"latitude": latitude, "longitude": longitude}
        if accuracy is not None:
            body["accuracy"] = accuracy
        if timestamp is not None:
            body["timestamp"] = timestamp
        data = await self._post("/api/location", json=body)
        return LocationRecord.model_validate(data["data"])

    async def get_locations(self, limit: Optional[int] = None) -> List[LocationRecord]:
        params = {"limit": limit} if limit is not None else None
        data = await self._get("/api/location", params=params)
        return [LocationRecord.model_validate(item) for item in data.get("data", [])]

    async def get_latest(self) -> Optional[LocationRecord]:
        try:
            data = await self._get("/api/location/latest")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise
        return LocationRecord.model_validate(data["data"])

    async def health(self) -> Dict[str, Any]:
        return await self._get("/api/health")

    async def info(self) -> Dict[str, Any]:
        return await self._get("/")
