"""
Read access to the Supabase ``majstori`` table over its PostgREST API.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import Config
from .data_processing import RecordProcessor
from .exceptions import FetchError
from .models import ProfessionalRecord

logger = logging.getLogger(__name__)


class DirectoryClient:
    """Thin async wrapper around the backend REST endpoint for professionals."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        table: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if base_url is None or api_key is None:
            Config.require_backend()
        self.base_url = (base_url or Config.SUPABASE_URL).rstrip("/")
        self.api_key = api_key or Config.SUPABASE_ANON_KEY
        self.table = table or Config.PROFESSIONALS_TABLE
        self.timeout = timeout if timeout is not None else Config.REQUEST_TIMEOUT
        self.transport = transport
        self.processor = RecordProcessor()

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def _get_rows(self, params: Dict[str, str]) -> List[Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(self.table_url, headers=self._headers(), params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                raise FetchError(f"Backend returned HTTP {status} for {self.table}", status_code=status) from e
            except httpx.HTTPError as e:
                raise FetchError(f"Could not reach backend: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError("Backend returned a non-JSON body") from e

        if not isinstance(data, list):
            raise FetchError(f"Expected a list of rows, got {type(data).__name__}")
        return data

    async def fetch_all_professionals(self) -> List[ProfessionalRecord]:
        rows = await self._get_rows({"select": "*"})
        records = self.processor.process_all_rows(rows)
        logger.info("Fetched %d majstori (%d rows)", len(records), len(rows))
        return records

    async def fetch_professional(self, professional_id: str) -> Optional[ProfessionalRecord]:
        rows = await self._get_rows({"select": "*", "id": f"eq.{professional_id}"})
        if not rows:
            return None
        return self.processor.process_row(rows[0])


async def fetch_all_professionals(client: Optional[DirectoryClient] = None) -> List[ProfessionalRecord]:
    client = client or DirectoryClient()
    return await client.fetch_all_professionals()
