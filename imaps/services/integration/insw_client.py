"""
INSW HTTP Client
================

Client untuk INSW (Indonesia National Single Window) inventory API.
Semua request memakai `requests` dengan timeout terbatas; pemanggilan dari
async service dijalankan di thread terpisah lewat `asyncio.to_thread`.
"""

import asyncio
import logging
from typing import Dict, Any, Optional

import requests

from ..exceptions import INSWIntegrationError

logger = logging.getLogger(__name__)

INSW_BASE_URL = 'https://api.insw.go.id/api-prod/inventory'

# Kategori endpoint -> path; 'registrasi' hanya tersedia di mode test
INSW_ENDPOINT_PATHS = {
    'saldoAwal': 'saldoAwal',
    'transaksi': 'transaksi',
    'dokumen': 'transaksi/dokumen',
    'registrasi': 'registrasi',
}

STOCK_OPNAME_ACTIVITY_CODE = '32'


class INSWClient:
    """Client INSW; satu instance per konfigurasi (api key, unique key, mode)"""

    def __init__(self, api_key: str, unique_key: str, use_test_mode: bool = True,
                 timeout: int = 30, base_url: str = INSW_BASE_URL,
                 http_session: Optional[requests.Session] = None):
        if not use_test_mode and not api_key:
            raise ValueError("INSW_API_KEY is required outside test mode")

        self.api_key = api_key
        self.unique_key = unique_key
        self.use_test_mode = use_test_mode
        self.timeout = timeout
        self.base_url = base_url.rstrip('/')
        self.http = http_session or requests.Session()

    def endpoint(self, category: str) -> str:
        """URL endpoint per kategori; mode test memakai prefix /temp/"""
        if category not in INSW_ENDPOINT_PATHS:
            raise ValueError(f"Unknown INSW endpoint category: {category}")
        if category == 'registrasi' and not self.use_test_mode:
            raise INSWIntegrationError("Registration endpoint is only available in test mode")

        prefix = 'temp/' if self.use_test_mode else ''
        return f"{self.base_url}/{prefix}{INSW_ENDPOINT_PATHS[category]}"

    @property
    def headers(self) -> Dict[str, str]:
        return {
            'Content-Type': 'application/json',
            'x-insw-key': self.api_key,
            'x-unique-key': self.unique_key,
        }

    # ==================== OPERATIONS ====================

    async def post_saldo_awal(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(self._request, 'POST', self.endpoint('saldoAwal'), payload)

    async def post_transaksi(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(self._request, 'POST', self.endpoint('transaksi'), payload)

    async def get_transaksi(self, activity_code: str, tgl_awal: str, tgl_akhir: str) -> Dict[str, Any]:
        """Ambil transaksi yang sudah terkirim; tanggal format dd-MM-yyyy"""
        url = f"{self.endpoint('transaksi')}/{activity_code}/tglAwal={tgl_awal}&tglAkhir={tgl_akhir}"
        # INSW melayani query stock opname lewat PUT
        method = 'PUT' if activity_code == STOCK_OPNAME_ACTIVITY_CODE else 'POST'
        return await asyncio.to_thread(self._request, method, url)

    async def get_dokumen(self, nomor_dokumen: str) -> Dict[str, Any]:
        return await asyncio.to_thread(
            self._request, 'GET', self.endpoint('dokumen'), None, {'nomorDokumen': nomor_dokumen}
        )

    async def cleansing(self, npwp: str) -> Dict[str, Any]:
        """Hapus data test untuk NPWP tertentu (mode test saja)"""
        if not self.use_test_mode:
            raise INSWIntegrationError("Cleansing data is only available in test mode")
        return await asyncio.to_thread(
            self._request, 'DELETE', self.endpoint('transaksi'), None, {'npwp': npwp}
        )

    async def registrasi_final(self) -> Dict[str, Any]:
        """Registrasi final setelah uji coba (mode test saja)"""
        if not self.use_test_mode:
            raise INSWIntegrationError("Final registration is only available in test mode")
        return await asyncio.to_thread(self._request, 'PUT', self.endpoint('registrasi'))

    # ==================== TRANSPORT ====================

    def _request(self, method: str, url: str, payload: Dict[str, Any] = None,
                 params: Dict[str, Any] = None) -> Dict[str, Any]:
        """
        Kirim request ke INSW.

        Timeout, connection error, status non-2xx dan body non-JSON menjadi
        INSWIntegrationError. Body 2xx dengan `status: false` dikembalikan apa adanya.
        """
        logger.debug(f"INSW {method} {url}")

        try:
            response = self.http.request(method, url, headers=self.headers, json=payload,
                                         params=params, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise INSWIntegrationError(f"INSW API request timeout after {self.timeout}s")
        except requests.exceptions.ConnectionError:
            raise INSWIntegrationError("Failed to connect to INSW API")
        except requests.exceptions.RequestException as e:
            raise INSWIntegrationError(f"INSW API request failed: {str(e)}")

        if response.status_code >= 400:
            raise INSWIntegrationError(
                f"INSW API error: {response.status_code} - {response.text[:500]}",
                status_code=response.status_code,
                insw_response=response.text
            )

        try:
            body = response.json()
        except ValueError:
            raise INSWIntegrationError(
                "INSW API returned a non-JSON response",
                status_code=response.status_code,
                insw_response=response.text
            )

        if not isinstance(body, dict):
            raise INSWIntegrationError(
                "INSW API returned an unexpected response shape",
                status_code=response.status_code,
                insw_response=body
            )
        return body
