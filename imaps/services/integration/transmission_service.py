"""
INSW Transmission Service
=========================

Orchestrator batch transmisi ke INSW dengan tracking status per record.

Setiap record diproses independen: kegagalan satu record tidak menghentikan
batch, semua hasil dikumpulkan dalam satu ringkasan.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional, Tuple

from ..exceptions import ValidationError, INSWIntegrationError
from .converter import (
    convert_incoming, convert_outgoing, convert_adjustment, convert_stock_opname,
    convert_saldo_awal, validate_payload,
)
from .repository import TransmissionRepository, source_wms_id

TRANSACTION_TYPES = ('incoming', 'outgoing', 'adjustment', 'stock_opname', 'saldo_awal')


class TransmissionService:
    """CRITICAL SERVICE untuk pengiriman data ke INSW"""

    def __init__(self, repository: TransmissionRepository, insw_client, max_retries: int = 3,
                 current_user: str = None, stale_claim_seconds: int = 300):
        self.repository = repository
        self.insw_client = insw_client
        self.max_retries = max_retries
        self.stale_claim_seconds = stale_claim_seconds
        self.current_user = current_user
        self.logger = logging.getLogger(self.__class__.__name__)

    # ==================== BATCH OPERATIONS ====================

    async def transmit_batch(self, company_code: int, transaction_type: str,
                             record_ids: List[int]) -> Dict[str, Any]:
        """
        Kirim sekumpulan transaksi sumber ke INSW.

        Record yang sudah SUCCESS (atau sedang SENT oleh request lain) di-skip
        tanpa mengubah tracking row-nya.
        """
        self._validate_transaction_type(transaction_type)
        if not record_ids:
            raise ValidationError("At least one record id is required", field='ids')

        # urutan dipertahankan, id dobel diproses sekali
        unique_ids = list(dict.fromkeys(record_ids))

        self.logger.info(f"INSW batch start: company={company_code} type={transaction_type} "
                         f"records={len(unique_ids)} user={self.current_user}")

        # tracking row id -> sent_at milik request ini
        claims: Dict[int, datetime] = {}
        results = []
        for record_id in unique_ids:
            try:
                result = await self._transmit_one(company_code, transaction_type, record_id, claims)
            except Exception as e:
                self.logger.exception(f"Unexpected error transmitting {transaction_type}#{record_id}")
                await self.repository.rollback()
                result = await self._recover_failed(company_code, transaction_type, record_id, claims, str(e))
            results.append(result)

        summary = self._summarize(results)
        self.logger.info(f"INSW batch done: company={company_code} type={transaction_type} "
                         f"success={summary['success_count']} failed={summary['failed_count']} "
                         f"skipped={summary['skipped_count']}")
        return summary

    async def retry_failed(self, company_code: int, transaction_type: str,
                           max_retries: int = None) -> Dict[str, Any]:
        """
        Kirim ulang record FAILED (kecuali gagal validasi) yang retry_count < max_retries.
        Row SENT yang claim-nya sudah basi ikut dikirim ulang.
        """
        self._validate_transaction_type(transaction_type)
        limit = max_retries if max_retries is not None else self.max_retries

        record_ids = await self.repository.list_retryable(company_code, transaction_type, limit,
                                                          stale_before=self._stale_before())
        if not record_ids:
            return {
                'status': 'success',
                'message': 'No failed records eligible for retry',
                'total': 0, 'success_count': 0, 'failed_count': 0, 'skipped_count': 0,
                'results': [],
            }
        return await self.transmit_batch(company_code, transaction_type, record_ids)

    async def get_transmission_logs(self, company_code: int, transaction_type: str = None,
                                    insw_status: str = None, limit: int = 100) -> List[Any]:
        if transaction_type:
            self._validate_transaction_type(transaction_type)
        return await self.repository.list_logs(company_code, transaction_type, insw_status,
                                               max(1, min(limit, 1000)))

    async def preview_payloads(self, company_code: int, transaction_type: str,
                               record_ids: List[int]) -> List[Dict[str, Any]]:
        """Konversi tanpa kirim; dipakai endpoint preview"""
        self._validate_transaction_type(transaction_type)
        if not record_ids:
            raise ValidationError("At least one record id is required", field='ids')

        previews = []
        for record_id in dict.fromkeys(record_ids):
            source = await self.repository.load_source(company_code, transaction_type, record_id)
            if source is None:
                previews.append({'id': record_id, 'payload': None,
                                 'errors': [f"{transaction_type} #{record_id} not found"]})
                continue
            payload, errors = await self._build_payload(company_code, transaction_type, source)
            previews.append({'id': record_id, 'wms_id': source_wms_id(transaction_type, source),
                             'payload': payload, 'errors': errors})
        return previews

    # ==================== SINGLE RECORD ====================

    async def _transmit_one(self, company_code: int, transaction_type: str, transaction_id: int,
                            claims: Dict[int, datetime]) -> Dict[str, Any]:
        record = await self.repository.get_record(company_code, transaction_type, transaction_id)
        source = None

        if record is None:
            source = await self.repository.load_source(company_code, transaction_type, transaction_id)
            if source is None:
                message = f"{transaction_type} #{transaction_id} not found"
                self.logger.warning(f"INSW transmit skipped: {message}")
                return self._result(transaction_id, None, 'failed', 'FAILED', error=message)
            record = await self.repository.queue(company_code, transaction_type, transaction_id,
                                                 source_wms_id(transaction_type, source))

        if record.insw_status == 'SUCCESS':
            return self._result(transaction_id, record.wms_id, 'skipped', 'SUCCESS',
                                insw_response=record.insw_response)

        claimed_at = await self.repository.claim(record.id, stale_before=self._stale_before())
        await self.repository.commit()
        if claimed_at is None:
            current = await self.repository.get_record(company_code, transaction_type, transaction_id)
            if current.insw_status == 'SUCCESS':
                return self._result(transaction_id, record.wms_id, 'skipped', 'SUCCESS',
                                    insw_response=current.insw_response)
            return self._result(transaction_id, record.wms_id, 'skipped', current.insw_status,
                                error='Record is being transmitted by another request')
        claims[record.id] = claimed_at

        if source is None:
            source = await self.repository.load_source(company_code, transaction_type, transaction_id)

        if source is None:
            errors = [f"{transaction_type} #{transaction_id} not found"]
            payload = None
        else:
            payload, errors = await self._build_payload(company_code, transaction_type, source)

        if errors:
            error = '; '.join(errors)
            self.logger.warning(f"INSW payload invalid for {transaction_type}#{transaction_id}: {error}")
            applied = await self.repository.mark_failed(record.id, claimed_at, payload, error, 'validation')
            return await self._finish(applied, company_code, transaction_type, transaction_id, record,
                                      'failed', 'FAILED', error=error)

        try:
            response = await self._send(transaction_type, payload)
        except INSWIntegrationError as e:
            self.logger.warning(f"INSW transport error for {transaction_type}#{transaction_id}: {e.message}")
            applied = await self.repository.mark_failed(record.id, claimed_at, payload, e.message,
                                                        'transport', e.insw_response)
            return await self._finish(applied, company_code, transaction_type, transaction_id, record,
                                      'failed', 'FAILED', error=e.message)

        if response.get('status') is True:
            applied = await self.repository.mark_success(record.id, claimed_at, payload, response)
            return await self._finish(applied, company_code, transaction_type, transaction_id, record,
                                      'success', 'SUCCESS', insw_response=response)

        error = response.get('message') or 'Rejected by INSW'
        self.logger.warning(f"INSW rejected {transaction_type}#{transaction_id}: {error}")
        applied = await self.repository.mark_failed(record.id, claimed_at, payload, error, 'rejected', response)
        return await self._finish(applied, company_code, transaction_type, transaction_id, record,
                                  'failed', 'FAILED', insw_response=response, error=error)

    async def _finish(self, applied: bool, company_code: int, transaction_type: str, transaction_id: int,
                      record, status: str, insw_status: str, insw_response: Any = None,
                      error: str = None) -> Dict[str, Any]:
        """Commit hasil transisi; kalau claim sudah diambil alih, laporkan status row yang sebenarnya"""
        await self.repository.commit()
        if applied:
            return self._result(transaction_id, record.wms_id, status, insw_status,
                                insw_response=insw_response, error=error)

        current = await self.repository.get_record(company_code, transaction_type, transaction_id)
        current_status = current.insw_status if current else None
        self.logger.warning(f"INSW claim on {transaction_type}#{transaction_id} was taken over; "
                            f"outcome '{insw_status}' not recorded, row is {current_status}")
        return self._result(transaction_id, record.wms_id, 'failed', current_status,
                            insw_response=insw_response,
                            error=f"Tracking record was taken over by another request ({current_status})")

    async def _recover_failed(self, company_code: int, transaction_type: str, transaction_id: int,
                              claims: Dict[int, datetime], error: str) -> Dict[str, Any]:
        """Row yang di-claim request ini dikembalikan ke FAILED; row milik request lain tidak disentuh"""
        record = await self.repository.get_record(company_code, transaction_type, transaction_id)
        if record is None:
            return self._result(transaction_id, None, 'failed', 'FAILED', error=error)

        claimed_at = claims.get(record.id)
        if claimed_at is not None and await self.repository.mark_failed(
                record.id, claimed_at, record.insw_request_payload, error, 'transport'):
            await self.repository.commit()
            return self._result(transaction_id, record.wms_id, 'failed', 'FAILED', error=error)
        return self._result(transaction_id, record.wms_id, 'failed', record.insw_status, error=error)

    async def _build_payload(self, company_code: int, transaction_type: str,
                             source) -> Tuple[Optional[Dict[str, Any]], List[str]]:
        if transaction_type == 'incoming':
            payload = convert_incoming(source)
        elif transaction_type == 'outgoing':
            payload = convert_outgoing(source)
        elif transaction_type == 'adjustment':
            entity_name = await self.repository.get_company_name(company_code)
            payload = convert_adjustment(source, entity_name)
        elif transaction_type == 'stock_opname':
            if source.status != 'CONFIRMED':
                return None, [f"Stock opname {source.wms_id} is {source.status}, only CONFIRMED can be reported"]
            entity_name = await self.repository.get_company_name(company_code)
            payload = convert_stock_opname(source, entity_name)
        else:
            payload = convert_saldo_awal(company_code, [source])

        return payload, validate_payload(payload)

    async def _send(self, transaction_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if transaction_type == 'saldo_awal':
            return await self.insw_client.post_saldo_awal(payload)
        return await self.insw_client.post_transaksi(payload)

    # ==================== HELPERS ====================

    def _stale_before(self) -> datetime:
        """Claim SENT yang lebih tua dari batas ini dianggap ditinggal (proses mati / session hilang)"""
        return datetime.utcnow() - timedelta(seconds=self.stale_claim_seconds)

    def _validate_transaction_type(self, transaction_type: str) -> None:
        if transaction_type not in TRANSACTION_TYPES:
            raise ValidationError(
                f"Invalid transaction_type '{transaction_type}'. "
                f"Must be one of: {', '.join(TRANSACTION_TYPES)}",
                field='transaction_type'
            )

    @staticmethod
    def _result(record_id: int, wms_id: Optional[str], status: str, insw_status: str,
                insw_response: Any = None, error: str = None) -> Dict[str, Any]:
        result = {'id': record_id, 'wms_id': wms_id, 'status': status, 'insw_status': insw_status}
        if insw_response is not None:
            result['insw_response'] = insw_response
        if error:
            result['error'] = error
        return result

    @staticmethod
    def _summarize(results: List[Dict[str, Any]]) -> Dict[str, Any]:
        success_count = sum(1 for r in results if r['status'] == 'success')
        failed_count = sum(1 for r in results if r['status'] == 'failed')
        skipped_count = sum(1 for r in results if r['status'] == 'skipped')

        if failed_count == 0:
            status = 'success'
        elif success_count == 0 and skipped_count == 0:
            status = 'failed'
        else:
            status = 'partial'

        message = (f"{success_count} of {len(results)} records sent to INSW"
                   f" ({failed_count} failed, {skipped_count} skipped)")
        return {
            'status': status,
            'message': message,
            'total': len(results),
            'success_count': success_count,
            'failed_count': failed_count,
            'skipped_count': skipped_count,
            'results': results,
        }
