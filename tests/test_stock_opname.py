from datetime import date

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select, update

from imaps.models import Adjustment, AuditLog, StockOpname
from imaps.services.exceptions import (
    BusinessRuleError, ConflictError, NotFoundError, StateConflictError, ValidationError,
)
from imaps.services.stock_opname.stock_opname_service import classify_variance, opname_checksum

from conftest import (
    COMPANY_CODE, OTHER_COMPANY_CODE, balance_row, dec, incoming_payload, opname_payload, outgoing_payload,
)


@pytest.fixture
async def stocked(registry):
    """Saldo awal 50, masuk 100 (10 Jan), keluar 30 (20 Jan) untuk RM-001"""
    await registry.beginning_balance_service.create_many(COMPANY_CODE, [balance_row()])
    await registry.incoming_goods_service.create(COMPANY_CODE, incoming_payload())
    await registry.outgoing_goods_service.create(COMPANY_CODE, outgoing_payload())
    return registry


def opname_line(physical_qty, item_code='RM-001', item_type='ROH', uom='KG'):
    return {'item_code': item_code, 'item_type': item_type, 'uom': uom, 'physical_qty': str(physical_qty)}


def test_classify_variance():
    assert classify_variance(dec('0.001')) == 'GAIN'
    assert classify_variance(dec('-0.001')) == 'LOSS'
    assert classify_variance(dec('0')) is None


def test_checksum_ignores_item_order_and_trailing_zeros():
    first = [{'item_code': 'A', 'item_type': 'ROH', 'uom': 'KG', 'physical_qty': dec('1.50')},
             {'item_code': 'B', 'item_type': 'ROH', 'uom': 'KG', 'physical_qty': dec('2')}]
    second = [{'item_code': 'B', 'item_type': 'ROH', 'uom': 'KG', 'physical_qty': dec('2.000')},
              {'item_code': 'A', 'item_type': 'ROH', 'uom': 'KG', 'physical_qty': dec('1.5')}]

    assert opname_checksum(date(2025, 1, 31), 1001, first) == opname_checksum(date(2025, 1, 31), 1001, second)
    assert opname_checksum(date(2025, 1, 31), 1001, first) != opname_checksum(date(2025, 2, 1), 1001, first)


async def test_create_computes_system_position(stocked):
    opname = await stocked.stock_opname_service.create_opname(COMPANY_CODE, opname_payload())

    assert opname['status'] == 'ACTIVE'
    assert opname['created_by'] == 'operator'
    line = opname['items'][0]
    assert line['item_name'] == 'Material RM-001'
    assert line['beginning_qty'] == 50.0
    assert line['incoming_qty_on_date'] == 100.0
    assert line['outgoing_qty_on_date'] == 30.0
    assert line['system_qty'] == 120.0
    assert line['physical_qty'] == 118.0
    assert line['variance_qty'] == -2.0
    assert line['adjustment_type'] == 'LOSS'


async def test_snapshot_excludes_movements_after_document_date(stocked):
    opname = await stocked.stock_opname_service.create_opname(
        COMPANY_CODE, opname_payload(document_date=date(2025, 1, 15), items=[opname_line(150)])
    )

    line = opname['items'][0]
    assert line['outgoing_qty_on_date'] == 0.0
    assert line['system_qty'] == 150.0
    assert line['adjustment_type'] is None


async def test_item_without_movements_has_zero_system_qty(stocked):
    opname = await stocked.stock_opname_service.create_opname(
        COMPANY_CODE, opname_payload(items=[opname_line(7, item_code='NEW-01')])
    )

    line = opname['items'][0]
    assert line['system_qty'] == 0.0
    assert line['variance_qty'] == 7.0
    assert line['adjustment_type'] == 'GAIN'


async def test_identical_resubmission_returns_existing_opname(stocked):
    first = await stocked.stock_opname_service.create_opname(COMPANY_CODE, opname_payload())
    second = await stocked.stock_opname_service.create_opname(COMPANY_CODE, opname_payload())

    assert second['id'] == first['id']


async def test_same_wms_id_with_different_payload_conflicts(stocked):
    await stocked.stock_opname_service.create_opname(COMPANY_CODE, opname_payload())

    with pytest.raises(ConflictError):
        await stocked.stock_opname_service.create_opname(
            COMPANY_CODE, opname_payload(items=[opname_line(119)])
        )


async def test_duplicate_lines_are_rejected(stocked):
    with pytest.raises(PydanticValidationError):
        await stocked.stock_opname_service.create_opname(
            COMPANY_CODE, opname_payload(items=[opname_line(1), opname_line(2)])
        )


async def test_unknown_item_type_is_rejected(stocked):
    with pytest.raises(ValidationError):
        await stocked.stock_opname_service.create_opname(
            COMPANY_CODE, opname_payload(items=[opname_line(1, item_type='XXX')])
        )


async def test_inactive_company_cannot_create_opname(registry):
    with pytest.raises(BusinessRuleError):
        await registry.stock_opname_service.create_opname(3003, opname_payload())


async def test_confirm_creates_adjustment_and_queues_transmission(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload())

    confirmed = await service.confirm_opname(COMPANY_CODE, 'SO-001')

    assert confirmed['status'] == 'CONFIRMED'
    assert confirmed['confirmed_at'] is not None
    adjustment = confirmed['adjustment']
    assert adjustment['internal_evidence_number'] == 'SO-ADJ/SO-001'
    assert adjustment['source_stock_opname_id'] == confirmed['id']
    assert len(adjustment['items']) == 1
    assert adjustment['items'][0]['adjustment_type'] == 'LOSS'
    assert adjustment['items'][0]['qty'] == 2.0

    logs = await stocked.get_service('transmission_repository').list_logs(COMPANY_CODE)
    queued = {(log.transaction_type, log.insw_status) for log in logs}
    assert ('adjustment', 'PENDING') in queued
    assert ('stock_opname', 'PENDING') in queued


async def test_confirm_without_variance_creates_no_adjustment(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload(items=[opname_line(120)]))

    confirmed = await service.confirm_opname(COMPANY_CODE, 'SO-001')

    assert confirmed['adjustment'] is None
    logs = await stocked.get_service('transmission_repository').list_logs(COMPANY_CODE, 'stock_opname')
    assert logs == []


async def test_tiny_variance_is_not_rounded_away(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload(items=[opname_line('120.001')]))

    confirmed = await service.confirm_opname(COMPANY_CODE, 'SO-001')

    assert confirmed['items'][0]['adjustment_type'] == 'GAIN'
    assert confirmed['adjustment']['items'][0]['adjustment_type'] == 'GAIN'


async def test_confirm_with_replacement_items(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload())

    confirmed = await service.confirm_opname(COMPANY_CODE, 'SO-001', items=[opname_line(125)], notes='Recount')

    assert confirmed['notes'] == 'Recount'
    assert confirmed['items'][0]['variance_qty'] == 5.0
    assert confirmed['adjustment']['items'][0]['adjustment_type'] == 'GAIN'
    assert confirmed['adjustment']['items'][0]['qty'] == 5.0


async def test_update_items_recomputes_lines(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload())

    updated = await service.update_items(COMPANY_CODE, 'SO-001',
                                         [opname_line(120), opname_line(3, item_code='NEW-01')])

    assert updated['status'] == 'ACTIVE'
    assert [item['item_code'] for item in updated['items']] == ['RM-001', 'NEW-01']
    assert updated['items'][0]['adjustment_type'] is None
    assert updated['items'][1]['adjustment_type'] == 'GAIN'


async def test_terminal_opname_cannot_transition_again(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload())
    await service.confirm_opname(COMPANY_CODE, 'SO-001')

    with pytest.raises(StateConflictError):
        await service.confirm_opname(COMPANY_CODE, 'SO-001')
    with pytest.raises(StateConflictError):
        await service.cancel_opname(COMPANY_CODE, 'SO-001')
    with pytest.raises(StateConflictError):
        await service.update_items(COMPANY_CODE, 'SO-001', [opname_line(1)])


async def test_cancel_opname(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload())

    cancelled = await service.cancel_opname(COMPANY_CODE, 'SO-001', notes='Salah gudang')

    assert cancelled['status'] == 'CANCELLED'
    assert cancelled['cancelled_at'] is not None
    assert cancelled['notes'] == 'Salah gudang'
    with pytest.raises(StateConflictError):
        await service.confirm_opname(COMPANY_CODE, 'SO-001')


async def test_cancelled_wms_id_cannot_be_reused(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload())
    await service.cancel_opname(COMPANY_CODE, 'SO-001')

    with pytest.raises(ConflictError):
        await service.create_opname(COMPANY_CODE, opname_payload())


async def test_confirmed_adjustment_feeds_next_opname(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload())
    await service.confirm_opname(COMPANY_CODE, 'SO-001')

    later = await service.create_opname(
        COMPANY_CODE, opname_payload(wms_id='SO-002', document_date=date(2025, 2, 28), items=[opname_line(118)])
    )

    line = later['items'][0]
    assert line['outgoing_qty_on_date'] == 32.0
    assert line['system_qty'] == 118.0
    assert line['adjustment_type'] is None


async def test_opname_is_scoped_to_company(stocked):
    await stocked.stock_opname_service.create_opname(COMPANY_CODE, opname_payload())

    with pytest.raises(NotFoundError):
        await stocked.stock_opname_service.get_opname(OTHER_COMPANY_CODE, 'SO-001')


async def test_list_opnames_filters_by_status(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload())
    await service.create_opname(COMPANY_CODE, opname_payload(wms_id='SO-002', items=[opname_line(120)]))
    await service.cancel_opname(COMPANY_CODE, 'SO-002')

    active = await service.list_opnames(COMPANY_CODE, status='ACTIVE')
    assert [row['wms_id'] for row in active['items']] == ['SO-001']

    with pytest.raises(ValidationError):
        await service.list_opnames(COMPANY_CODE, status='DONE')


async def test_confirm_emits_one_adjustment_line_per_nonzero_variance(stocked):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload(items=[
        opname_line(5, item_code='NEW-A'),
        opname_line(117),
        opname_line(0, item_code='NEW-B'),
    ]))

    confirmed = await service.confirm_opname(COMPANY_CODE, 'SO-001')

    lines = {(item['item_code'], item['adjustment_type'], item['qty'])
             for item in confirmed['adjustment']['items']}
    assert lines == {('NEW-A', 'GAIN', 5.0), ('RM-001', 'LOSS', 3.0)}


def confirmed_elsewhere(service, db_session, monkeypatch):
    """Konfirmasi paralel masuk di antara pembacaan status dan UPDATE"""
    get_active = service._get_active

    async def read_then_confirmed(company_code, wms_id):
        opname = await get_active(company_code, wms_id)
        await db_session.execute(
            update(StockOpname).where(StockOpname.id == opname.id)
            .values(status='CONFIRMED')
            .execution_options(synchronize_session=False)
        )
        return opname

    monkeypatch.setattr(service, '_get_active', read_then_confirmed)


async def test_confirm_racing_another_confirm_has_no_side_effects(stocked, db_session, monkeypatch):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload())
    confirmed_elsewhere(service, db_session, monkeypatch)

    with pytest.raises(StateConflictError):
        await service.confirm_opname(COMPANY_CODE, 'SO-001')

    assert (await db_session.execute(select(func.count()).select_from(Adjustment))).scalar() == 0
    logs = await stocked.get_service('transmission_repository').list_logs(COMPANY_CODE, 'adjustment')
    assert logs == []


async def test_update_items_racing_confirm_is_rejected(stocked, db_session, monkeypatch):
    service = stocked.stock_opname_service
    await service.create_opname(COMPANY_CODE, opname_payload())
    confirmed_elsewhere(service, db_session, monkeypatch)

    with pytest.raises(StateConflictError):
        await service.update_items(COMPANY_CODE, 'SO-001', [opname_line(120)])

    monkeypatch.undo()
    opname = await service.get_opname(COMPANY_CODE, 'SO-001')
    assert [item['physical_qty'] for item in opname['items']] == [118.0]


async def test_identical_resubmission_is_audited_once(stocked, db_session):
    await stocked.stock_opname_service.create_opname(COMPANY_CODE, opname_payload())
    await stocked.stock_opname_service.create_opname(COMPANY_CODE, opname_payload())

    created = (await db_session.execute(
        select(AuditLog).where(AuditLog.entity_type == 'StockOpname', AuditLog.action == 'CREATE')
    )).scalars().all()
    assert len(created) == 1
