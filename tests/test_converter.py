from datetime import date, datetime
from decimal import Decimal

from imaps.models import (
    IncomingGood, IncomingGoodItem, OutgoingGood, OutgoingGoodItem, Adjustment, AdjustmentItem,
    StockOpname, StockOpnameItem, BeginningBalance,
)
from imaps.services.integration.converter import (
    convert_incoming, convert_outgoing, convert_adjustment, convert_stock_opname, convert_saldo_awal,
    format_insw_date, format_insw_datetime, map_item_type_to_category, validate_payload,
)


def make_incoming(**overrides):
    values = dict(
        wms_id='IN-001', company_code=1001, owner=1001, customs_document_type='BC23',
        ppkek_number='PPKEK-0001', customs_registration_date=date(2025, 1, 9),
        incoming_evidence_number='BPB/001', incoming_date=date(2025, 1, 10),
        invoice_number='INV/001', invoice_date=date(2025, 1, 8), shipper_name='Shipper Co',
    )
    values.update(overrides)
    incoming = IncomingGood(**values)
    incoming.items = [
        IncomingGoodItem(item_type='ROH', item_code='RM-001', item_name='Resin', uom='KG',
                         qty=Decimal('100.5'), currency='USD', amount=Decimal('1500')),
        IncomingGoodItem(item_type='HIBE-M', item_code='MC-01', item_name='Mesin', uom='UNIT',
                         qty=Decimal('1'), currency='USD', amount=Decimal('20000')),
    ]
    return incoming


def make_opname():
    opname = StockOpname(wms_id='SO-001', company_code=1001, document_date=date(2025, 1, 31),
                         status='CONFIRMED')
    opname.items = [
        StockOpnameItem(item_code='RM-001', item_type='ROH', uom='KG', item_name='Resin',
                        beginning_qty=Decimal('0'), incoming_qty_on_date=Decimal('100'),
                        outgoing_qty_on_date=Decimal('0'), system_qty=Decimal('100'),
                        physical_qty=Decimal('97'), variance_qty=Decimal('-3'),
                        adjustment_qty_signed=Decimal('-3'), adjustment_type='LOSS'),
        StockOpnameItem(item_code='FG-001', item_type='FERT', uom='PCS', item_name='Barang Jadi',
                        beginning_qty=Decimal('10'), incoming_qty_on_date=Decimal('0'),
                        outgoing_qty_on_date=Decimal('0'), system_qty=Decimal('10'),
                        physical_qty=Decimal('10'), variance_qty=Decimal('0'),
                        adjustment_qty_signed=Decimal('0'), adjustment_type=None),
    ]
    return opname


def test_item_type_category_mapping():
    assert map_item_type_to_category('ROH') == '1'
    assert map_item_type_to_category('HALB') == '1'
    assert map_item_type_to_category('HIBE') == '2'
    assert map_item_type_to_category('HIBE-T') == '5'
    assert map_item_type_to_category('WIP') == '6'
    assert map_item_type_to_category('FERT') == '7'
    assert map_item_type_to_category('SCRAP') == '8'
    assert map_item_type_to_category('UNKNOWN') == '1'


def test_date_formats():
    assert format_insw_date(date(2025, 3, 7)) == '07-03-2025'
    assert format_insw_datetime(date(2025, 3, 7)) == '07-03-2025 00:00:00.000'
    assert format_insw_datetime(datetime(2025, 3, 7, 13, 5, 9, 250000)) == '07-03-2025 13:05:09.250'


def test_convert_incoming_builds_activity_30_document():
    payload = convert_incoming(make_incoming())

    transaction = payload['data'][0]
    assert transaction['kdKegiatan'] == '30'
    document = transaction['dokumenKegiatan'][0]
    assert document['nomorDokKegiatan'] == 'BPB/001'
    assert document['tanggalKegiatan'] == '10-01-2025'
    assert document['namaEntitas'] == 'Shipper Co'

    first, second = document['barangTransaksi']
    assert first['kdKategoriBarang'] == '1'
    assert first['jumlah'] == 100.5
    assert first['dokumen'] == [{'kodeDokumen': '0407023', 'nomorDokumen': 'PPKEK-0001',
                                 'tanggalDokumen': '09-01-2025'}]
    assert second['kdKategoriBarang'] == '5'
    assert validate_payload(payload) == []


def test_convert_outgoing_uses_recipient_and_activity_31():
    outgoing = OutgoingGood(
        wms_id='OUT-001', company_code=1001, owner=1001, customs_document_type='PPKEKLDPOUT',
        ppkek_number='PPKEK-0002', customs_registration_date=date(2025, 1, 20),
        outgoing_evidence_number='BPK/001', outgoing_date=date(2025, 1, 20),
        invoice_number='INV/002', invoice_date=date(2025, 1, 20), recipient_name='Buyer Co',
    )
    outgoing.items = [OutgoingGoodItem(item_type='FERT', item_code='FG-001', item_name='Barang Jadi',
                                       uom='PCS', qty=Decimal('5'), currency='USD', amount=Decimal('0'))]

    payload = convert_outgoing(outgoing)

    document = payload['data'][0]['dokumenKegiatan'][0]
    assert payload['data'][0]['kdKegiatan'] == '31'
    assert document['namaEntitas'] == 'Buyer Co'
    assert document['barangTransaksi'][0]['dokumen'][0]['kodeDokumen'] == '0407631'
    assert document['barangTransaksi'][0]['nilai'] == 0.0
    assert validate_payload(payload) == []


def test_convert_adjustment_has_no_customs_documents():
    adjustment = Adjustment(wms_id='SO-001', company_code=1001, internal_evidence_number='SO-ADJ/SO-001',
                            transaction_date=date(2025, 1, 31), wms_doc_type='STOCK_OPNAME')
    adjustment.items = [AdjustmentItem(adjustment_type='LOSS', item_type='ROH', item_code='RM-001',
                                       item_name='Resin', uom='KG', qty=Decimal('3'),
                                       reason='Stock opname SO-001')]

    payload = convert_adjustment(adjustment, 'PT Kawasan Satu')

    document = payload['data'][0]['dokumenKegiatan'][0]
    assert payload['data'][0]['kdKegiatan'] == '33'
    assert document['namaEntitas'] == 'PT Kawasan Satu'
    assert document['keterangan'] == 'Stock opname SO-001'
    assert document['barangTransaksi'][0]['dokumen'] == []
    assert validate_payload(payload) == []


def test_convert_stock_opname_reports_only_variance_lines():
    payload = convert_stock_opname(make_opname(), 'PT Kawasan Satu')

    document = payload['data'][0]['dokumenKegiatan'][0]
    assert payload['data'][0]['kdKegiatan'] == '32'
    assert [item['kdBarang'] for item in document['barangTransaksi']] == ['RM-001']
    line = document['barangTransaksi'][0]
    assert line['jumlah'] == 97.0
    assert line['dokumen'][0]['kodeDokumen'] == '0407632'


def test_convert_saldo_awal_activity_number_and_items():
    balance = BeginningBalance(company_code=1001, item_code='RM-001', item_name='Resin', item_type='ROH',
                               uom='KG', qty=Decimal('50'), balance_date=date(2025, 1, 1))

    payload = convert_saldo_awal(1001, [balance])

    assert payload['data']['no_kegiatan'] == '1001/SAL/2025'
    assert payload['data']['tgl_kegiatan'] == '01-01-2025 00:00:00.000'
    assert payload['data']['barangSaldo'][0]['kd_barang'] == 'RM-001'
    assert payload['data']['barangSaldo'][0]['jumlah'] == 50.0
    assert validate_payload(payload) == []


def test_validate_payload_reports_missing_fields():
    payload = convert_incoming(make_incoming(incoming_evidence_number='', shipper_name=None))
    payload['data'][0]['dokumenKegiatan'][0]['barangTransaksi'][0]['kdSatuan'] = ''

    errors = validate_payload(payload)

    assert 'data[0].dokumenKegiatan[0].nomorDokKegiatan is required' in errors
    assert not any('namaEntitas' in error for error in errors)
    assert 'data[0].dokumenKegiatan[0].barangTransaksi[0].kdSatuan is required' in errors


def test_validate_payload_rejects_empty_transactions():
    assert validate_payload({'data': []}) == ['Transaction data must not be empty']
    assert validate_payload({}) == ['Transaction data must not be empty']
