"""
INSW Payload Converter
======================

Konversi transaksi lokal (pemasukan, pengeluaran, adjustment, stock opname,
saldo awal) ke bentuk payload INSW, plus validasi field wajib sebelum dikirim.
Fungsi di sini murni: tidak menyentuh database maupun network.
"""

from datetime import date, datetime
from typing import Dict, Any, List, Optional

# Kode kegiatan INSW
ACTIVITY_INCOMING = '30'
ACTIVITY_OUTGOING = '31'
ACTIVITY_STOCK_OPNAME = '32'
ACTIVITY_ADJUSTMENT = '33'

ACTIVITY_CODES = {
    'incoming': ACTIVITY_INCOMING,
    'outgoing': ACTIVITY_OUTGOING,
    'stock_opname': ACTIVITY_STOCK_OPNAME,
    'adjustment': ACTIVITY_ADJUSTMENT,
    'saldo_awal': None,
}

ITEM_TYPE_TO_INSW_CATEGORY = {
    'ROH': '1',
    'HALB': '1',
    'HIBE': '2',
    'FERT': '7',
    'HIBE-M': '5',
    'HIBE-E': '5',
    'HIBE-T': '5',
    'SCRAP': '8',
    'WIP': '6',
}
DEFAULT_INSW_CATEGORY = '1'

CUSTOMS_DOC_TO_INSW_CODE = {
    'BC23': '0407023',
    'BC27': '0407027',
    'BC40': '0407040',
    'BC30': '0407030',
    'BC25': '0407025',
    'BC41': '0407041',
    'BC261': '0407261',
    'BC262': '0407262',
    'PPKEKTLDDP': '0407613',
    'PPKEKLDIN': '0407611',
    'PPKEKLDPOUT': '0407631',
}
DEFAULT_INCOMING_DOC_CODE = '0407020'
DEFAULT_OUTGOING_DOC_CODE = '0407631'
STOCK_OPNAME_DOC_CODE = '0407632'

UNKNOWN_ENTITY = 'Unknown'


# ==================== FORMATTERS ====================

def format_insw_date(value) -> Optional[str]:
    """dd-MM-yyyy"""
    if value is None:
        return None
    return value.strftime('%d-%m-%Y')


def format_insw_datetime(value) -> Optional[str]:
    """dd-MM-yyyy HH:mm:ss.SSS (dipakai saldo awal)"""
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    return value.strftime('%d-%m-%Y %H:%M:%S.') + f"{value.microsecond // 1000:03d}"


def to_number(value) -> float:
    return float(value) if value is not None else 0.0


def map_item_type_to_category(item_type: str) -> str:
    return ITEM_TYPE_TO_INSW_CATEGORY.get(item_type, DEFAULT_INSW_CATEGORY)


def map_customs_doc_code(customs_document_type: str) -> Optional[str]:
    return CUSTOMS_DOC_TO_INSW_CODE.get(customs_document_type)


# ==================== TRANSAKSI (kegiatan 30-33) ====================

def _transaksi_payload(activity_code: str, dokumen_kegiatan: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {'data': [{'kdKegiatan': activity_code, 'dokumenKegiatan': dokumen_kegiatan}]}


def _goods_document(header, evidence_number: str, activity_date: date, entity_name: str,
                    default_doc_code: str) -> Dict[str, Any]:
    doc_code = map_customs_doc_code(header.customs_document_type) or default_doc_code
    return {
        'nomorDokKegiatan': evidence_number,
        'tanggalKegiatan': format_insw_date(activity_date),
        'namaEntitas': entity_name or UNKNOWN_ENTITY,
        'barangTransaksi': [
            {
                'kdKategoriBarang': map_item_type_to_category(item.item_type),
                'kdBarang': item.item_code,
                'uraianBarang': item.item_name,
                'jumlah': to_number(item.qty),
                'kdSatuan': item.uom,
                'nilai': to_number(item.amount),
                'dokumen': [{
                    'kodeDokumen': doc_code,
                    'nomorDokumen': header.ppkek_number or evidence_number,
                    'tanggalDokumen': format_insw_date(
                        header.customs_registration_date or activity_date
                    ),
                }],
            }
            for item in header.items
        ],
    }


def convert_incoming(incoming) -> Dict[str, Any]:
    """IncomingGood -> payload kegiatan 30"""
    document = _goods_document(incoming, incoming.incoming_evidence_number, incoming.incoming_date,
                               incoming.shipper_name, DEFAULT_INCOMING_DOC_CODE)
    return _transaksi_payload(ACTIVITY_INCOMING, [document])


def convert_outgoing(outgoing) -> Dict[str, Any]:
    """OutgoingGood -> payload kegiatan 31"""
    document = _goods_document(outgoing, outgoing.outgoing_evidence_number, outgoing.outgoing_date,
                               outgoing.recipient_name, DEFAULT_OUTGOING_DOC_CODE)
    return _transaksi_payload(ACTIVITY_OUTGOING, [document])


def convert_adjustment(adjustment, entity_name: str = None) -> Dict[str, Any]:
    """Adjustment -> payload kegiatan 33; adjustment tidak punya dokumen pabean"""
    reasons = [item.reason for item in adjustment.items if item.reason]
    document = {
        'nomorDokKegiatan': adjustment.internal_evidence_number,
        'tanggalKegiatan': format_insw_date(adjustment.transaction_date),
        'namaEntitas': entity_name or UNKNOWN_ENTITY,
        'keterangan': reasons[0] if reasons else (adjustment.wms_doc_type or 'Adjustment'),
        'barangTransaksi': [
            {
                'kdKategoriBarang': map_item_type_to_category(item.item_type),
                'kdBarang': item.item_code,
                'uraianBarang': item.item_name or item.item_code,
                'jumlah': to_number(item.qty),
                'kdSatuan': item.uom,
                'nilai': 0.0,
                'dokumen': [],
            }
            for item in adjustment.items
        ],
    }
    return _transaksi_payload(ACTIVITY_ADJUSTMENT, [document])


def convert_stock_opname(opname, entity_name: str = None) -> Dict[str, Any]:
    """
    StockOpname (CONFIRMED) -> payload kegiatan 32.

    Hanya baris dengan selisih; jumlah yang dilaporkan adalah hasil hitung fisik.
    """
    lines = [item for item in opname.items if item.variance_qty is not None and item.variance_qty != 0]
    document = {
        'nomorDokKegiatan': opname.wms_id,
        'tanggalKegiatan': format_insw_date(opname.document_date),
        'namaEntitas': entity_name or UNKNOWN_ENTITY,
        'barangTransaksi': [
            {
                'kdKategoriBarang': map_item_type_to_category(item.item_type),
                'kdBarang': item.item_code,
                'uraianBarang': item.item_name or item.item_code,
                'jumlah': to_number(item.physical_qty),
                'kdSatuan': item.uom,
                'nilai': 0.0,
                'dokumen': [{
                    'kodeDokumen': STOCK_OPNAME_DOC_CODE,
                    'nomorDokumen': opname.wms_id,
                    'tanggalDokumen': format_insw_date(opname.document_date),
                }],
            }
            for item in lines
        ],
    }
    return _transaksi_payload(ACTIVITY_STOCK_OPNAME, [document])


# ==================== SALDO AWAL ====================

def saldo_awal_activity_number(company_code: int, year: int) -> str:
    return f"{company_code}/SAL/{year}"


def convert_saldo_awal(company_code: int, balances: List[Any], activity_date: date = None) -> Dict[str, Any]:
    """BeginningBalance[] -> payload saldoAwal"""
    effective_date = activity_date or (balances[0].balance_date if balances else date.today())
    return {
        'data': {
            'no_kegiatan': saldo_awal_activity_number(company_code, effective_date.year),
            'tgl_kegiatan': format_insw_datetime(effective_date),
            'barangSaldo': [
                {
                    'kd_kategori_barang': map_item_type_to_category(balance.item_type),
                    'kd_barang': balance.item_code,
                    'uraian_barang': balance.item_name,
                    'jumlah': to_number(balance.qty),
                    'satuan': balance.uom,
                    'nilai': 0.0,
                    'tanggal_declare': format_insw_datetime(balance.balance_date),
                }
                for balance in balances
            ],
        }
    }


# ==================== VALIDATION ====================

def _missing(value) -> bool:
    return value is None or value == ''


def validate_saldo_awal_payload(payload: Dict[str, Any]) -> List[str]:
    errors = []
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        return ['Saldo awal data must not be empty']

    for field in ('no_kegiatan', 'tgl_kegiatan'):
        if _missing(data.get(field)):
            errors.append(f"data.{field} is required")

    items = data.get('barangSaldo') or []
    if not items:
        errors.append('data.barangSaldo must not be empty')

    for idx, item in enumerate(items):
        for field in ('kd_kategori_barang', 'kd_barang', 'uraian_barang', 'jumlah',
                      'satuan', 'nilai', 'tanggal_declare'):
            if _missing(item.get(field)):
                errors.append(f"data.barangSaldo[{idx}].{field} is required")
    return errors


def validate_payload(payload: Dict[str, Any]) -> List[str]:
    """
    Validasi field wajib payload INSW.

    Return daftar pesan error; list kosong berarti payload siap dikirim.
    """
    if isinstance(payload, dict) and isinstance(payload.get('data'), dict):
        return validate_saldo_awal_payload(payload)

    errors = []
    transactions = payload.get('data') if isinstance(payload, dict) else None
    if not transactions:
        return ['Transaction data must not be empty']

    for t_idx, transaction in enumerate(transactions):
        prefix = f"data[{t_idx}]"
        if _missing(transaction.get('kdKegiatan')):
            errors.append(f"{prefix}.kdKegiatan is required")

        documents = transaction.get('dokumenKegiatan') or []
        if not documents:
            errors.append(f"{prefix}.dokumenKegiatan must not be empty")
            continue

        for d_idx, document in enumerate(documents):
            doc_prefix = f"{prefix}.dokumenKegiatan[{d_idx}]"
            for field in ('nomorDokKegiatan', 'tanggalKegiatan', 'namaEntitas'):
                if _missing(document.get(field)):
                    errors.append(f"{doc_prefix}.{field} is required")

            items = document.get('barangTransaksi') or []
            if not items:
                errors.append(f"{doc_prefix}.barangTransaksi must not be empty")
                continue

            for b_idx, item in enumerate(items):
                item_prefix = f"{doc_prefix}.barangTransaksi[{b_idx}]"
                for field in ('kdKategoriBarang', 'kdBarang', 'uraianBarang', 'kdSatuan'):
                    if _missing(item.get(field)):
                        errors.append(f"{item_prefix}.{field} is required")
                if item.get('jumlah') is None:
                    errors.append(f"{item_prefix}.jumlah is required")
                if item.get('nilai') is None:
                    errors.append(f"{item_prefix}.nilai is required (use 0 when unknown)")
                if item.get('dokumen') is None:
                    errors.append(f"{item_prefix}.dokumen is required (use [] when none)")
    return errors
