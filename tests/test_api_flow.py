from datetime import date, timedelta

from conftest import (
    adjustment_payload, balance_row, goods_item, incoming_payload, opname_payload, outgoing_payload,
)


async def post_incoming(client, headers, **kwargs):
    response = await client.post('/api/v1/incoming-goods', json=incoming_payload(**kwargs), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()['data']


async def test_ingest_queues_and_transmits_incoming(client, auth_headers, fake_insw):
    incoming = await post_incoming(client, auth_headers('wms'))
    assert incoming['company_code'] == 1001
    assert incoming['items'][0]['qty'] == 100.0

    logs = (await client.get('/api/insw/logs', headers=auth_headers('operator'))).json()['data']
    assert [(log['transaction_type'], log['transaction_id'], log['insw_status']) for log in logs] == \
        [('incoming', incoming['id'], 'PENDING')]

    response = await client.post('/api/insw/transmit', headers=auth_headers('operator'),
                                 json={'transaction_type': 'incoming', 'ids': [incoming['id']]})
    assert response.status_code == 200
    body = response.json()
    assert body['status'] == 'success'
    assert 'results' not in body
    assert body['data'][0]['wms_id'] == 'IN-001'
    assert body['data'][0]['insw_status'] == 'SUCCESS'

    method, payload = fake_insw.calls[0]
    assert method == 'post_transaksi'
    assert payload['data'][0]['kdKegiatan'] == '30'

    logs = (await client.get('/api/insw/logs', headers=auth_headers('operator'),
                             params={'insw_status': 'SUCCESS'})).json()['data']
    assert len(logs) == 1


async def test_duplicate_wms_id_is_conflict(client, auth_headers):
    await post_incoming(client, auth_headers('wms'))

    response = await client.post('/api/v1/incoming-goods', json=incoming_payload(), headers=auth_headers('wms'))

    assert response.status_code == 409
    assert response.json()['errors'][0]['field'] == 'wms_id'


async def test_ingest_rules(client, auth_headers):
    viewer = await client.post('/api/v1/incoming-goods', json=incoming_payload(), headers=auth_headers('viewer'))
    assert viewer.status_code == 403

    closed = await client.post('/api/v1/incoming-goods', json=incoming_payload(), headers=auth_headers('closed'))
    assert closed.status_code == 422
    assert closed.json()['errors'][0]['code'] == 'COMPANY_INACTIVE'

    unknown = await client.post('/api/v1/incoming-goods', headers=auth_headers('wms'),
                                json=incoming_payload(items=[goods_item(item_type='XYZ')]))
    assert unknown.status_code == 400
    assert unknown.json()['errors'][0]['code'] == 'UNKNOWN_ITEM_TYPE'

    negative = await client.post('/api/v1/incoming-goods', headers=auth_headers('wms'),
                                 json=incoming_payload(items=[goods_item(qty='-1')]))
    assert negative.status_code == 400
    assert negative.json()['errors'][0]['field'] == 'items.0.qty'


async def test_transactions_are_isolated_per_company(client, auth_headers):
    incoming = await post_incoming(client, auth_headers('wms'))

    response = await client.get(f"/api/v1/incoming-goods/{incoming['id']}", headers=auth_headers('other'))
    assert response.status_code == 404

    listing = await client.get('/api/v1/incoming-goods', headers=auth_headers('other'))
    assert listing.json()['data'] == []


async def test_outgoing_list_filters_by_date(client, auth_headers):
    headers = auth_headers('wms')
    await client.post('/api/v1/outgoing-goods', json=outgoing_payload(), headers=headers)

    inside = await client.get('/api/v1/outgoing-goods', headers=headers,
                              params={'start_date': '2025-01-20', 'end_date': '2025-01-20'})
    outside = await client.get('/api/v1/outgoing-goods', headers=headers, params={'start_date': '2025-01-21'})

    assert [row['wms_id'] for row in inside.json()['data']] == ['OUT-001']
    assert outside.json()['data'] == []


async def test_stock_opname_lifecycle_over_http(client, auth_headers, fake_insw):
    operator = auth_headers('operator')
    balances = await client.post('/api/customs/beginning-balances', json=[balance_row()], headers=operator)
    assert balances.status_code == 201
    await post_incoming(client, auth_headers('wms'))

    created = await client.post('/api/v1/stock-opname', json=opname_payload(), headers=auth_headers('wms'))
    assert created.status_code == 201
    assert created.json()['data']['items'][0]['system_qty'] == 150.0

    confirmed = await client.patch('/api/v1/stock-opname', headers=auth_headers('wms'),
                                   json={'wms_id': 'SO-001', 'status': 'CONFIRMED'})
    assert confirmed.status_code == 200
    adjustment = confirmed.json()['data']['adjustment']
    assert adjustment['items'][0]['adjustment_type'] == 'LOSS'
    assert adjustment['items'][0]['qty'] == 32.0

    again = await client.patch('/api/v1/stock-opname', headers=auth_headers('wms'),
                               json={'wms_id': 'SO-001', 'status': 'CANCELLED'})
    assert again.status_code == 409
    assert again.json()['errors'][0]['code'] == 'STATE_CONFLICT'

    report = await client.get('/api/reports/mutation', headers=auth_headers('viewer'),
                              params={'start_date': '2025-01-01', 'end_date': '2025-01-31'})
    row = report.json()['data']['rows'][0]
    assert (row['beginning'], row['incoming'], row['adjustment'], row['ending']) == (50.0, 100.0, -32.0, 118.0)

    transmitted = await client.post('/api/insw/transmit', headers=operator,
                                    json={'transaction_type': 'adjustment', 'ids': [adjustment['id']]})
    assert transmitted.json()['status'] == 'success'
    assert fake_insw.calls[-1][1]['data'][0]['kdKegiatan'] == '33'

    listing = await client.get('/api/v1/stock-opname', headers=operator, params={'status': 'CONFIRMED'})
    assert [row['wms_id'] for row in listing.json()['data']] == ['SO-001']


async def test_saldo_awal_transmission(client, auth_headers, fake_insw):
    operator = auth_headers('operator')
    balances = (await client.post('/api/customs/beginning-balances', json=[balance_row()],
                                  headers=operator)).json()['data']

    response = await client.post('/api/insw/transmit', headers=operator,
                                 json={'transaction_type': 'saldo_awal', 'ids': [balances[0]['id']]})

    assert response.json()['data'][0]['wms_id'] == 'SAL-RM-001'
    method, payload = fake_insw.calls[0]
    assert method == 'post_saldo_awal'
    assert payload['data']['no_kegiatan'] == '1001/SAL/2025'


async def test_rejected_transmission_can_be_retried(client, auth_headers, fake_insw):
    operator = auth_headers('operator')
    incoming = await post_incoming(client, auth_headers('wms'))
    fake_insw.queue_response({'status': False, 'message': 'Ditolak'})

    failed = await client.post('/api/insw/transmit', headers=operator,
                               json={'transaction_type': 'incoming', 'ids': [incoming['id']]})
    assert failed.status_code == 200
    assert failed.json()['status'] == 'failed'
    assert failed.json()['data'][0]['error'] == 'Ditolak'

    retried = await client.post('/api/insw/retry', headers=operator, json={'transaction_type': 'incoming'})
    assert retried.json()['status'] == 'success'
    assert retried.json()['success_count'] == 1


async def test_transmit_requires_operator_and_ids(client, auth_headers):
    wms = await client.post('/api/insw/transmit', headers=auth_headers('wms'),
                            json={'transaction_type': 'incoming', 'ids': [1]})
    assert wms.status_code == 403

    empty = await client.post('/api/insw/transmit', headers=auth_headers('operator'),
                              json={'transaction_type': 'incoming', 'ids': []})
    assert empty.status_code == 400


async def test_preview_and_insw_lookups(client, auth_headers, fake_insw):
    headers = auth_headers('operator')
    incoming = await post_incoming(client, auth_headers('wms'))

    preview = await client.get('/api/insw/convert/incoming', headers=headers, params={'ids': [incoming['id']]})
    assert preview.json()['data'][0]['errors'] == []
    assert fake_insw.calls == []

    lookup = await client.get('/api/insw/transaksi/30', headers=headers,
                              params={'start_date': '2025-01-01', 'end_date': '2025-01-31'})
    assert lookup.status_code == 200
    assert fake_insw.calls[0] == ('get_transaksi', {'activity_code': '30', 'tgl_awal': '01-01-2025',
                                                    'tgl_akhir': '31-01-2025'})


async def test_insw_transport_error_is_bad_gateway(client, auth_headers, fake_insw, transport_error):
    fake_insw.queue_response(transport_error)

    response = await client.get('/api/insw/dokumen', headers=auth_headers('operator'),
                                params={'nomor_dokumen': 'PPKEK-0001'})

    assert response.status_code == 502
    assert response.json()['errors'][0]['code'] == 'INSW_INTEGRATION_ERROR'


async def test_audit_trail_records_writes(client, auth_headers):
    await post_incoming(client, auth_headers('wms'))

    response = await client.get('/api/reports/audit-trail', headers=auth_headers('admin'),
                                params={'entity_type': 'IncomingGood'})

    assert response.status_code == 200
    entries = response.json()['data']
    assert entries[0]['action'] == 'CREATE'
    assert entries[0]['username'] == 'wms'

    forbidden = await client.get('/api/reports/audit-trail', headers=auth_headers('viewer'))
    assert forbidden.status_code == 403


async def test_wms_adjustment_is_recorded_queued_and_reported(client, auth_headers, fake_insw):
    headers = auth_headers('wms')
    balances = await client.post('/api/customs/beginning-balances', json=[balance_row()],
                                 headers=auth_headers('operator'))
    assert balances.status_code == 201
    await post_incoming(client, headers)

    response = await client.post('/api/v1/adjustments', json=adjustment_payload(), headers=headers)
    assert response.status_code == 201, response.text
    adjustment = response.json()['data']
    assert adjustment['source_stock_opname_id'] is None
    assert adjustment['items'][0]['adjustment_type'] == 'LOSS'
    assert adjustment['items'][0]['qty'] == 4.0

    logs = (await client.get('/api/insw/logs', headers=headers,
                             params={'transaction_type': 'adjustment'})).json()['data']
    assert [(log['transaction_id'], log['insw_status']) for log in logs] == [(adjustment['id'], 'PENDING')]

    report = await client.get('/api/reports/mutation', headers=headers,
                              params={'start_date': '2025-01-01', 'end_date': '2025-01-31'})
    row = report.json()['data']['rows'][0]
    assert (row['adjustment'], row['ending']) == (-4.0, 146.0)

    transmitted = await client.post('/api/insw/transmit', headers=auth_headers('operator'),
                                    json={'transaction_type': 'adjustment', 'ids': [adjustment['id']]})
    assert transmitted.json()['status'] == 'success'
    document = fake_insw.calls[-1][1]['data'][0]
    assert document['kdKegiatan'] == '33'
    assert document['keterangan'] == 'Karung sobek'

    detail = await client.get(f"/api/v1/adjustments/{adjustment['id']}", headers=auth_headers('viewer'))
    assert detail.json()['data']['wms_id'] == 'ADJ-001'
    listing = await client.get('/api/v1/adjustments', headers=auth_headers('other'))
    assert listing.json()['data'] == []


async def test_adjustment_ingest_rules(client, auth_headers):
    headers = auth_headers('wms')
    await client.post('/api/v1/adjustments', json=adjustment_payload(), headers=headers)

    duplicate = await client.post('/api/v1/adjustments', json=adjustment_payload(), headers=headers)
    assert duplicate.status_code == 409
    assert duplicate.json()['errors'][0]['field'] == 'wms_id'

    viewer = await client.post('/api/v1/adjustments', json=adjustment_payload('ADJ-002'),
                               headers=auth_headers('viewer'))
    assert viewer.status_code == 403

    line = adjustment_payload()['items'][0]
    zero = await client.post('/api/v1/adjustments', headers=headers,
                             json=adjustment_payload('ADJ-003', items=[dict(line, qty='0')]))
    assert zero.status_code == 400
    assert zero.json()['errors'][0]['field'] == 'items.0.qty'

    direction = await client.post('/api/v1/adjustments', headers=headers,
                                  json=adjustment_payload('ADJ-004', items=[dict(line, adjustment_type='PLUS')]))
    assert direction.status_code == 400
    assert direction.json()['errors'][0]['field'] == 'items.0.adjustment_type'

    unknown = await client.post('/api/v1/adjustments', headers=headers,
                                json=adjustment_payload('ADJ-005', items=[dict(line, item_type='XYZ')]))
    assert unknown.status_code == 400
    assert unknown.json()['errors'][0]['code'] == 'UNKNOWN_ITEM_TYPE'

    future = await client.post('/api/v1/adjustments', headers=headers,
                               json=adjustment_payload('ADJ-006', transaction_date=date.today() + timedelta(days=1)))
    assert future.status_code == 400
    assert future.json()['errors'][0]['field'] == 'transaction_date'
