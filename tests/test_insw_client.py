import pytest
import requests

from imaps.services.exceptions import INSWIntegrationError
from imaps.services.integration import INSWClient


class StubResponse:
    def __init__(self, status_code=200, body=None, text=''):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError('No JSON object could be decoded')
        return self._body


class StubSession:
    """requests.Session pengganti; mencatat request dan mengembalikan response antrian"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(*responses, use_test_mode=True):
    session = StubSession(*responses)
    client = INSWClient('api-key', 'unique-key', use_test_mode=use_test_mode, timeout=5,
                        http_session=session)
    return client, session


def test_endpoints_follow_mode():
    test_client, _ = make_client()
    prod_client, _ = make_client(use_test_mode=False)

    assert test_client.endpoint('transaksi') == 'https://api.insw.go.id/api-prod/inventory/temp/transaksi'
    assert prod_client.endpoint('saldoAwal') == 'https://api.insw.go.id/api-prod/inventory/saldoAwal'
    with pytest.raises(INSWIntegrationError):
        prod_client.endpoint('registrasi')
    with pytest.raises(ValueError):
        test_client.endpoint('unknown')


def test_production_mode_requires_api_key():
    with pytest.raises(ValueError):
        INSWClient('', 'unique-key', use_test_mode=False)


async def test_post_transaksi_sends_headers_and_payload():
    client, session = make_client(StubResponse(body={'status': True, 'message': 'OK'}))

    response = await client.post_transaksi({'data': []})

    assert response == {'status': True, 'message': 'OK'}
    method, url, kwargs = session.requests[0]
    assert method == 'POST'
    assert url.endswith('/temp/transaksi')
    assert kwargs['json'] == {'data': []}
    assert kwargs['timeout'] == 5
    assert kwargs['headers']['x-insw-key'] == 'api-key'
    assert kwargs['headers']['x-unique-key'] == 'unique-key'


async def test_rejection_body_is_returned_as_is():
    client, _ = make_client(StubResponse(body={'status': False, 'message': 'Data tidak valid'}))

    assert await client.post_saldo_awal({'data': {}}) == {'status': False, 'message': 'Data tidak valid'}


async def test_stock_opname_lookup_uses_put():
    client, session = make_client(StubResponse(body={'status': True}), StubResponse(body={'status': True}))

    await client.get_transaksi('32', '01-01-2025', '31-01-2025')
    await client.get_transaksi('30', '01-01-2025', '31-01-2025')

    assert session.requests[0][0] == 'PUT'
    assert session.requests[0][1].endswith('/transaksi/32/tglAwal=01-01-2025&tglAkhir=31-01-2025')
    assert session.requests[1][0] == 'POST'


@pytest.mark.parametrize('failure, message', [
    (requests.exceptions.Timeout(), 'timeout after 5s'),
    (requests.exceptions.ConnectionError(), 'Failed to connect'),
    (StubResponse(status_code=500, text='Internal Server Error'), 'INSW API error: 500'),
    (StubResponse(status_code=200, text='<html>'), 'non-JSON'),
])
async def test_transport_failures_raise_integration_error(failure, message):
    client, _ = make_client(failure)

    with pytest.raises(INSWIntegrationError) as exc_info:
        await client.post_transaksi({'data': []})
    assert message in exc_info.value.message


async def test_test_mode_only_operations():
    client, _ = make_client(use_test_mode=False)

    with pytest.raises(INSWIntegrationError):
        await client.cleansing('012345678901000')
    with pytest.raises(INSWIntegrationError):
        await client.registrasi_final()
