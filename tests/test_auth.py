async def test_login_returns_token_and_profile(client):
    response = await client.post('/api/auth/login', json={'username': 'operator', 'password': 'password123'})

    assert response.status_code == 200
    body = response.json()
    assert body['status'] == 'success'
    assert body['data']['token_type'] == 'Bearer'
    assert body['data']['user']['username'] == 'operator'
    assert 'id' not in body['data']

    token = body['data']['access_token']
    me = await client.get('/api/auth/me', headers={'Authorization': f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()['data']['company_code'] == 1001


async def test_login_with_wrong_password(client):
    response = await client.post('/api/auth/login', json={'username': 'operator', 'password': 'wrong-pass'})

    assert response.status_code == 401
    body = response.json()
    assert body['status'] == 'failed'
    assert body['errors'][0]['code'] == 'AUTHENTICATION_ERROR'


async def test_missing_or_invalid_token_is_unauthorized(client):
    response = await client.get('/api/v1/incoming-goods')
    assert response.status_code == 401
    assert response.json()['message'] == 'Authentication required'

    response = await client.get('/api/v1/incoming-goods', headers={'Authorization': 'Bearer not-a-jwt'})
    assert response.status_code == 401
    assert response.json()['message'] == 'Invalid access token'


async def test_user_without_company_code_is_rejected(client, auth_headers):
    response = await client.get('/api/v1/incoming-goods', headers=auth_headers('nocompany'))

    assert response.status_code == 400
    error = response.json()['errors'][0]
    assert error == {'field': 'company_code', 'code': 'COMPANY_CODE_MISSING',
                     'message': 'Company code is missing for this account'}


async def test_admin_creates_user(client, auth_headers):
    payload = {'username': 'gudang2', 'email': 'gudang2@example.com', 'password': 'rahasia123',
               'role': 'wms', 'company_code': 1001}

    response = await client.post('/api/users', json=payload, headers=auth_headers('admin'))
    assert response.status_code == 201
    assert response.json()['data']['role'] == 'wms'
    assert 'password' not in response.json()['data']

    forbidden = await client.post('/api/users', json={**payload, 'username': 'gudang3'},
                                  headers=auth_headers('operator'))
    assert forbidden.status_code == 403
