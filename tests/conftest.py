import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date
from decimal import Decimal

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from imaps import create_app
from imaps.config import settings
from imaps.database import Base, get_db_session
from imaps.dependencies import get_insw_client, registry_config
from imaps.models import Company, User
from imaps.services import create_service_registry
from imaps.services.auth import AuthService
from imaps.services.exceptions import INSWIntegrationError
from imaps.services.master import ItemTypeService

COMPANY_CODE = 1001
OTHER_COMPANY_CODE = 2002


class FakeINSWClient:
    """INSWClient pengganti; response diantrikan per panggilan"""

    def __init__(self):
        self.calls = []
        self.responses = []
        self.default_response = {'status': True, 'message': 'OK'}

    def queue_response(self, response):
        """response berupa dict atau exception yang akan di-raise"""
        self.responses.append(response)

    def _next(self, method, payload=None):
        self.calls.append((method, payload))
        response = self.responses.pop(0) if self.responses else self.default_response
        if isinstance(response, Exception):
            raise response
        return response

    async def post_saldo_awal(self, payload):
        return self._next('post_saldo_awal', payload)

    async def post_transaksi(self, payload):
        return self._next('post_transaksi', payload)

    async def get_transaksi(self, activity_code, tgl_awal, tgl_akhir):
        return self._next('get_transaksi', {'activity_code': activity_code,
                                            'tgl_awal': tgl_awal, 'tgl_akhir': tgl_akhir})

    async def get_dokumen(self, nomor_dokumen):
        return self._next('get_dokumen', {'nomor_dokumen': nomor_dokumen})

    async def cleansing(self, npwp):
        return self._next('cleansing', {'npwp': npwp})

    async def registrasi_final(self):
        return self._next('registrasi_final')


@pytest.fixture
def fake_insw():
    return FakeINSWClient()


@pytest.fixture
def transport_error():
    return INSWIntegrationError("INSW API request timeout after 30s")


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def seeded(session_factory):
    """Item type default, dua company aktif, satu inactive, dan user per role"""
    async with session_factory() as session:
        await ItemTypeService(session).seed_defaults()

        session.add_all([
            Company(code=COMPANY_CODE, name='PT Kawasan Satu', status='ACTIVE'),
            Company(code=OTHER_COMPANY_CODE, name='PT Kawasan Dua', status='ACTIVE'),
            Company(code=3003, name='PT Tutup', status='INACTIVE'),
        ])

        users = {}
        for username, role, company_code in (
            ('admin', 'admin', COMPANY_CODE),
            ('operator', 'operator', COMPANY_CODE),
            ('viewer', 'viewer', COMPANY_CODE),
            ('wms', 'wms', COMPANY_CODE),
            ('other', 'operator', OTHER_COMPANY_CODE),
            ('closed', 'operator', 3003),
            ('nocompany', 'operator', None),
        ):
            user = User(username=username, email=f"{username}@example.com", full_name=username.title(),
                        role=role, company_code=company_code, is_active=True)
            user.set_password('password123')
            session.add(user)
            users[username] = user

        await session.commit()
        return users


@pytest.fixture
async def db_session(session_factory, seeded):
    async with session_factory() as session:
        yield session


@pytest.fixture
def registry(db_session, fake_insw):
    return create_service_registry(db_session, registry_config(), current_user='operator',
                                   insw_client=fake_insw)


@pytest.fixture
def tokens(seeded):
    auth = AuthService(None, settings.SECRET_KEY, settings.ALGORITHM)
    return {username: auth._generate_access_token(user) for username, user in seeded.items()}


@pytest.fixture
def auth_headers(tokens):
    def headers(username='admin'):
        return {'Authorization': f"Bearer {tokens[username]}"}
    return headers


@pytest.fixture
async def client(session_factory, seeded, fake_insw):
    app = create_app()

    async def override_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_insw_client] = lambda: fake_insw

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client


# ==================== PAYLOAD BUILDERS ====================

def goods_item(item_code='RM-001', qty='100', item_type='ROH', uom='KG', **extra):
    item = {
        'item_type': item_type,
        'item_code': item_code,
        'item_name': f"Material {item_code}",
        'uom': uom,
        'qty': str(qty),
        'currency': 'USD',
        'amount': '1500.00',
    }
    item.update(extra)
    return item


def incoming_payload(wms_id='IN-001', incoming_date=date(2025, 1, 10), items=None):
    return {
        'wms_id': wms_id,
        'owner': COMPANY_CODE,
        'customs_document_type': 'BC23',
        'ppkek_number': 'PPKEK-0001',
        'customs_registration_date': incoming_date.isoformat(),
        'incoming_evidence_number': f"BPB/{wms_id}",
        'incoming_date': incoming_date.isoformat(),
        'invoice_number': f"INV/{wms_id}",
        'invoice_date': incoming_date.isoformat(),
        'shipper_name': 'Shipper Co',
        'items': items or [goods_item()],
    }


def outgoing_payload(wms_id='OUT-001', outgoing_date=date(2025, 1, 20), items=None):
    return {
        'wms_id': wms_id,
        'owner': COMPANY_CODE,
        'customs_document_type': 'BC30',
        'ppkek_number': 'PPKEK-0002',
        'customs_registration_date': outgoing_date.isoformat(),
        'outgoing_evidence_number': f"BPK/{wms_id}",
        'outgoing_date': outgoing_date.isoformat(),
        'invoice_number': f"INV/{wms_id}",
        'invoice_date': outgoing_date.isoformat(),
        'recipient_name': 'Buyer Co',
        'items': items or [goods_item(qty='30')],
    }


def balance_row(item_code='RM-001', qty='50', balance_date=date(2025, 1, 1), item_type='ROH', uom='KG'):
    return {
        'item_code': item_code,
        'item_name': f"Material {item_code}",
        'item_type': item_type,
        'uom': uom,
        'qty': str(qty),
        'balance_date': balance_date.isoformat(),
    }


def opname_payload(wms_id='SO-001', document_date=date(2025, 1, 31), items=None):
    return {
        'wms_id': wms_id,
        'owner': COMPANY_CODE,
        'document_date': document_date.isoformat(),
        'items': items or [
            {'item_code': 'RM-001', 'item_type': 'ROH', 'uom': 'KG', 'physical_qty': '118'},
        ],
    }


def dec(value) -> Decimal:
    return Decimal(str(value))


def adjustment_payload(wms_id='ADJ-001', transaction_date=date(2025, 1, 25), items=None):
    return {
        'wms_id': wms_id,
        'wms_doc_type': 'DAMAGE',
        'internal_evidence_number': f"ADJ/{wms_id}",
        'transaction_date': transaction_date.isoformat(),
        'items': items or [
            {'adjustment_type': 'LOSS', 'item_type': 'ROH', 'item_code': 'RM-001',
             'item_name': 'Material RM-001', 'uom': 'KG', 'qty': '4', 'reason': 'Karung sobek'},
        ],
    }
