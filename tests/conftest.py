import itertools

import pytest

from payrecon import create_app
from payrecon.clients import Clients
from payrecon.errors import NotFoundError
from payrecon.extensions import db
from payrecon.model import Receipt, ReceiptStatus
from payrecon.services.orders import ExternalOrder, upsert_order
from payrecon.services.text import fingerprint

SCENARIO_TEXT = (
    "Transferencia exitosa. Importe: $ 50.500,00. "
    "CBU 0000000310000000000000 Fecha 12/03/2025"
)


class FakeOrderSource:
    def __init__(self):
        self.orders = {}
        self.by_id = {}
        self.calls = []

    def add(self, number, total, order_id=None, **customer):
        ext = ExternalOrder(number=str(number), total=total, **customer)
        self.orders[str(number)] = ext
        if order_id is not None:
            self.by_id[str(order_id)] = ext
        return ext

    def fetch_order(self, order_number):
        self.calls.append(order_number)
        if str(order_number) not in self.orders:
            raise NotFoundError("order not found on the store", {"order_number": order_number})
        return self.orders[str(order_number)]

    def fetch_order_by_id(self, order_id):
        if str(order_id) not in self.by_id:
            raise NotFoundError("order not found on the store", {"order_id": order_id})
        return self.by_id[str(order_id)]


class FakeOcr:
    """Treats the uploaded bytes as the text on the image."""
    error = None

    def extract_text(self, image_bytes):
        if self.error:
            raise self.error
        return image_bytes.decode("utf-8")


class FakeStorage:
    error = None

    def __init__(self):
        self.stored = {}

    def store(self, data, filename=None):
        if self.error:
            raise self.error
        location = f"pending/{len(self.stored) + 1}-{filename or 'receipt'}"
        self.stored[location] = data
        return location

    def public_url(self, location):
        return f"https://files.test/{location}"


class FakeNotifier:
    error = None

    def __init__(self):
        self.sent = []

    def send_template(self, phone, template, variables):
        if self.error:
            raise self.error
        self.sent.append((phone, template, variables))
        return True


@pytest.fixture
def clients():
    return Clients(
        order_source=FakeOrderSource(),
        ocr=FakeOcr(),
        storage=FakeStorage(),
        notifier=FakeNotifier(),
    )


@pytest.fixture
def app(clients, tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "STORAGE_DIR": str(tmp_path),
        "TIENDANUBE_CLIENT_SECRET": "s3cret",
    }, clients=clients)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_order(app):
    def _make(number="100", total=50000, name="Ana", phone="+5491100000000", email=None):
        o = upsert_order(ExternalOrder(
            number=number, total=total,
            customer_name=name, customer_phone=phone, customer_email=email,
        ))
        db.session.commit()
        return o
    return _make


@pytest.fixture
def make_receipt(app):
    seq = itertools.count(1)

    def _make(order_number, amount, status=ReceiptStatus.PENDING):
        text = f"comprobante de transferencia nro {next(seq)} importe {amount}"
        r = Receipt(
            order_number=order_number,
            raw_text=text,
            fingerprint=fingerprint(text),
            detected_amount=amount,
            status=status,
        )
        db.session.add(r)
        db.session.commit()
        return r
    return _make
