from .client import Client
from .payment import Payment
from .payment_method import PaymentMethod
from .receipt import Receipt
from .service import Service
