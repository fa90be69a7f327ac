# khata/models/__init__.py
from khata.models.customer_models import Customer
from khata.models.product_models import Product
from khata.models.order_models import Order, OrderStatus
from khata.models.quotation_models import Quotation, QuotationStatus
from khata.models.collection_models import Collection, Transaction, TransactionType, CustomerCollectionPreference
from khata.models.bill_models import Bill
from khata.models.supplier_models import Supplier
from khata.models.profile_models import Profile
from khata.models.activity_models import UserActivity
