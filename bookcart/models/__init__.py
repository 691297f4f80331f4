from bookcart.models.book import Book
from bookcart.models.cart import CartItem
from bookcart.models.shipping_rate import ShippingRate
from bookcart.models.local_slot import LocalSlot

# add ALL models here
