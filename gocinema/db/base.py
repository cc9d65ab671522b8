
from gocinema.db.session import Base
from gocinema.models.user import User
from gocinema.models.hall import Hall
from gocinema.models.seat import Seat
from gocinema.models.movie import Movie, Premiere
from gocinema.models.screening import Screening
from gocinema.models.product import Product
from gocinema.models.order import Order, OrderItem
from gocinema.models.ticket import Ticket
from gocinema.models.payment import Payment
from gocinema.models.password_reset import PasswordResetToken
from gocinema.models.content import Contact, FAQ
