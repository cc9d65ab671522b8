
from gocinema.models.user import User
from gocinema.models.hall import Hall
from gocinema.models.seat import Seat, SeatType
from gocinema.models.movie import Movie, Premiere
from gocinema.models.screening import Screening
from gocinema.models.product import Product
from gocinema.models.order import Order, OrderItem, OrderStatus
from gocinema.models.ticket import Ticket, TicketStatus, ACTIVE_TICKET_STATUSES
from gocinema.models.payment import Payment, PaymentMethod
from gocinema.models.password_reset import PasswordResetToken
from gocinema.models.content import Contact, FAQ
