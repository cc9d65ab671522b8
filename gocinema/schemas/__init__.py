from gocinema.schemas.common import PaginatedResponse, ErrorResponse, ActionResult, DeleteResponse
from gocinema.schemas.user import User, UserCreate, AdminCreate, UserUpdate, AdminUserUpdate, UserWithCounts, Token
from gocinema.schemas.hall import Hall, HallCreate, Seat, SeatCreate, SeatUpdate, SeatBulkCreate, SeatMapSeat
from gocinema.schemas.movie import Movie, MovieCreate, MovieUpdate, MovieDetail, Premiere, PremiereCreate, PremiereUpdate
from gocinema.schemas.screening import Screening, ScreeningCreate, ScreeningUpdate, ScreeningDetail
from gocinema.schemas.ticket import Ticket, TicketCreate, TicketWithUser, ReservationResult
from gocinema.schemas.order import Order, OrderCreate, OrderProductsUpdate, OrderResult
from gocinema.schemas.product import Product, ProductCreate, ProductUpdate
from gocinema.schemas.payment import Payment, PaymentCreate, PaymentResult
from gocinema.schemas.content import Contact, ContactCreate, FAQ, FAQCreate, FAQUpdate
