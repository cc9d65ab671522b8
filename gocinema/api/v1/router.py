from fastapi import APIRouter

# Auth
from gocinema.api.v1.public.auth import router as auth_router
from gocinema.api.v1.public.password_reset import router as password_reset_router

# Public: catalogue and schedule
from gocinema.api.v1.public.movies import router as public_movies_router, premieres_router
from gocinema.api.v1.public.screenings import router as public_screenings_router
from gocinema.api.v1.public.catalog import products_router, faq_router, contacts_router

# Public: booking, checkout, payment
from gocinema.api.v1.public.tickets import router as tickets_router
from gocinema.api.v1.public.orders import router as orders_router
from gocinema.api.v1.public.payments import router as payments_router

# Public: profile and Telegram bot
from gocinema.api.v1.public.me import router as me_router
from gocinema.api.v1.public.telegram import router as telegram_webhook_router

# Admin
from gocinema.api.v1.admin.movies import router as admin_movies_router, premiere_router
from gocinema.api.v1.admin.seats import seats_router, seat_router
from gocinema.api.v1.admin.screenings import router as admin_screenings_router
from gocinema.api.v1.admin.catalog import (
    products_router as admin_products_router,
    faq_router as admin_faq_router,
    contacts_router as admin_contacts_router,
)
from gocinema.api.v1.admin.users import router as admin_users_router
from gocinema.api.v1.admin.tickets import router as admin_tickets_router, scanner_router
from gocinema.api.v1.admin.telegram import router as admin_telegram_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)
api_router.include_router(password_reset_router)

# --- Public: catalogue and schedule ---
api_router.include_router(public_movies_router)
api_router.include_router(premieres_router)
api_router.include_router(public_screenings_router)
api_router.include_router(products_router)
api_router.include_router(faq_router)
api_router.include_router(contacts_router)

# --- Public: booking, checkout, payment ---
api_router.include_router(tickets_router)
api_router.include_router(orders_router)
api_router.include_router(payments_router)

# --- Public: profile and Telegram bot ---
api_router.include_router(me_router)
api_router.include_router(telegram_webhook_router)

# --- Admin ---
api_router.include_router(admin_movies_router)
api_router.include_router(premiere_router)
api_router.include_router(seats_router)
api_router.include_router(seat_router)
api_router.include_router(admin_screenings_router)
api_router.include_router(admin_products_router)
api_router.include_router(admin_faq_router)
api_router.include_router(admin_contacts_router)
api_router.include_router(admin_users_router)
api_router.include_router(admin_tickets_router)
api_router.include_router(scanner_router)
api_router.include_router(admin_telegram_router)
