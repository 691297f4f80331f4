import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookcart.config import settings
from bookcart.database import create_db_and_tables
from bookcart.routes import books, cart, shipping

logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Bookstore Cart API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(books.router, prefix="/books", tags=["Books"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(shipping.router, prefix="/shipping-rate", tags=["Shipping"])


@app.get("/")
def root():
    return {"message": "Bookstore Cart API running"}
