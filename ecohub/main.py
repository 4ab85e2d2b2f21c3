import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from ecohub.core import config
from ecohub.core.errors import setup_error_handlers
from ecohub.database import Base, engine, ensure_enrollment_schema, ensure_user_schema
from ecohub.models import challenge, order, product, user  # noqa: F401
from ecohub.routes import (
    admin_routes,
    auth_routes,
    challenge_routes,
    payment_routes,
    product_routes,
    seller_routes,
)

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

app = FastAPI(title='Eco Hub API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

setup_error_handlers(app)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine)
        ensure_user_schema()
        ensure_enrollment_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.get('/')
def root():
    return {'status': 'Eco Hub API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(admin_routes.router, prefix='/admin')
app.include_router(product_routes.router, prefix='/products')
app.include_router(challenge_routes.router, prefix='/challenges')
app.include_router(seller_routes.router, prefix='/sellers')
app.include_router(payment_routes.router, prefix='/payment')
