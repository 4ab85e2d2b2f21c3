import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ecohub.auth.policies import require_seller
from ecohub.core.errors import NotFoundError, ValidationError
from ecohub.database import get_db
from ecohub.models.product import APPROVED, PENDING, Product

router = APIRouter(tags=['products'])

logger = logging.getLogger(__name__)

DEFAULT_STOCK = 0
DEFAULT_ECO_RATING = 5
DEFAULT_CO2_REDUCTION_KG = 0.0


class ProductRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    price: float | None = None
    category_id: int | None = None
    stock: int | None = None
    image_url: str | None = None
    eco_rating: int | None = None
    co2_reduction_kg: float | None = None


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: float
    category_id: int | None = None
    stock: int | None = None
    image_url: str | None = None
    eco_rating: int | None = None
    co2_reduction_kg: float | None = None
    status: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


def product_fields(data: ProductRequest) -> dict:
    """Optional product columns with their defaults applied."""
    return {
        'description': data.description or '',
        'category_id': data.category_id or None,
        'stock': data.stock or DEFAULT_STOCK,
        'image_url': data.image_url or '',
        'eco_rating': data.eco_rating or DEFAULT_ECO_RATING,
        'co2_reduction_kg': data.co2_reduction_kg or DEFAULT_CO2_REDUCTION_KG,
    }


@router.get('', response_model=list[ProductResponse])
def list_products(db: Session = Depends(get_db)):
    return db.query(Product).filter(Product.status == APPROVED).order_by(Product.id.asc()).all()


@router.get('/{product_id}', response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError('Product not found')
    return product


@router.post('', status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_seller)])
def create_product(data: ProductRequest, db: Session = Depends(get_db)):
    if not data.name or not data.price:
        raise ValidationError('Name and price are required')

    product = Product(name=data.name, price=data.price, status=PENDING, **product_fields(data))
    db.add(product)
    db.commit()
    db.refresh(product)

    logger.info('Created product id=%s awaiting approval', product.id)
    return {'message': 'Product created', 'productId': product.id}


@router.put('/{product_id}', dependencies=[Depends(require_seller)])
def update_product(product_id: int, data: ProductRequest, db: Session = Depends(get_db)):
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError('Product not found')

    if data.name:
        product.name = data.name
    if data.price is not None:
        product.price = data.price
    for column, value in product_fields(data).items():
        setattr(product, column, value)
    db.commit()

    return {'message': 'Product updated'}


@router.delete('/{product_id}', dependencies=[Depends(require_seller)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError('Product not found')

    db.delete(product)
    db.commit()

    logger.info('Deleted product id=%s', product_id)
    return {'message': 'Product deleted'}
