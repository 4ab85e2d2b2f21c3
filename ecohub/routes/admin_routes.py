import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ecohub.auth.dependencies import get_current_user
from ecohub.auth.policies import require_admin
from ecohub.core.errors import NotFoundError, ValidationError
from ecohub.database import get_db
from ecohub.models.challenge import UserChallenge
from ecohub.models.order import Order
from ecohub.models.product import APPROVED, PENDING, REJECTED, Product
from ecohub.models.user import ROLES, User
from ecohub.routes.auth_routes import StatsResponse, collect_stats
from ecohub.routes.product_routes import ProductResponse

router = APIRouter(
    tags=['admin'],
    dependencies=[Depends(get_current_user), Depends(require_admin)],
)

logger = logging.getLogger(__name__)


class PendingSellerResponse(BaseModel):
    id: int
    username: str
    email: str
    avatar_url: str | None = None

    class Config:
        from_attributes = True


class UpdateRoleRequest(BaseModel):
    role: str | None = None


def transition_product(db: Session, product_id: int, new_status: str) -> bool:
    updated = db.query(Product).filter(
        Product.id == product_id,
        Product.status == PENDING,
    ).update({Product.status: new_status}, synchronize_session=False)
    db.commit()
    return updated > 0


@router.get('/sellers/pending', response_model=list[PendingSellerResponse])
def list_pending_sellers(db: Session = Depends(get_db)):
    return db.query(User).filter(User.role == 'user').order_by(User.id.asc()).all()


@router.post('/sellers/{user_id}/approve')
def approve_seller(user_id: int, db: Session = Depends(get_db)):
    updated = db.query(User).filter(
        User.id == user_id,
        User.role == 'user',
    ).update({User.role: 'seller'}, synchronize_session=False)
    db.commit()

    if not updated:
        raise NotFoundError('Seller not found or already approved')

    logger.info('Approved seller id=%s', user_id)
    return {'message': 'Seller approved'}


@router.get('/products/pending', response_model=list[ProductResponse])
def list_pending_products(db: Session = Depends(get_db)):
    return db.query(Product).filter(Product.status == PENDING).order_by(Product.id.asc()).all()


@router.post('/products/{product_id}/approve')
def approve_product(product_id: int, db: Session = Depends(get_db)):
    if not transition_product(db, product_id, APPROVED):
        raise NotFoundError('Product not found or already approved')

    logger.info('Approved product id=%s', product_id)
    return {'message': 'Product approved'}


@router.post('/products/{product_id}/reject')
def reject_product(product_id: int, db: Session = Depends(get_db)):
    if not transition_product(db, product_id, REJECTED):
        raise NotFoundError('Product not found or already processed')

    logger.info('Rejected product id=%s', product_id)
    return {'message': 'Product rejected'}


# There is no posts table; moderation endpoints exist so the dashboard can call them.
@router.get('/posts/pending')
def list_pending_posts():
    return []


@router.post('/posts/{post_id}/approve')
def approve_post(post_id: int):
    raise NotFoundError('Posts not implemented')


@router.post('/posts/{post_id}/reject')
def reject_post(post_id: int):
    raise NotFoundError('Posts not implemented')


@router.get('/stats', response_model=StatsResponse)
def platform_stats(db: Session = Depends(get_db)):
    return collect_stats(db)


@router.put('/users/{user_id}/role')
def update_user_role(user_id: int, data: UpdateRoleRequest, db: Session = Depends(get_db)):
    if data.role not in ROLES:
        raise ValidationError('Invalid role')

    updated = db.query(User).filter(User.id == user_id).update(
        {User.role: data.role}, synchronize_session=False,
    )
    db.commit()

    if not updated:
        raise NotFoundError('User not found')

    logger.info('Set role of user id=%s to %s', user_id, data.role)
    return {'message': 'User role updated'}


@router.delete('/users/{user_id}')
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError('User not found')

    db.query(UserChallenge).filter(UserChallenge.user_id == user_id).delete(synchronize_session=False)
    db.query(Order).filter(Order.user_id == user_id).update({Order.user_id: None}, synchronize_session=False)
    db.delete(user)
    db.commit()

    logger.info('Deleted user id=%s', user_id)
    return {'message': 'User deleted'}
