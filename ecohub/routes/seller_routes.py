from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ecohub.auth.dependencies import get_current_user
from ecohub.core.errors import NotFoundError
from ecohub.database import get_db
from ecohub.models.user import User

router = APIRouter(tags=['sellers'])

APPLICATION_RECEIVED = 'Application submitted. Admin will review it soon.'


class SellerProfileResponse(BaseModel):
    id: int
    username: str
    email: str
    bio: str | None = None
    avatar_url: str | None = None
    eco_points: int | None = 0

    class Config:
        from_attributes = True


@router.post('/apply')
def apply_as_seller(current_user: User = Depends(get_current_user)):
    # Acknowledged only; approval happens through the admin pending-sellers queue.
    return {'message': APPLICATION_RECEIVED}


@router.get('/{slug}', response_model=SellerProfileResponse)
def get_seller(slug: str, db: Session = Depends(get_db)):
    seller = db.query(User).filter(User.username == slug).first()
    if seller is None:
        raise NotFoundError('Seller not found')
    return seller
