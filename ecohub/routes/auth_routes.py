import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecohub.auth import jwt_handler
from ecohub.auth.dependencies import get_current_user
from ecohub.auth.password import hash_password, verify_password
from ecohub.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from ecohub.database import get_db
from ecohub.models.order import Order
from ecohub.models.product import APPROVED, Product
from ecohub.models.user import User

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid credentials'


class RegisterRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None
    firstName: str | None = None
    lastName: str | None = None
    birthMonth: int | None = None
    birthDay: int | None = None
    birthYear: int | None = None
    gender: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UserSummaryResponse(BaseModel):
    id: int
    username: str
    email: str
    role: str
    avatar_url: str | None = None
    bio: str | None = None
    eco_points: int | None = 0

    class Config:
        from_attributes = True


class UserProfileResponse(BaseModel):
    id: int
    username: str
    avatar_url: str | None = None
    bio: str | None = None
    eco_points: int | None = 0
    carbon_saved_kg: float | None = 0.0
    trees_planted: int | None = 0
    role: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class StatsResponse(BaseModel):
    users: int
    products: int
    orders: int
    totalCO2Saved: float


def compose_birth_date(year: int, month: int, day: int) -> date:
    try:
        return date.fromisoformat(f'{year:04d}-{month:02d}-{day:02d}')
    except ValueError as exc:
        raise ValidationError('Invalid birth date') from exc


def find_registered_user(db: Session, email: str, username: str) -> int | None:
    row = db.query(User.id).filter(or_(User.email == email, User.username == username)).first()
    return row.id if row else None


def collect_stats(db: Session, product_status: str | None = None) -> dict:
    product_query = db.query(func.count(Product.id))
    if product_status is not None:
        product_query = product_query.filter(Product.status == product_status)

    return {
        'users': db.query(func.count(User.id)).scalar() or 0,
        'products': product_query.scalar() or 0,
        'orders': db.query(func.count(Order.id)).scalar() or 0,
        'totalCO2Saved': db.query(func.coalesce(func.sum(User.carbon_saved_kg), 0)).scalar() or 0,
    }


@router.post('/register', status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    required = [
        data.username, data.email, data.password, data.firstName, data.lastName,
        data.birthMonth, data.birthDay, data.birthYear, data.gender,
    ]
    if not all(required):
        raise ValidationError('All fields are required')

    birth_date = compose_birth_date(data.birthYear, data.birthMonth, data.birthDay)

    if find_registered_user(db, data.email, data.username):
        raise ConflictError('User already exists')

    user = User(
        username=data.username,
        email=data.email,
        password=hash_password(data.password),
        first_name=data.firstName,
        last_name=data.lastName,
        birth_date=birth_date,
        gender=data.gender,
        role='user',
    )

    try:
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError('User already exists') from exc
    db.refresh(user)

    logger.info('Registered user %s (id=%s)', user.username, user.id)
    return {'message': 'User registered successfully', 'userId': user.id}


@router.post('/login')
def login(data: LoginRequest, db: Session = Depends(get_db)):
    if not data.email or not data.password:
        raise ValidationError('Email and password are required')

    user = db.query(User).filter(User.email == data.email).first()
    stored_hash = user.password if user is not None else None
    if not verify_password(data.password, stored_hash) or user is None:
        raise AuthError(INVALID_CREDENTIALS)

    token = jwt_handler.create_access_token(user.id, user.email, user.role)
    return {
        'message': 'Login successful',
        'token': token,
        'user': {'id': user.id, 'username': user.username, 'email': user.email, 'role': user.role},
    }


@router.get('/users', response_model=list[UserSummaryResponse])
def list_users(search: str | None = Query(None), db: Session = Depends(get_db)):
    query = db.query(User)
    if search:
        query = query.filter(User.username.ilike(f'%{search}%'))
    return query.order_by(User.id.asc()).all()


@router.get('/user/{user_id}', response_model=UserProfileResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError('User not found')
    return user


@router.get('/stats', response_model=StatsResponse)
def public_stats(db: Session = Depends(get_db)):
    return collect_stats(db, product_status=APPROVED)


@router.get('/me')
def me(current_user: User = Depends(get_current_user)):
    return {'id': current_user.id, 'email': current_user.email, 'role': current_user.role}
