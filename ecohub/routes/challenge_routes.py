import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecohub.auth.dependencies import get_current_user
from ecohub.auth.policies import is_owner_or_admin, require_admin
from ecohub.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ecohub.database import get_db
from ecohub.models.challenge import COMPLETED, Challenge, UserChallenge
from ecohub.models.user import User

router = APIRouter(tags=['challenges'])

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = 'Week'
DEFAULT_DURATION_DAYS = 7
MIN_PROGRESS = 0
MAX_PROGRESS = 100


class ChallengeRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    points_reward: int | None = None
    co2_saving_kg: float | None = None
    duration_days: int | None = None
    image_url: str | None = None
    category: str | None = None


class ChallengeResponse(BaseModel):
    id: int
    title: str
    description: str | None = None
    points_reward: int
    co2_saving_kg: float | None = None
    duration_days: int
    image_url: str | None = None
    category: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class ProgressRequest(BaseModel):
    progress: int | None = None


class EnrollmentResponse(BaseModel):
    id: int
    user_id: int
    challenge_id: int
    progress: int
    status: str
    joined_at: datetime | None = None
    completed_at: datetime | None = None
    title: str
    description: str | None = None
    points_reward: int
    co2_saving_kg: float | None = None
    duration_days: int
    category: str | None = None


def find_enrollment(db: Session, user_id: int, challenge_id: int) -> int | None:
    row = db.query(UserChallenge.id).filter(
        UserChallenge.user_id == user_id,
        UserChallenge.challenge_id == challenge_id,
    ).first()
    return row.id if row else None


def get_owned_enrollment(db: Session, user_challenge_id: int, current_user: User) -> UserChallenge:
    enrollment = db.get(UserChallenge, user_challenge_id)
    if enrollment is None:
        raise NotFoundError('User challenge not found')
    if not is_owner_or_admin(current_user, enrollment.user_id):
        raise ForbiddenError('Access denied')
    return enrollment


@router.get('', response_model=list[ChallengeResponse])
def list_challenges(db: Session = Depends(get_db)):
    return db.query(Challenge).order_by(Challenge.created_at.desc(), Challenge.id.desc()).all()


@router.get('/user/me', response_model=list[EnrollmentResponse])
def list_my_challenges(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    rows = db.query(UserChallenge, Challenge).join(
        Challenge, UserChallenge.challenge_id == Challenge.id,
    ).filter(
        UserChallenge.user_id == current_user.id,
    ).order_by(UserChallenge.joined_at.desc(), UserChallenge.id.desc()).all()

    return [
        EnrollmentResponse(
            id=enrollment.id,
            user_id=enrollment.user_id,
            challenge_id=enrollment.challenge_id,
            progress=enrollment.progress,
            status=enrollment.status,
            joined_at=enrollment.joined_at,
            completed_at=enrollment.completed_at,
            title=challenge.title,
            description=challenge.description,
            points_reward=challenge.points_reward,
            co2_saving_kg=challenge.co2_saving_kg,
            duration_days=challenge.duration_days,
            category=challenge.category,
        )
        for enrollment, challenge in rows
    ]


@router.get('/{challenge_id}', response_model=ChallengeResponse)
def get_challenge(challenge_id: int, db: Session = Depends(get_db)):
    challenge = db.get(Challenge, challenge_id)
    if challenge is None:
        raise NotFoundError('Challenge not found')
    return challenge


@router.post('', status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_challenge(data: ChallengeRequest, db: Session = Depends(get_db)):
    if not data.title or not data.points_reward or not data.duration_days:
        raise ValidationError('Title, points_reward, and duration_days are required')

    challenge = Challenge(
        title=data.title,
        description=data.description or '',
        points_reward=data.points_reward,
        co2_saving_kg=data.co2_saving_kg or 0.0,
        duration_days=data.duration_days,
        image_url=data.image_url or '',
        category=data.category or DEFAULT_CATEGORY,
    )
    db.add(challenge)
    db.commit()
    db.refresh(challenge)

    logger.info('Created challenge id=%s', challenge.id)
    return {'message': 'Challenge created', 'challengeId': challenge.id}


@router.put('/{challenge_id}', dependencies=[Depends(require_admin)])
def update_challenge(challenge_id: int, data: ChallengeRequest, db: Session = Depends(get_db)):
    challenge = db.get(Challenge, challenge_id)
    if challenge is None:
        raise NotFoundError('Challenge not found')

    if data.title:
        challenge.title = data.title
    challenge.description = data.description or ''
    challenge.points_reward = data.points_reward or 0
    challenge.co2_saving_kg = data.co2_saving_kg or 0.0
    challenge.duration_days = data.duration_days or DEFAULT_DURATION_DAYS
    challenge.image_url = data.image_url or ''
    challenge.category = data.category or DEFAULT_CATEGORY
    db.commit()

    return {'message': 'Challenge updated'}


@router.delete('/{challenge_id}', dependencies=[Depends(require_admin)])
def delete_challenge(challenge_id: int, db: Session = Depends(get_db)):
    challenge = db.get(Challenge, challenge_id)
    if challenge is None:
        raise NotFoundError('Challenge not found')

    db.query(UserChallenge).filter(UserChallenge.challenge_id == challenge_id).delete(synchronize_session=False)
    db.delete(challenge)
    db.commit()

    logger.info('Deleted challenge id=%s', challenge_id)
    return {'message': 'Challenge deleted'}


@router.post('/join/{challenge_id}', status_code=status.HTTP_201_CREATED)
def join_challenge(
    challenge_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if db.get(Challenge, challenge_id) is None:
        raise NotFoundError('Challenge not found')

    if find_enrollment(db, current_user.id, challenge_id):
        raise ConflictError('Already joined this challenge')

    enrollment = UserChallenge(user_id=current_user.id, challenge_id=challenge_id)
    try:
        db.add(enrollment)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError('Already joined this challenge') from exc
    db.refresh(enrollment)

    return {'message': 'Joined challenge', 'userChallengeId': enrollment.id}


@router.put('/progress/{user_challenge_id}')
def update_progress(
    user_challenge_id: int,
    data: ProgressRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if data.progress is None or not MIN_PROGRESS <= data.progress <= MAX_PROGRESS:
        raise ValidationError('Progress must be between 0 and 100')

    enrollment = get_owned_enrollment(db, user_challenge_id, current_user)
    enrollment.progress = data.progress
    db.commit()

    return {'message': 'Progress updated'}


@router.put('/complete/{user_challenge_id}')
def complete_challenge(
    user_challenge_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    enrollment = get_owned_enrollment(db, user_challenge_id, current_user)
    if enrollment.status == COMPLETED:
        raise ConflictError('Challenge already completed')

    enrollment.status = COMPLETED
    enrollment.completed_at = func.now()
    db.commit()

    logger.info('User id=%s completed enrollment id=%s', enrollment.user_id, enrollment.id)
    return {'message': 'Challenge completed'}
