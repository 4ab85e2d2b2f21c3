from threading import Lock

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from ecohub.core import config


DATABASE_URL = config.DATABASE_URL

connect_args = {'check_same_thread': False} if DATABASE_URL.startswith('sqlite') else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)


def enable_sqlite_foreign_keys(target_engine) -> None:
    """SQLite ignores foreign keys unless each connection turns them on."""

    @event.listens_for(target_engine, 'connect')
    def _set_foreign_keys(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


if DATABASE_URL.startswith('sqlite'):
    enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_user_schema_checked = False
_enrollment_schema_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_user_schema() -> None:
    """Add profile and gamification columns missing from older users tables."""
    global _user_schema_checked

    if _user_schema_checked:
        return

    with _schema_lock:
        if _user_schema_checked:
            return

        inspector = inspect(engine)

        if 'users' not in inspector.get_table_names():
            _user_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('users')}
        migration_steps = [
            ('avatar_url', 'ALTER TABLE users ADD COLUMN avatar_url VARCHAR'),
            ('bio', 'ALTER TABLE users ADD COLUMN bio TEXT'),
            ('eco_points', 'ALTER TABLE users ADD COLUMN eco_points INTEGER DEFAULT 0'),
            ('carbon_saved_kg', 'ALTER TABLE users ADD COLUMN carbon_saved_kg FLOAT DEFAULT 0'),
            ('trees_planted', 'ALTER TABLE users ADD COLUMN trees_planted INTEGER DEFAULT 0'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_users_role ON users(role)')
            )

        _user_schema_checked = True


def ensure_enrollment_schema() -> None:
    """Guarantee one enrollment per (user, challenge) at the database level."""
    global _enrollment_schema_checked

    if _enrollment_schema_checked:
        return

    with _schema_lock:
        if _enrollment_schema_checked:
            return

        inspector = inspect(engine)
        table_names = inspector.get_table_names()

        with engine.begin() as connection:
            if 'user_challenges' in table_names:
                connection.execute(
                    text(
                        'CREATE UNIQUE INDEX IF NOT EXISTS uq_user_challenges_user_challenge '
                        'ON user_challenges(user_id, challenge_id)'
                    )
                )
            if 'products' in table_names:
                connection.execute(
                    text('CREATE INDEX IF NOT EXISTS idx_products_status ON products(status)')
                )

        _enrollment_schema_checked = True
