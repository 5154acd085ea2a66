# db.py - SQLAlchemy engine, session and the application store
import logging
from datetime import datetime
from typing import Any, Dict, Optional
from sqlalchemy import create_engine, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from models import Application, ApplicationCounter, Base

logger = logging.getLogger("btr-backend")

ID_PREFIX = "BTR"

# unique column -> field name in the request body
UNIQUE_FIELDS = (
    ("tc_no", "tcNo"),
    ("email", "email"),
    ("application_id", "applicationId"),
)


def duplicate_field(exc: IntegrityError) -> Optional[str]:
    """Return the body field whose unique index rejected the insert, if any.

    PostgreSQL drivers expose the violated constraint name on ``orig.diag``
    (e.g. ``btr_applications_tc_no_key``); SQLite only reports it in the
    message (``UNIQUE constraint failed: btr_applications.tc_no``).
    """
    orig = exc.orig
    diag = getattr(orig, "diag", None)
    target = getattr(diag, "constraint_name", None)
    if not target:
        message = str(orig)
        if "UNIQUE" not in message:
            return None
        target = message
    if Application.__tablename__ not in target:
        return None
    for column, field in UNIQUE_FIELDS:
        if column in target:
            return field
    return None


def next_application_id(sess: Session, year: int) -> str:
    """Allocate the next ``BTR-<year>-NNNN`` id inside the caller's transaction."""
    name = f"{ID_PREFIX}-{year}"
    counters = ApplicationCounter.__table__
    bump = (
        update(counters)
        .where(counters.c.name == name)
        .values(value=counters.c.value + 1)
        .returning(counters.c.value)
    )
    value = sess.execute(bump).scalar_one_or_none()
    if value is None:
        try:
            with sess.begin_nested():
                sess.add(ApplicationCounter(name=name, value=1))
            value = 1
        except IntegrityError:
            # another transaction created the row first
            value = sess.execute(bump).scalar_one()
    return f"{name}-{value:04d}"


class ApplicationStore:
    """Persistence handle for applications; connect on startup, close on shutdown."""

    def __init__(self, database_url: Optional[str], academic_year: str = "2025-2026",
                 semester: str = "I. Dönem", **engine_options):
        self.database_url = database_url
        self.academic_year = academic_year
        self.semester = semester
        self.engine_options = engine_options
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def connected(self) -> bool:
        return self.engine is not None

    def connect(self):
        if not self.database_url:
            raise RuntimeError("Set DATABASE_URL in .env")
        options = dict(self.engine_options)
        if self.database_url.startswith("sqlite"):
            options.setdefault("connect_args", {"check_same_thread": False})
        else:
            options.setdefault("pool_pre_ping", True)
        engine = create_engine(self.database_url, echo=False, future=True, **options)
        try:
            Base.metadata.create_all(bind=engine)
        except Exception:
            engine.dispose()
            raise
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False,
                                             expire_on_commit=False, future=True)
        logger.info("Connected to database %s", engine.url.render_as_string(hide_password=True))

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connection pool closed")
        self.engine = None
        self._session_factory = None

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database not initialized")
        return self._session_factory()

    def create_application(self, data: Dict[str, Any], now: Optional[datetime] = None) -> str:
        """Insert one application and return its generated id.

        ``data`` holds column values from the validated request body. Store
        errors (IntegrityError for duplicates included) propagate unchanged.
        """
        now = now or datetime.now().astimezone()
        with self.session() as sess, sess.begin():
            application_id = next_application_id(sess, now.year)
            sess.add(Application(
                **data,
                application_id=application_id,
                submission_date=now,
                academic_year=self.academic_year,
                semester=self.semester,
            ))
        return application_id

    def get_application(self, application_id: str) -> Optional[Application]:
        with self.session() as sess:
            stmt = select(Application).where(Application.application_id == application_id)
            return sess.execute(stmt).scalars().first()

    def health_check(self) -> bool:
        if not self.connected:
            return False
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed: %s", e)
            return False
