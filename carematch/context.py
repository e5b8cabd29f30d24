"""Application context handed to every store helper."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import CONFIG, AppConfig
from .db import KeyValueStore
from .errors import CareMatchError
from .images import FileImageStore
from .schemas import Session, UserType

logger = logging.getLogger(__name__)

IS_LOGGED_IN_KEY = "isLoggedIn"
LOGGED_IN_USER_TYPE_KEY = "loggedInUserType"
LOGGED_IN_EMAIL_KEY = "loggedInEmail"


class AppContext:
    """Owns the key/value store, the image store and the live session.

    Created once at startup with ``AppContext.open`` and torn down with
    ``close``.
    """

    def __init__(self, store: KeyValueStore, images: FileImageStore, config: AppConfig) -> None:
        self._store = store
        self.images = images
        self.config = config
        self.session = Session()
        self.closed = False

    @property
    def store(self) -> KeyValueStore:
        if self.closed:
            raise CareMatchError("Application context is closed.")
        return self._store

    @classmethod
    def open(
        cls,
        config: Optional[AppConfig] = None,
        *,
        database_path: Optional[Path] = None,
        image_dir: Optional[Path] = None,
    ) -> "AppContext":
        config = config or CONFIG
        store = KeyValueStore(database_path or config.resolved_database_path)
        store.initialize()
        images = FileImageStore(image_dir or config.resolved_image_dir)
        context = cls(store, images, config)
        context.session = context.read_session()
        logger.info("Opened store at %s (logged_in=%s)", store.path, context.session.logged_in)
        return context

    def read_session(self) -> Session:
        logged_in = bool(self.store.get(IS_LOGGED_IN_KEY, False))
        if not logged_in:
            return Session()
        raw_type = self.store.get(LOGGED_IN_USER_TYPE_KEY)
        try:
            user_type = UserType(raw_type) if raw_type else None
        except ValueError:
            user_type = None
        return Session(
            logged_in=True,
            user_type=user_type,
            logged_in_email=self.store.get(LOGGED_IN_EMAIL_KEY),
        )

    def write_session(self, session: Session) -> None:
        self.store.set(IS_LOGGED_IN_KEY, session.logged_in)
        if session.logged_in and session.user_type is not None:
            self.store.set(LOGGED_IN_USER_TYPE_KEY, session.user_type.value)
        else:
            self.store.delete(LOGGED_IN_USER_TYPE_KEY)
        if session.logged_in and session.logged_in_email:
            self.store.set(LOGGED_IN_EMAIL_KEY, session.logged_in_email)
        else:
            self.store.delete(LOGGED_IN_EMAIL_KEY)
        self.session = session

    def close(self) -> None:
        """Release the context; later store access raises ``CareMatchError``."""
        if self.closed:
            return
        self.closed = True
        logger.info("Closed store at %s", self._store.path)
