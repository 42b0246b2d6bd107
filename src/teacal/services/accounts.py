"""Registration and login against whichever store is active."""

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..errors import DuplicateError, RemoteError, RemoteUnavailableError, TeaCalError
from ..models.sync import StoreSource, SyncResult
from ..models.user_profile import UserProfile
from .data_sync import DataSyncService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "invalid username or password"


class AccountService:
    def __init__(self, sync: DataSyncService):
        self.sync = sync

    async def register(self, username: str, password: str) -> SyncResult[UserProfile]:
        """Create an account; the profile is mirrored locally either way."""
        username = (username or "").strip()
        if not username:
            return SyncResult.fail("username is required")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            return SyncResult.fail(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        profile = UserProfile(username=username, password_hash=generate_password_hash(password))
        remote = self.sync.remote

        try:
            if remote is None:
                await self.sync.users.create(profile)
                return SyncResult.ok(profile)

            created = await remote.create_user(profile)
            created.password_hash = created.password_hash or profile.password_hash
            await self.sync.users.upsert(created)
        except DuplicateError:
            return SyncResult.fail("username already exists", StoreSource.REMOTE)
        except RemoteError as e:
            # No queueing here; an account must exist remotely before use
            logger.error(f"Registration of {username} failed: {e}")
            return SyncResult.fail(str(e), StoreSource.REMOTE)
        except (TeaCalError, ValueError) as e:
            return SyncResult.fail(str(e))

        logger.info(f"Registered user {username}")
        return SyncResult.ok(created, StoreSource.REMOTE)

    async def authenticate(self, username: str, password: str) -> SyncResult[UserProfile]:
        """Check credentials against the remote, or the local copy when it is down."""
        profile = None
        source = StoreSource.LOCAL
        try:
            if self.sync.remote is not None:
                try:
                    profile = await self.sync.remote.get_user_by_username(username)
                    source = StoreSource.REMOTE
                except RemoteUnavailableError as e:
                    logger.warning(f"Remote login lookup failed, trying local store: {e}")
            if profile is None:
                profile = await self.sync.users.get_by_username(username)
                source = StoreSource.LOCAL
        except TeaCalError as e:
            return SyncResult.fail(str(e), source)

        if (
            profile is None
            or not profile.password_hash
            or not check_password_hash(profile.password_hash, password or "")
        ):
            return SyncResult.fail(INVALID_CREDENTIALS, source)
        return SyncResult.ok(profile, source)
