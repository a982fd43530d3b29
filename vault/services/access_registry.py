"""Access registry: user profiles, quotas and suspension."""

import sqlite3
from typing import Optional

from common.logging_config import get_logger
from vault.config import MIN_NAME_LENGTH
from vault.exceptions import (
    AlreadyRegisteredError,
    AlreadySuspendedError,
    InvalidParameterError,
    NameTakenError,
    NameTooShortError,
    NotRegisteredError,
    NotSuspendedError,
    QuotaExceededError,
    SuspendedError,
    UserNotFoundError,
)
from vault.repositories.state_repository import StateRepository
from vault.repositories.user_repository import UserRepository
from vault.services.base import Registry, require_identity, require_int
from vault.types import UserProfile
from vault.utils import utc_now

logger = get_logger(__name__)


class AccessRegistry(Registry):
    def __init__(self, admin: str, db_path: Optional[str] = None):
        super().__init__(admin, db_path)
        self.user_repo = UserRepository()
        self.state_repo = StateRepository()

    def register(self, identity: str, name: str, conn: Optional[sqlite3.Connection] = None) -> UserProfile:
        """
        Create the profile for an identity.

        Raises:
            NameTooShortError: name has fewer than three characters
            AlreadyRegisteredError: identity already has a profile
            NameTakenError: another identity uses the same name
        """
        require_identity(identity)
        name = name.strip() if isinstance(name, str) else ""
        if len(name) < MIN_NAME_LENGTH:
            raise NameTooShortError(f"Name must be at least {MIN_NAME_LENGTH} characters")

        with self._unit_of_work(conn) as conn:
            if self.user_repo.get_by_identity(identity, conn) is not None:
                logger.warning(f"Registration failed: identity already registered [identity={identity}]")
                raise AlreadyRegisteredError(f"Identity '{identity}' is already registered")

            if self.user_repo.get_by_name(name, conn) is not None:
                logger.warning(f"Registration failed: name '{name}' already taken")
                raise NameTakenError(f"Name '{name}' is already taken")

            quota = self.state_repo.get_settings(conn).default_quota
            try:
                profile = self.user_repo.create_user(identity, name, quota, utc_now(), conn)
            except sqlite3.IntegrityError:
                logger.warning(f"Registration failed due to integrity error: name '{name}'")
                raise NameTakenError(f"Name '{name}' is already taken")

        logger.info(f"Registered user {name} [identity={identity}] [quota={quota}]")
        return profile

    def get_profile(self, identity: str, conn: Optional[sqlite3.Connection] = None) -> UserProfile:
        with self._unit_of_work(conn) as conn:
            profile = self.user_repo.get_by_identity(identity, conn)
        if profile is None:
            raise UserNotFoundError(f"No profile for identity '{identity}'")
        return profile

    def is_eligible(self, identity: str, conn: Optional[sqlite3.Connection] = None) -> bool:
        """True iff the identity is registered and not suspended."""
        with self._unit_of_work(conn) as conn:
            profile = self.user_repo.get_by_identity(identity, conn)
        return profile is not None and not profile.suspended

    def charge_quota(self, identity: str, size: int, conn: Optional[sqlite3.Connection] = None) -> UserProfile:
        """
        Add size bytes to the identity's storage usage.

        Usage is left unchanged when the charge is rejected.
        """
        require_int(size, "size", minimum=1)

        with self._unit_of_work(conn) as conn:
            profile = self.user_repo.get_by_identity(identity, conn)
            if profile is None:
                raise NotRegisteredError(f"Identity '{identity}' is not registered")
            if profile.suspended:
                raise SuspendedError(f"Identity '{identity}' is suspended")

            new_used = profile.storage_used + size
            if new_used > profile.storage_quota:
                logger.warning(
                    f"Quota exceeded [identity={identity}] used={profile.storage_used} "
                    f"request={size} quota={profile.storage_quota}"
                )
                raise QuotaExceededError(
                    f"Upload of {size} bytes exceeds quota "
                    f"({profile.storage_used}/{profile.storage_quota} bytes used)"
                )

            self.user_repo.update_storage_used(identity, new_used, conn)

        logger.debug(f"Charged {size} bytes [identity={identity}] used={new_used}")
        return UserProfile(
            identity=profile.identity,
            name=profile.name,
            registered_at=profile.registered_at,
            last_activity_at=profile.last_activity_at,
            storage_used=new_used,
            storage_quota=profile.storage_quota,
            suspended=profile.suspended,
        )

    def touch(self, identity: str, conn: Optional[sqlite3.Connection] = None) -> None:
        """Record activity; unknown identities are ignored."""
        with self._unit_of_work(conn) as conn:
            self.user_repo.touch(identity, utc_now(), conn)

    def set_default_quota(self, caller: str, quota: int, conn: Optional[sqlite3.Connection] = None) -> None:
        self._require_admin(caller, "set the default quota")
        require_int(quota, "default_quota", minimum=1)

        with self._unit_of_work(conn) as conn:
            settings = self.state_repo.get_settings(conn)
            if quota > settings.max_quota:
                raise InvalidParameterError(
                    f"Default quota {quota} exceeds max quota {settings.max_quota}"
                )
            self.state_repo.update_setting("default_quota", quota, conn)

        logger.info(f"Default quota set to {quota}")

    def set_max_quota(self, caller: str, quota: int, conn: Optional[sqlite3.Connection] = None) -> None:
        self._require_admin(caller, "set the max quota")
        require_int(quota, "max_quota", minimum=1)

        with self._unit_of_work(conn) as conn:
            settings = self.state_repo.get_settings(conn)
            if quota < settings.default_quota:
                raise InvalidParameterError(
                    f"Max quota {quota} is below default quota {settings.default_quota}"
                )
            self.state_repo.update_setting("max_quota", quota, conn)

        logger.info(f"Max quota set to {quota}")

    def set_user_quota(
        self,
        caller: str,
        identity: str,
        quota: int,
        conn: Optional[sqlite3.Connection] = None,
    ) -> UserProfile:
        self._require_admin(caller, "set a user quota")
        require_int(quota, "quota", minimum=1)

        with self._unit_of_work(conn) as conn:
            profile = self.user_repo.get_by_identity(identity, conn)
            if profile is None:
                raise NotRegisteredError(f"Identity '{identity}' is not registered")

            max_quota = self.state_repo.get_settings(conn).max_quota
            if quota > max_quota:
                raise InvalidParameterError(f"Quota {quota} exceeds max quota {max_quota}")
            if quota < profile.storage_used:
                raise InvalidParameterError(
                    f"Quota {quota} is below current usage {profile.storage_used}"
                )

            self.user_repo.update_quota(identity, quota, conn)
            profile = self.user_repo.get_by_identity(identity, conn)

        logger.info(f"Quota for [identity={identity}] set to {quota}")
        return profile

    def suspend(self, caller: str, identity: str, conn: Optional[sqlite3.Connection] = None) -> None:
        self._require_admin(caller, "suspend users")
        with self._unit_of_work(conn) as conn:
            profile = self.user_repo.get_by_identity(identity, conn)
            if profile is None:
                raise NotRegisteredError(f"Identity '{identity}' is not registered")
            if profile.suspended:
                raise AlreadySuspendedError(f"Identity '{identity}' is already suspended")
            self.user_repo.set_suspended(identity, True, conn)

        logger.info(f"Suspended [identity={identity}]")

    def unsuspend(self, caller: str, identity: str, conn: Optional[sqlite3.Connection] = None) -> None:
        self._require_admin(caller, "unsuspend users")
        with self._unit_of_work(conn) as conn:
            profile = self.user_repo.get_by_identity(identity, conn)
            if profile is None:
                raise NotRegisteredError(f"Identity '{identity}' is not registered")
            if not profile.suspended:
                raise NotSuspendedError(f"Identity '{identity}' is not suspended")
            self.user_repo.set_suspended(identity, False, conn)

        logger.info(f"Unsuspended [identity={identity}]")
