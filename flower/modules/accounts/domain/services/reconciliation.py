# 📄 File: flower/modules/accounts/domain/services/reconciliation.py
# 🧭 Purpose (Layman Explanation):
# If signing up was interrupted halfway (account made, but the username records were not saved),
# this quietly fills in the missing pieces the next time that person is signed in.
# 🧪 Purpose (Technical Summary):
# Self-heal step run on authenticated access: verifies the user record, username directory entry,
# public profile and display name of the account and recreates what is missing. Every repair is
# best-effort and reported in a ReconciliationReport; nothing is raised to the caller.
# 🔗 Dependencies:
# dataclasses, IdentityProvider, UsernameDirectory, User/Profile repositories
# 🔄 Connected Modules / Calls From:
# App session (on sign-in / initial session), tests

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from flower.shared.core.exceptions import DirectoryConflictError

from ..models.account import Account
from ..models.directory import Profile, UserRecord, normalize_username
from ..repositories.profile_repository import ProfileRepository
from ..repositories.user_repository import UserRepository
from .identity_provider import IdentityProvider
from .username_directory import UsernameDirectory

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    """Outcome of one reconciliation pass."""
    uid: str
    username: Optional[str] = None
    repaired: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    conflict: bool = False

    @property
    def consistent(self) -> bool:
        return not self.failed and not self.conflict


class AccountReconciler:
    """
    Repairs accounts left behind by a partial registration.

    The username is taken from the account display name, or from the
    user record when the display name was never set. Without either
    there is nothing to repair from.
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        username_directory: UsernameDirectory,
        user_repository: UserRepository,
        profile_repository: ProfileRepository
    ):
        self.identity_provider = identity_provider
        self.username_directory = username_directory
        self.user_repository = user_repository
        self.profile_repository = profile_repository

    async def reconcile(self, account: Account) -> ReconciliationReport:
        report = ReconciliationReport(uid=account.uid)

        record = await self._step(report, "read_user_record", self.user_repository.get_by_uid(account.uid))
        username = account.display_name or (record.username if record else None)
        if not username:
            logger.warning(f"Account {account.uid} has no username to reconcile from")
            return report
        report.username = username

        if record is None and "read_user_record" not in report.failed:
            await self._step(
                report,
                "write_user_record",
                self.user_repository.save(
                    UserRecord.for_registration(uid=account.uid, username=username, email=account.email)
                ),
                repaired=True
            )

        await self._reconcile_directory(report, account, username)

        profile = await self._step(report, "read_profile", self.profile_repository.get_by_uid(account.uid))
        if profile is None and "read_profile" not in report.failed:
            await self._step(
                report,
                "write_profile",
                self.profile_repository.save(Profile(uid=account.uid, username=username)),
                repaired=True
            )

        if not account.display_name:
            await self._step(
                report,
                "set_display_name",
                self.identity_provider.set_display_name(username),
                repaired=True
            )

        if report.repaired:
            logger.info(f"Reconciled account {account.uid}: repaired {', '.join(report.repaired)}")
        return report

    async def _reconcile_directory(self, report: ReconciliationReport, account: Account, username: str) -> None:
        entry = await self._step(report, "read_directory", self.username_directory.lookup(username))
        if "read_directory" in report.failed:
            return

        if entry is None:
            try:
                await self.username_directory.reserve(username, account.uid, account.email)
                report.repaired.append("reserve_username")
            except DirectoryConflictError:
                report.conflict = True
                logger.warning(f"Username {normalize_username(username)} was taken before {account.uid} reserved it")
            except Exception as e:
                report.failed.append("reserve_username")
                logger.warning(f"Directory repair failed for {account.uid}: {e}")
        elif entry.uid != account.uid:
            report.conflict = True
            logger.warning(
                f"Username {entry.username_lc} belongs to {entry.uid}, not {account.uid}"
            )

    async def _step(self, report: ReconciliationReport, name: str, awaitable, repaired: bool = False):
        try:
            result = await awaitable
        except Exception as e:
            report.failed.append(name)
            logger.warning(f"Reconciliation step {name} failed for {report.uid}: {e}")
            return None
        if repaired:
            report.repaired.append(name)
        return result
