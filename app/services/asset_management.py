"""Asset management service — permissions, validation and asset lifecycle.

Every mutating operation follows the same flow:
  1. Resolve the acting user by id
  2. Check role or ashram assignment
  3. Validate and normalize all inputs
  4. Read / write through the repositories and return a fresh record
"""

import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any

from app.core.config import Settings, get_settings
from app.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from app.core.security import dummy_verify, hash_password, verify_password
from app.core.validators import (
    require_date,
    require_email,
    require_enum,
    require_id,
    require_list,
    require_mapping,
    require_positive_int,
    require_string,
)
from app.models import (
    ELEVATED_ROLES,
    Ashram,
    Asset,
    AssetCategory,
    AssetDocument,
    AssetStatus,
    Assignment,
    DocumentCategory,
    Invite,
    InviteStatus,
    Reminder,
    ReminderType,
    Role,
    User,
)
from app.models.base import utcnow
from app.repositories.base import (
    AshramRepository,
    AssetRepository,
    AssignmentRepository,
    InviteRepository,
    UserRepository,
)
from app.services.asset_tags import AssetTagCounter, build_asset_tag, encode_qr_payload
from app.services.dashboards import (
    AshramDashboard,
    AssetFilters,
    HeadOfficeDashboard,
    UpcomingReminder,
    build_ashram_breakdown,
    collect_upcoming_reminders,
    count_by_category,
    exclude_archived,
    top_category,
)
from app.services.sessions import SessionStore, UserSession

logger = logging.getLogger(__name__)

UPDATABLE_ASSET_FIELDS = frozenset(
    {"name", "category", "purchase_date", "status", "owner", "metadata"}
)


class AssetManagementService:
    """Business rules for users, ashrams, assets and their sub-entities.

    ``sessions`` and ``tag_counter`` are process-local state. Pass shared
    instances when several service objects (e.g. one per request) must
    see the same logins and tag sequences.
    """

    def __init__(
        self,
        *,
        ashrams: AshramRepository,
        users: UserRepository,
        assignments: AssignmentRepository,
        assets: AssetRepository,
        invites: InviteRepository,
        sessions: SessionStore | None = None,
        tag_counter: AssetTagCounter | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.ashrams = ashrams
        self.users = users
        self.assignments = assignments
        self.assets = assets
        self.invites = invites
        self.sessions = sessions if sessions is not None else SessionStore()
        self.tag_counter = tag_counter if tag_counter is not None else AssetTagCounter()
        self.settings = settings or get_settings()

    # ── Identity ─────────────────────────────────────────────

    async def register_user(
        self,
        *,
        email: str,
        password: str,
        display_name: str,
        roles: Iterable[Role | str] | None,
    ) -> User:
        normalized_email = require_email(email)
        unique_roles = self._require_roles(roles, "roles")
        if not unique_roles:
            raise ValidationError("roles", "At least one role must be provided")
        name = require_string(display_name, "display_name")

        if await self.users.find_by_email(normalized_email) is not None:
            raise ConflictError("User with this email already exists")

        user = await self.users.create(
            User(
                email=normalized_email,
                display_name=name,
                password_hash=hash_password(password),
                roles=unique_roles,
            )
        )
        logger.info("Registered user %s with roles %s", user.id, ",".join(unique_roles))
        return await self._apply_pending_invites(user)

    async def sign_up(
        self,
        *,
        email: str,
        password: str,
        display_name: str,
        roles: Iterable[Role | str] | None = None,
        requested_by: uuid.UUID | str | None = None,
    ) -> User:
        """Self-service registration.

        New accounts are ASHRAM_USER. Emails listed in
        ``settings.super_admin_emails`` get ADMIN and HEAD_OFFICE instead.
        Choosing roles explicitly is reserved for a logged-in ADMIN.
        """
        if roles is not None:
            if requested_by is None:
                raise AuthorizationError("Only an admin can choose roles at registration")
            actor = await self._require_user(requested_by, "requested_by")
            self.require_any_role(actor, (Role.ADMIN,))
            granted = roles
        elif require_email(email) in self.settings.super_admins:
            granted = [Role.ADMIN, Role.HEAD_OFFICE]
        else:
            granted = [Role.ASHRAM_USER]
        return await self.register_user(
            email=email, password=password, display_name=display_name, roles=granted
        )

    async def login(self, *, email: str, password: str) -> UserSession:
        normalized_email = require_email(email)
        user = await self.users.find_by_email(normalized_email)
        if user is None:
            dummy_verify()
            logger.warning("Failed login attempt")
            raise AuthenticationError()
        if not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthenticationError()

        updated = await self.users.update(user.id, {"last_login_at": utcnow()})
        session = self.sessions.issue(updated or user)
        logger.info("User %s logged in", user.id)
        return session

    async def get_session(self, token: str | None) -> UserSession | None:
        if not isinstance(token, str) or not token:
            return None
        return self.sessions.get(token)

    async def logout(self, token: str) -> bool:
        if not isinstance(token, str) or not token:
            return False
        return self.sessions.revoke(token)

    async def get_user(self, user_id: uuid.UUID | str) -> User:
        return await self._require_user(user_id)

    async def grant_roles(
        self,
        *,
        user_id: uuid.UUID | str,
        roles: Iterable[Role | str],
        requested_by: uuid.UUID | str,
    ) -> User:
        """Add roles to a user. Existing roles are kept; duplicates ignored."""
        actor = await self._require_user(requested_by, "requested_by")
        self.require_any_role(actor, (Role.ADMIN,))
        user = await self._require_user(user_id)
        granted = self._require_roles(roles, "roles")
        if not granted:
            raise ValidationError("roles", "At least one role must be provided")

        merged = list(dict.fromkeys([*user.roles, *granted]))
        if merged == user.roles:
            return user
        logger.info("User %s granted roles %s by %s", user.id, ",".join(granted), actor.id)
        return await self._save(self.users, "User", user.id, {"roles": merged})

    # ── Authorization primitives ─────────────────────────────

    @staticmethod
    def is_elevated(user: User) -> bool:
        return any(role in ELEVATED_ROLES for role in user.roles)

    @staticmethod
    def require_any_role(user: User, allowed_roles: Iterable[Role]) -> None:
        allowed = set(allowed_roles)
        if not any(role in allowed for role in user.roles):
            raise AuthorizationError("User does not have permission for this operation")

    async def require_assignment(self, user_id: uuid.UUID, ashram_id: uuid.UUID) -> None:
        assignments = await self.assignments.list_by_user_id(user_id)
        if not any(a.ashram_id == ashram_id for a in assignments):
            raise AuthorizationError("User is not assigned to this ashram")

    async def require_site_access(self, actor: User, ashram_id: uuid.UUID) -> None:
        """Elevated roles reach every ashram; everyone else needs an assignment."""
        if self.is_elevated(actor):
            return
        await self.require_assignment(actor.id, ashram_id)

    # ── Ashrams & assignment ─────────────────────────────────

    async def create_ashram(
        self,
        *,
        name: str,
        created_by: uuid.UUID | str,
        location: str | None = None,
    ) -> Ashram:
        actor = await self._require_user(created_by, "created_by")
        self.require_any_role(actor, ELEVATED_ROLES)
        ashram = await self.ashrams.create(
            Ashram(
                name=require_string(name, "name"),
                location=require_string(location, "location") if location else None,
            )
        )
        logger.info("Ashram %s (%s) created by %s", ashram.id, ashram.name, actor.id)
        return ashram

    async def assign_user_to_ashram(
        self,
        *,
        user_id: uuid.UUID | str,
        ashram_id: uuid.UUID | str,
        roles: Iterable[Role | str],
        requested_by: uuid.UUID | str,
    ) -> Assignment:
        """Link a user to an ashram.

        Membership lists are updated only when the link is new, so retrying
        after a partial failure is safe. The two membership writes are not
        atomic. A new Assignment record is written on every call, keeping
        repeated grants as an audit trail.
        """
        actor = await self._require_user(requested_by, "requested_by")
        self.require_any_role(actor, ELEVATED_ROLES)

        ashram = await self._require_ashram(ashram_id)
        user = await self._require_user(user_id)
        unique_roles = self._require_roles(roles, "roles")

        if ashram.id not in user.ashram_ids:
            await self.users.update(user.id, {"ashram_ids": [*user.ashram_ids, ashram.id]})
        if user.id not in ashram.user_ids:
            await self.ashrams.update(ashram.id, {"user_ids": [*ashram.user_ids, user.id]})

        assignment = await self.assignments.create(
            Assignment(user_id=user.id, ashram_id=ashram.id, roles=unique_roles)
        )
        logger.info("User %s assigned to ashram %s by %s", user.id, ashram.id, actor.id)
        return assignment

    async def assign_user_by_email(
        self,
        *,
        email: str,
        ashram_id: uuid.UUID | str,
        roles: Iterable[Role | str],
        requested_by: uuid.UUID | str,
    ) -> Assignment | Invite:
        """Assign an existing account, or leave a pending invite for the email.

        The invite is fulfilled when an account with that email registers.
        """
        actor = await self._require_user(requested_by, "requested_by")
        self.require_any_role(actor, ELEVATED_ROLES)
        normalized_email = require_email(email)
        ashram = await self._require_ashram(ashram_id)
        unique_roles = self._require_roles(roles, "roles")

        user = await self.users.find_by_email(normalized_email)
        if user is not None:
            return await self.assign_user_to_ashram(
                user_id=user.id,
                ashram_id=ashram.id,
                roles=unique_roles,
                requested_by=actor.id,
            )

        invite = await self.invites.create(
            Invite(
                email=normalized_email,
                ashram_id=ashram.id,
                roles=unique_roles,
                created_by=actor.id,
            )
        )
        logger.info("Invite %s for ashram %s created by %s", invite.id, ashram.id, actor.id)
        return invite

    async def list_ashrams(self, *, requested_by: uuid.UUID | str) -> list[Ashram]:
        actor = await self._require_user(requested_by, "requested_by")
        ashrams = await self.ashrams.list()
        if self.is_elevated(actor):
            return ashrams
        return [a for a in ashrams if a.id in actor.ashram_ids]

    # ── Assets ───────────────────────────────────────────────

    async def add_asset(
        self,
        *,
        ashram_id: uuid.UUID | str,
        name: str,
        category: AssetCategory | str,
        purchase_date: Any,
        added_by: uuid.UUID | str,
        status: AssetStatus | str = AssetStatus.ACTIVE,
        owner: str | None = None,
        metadata: Mapping[str, Any] | None = None,
        reminders: Iterable[Mapping[str, Any]] = (),
        documents: Iterable[Mapping[str, Any]] = (),
    ) -> Asset:
        actor = await self._require_user(added_by, "added_by")
        ashram = await self._require_ashram(ashram_id)
        await self.require_assignment(actor.id, ashram.id)

        asset_category = require_enum(category, AssetCategory, "category")
        asset_status = require_enum(status, AssetStatus, "status")
        if asset_status == AssetStatus.ARCHIVED:
            raise ValidationError("status", "New assets cannot start archived")
        asset_name = require_string(name, "name")
        purchased_on = require_date(purchase_date, "purchase_date")
        owner_name = require_string(owner, "owner") if owner else None
        attributes = require_mapping(metadata, "metadata") if metadata is not None else {}
        prepared_reminders = [
            self._prepare_reminder(r) for r in require_list(reminders, "reminders")
        ]
        prepared_documents = [
            self._prepare_document(d) for d in require_list(documents, "documents")
        ]

        # Only consume a sequence number once every input is known to be valid
        asset_tag = build_asset_tag(
            ashram.name, asset_category, self.tag_counter.next(ashram.id, asset_category)
        )
        asset = await self.assets.create(
            Asset(
                ashram_id=ashram.id,
                name=asset_name,
                category=asset_category,
                asset_tag=asset_tag,
                purchase_date=purchased_on,
                status=asset_status,
                owner=owner_name,
                attributes=attributes,
                reminders=prepared_reminders,
                documents=prepared_documents,
                qr_code=encode_qr_payload(
                    ashram_id=ashram.id,
                    asset_name=asset_name,
                    asset_tag=asset_tag,
                    category=asset_category,
                ),
                created_by=actor.id,
            )
        )
        logger.info("Asset %s (%s) added to ashram %s", asset.id, asset.asset_tag, ashram.id)
        return asset

    async def get_asset(self, asset_id: uuid.UUID | str) -> Asset:
        return await self._require_asset(asset_id)

    async def update_asset(
        self,
        *,
        asset_id: uuid.UUID | str,
        updated_by: uuid.UUID | str,
        **changes: Any,
    ) -> Asset:
        """Edit scalar asset fields.

        A category change issues a fresh tag from the new category's
        sequence; the old number is retired, never reused. Archiving goes
        through ``archive_asset``; moving an archived asset back to another
        status needs an elevated role and clears ``archived_at``.
        """
        unknown = sorted(set(changes) - UPDATABLE_ASSET_FIELDS)
        if unknown:
            raise ValidationError(unknown[0], f"{unknown[0]} cannot be updated")

        actor = await self._require_user(updated_by, "updated_by")
        asset = await self._require_asset(asset_id)
        await self.require_site_access(actor, asset.ashram_id)

        patch: dict[str, Any] = {}
        if "name" in changes:
            patch["name"] = require_string(changes["name"], "name")
        if "purchase_date" in changes:
            patch["purchase_date"] = require_date(changes["purchase_date"], "purchase_date")
        if "owner" in changes:
            owner = changes["owner"]
            patch["owner"] = require_string(owner, "owner") if owner else None
        if "metadata" in changes:
            patch["attributes"] = require_mapping(changes["metadata"], "metadata")
        if "status" in changes:
            new_status = require_enum(changes["status"], AssetStatus, "status")
            if new_status != asset.status:
                if new_status == AssetStatus.ARCHIVED:
                    raise ValidationError("status", "Use archive_asset to archive an asset")
                if asset.status == AssetStatus.ARCHIVED:
                    self.require_any_role(actor, ELEVATED_ROLES)
                    patch["archived_at"] = None
                patch["status"] = new_status

        new_category = asset.category
        if "category" in changes:
            new_category = require_enum(changes["category"], AssetCategory, "category")
            if new_category != asset.category:
                ashram = await self._require_ashram(asset.ashram_id)
                patch["category"] = new_category
                patch["asset_tag"] = build_asset_tag(
                    ashram.name, new_category, self.tag_counter.next(ashram.id, new_category)
                )
                logger.info(
                    "Asset %s retagged %s -> %s", asset.id, asset.asset_tag, patch["asset_tag"]
                )

        if "asset_tag" in patch or "name" in patch:
            patch["qr_code"] = encode_qr_payload(
                ashram_id=asset.ashram_id,
                asset_name=patch.get("name", asset.name),
                asset_tag=patch.get("asset_tag", asset.asset_tag),
                category=new_category,
            )
        if not patch:
            return asset
        return await self._save(self.assets, "Asset", asset.id, patch)

    async def add_reminder(
        self,
        *,
        asset_id: uuid.UUID | str,
        reminder_type: ReminderType | str,
        due_date: Any,
        added_by: uuid.UUID | str,
        notes: str | None = None,
    ) -> Asset:
        actor = await self._require_user(added_by, "added_by")
        asset = await self._require_asset(asset_id)
        await self.require_site_access(actor, asset.ashram_id)
        reminder = self._prepare_reminder(
            {"type": reminder_type, "due_date": due_date, "notes": notes}
        )
        return await self._save(
            self.assets, "Asset", asset.id, {"reminders": [*asset.reminders, reminder]}
        )

    async def attach_document(
        self,
        *,
        asset_id: uuid.UUID | str,
        name: str,
        url: str,
        category: DocumentCategory | str,
        attached_by: uuid.UUID | str,
        storage_path: str | None = None,
    ) -> Asset:
        actor = await self._require_user(attached_by, "attached_by")
        asset = await self._require_asset(asset_id)
        await self.require_site_access(actor, asset.ashram_id)
        document = self._prepare_document(
            {"name": name, "url": url, "category": category, "storage_path": storage_path}
        )
        return await self._save(
            self.assets, "Asset", asset.id, {"documents": [*asset.documents, document]}
        )

    # ── Queries ──────────────────────────────────────────────

    async def list_assets_by_ashram(self, ashram_id: uuid.UUID | str) -> list[Asset]:
        return await self.assets.list_by_ashram_id(require_id(ashram_id, "ashram_id"))

    async def query_assets(
        self,
        *,
        category: AssetCategory | str | None = None,
        status: AssetStatus | str | None = None,
        ashram_id: uuid.UUID | str | None = None,
        search: str | None = None,
        reminder_due_before: Any = None,
    ) -> list[Asset]:
        filters = self._build_filters(
            category=category,
            status=status,
            ashram_id=ashram_id,
            search=search,
            reminder_due_before=reminder_due_before,
        )
        return await self._filtered_assets(filters)

    async def get_upcoming_reminders(
        self,
        *,
        due_before: Any,
        ashram_id: uuid.UUID | str | None = None,
    ) -> list[UpcomingReminder]:
        cutoff = require_date(due_before, "due_before")
        if ashram_id is not None:
            assets = await self.assets.list_by_ashram_id(require_id(ashram_id, "ashram_id"))
        else:
            assets = await self.assets.list()
        return collect_upcoming_reminders(assets, cutoff)

    # ── Reminder & disposal lifecycle ────────────────────────

    async def mark_reminder_complete(
        self,
        *,
        asset_id: uuid.UUID | str,
        reminder_id: uuid.UUID | str,
        completed_by: uuid.UUID | str,
    ) -> Asset:
        """Complete a reminder. Completing it again changes nothing."""
        await self._require_user(completed_by, "completed_by")
        asset = await self._require_asset(asset_id)
        target_id = require_id(reminder_id, "reminder_id")

        reminder = next((r for r in asset.reminders if r.id == target_id), None)
        if reminder is None:
            raise NotFoundError("Reminder", target_id)
        if reminder.completed:
            return asset

        reminder.completed = True
        reminder.completed_at = utcnow()
        return await self._save(self.assets, "Asset", asset.id, {"reminders": asset.reminders})

    async def archive_asset(
        self,
        *,
        asset_id: uuid.UUID | str,
        archived_by: uuid.UUID | str,
    ) -> Asset:
        actor = await self._require_user(archived_by, "archived_by")
        self.require_any_role(actor, ELEVATED_ROLES)
        asset = await self._require_asset(asset_id)
        if asset.status == AssetStatus.ARCHIVED and asset.archived_at is not None:
            return asset

        archived = await self._save(
            self.assets,
            "Asset",
            asset.id,
            {"status": AssetStatus.ARCHIVED, "archived_at": utcnow()},
        )
        logger.info("Asset %s archived by %s", asset.id, actor.id)
        return archived

    async def delete_asset_permanently(
        self,
        *,
        asset_id: uuid.UUID | str,
        requested_by: uuid.UUID | str,
        retention_days: int | None = None,
    ) -> bool:
        """Purge an asset that has been archived for ``retention_days``."""
        actor = await self._require_user(requested_by, "requested_by")
        self.require_any_role(actor, ELEVATED_ROLES)
        days = require_positive_int(
            self.settings.retention_days if retention_days is None else retention_days,
            "retention_days",
        )
        asset = await self._require_asset(asset_id)

        if asset.status != AssetStatus.ARCHIVED or asset.archived_at is None:
            raise PreconditionError("Asset must be archived before deletion")
        if asset.archived_at > utcnow() - timedelta(days=days):
            raise PreconditionError("Asset retention period has not elapsed")

        await self.assets.delete(asset.id)
        logger.info("Asset %s (%s) deleted by %s", asset.id, asset.asset_tag, actor.id)
        return True

    # ── Dashboards ───────────────────────────────────────────

    async def get_ashram_dashboard(
        self,
        *,
        ashram_id: uuid.UUID | str,
        requested_by: uuid.UUID | str,
        due_before: Any = None,
        include_archived: bool = False,
    ) -> AshramDashboard:
        actor = await self._require_user(requested_by, "requested_by")
        ashram = await self._require_ashram(ashram_id)
        await self.require_site_access(actor, ashram.id)
        cutoff = self._reminder_cutoff(due_before)

        assets = await self.assets.list_by_ashram_id(ashram.id)
        if not include_archived:
            assets = exclude_archived(assets)
        counts = count_by_category(assets)
        return AshramDashboard(
            ashram_id=ashram.id,
            ashram_name=ashram.name,
            total_assets=len(assets),
            by_category=counts,
            top_category=top_category(counts),
            upcoming_reminders=collect_upcoming_reminders(assets, cutoff),
            due_before=cutoff,
        )

    async def get_head_office_dashboard(
        self,
        *,
        requested_by: uuid.UUID | str,
        category: AssetCategory | str | None = None,
        status: AssetStatus | str | None = None,
        ashram_id: uuid.UUID | str | None = None,
        search: str | None = None,
        due_before: Any = None,
        include_archived: bool = False,
    ) -> HeadOfficeDashboard:
        actor = await self._require_user(requested_by, "requested_by")
        self.require_any_role(actor, ELEVATED_ROLES)
        filters = self._build_filters(
            category=category, status=status, ashram_id=ashram_id, search=search
        )
        cutoff = self._reminder_cutoff(due_before)

        if filters.ashram_id is not None:
            ashrams = [await self._require_ashram(filters.ashram_id)]
        else:
            ashrams = await self.ashrams.list()

        assets = await self._filtered_assets(filters)
        if not include_archived and filters.status != AssetStatus.ARCHIVED:
            assets = exclude_archived(assets)
        breakdown = build_ashram_breakdown(ashrams, assets)
        return HeadOfficeDashboard(
            total_assets=len(assets),
            total_ashrams=sum(1 for s in breakdown if s.asset_count),
            by_category=count_by_category(assets),
            ashram_breakdown=breakdown,
            upcoming_reminders=collect_upcoming_reminders(assets, cutoff),
            due_before=cutoff,
            include_archived=include_archived,
            filters=filters,
        )

    # ── Internal helpers ─────────────────────────────────────

    async def _require_user(self, user_id: Any, field: str = "user_id") -> User:
        identifier = require_id(user_id, field)
        user = await self.users.find_by_id(identifier)
        if user is None:
            raise NotFoundError("User", identifier)
        return user

    async def _require_ashram(self, ashram_id: Any) -> Ashram:
        identifier = require_id(ashram_id, "ashram_id")
        ashram = await self.ashrams.find_by_id(identifier)
        if ashram is None:
            raise NotFoundError("Ashram", identifier)
        return ashram

    async def _require_asset(self, asset_id: Any) -> Asset:
        identifier = require_id(asset_id, "asset_id")
        asset = await self.assets.find_by_id(identifier)
        if asset is None or asset.deleted_at is not None:
            raise NotFoundError("Asset", identifier)
        return asset

    async def _apply_pending_invites(self, user: User) -> User:
        invites = await self.invites.list_pending_by_email(user.email)
        if not invites:
            return user

        roles = list(user.roles)
        ashram_ids = list(user.ashram_ids)
        for invite in invites:
            roles.extend(r for r in invite.roles if r not in roles)
            ashram = await self.ashrams.find_by_id(invite.ashram_id)
            if ashram is not None:
                if ashram.id not in ashram_ids:
                    ashram_ids.append(ashram.id)
                if user.id not in ashram.user_ids:
                    await self.ashrams.update(ashram.id, {"user_ids": [*ashram.user_ids, user.id]})
                await self.assignments.create(
                    Assignment(user_id=user.id, ashram_id=ashram.id, roles=invite.roles)
                )
            await self.invites.update(
                invite.id,
                {
                    "status": InviteStatus.FULFILLED,
                    "fulfilled_at": utcnow(),
                    "fulfilled_by": user.id,
                },
            )
            logger.info("Invite %s fulfilled by user %s", invite.id, user.id)

        return await self._save(
            self.users, "User", user.id, {"roles": roles, "ashram_ids": ashram_ids}
        )

    @staticmethod
    async def _save(repository: Any, resource: str, record_id: uuid.UUID, patch: dict) -> Any:
        updated = await repository.update(record_id, patch)
        if updated is None:
            raise NotFoundError(resource, record_id)
        return updated

    @staticmethod
    def _require_roles(roles: Any, field: str) -> list[Role]:
        values = require_list(roles if roles is not None else [], field)
        return list(dict.fromkeys(require_enum(r, Role, field) for r in values))

    @staticmethod
    def _prepare_reminder(data: Any) -> Reminder:
        fields = require_mapping(data, "reminder")
        completed = bool(fields.get("completed", False))
        notes = fields.get("notes")
        return Reminder(
            type=require_enum(fields.get("type"), ReminderType, "reminder.type"),
            due_date=require_date(fields.get("due_date"), "reminder.due_date"),
            notes=require_string(notes, "reminder.notes") if notes else None,
            completed=completed,
            completed_at=utcnow() if completed else None,
        )

    @staticmethod
    def _prepare_document(data: Any) -> AssetDocument:
        fields = require_mapping(data, "document")
        storage_path = fields.get("storage_path")
        return AssetDocument(
            name=require_string(fields.get("name"), "document.name"),
            url=require_string(fields.get("url"), "document.url"),
            category=require_enum(fields.get("category"), DocumentCategory, "document.category"),
            storage_path=(
                require_string(storage_path, "document.storage_path") if storage_path else None
            ),
        )

    @staticmethod
    def _build_filters(
        *,
        category: Any = None,
        status: Any = None,
        ashram_id: Any = None,
        search: Any = None,
        reminder_due_before: Any = None,
    ) -> AssetFilters:
        if search is not None and not isinstance(search, str):
            raise ValidationError("search", "search must be a string")
        return AssetFilters(
            category=require_enum(category, AssetCategory, "category") if category else None,
            status=require_enum(status, AssetStatus, "status") if status else None,
            ashram_id=require_id(ashram_id, "ashram_id") if ashram_id else None,
            search=(search.strip() or None) if search else None,
            reminder_due_before=(
                require_date(reminder_due_before, "reminder_due_before")
                if reminder_due_before is not None
                else None
            ),
        )

    async def _filtered_assets(self, filters: AssetFilters) -> list[Asset]:
        if filters.ashram_id is not None:
            assets = await self.assets.list_by_ashram_id(filters.ashram_id)
        else:
            assets = await self.assets.list()
        return [a for a in assets if filters.matches(a)]

    def default_reminder_cutoff(self) -> datetime:
        return utcnow() + timedelta(days=self.settings.reminder_window_days)

    def _reminder_cutoff(self, due_before: Any) -> datetime:
        if due_before is None:
            return self.default_reminder_cutoff()
        return require_date(due_before, "due_before")
