# campus_gigs/services/project_service.py

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.config import settings
from campus_gigs.core.exceptions import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from campus_gigs.models.notification import NotificationTypeEnum
from campus_gigs.models.project import (
    DiscussionReply,
    MemberRoleEnum,
    Project,
    ProjectDiscussion,
    ProjectFile,
    ProjectMember,
    ProjectVisibilityEnum,
)
from campus_gigs.models.user import User
from campus_gigs.repositories.project_repo import ProjectRepository
from campus_gigs.schemas.project_schema import (
    DiscussionCreate,
    DiscussionReplyCreate,
    DiscussionUpdate,
    ProjectCreate,
    ProjectFileCreate,
    ProjectFilter,
)
from campus_gigs.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.project_repo = ProjectRepository(db)
        self.notification_service = NotificationService(db)

    @staticmethod
    def _is_member(project: Project, user_id: Optional[str]) -> bool:
        if user_id is None:
            return False
        return any(m.user_id == user_id for m in project.members)

    @staticmethod
    def _to_out(project: Project, member_count: int) -> dict:
        data = {c.name: getattr(project, c.name) for c in Project.__table__.columns}
        data["created_by"] = project.created_by
        data["member_count"] = member_count
        return data

    async def create_project(self, project_data: ProjectCreate, user: User) -> dict:
        """
        建立專案，建立者同時成為 creator 成員 (同一個 commit)
        """
        values = project_data.model_dump()
        if values.get("max_members") is None:
            values["max_members"] = settings.PROJECT_DEFAULT_MAX_MEMBERS

        new_project = Project(
            **values,
            created_by_id=user.user_id,
            members=[ProjectMember(user_id=user.user_id, role=MemberRoleEnum.creator)],
        )
        created = await self.project_repo.create_project(new_project)
        logger.info(f"Project created: {created.project_id} by {user.user_id}")
        return self._detail(created)

    def _detail(self, project: Project) -> dict:
        data = self._to_out(project, len(project.members))
        data["members"] = project.members
        return data

    async def list_projects(self, filters: ProjectFilter, viewer: Optional[User]) -> dict:
        viewer_id = viewer.user_id if viewer else None
        projects, total = await self.project_repo.list_projects(
            viewer_id, filters.category, filters.status, filters.skip, filters.take
        )
        counts = await self.project_repo.count_members_by_project_ids([p.project_id for p in projects])
        return {
            "projects": [self._to_out(p, counts.get(p.project_id, 0)) for p in projects],
            "total": total,
            "skip": filters.skip,
            "take": filters.take,
        }

    async def _get_project_or_404(self, project_id: str) -> Project:
        project = await self.project_repo.get_project_by_id(project_id)
        if not project:
            raise NotFoundError("Project not found")
        return project

    async def get_project_detail(self, project_id: str, viewer: Optional[User]) -> dict:
        """
        私人專案只有成員看得到
        """
        project = await self._get_project_or_404(project_id)
        viewer_id = viewer.user_id if viewer else None
        if project.visibility == ProjectVisibilityEnum.private and not self._is_member(project, viewer_id):
            raise ForbiddenError("This project is private")
        return self._detail(project)

    async def join_project(self, project_id: str, user: User) -> dict:
        project = await self._get_project_or_404(project_id)

        if self._is_member(project, user.user_id):
            raise ConflictError("You are already a member of this project")

        if len(project.members) >= project.max_members:
            raise ConflictError("This project is full")

        creator_id = project.created_by_id
        project_title = project.title
        user_id = user.user_id
        user_name = user.name

        try:
            await self.project_repo.add_member(
                project, ProjectMember(user_id=user_id, role=MemberRoleEnum.member)
            )
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Duplicate project membership (project={project_id}, user={user_id})")
            raise ConflictError("You are already a member of this project")

        await self.notification_service.notify(
            user_id=creator_id,
            type=NotificationTypeEnum.project_invite,
            title="New Member",
            message=f"{user_name} joined your project: {project_title}",
            link_url=f"/project/{project_id}",
            project_id=project_id,
        )

        return self._detail(await self.project_repo.get_project_by_id(project_id))

    async def delete_project(self, project_id: str, user: User) -> None:
        project = await self._get_project_or_404(project_id)
        if project.created_by_id != user.user_id:
            raise ForbiddenError("Only the creator can delete this project")
        await self.project_repo.delete_project(project)
        logger.info(f"Project deleted: {project_id} by {user.user_id}")

    def _can_read(self, project: Project, user_id: Optional[str]) -> bool:
        # 公開專案任何人可讀；私人專案只有成員 (含建立者) 可讀
        return project.visibility == ProjectVisibilityEnum.public or self._is_member(project, user_id)

    # --- 討論串 ---

    async def list_discussions(self, project_id: str, viewer: Optional[User]) -> List[ProjectDiscussion]:
        project = await self._get_project_or_404(project_id)
        if not self._can_read(project, viewer.user_id if viewer else None):
            raise ForbiddenError("This project is private")
        return await self.project_repo.list_discussions(project_id)

    async def create_discussion(
        self, project_id: str, discussion_data: DiscussionCreate, user: User
    ) -> ProjectDiscussion:
        project = await self._get_project_or_404(project_id)
        if not self._can_read(project, user.user_id):
            raise ForbiddenError("Only project members can post in a private project")

        new_discussion = ProjectDiscussion(
            project_id=project_id,
            author_id=user.user_id,
            title=discussion_data.title,
            body=discussion_data.body,
        )
        return await self.project_repo.create_discussion(new_discussion)

    async def _get_discussion_or_404(self, project_id: str, discussion_id: str) -> ProjectDiscussion:
        discussion = await self.project_repo.get_discussion_by_id(discussion_id)
        # 討論串必須屬於網址上的專案
        if not discussion or discussion.project_id != project_id:
            raise NotFoundError("Discussion not found")
        return discussion

    @staticmethod
    def _can_moderate(discussion: ProjectDiscussion, user: User) -> bool:
        return user.user_id in (discussion.project.created_by_id, discussion.author_id)

    async def reply_to_discussion(
        self, project_id: str, discussion_id: str, reply_data: DiscussionReplyCreate, user: User
    ) -> DiscussionReply:
        discussion = await self._get_discussion_or_404(project_id, discussion_id)
        if discussion.closed:
            raise InvalidArgumentError("Discussion is closed")
        if not self._can_read(discussion.project, user.user_id):
            raise ForbiddenError("Only project members can reply in a private project")

        body = reply_data.body.strip()
        if not body:
            raise InvalidArgumentError("Reply body is required")

        reply = DiscussionReply(discussion_id=discussion_id, author_id=user.user_id, body=body)
        return await self.project_repo.create_reply(reply)

    async def update_discussion(
        self, project_id: str, discussion_id: str, update_data: DiscussionUpdate, user: User
    ) -> ProjectDiscussion:
        """
        置頂或關閉討論串，只有專案建立者或討論串作者可以操作
        """
        discussion = await self._get_discussion_or_404(project_id, discussion_id)
        if not self._can_moderate(discussion, user):
            raise ForbiddenError("Only the project creator or the author can modify this discussion")

        for field, value in update_data.model_dump(exclude_none=True).items():
            setattr(discussion, field, value)
        return await self.project_repo.update_discussion(discussion)

    async def delete_discussion(self, project_id: str, discussion_id: str, user: User) -> None:
        discussion = await self._get_discussion_or_404(project_id, discussion_id)
        if not self._can_moderate(discussion, user):
            raise ForbiddenError("Only the project creator or the author can delete this discussion")
        await self.project_repo.delete_discussion(discussion)
        logger.info(f"Discussion deleted: {discussion_id} by {user.user_id}")

    # --- 檔案 ---

    async def list_files(self, project_id: str, viewer: Optional[User]) -> List[ProjectFile]:
        project = await self._get_project_or_404(project_id)
        if not self._can_read(project, viewer.user_id if viewer else None):
            raise ForbiddenError("This project is private")
        return await self.project_repo.list_files(project_id)

    async def add_file(self, project_id: str, file_data: ProjectFileCreate, user: User) -> ProjectFile:
        """
        登記一個已上傳到 Blob Storage 的檔案 (只存 URL 與中繼資料)
        """
        project = await self._get_project_or_404(project_id)
        if not self._can_read(project, user.user_id):
            raise ForbiddenError("This project is private")

        project_file = ProjectFile(
            **file_data.model_dump(),
            project_id=project_id,
            uploaded_by_id=user.user_id,
        )
        return await self.project_repo.create_file(project_file)

    async def delete_file(self, project_id: str, file_id: str, user: User) -> None:
        project_file = await self.project_repo.get_file_by_id(file_id)
        if not project_file or project_file.project_id != project_id:
            raise NotFoundError("File not found")
        if user.user_id not in (project_file.project.created_by_id, project_file.uploaded_by_id):
            raise ForbiddenError("Only the project creator or the uploader can delete this file")
        await self.project_repo.delete_file(project_file)
        logger.info(f"Project file deleted: {file_id} by {user.user_id}")
