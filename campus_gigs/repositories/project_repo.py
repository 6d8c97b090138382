# campus_gigs/repositories/project_repo.py

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import aliased, joinedload, selectinload

# 匯入 Models
from campus_gigs.models.project import (
    DiscussionReply,
    Project,
    ProjectDiscussion,
    ProjectFile,
    ProjectMember,
    ProjectStatusEnum,
    ProjectVisibilityEnum,
)


class ProjectRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    # 建立新專案
    async def create_project(self, project: Project) -> Project:
        """
        建立專案。建立者的 creator 成員資格已放在 project.members 中，
        兩者在同一次 commit 寫入。
        """
        self.db.add(project)
        await self.db.commit()

        # 不使用 refresh()，重新查詢一次以載入 members 與 created_by
        return await self.get_project_by_id(project.project_id)

    async def get_project_by_id(self, project_id: str) -> Optional[Project]:
        """
        透過 ID 獲取單一專案 (含建立者、成員及成員的使用者資料)
        """
        stmt = (
            select(Project)
            .where(Project.project_id == project_id)
            .options(
                joinedload(Project.created_by),
                selectinload(Project.members).selectinload(ProjectMember.user),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def add_member(self, project: Project, member: ProjectMember) -> Project:
        """
        將成員加入專案。重複加入時 commit 會拋出 IntegrityError。
        """
        project.members.append(member)
        await self.db.commit()
        return await self.get_project_by_id(project.project_id)

    def _visible_stmt(self, viewer_id: Optional[str]):
        # 匿名：只看公開；登入：另外加上自己建立或已加入的專案
        visible = Project.visibility == ProjectVisibilityEnum.public
        if viewer_id:
            my_projects = select(ProjectMember.project_id).where(ProjectMember.user_id == viewer_id)
            visible = or_(
                visible,
                Project.created_by_id == viewer_id,
                Project.project_id.in_(my_projects),
            )
        return select(Project).where(visible)

    async def list_projects(
        self,
        viewer_id: Optional[str],
        category: Optional[str],
        status: Optional[ProjectStatusEnum],
        skip: int,
        take: int,
    ) -> Tuple[List[Project], int]:
        base_stmt = self._visible_stmt(viewer_id)
        if category:
            base_stmt = base_stmt.where(Project.category == category)
        if status:
            base_stmt = base_stmt.where(Project.status == status)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            base_stmt.options(joinedload(Project.created_by))
            .order_by(Project.created_at.desc())
            .offset(skip)
            .limit(take)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def count_members_by_project_ids(self, project_ids: List[str]) -> Dict[str, int]:
        if not project_ids:
            return {}
        stmt = (
            select(ProjectMember.project_id, func.count(ProjectMember.member_id))
            .where(ProjectMember.project_id.in_(project_ids))
            .group_by(ProjectMember.project_id)
        )
        result = await self.db.execute(stmt)
        return {project_id: count for project_id, count in result.all()}

    async def list_public_projects_by_creator(self, user_id: str, limit: int) -> List[Project]:
        stmt = (
            select(Project)
            .where(
                Project.created_by_id == user_id,
                Project.visibility == ProjectVisibilityEnum.public,
            )
            .order_by(Project.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_projects_by_creator(self, user_id: str) -> int:
        stmt = select(func.count(Project.project_id)).where(Project.created_by_id == user_id)
        return (await self.db.execute(stmt)).scalar_one()

    async def count_memberships(self, user_id: str) -> int:
        stmt = select(func.count(ProjectMember.member_id)).where(ProjectMember.user_id == user_id)
        return (await self.db.execute(stmt)).scalar_one()

    async def is_member(self, project_id: str, user_id: str) -> bool:
        stmt = (
            select(ProjectMember.member_id)
            .where(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def share_any_project(self, user_a: str, user_b: str) -> bool:
        """
        兩位使用者是否同時是某個專案的成員
        """
        other = aliased(ProjectMember)
        stmt = (
            select(ProjectMember.project_id)
            .join(other, other.project_id == ProjectMember.project_id)
            .where(ProjectMember.user_id == user_a, other.user_id == user_b)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def delete_project(self, project: Project) -> None:
        await self.db.refresh(project, attribute_names=["members", "discussions"])
        await self.db.delete(project)
        await self.db.commit()

    async def count_open_projects(self) -> int:
        stmt = select(func.count(Project.project_id)).where(Project.status == ProjectStatusEnum.open)
        return (await self.db.execute(stmt)).scalar_one()

    # --- 討論串 ---

    def _discussion_stmt(self):
        # 作者與所有回覆 (含回覆者) 一次載入，避免 async session 觸發 lazy load
        return select(ProjectDiscussion).options(
            joinedload(ProjectDiscussion.author),
            selectinload(ProjectDiscussion.replies).joinedload(DiscussionReply.author),
        )

    async def list_discussions(self, project_id: str) -> List[ProjectDiscussion]:
        """置頂優先，其次依建立時間降序"""
        stmt = (
            self._discussion_stmt()
            .where(ProjectDiscussion.project_id == project_id)
            .order_by(ProjectDiscussion.pinned.desc(), ProjectDiscussion.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_discussion_by_id(self, discussion_id: str) -> Optional[ProjectDiscussion]:
        """
        取得單一討論串，連同所屬專案的成員 (權限判斷用)
        """
        stmt = (
            self._discussion_stmt()
            .where(ProjectDiscussion.discussion_id == discussion_id)
            .options(joinedload(ProjectDiscussion.project).selectinload(Project.members))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create_discussion(self, discussion: ProjectDiscussion) -> ProjectDiscussion:
        self.db.add(discussion)
        await self.db.commit()
        return await self.get_discussion_by_id(discussion.discussion_id)

    async def update_discussion(self, discussion: ProjectDiscussion) -> ProjectDiscussion:
        await self.db.commit()
        return await self.get_discussion_by_id(discussion.discussion_id)

    async def delete_discussion(self, discussion: ProjectDiscussion) -> None:
        # 回覆由資料庫的 ON DELETE CASCADE 一併刪除
        await self.db.delete(discussion)
        await self.db.commit()

    async def create_reply(self, reply: DiscussionReply) -> DiscussionReply:
        self.db.add(reply)
        await self.db.commit()

        stmt = (
            select(DiscussionReply)
            .where(DiscussionReply.reply_id == reply.reply_id)
            .options(joinedload(DiscussionReply.author))
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    # --- 檔案 (只有中繼資料) ---

    async def list_files(self, project_id: str) -> List[ProjectFile]:
        """依虛擬路徑排序，同一路徑內最新的在前"""
        stmt = (
            select(ProjectFile)
            .where(ProjectFile.project_id == project_id)
            .options(joinedload(ProjectFile.uploaded_by))
            .order_by(ProjectFile.path.asc(), ProjectFile.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_file_by_id(self, file_id: str) -> Optional[ProjectFile]:
        stmt = (
            select(ProjectFile)
            .where(ProjectFile.file_id == file_id)
            .options(joinedload(ProjectFile.uploaded_by), joinedload(ProjectFile.project))
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create_file(self, project_file: ProjectFile) -> ProjectFile:
        self.db.add(project_file)
        await self.db.commit()
        return await self.get_file_by_id(project_file.file_id)

    async def delete_file(self, project_file: ProjectFile) -> None:
        await self.db.delete(project_file)
        await self.db.commit()
