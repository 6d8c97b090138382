# campus_gigs/routers/project_router.py
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

# 匯入核心依賴
from campus_gigs.core.config import settings
from campus_gigs.core.database import get_db
from campus_gigs.core.security import get_current_user, get_optional_user
from campus_gigs.models.project import ProjectStatusEnum
from campus_gigs.models.user import User

# 匯入 Service 和 Schemas
from campus_gigs.services.project_service import ProjectService
from campus_gigs.schemas.project_schema import (
    DiscussionCreate,
    DiscussionOut,
    DiscussionReplyCreate,
    DiscussionReplyOut,
    DiscussionUpdate,
    ProjectCreate,
    ProjectDetailOut,
    ProjectFileCreate,
    ProjectFileOut,
    ProjectFilter,
    ProjectListOut,
)

router = APIRouter(
    prefix="/projects",
    tags=["Projects"],
)


@router.post(
    "",
    response_model=ProjectDetailOut,
    status_code=status.HTTP_201_CREATED
)
async def create_new_project(
    project_data: ProjectCreate, # Request Body
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    建立專案。建立者會自動成為 creator 成員。
    """
    service = ProjectService(db)
    return await service.create_project(project_data=project_data, user=current_user)


@router.get("", response_model=ProjectListOut)
async def list_projects(
    category: Optional[str] = None,
    project_status: ProjectStatusEnum = Query(ProjectStatusEnum.open, alias="status"),
    skip: int = Query(0, ge=0),
    take: int = Query(settings.LIST_PAGE_SIZE_DEFAULT, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """
    瀏覽專案。
    匿名只看得到公開專案；登入後也看得到自己建立或已加入的私人專案。
    """
    filters = ProjectFilter(category=category, status=project_status, skip=skip, take=take)
    service = ProjectService(db)
    return await service.list_projects(filters, current_user)


@router.get("/{project_id}", response_model=ProjectDetailOut)
async def get_project_detail(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """專案詳情與成員 (依加入時間排序)；私人專案僅成員可見"""
    service = ProjectService(db)
    return await service.get_project_detail(project_id, current_user)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = ProjectService(db)
    await service.delete_project(project_id, current_user)


@router.post("/{project_id}/join", response_model=ProjectDetailOut)
async def join_project(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    加入專案。已是成員或人數已滿時回傳 409。
    """
    service = ProjectService(db)
    return await service.join_project(project_id, current_user)


@router.get("/{project_id}/discussions", response_model=List[DiscussionOut])
async def list_discussions(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    service = ProjectService(db)
    return await service.list_discussions(project_id, current_user)


@router.post(
    "/{project_id}/discussions",
    response_model=DiscussionOut,
    status_code=status.HTTP_201_CREATED
)
async def create_discussion(
    project_id: str,
    discussion_data: DiscussionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = ProjectService(db)
    return await service.create_discussion(project_id, discussion_data, current_user)


@router.patch("/{project_id}/discussions/{discussion_id}", response_model=DiscussionOut)
async def update_discussion(
    project_id: str,
    discussion_id: str,
    update_data: DiscussionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """置頂 / 關閉討論串 (專案建立者或作者)"""
    service = ProjectService(db)
    return await service.update_discussion(project_id, discussion_id, update_data, current_user)


@router.delete("/{project_id}/discussions/{discussion_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_discussion(
    project_id: str,
    discussion_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = ProjectService(db)
    await service.delete_discussion(project_id, discussion_id, current_user)


@router.post(
    "/{project_id}/discussions/{discussion_id}/replies",
    response_model=DiscussionReplyOut,
    status_code=status.HTTP_201_CREATED
)
async def reply_to_discussion(
    project_id: str,
    discussion_id: str,
    reply_data: DiscussionReplyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    回覆討論串。已關閉的討論串回傳 400。
    """
    service = ProjectService(db)
    return await service.reply_to_discussion(project_id, discussion_id, reply_data, current_user)


@router.get("/{project_id}/files", response_model=List[ProjectFileOut])
async def list_project_files(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    service = ProjectService(db)
    return await service.list_files(project_id, current_user)


@router.post(
    "/{project_id}/files",
    response_model=ProjectFileOut,
    status_code=status.HTTP_201_CREATED
)
async def add_project_file(
    project_id: str,
    file_data: ProjectFileCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    登記檔案中繼資料。用戶端需先自行上傳到 Blob Storage 取得 URL。
    """
    service = ProjectService(db)
    return await service.add_file(project_id, file_data, current_user)


@router.delete("/{project_id}/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project_file(
    project_id: str,
    file_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = ProjectService(db)
    await service.delete_file(project_id, file_id, current_user)
