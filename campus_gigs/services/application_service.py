# campus_gigs/services/application_service.py

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.exceptions import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from campus_gigs.models.application import GigApplication, ApplicationStatusEnum
from campus_gigs.models.notification import NotificationTypeEnum
from campus_gigs.models.user import User
from campus_gigs.repositories.application_repo import ApplicationRepository
from campus_gigs.repositories.gig_repo import GigRepository
from campus_gigs.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# 雇主可以做的決定
DECISION_ACTIONS = {
    ApplicationStatusEnum.accepted.value: ApplicationStatusEnum.accepted,
    ApplicationStatusEnum.rejected.value: ApplicationStatusEnum.rejected,
}


class ApplicationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.application_repo = ApplicationRepository(db)
        self.gig_repo = GigRepository(db)
        self.notification_service = NotificationService(db)

    async def submit_application(
        self,
        gig_id: str,
        applicant: User,
        cover_letter: Optional[str] = None,
    ) -> GigApplication:
        """
        申請 Gig。
        同一人對同一 Gig 只能申請一次；先查一次，併發時再由唯一約束擋下。
        """
        # 步驟 1: 驗證
        gig = await self.gig_repo.get_gig_by_id(gig_id)
        if not gig:
            raise NotFoundError("Gig not found")

        existing = await self.application_repo.check_existing_application(gig_id, applicant.user_id)
        if existing:
            raise ConflictError("You have already applied to this gig")

        # 通知需要的資料先取出，commit 失敗 rollback 後物件會過期
        poster_id = gig.poster_id
        gig_title = gig.title
        applicant_id = applicant.user_id
        applicant_name = applicant.name

        # 步驟 2: 儲存
        new_application = GigApplication(
            gig_id=gig_id,
            applicant_id=applicant_id,
            cover_letter=cover_letter,
            status=ApplicationStatusEnum.pending,
        )
        try:
            await self.application_repo.create_application(new_application)
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Duplicate application (gig={gig_id}, applicant={applicant_id})")
            raise ConflictError("You have already applied to this gig")

        application_id = new_application.application_id

        # 步驟 3: commit 之後才發通知 (best-effort)
        await self.notification_service.notify(
            user_id=poster_id,
            type=NotificationTypeEnum.gig_application,
            title="New Application",
            message=f"{applicant_name} applied to your gig: {gig_title}",
            link_url=f"/gig/{gig_id}",
            gig_id=gig_id,
        )

        # 步驟 4: 重新查詢，附上申請者資訊
        return await self.application_repo.get_application_by_id(application_id)

    async def decide_application(
        self,
        application_id: str,
        action: str,
        actor: User,
    ) -> GigApplication:
        """
        (刊登者) 接受或拒絕申請。
        檢查順序：action 格式 -> 存在 -> 權限 -> 狀態。
        已經決定過的申請不能再改 (Conflict)。
        """
        new_status = DECISION_ACTIONS.get(action)
        if new_status is None:
            raise InvalidArgumentError("Invalid action. Must be 'accepted' or 'rejected'")

        application = await self.application_repo.get_application_by_id_with_gig(application_id)
        if not application:
            raise NotFoundError("Application not found")

        # 權限一律看 gig.poster_id
        if application.gig.poster_id != actor.user_id:
            raise ForbiddenError("Only the gig poster can decide on applications")

        if application.status != ApplicationStatusEnum.pending:
            raise ConflictError("This application has already been decided")

        # 步驟 1: 更新物件狀態 (記憶體中)
        application.status = new_status
        application.responded_at = datetime.now()
        application.accepted_by_id = actor.user_id if new_status == ApplicationStatusEnum.accepted else None

        applicant_id = application.applicant_id
        gig_id = application.gig_id
        gig_title = application.gig.title

        # 步驟 2: 儲存
        await self.application_repo.update_application(application)

        # 步驟 3: 通知申請者
        if new_status == ApplicationStatusEnum.accepted:
            await self.notification_service.notify(
                user_id=applicant_id,
                type=NotificationTypeEnum.application_accepted,
                title="Application Accepted!",
                message=f'Your application for "{gig_title}" has been accepted!',
                link_url=f"/gig/{gig_id}",
                gig_id=gig_id,
            )
        else:
            await self.notification_service.notify(
                user_id=applicant_id,
                type=NotificationTypeEnum.application_rejected,
                title="Application Update",
                message=f'Your application for "{gig_title}" was not accepted.',
                link_url=f"/gig/{gig_id}",
                gig_id=gig_id,
            )

        return await self.application_repo.get_application_by_id(application_id)

    async def list_my_applications(self, user: User) -> List[GigApplication]:
        return await self.application_repo.list_applications_by_applicant(user.user_id)
