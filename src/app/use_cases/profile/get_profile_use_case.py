from libs.result import Result, Return
from src.app.services.blob_store import IBlobStore
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.account_view import build_account_view
from src.app.use_cases.auth.dtos import ProfileResponse
from src.domain.entities import User


class GetProfileUseCase:
    """Project the current account; no state changes"""

    def __init__(self, uow: UnitOfWork, blob_store: IBlobStore):
        self.uow = uow
        self.blob_store = blob_store

    async def execute(self, user: User) -> Result[ProfileResponse]:
        async with self.uow:
            view = await build_account_view(self.uow, user, self.blob_store)
        return Return.ok(ProfileResponse(user=view))
