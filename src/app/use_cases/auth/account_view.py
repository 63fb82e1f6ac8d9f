from src.app.services.blob_store import IBlobStore
from src.app.services.role_registry import permissions_for
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import as_utc
from src.domain.entities import RoleName, User
from .dtos import AccountView, RoleInfo


async def build_account_view(uow: UnitOfWork, user: User, blob_store: IBlobStore) -> AccountView:
    """Project a user into its public view. Must run inside an open unit of work."""
    permissions = await permissions_for(uow, user)

    return AccountView(
        id=str(user.id),
        first_name=user.first_name,
        last_name=user.last_name,
        date_of_birth=user.date_of_birth.isoformat() if user.date_of_birth else None,
        email=user.email,
        phone=user.phone,
        address=user.address,
        city=user.city,
        state=user.state,
        email_verified_at=(
            as_utc(user.email_verified_at).isoformat() if user.email_verified_at else None
        ),
        avatar=blob_store.url(user.avatar) if user.avatar else None,
        created_at=as_utc(user.created_at).isoformat() if user.created_at else None,
        role=RoleInfo(name=RoleName(user.role).value) if user.role else None,
        permissions=permissions,
    )
