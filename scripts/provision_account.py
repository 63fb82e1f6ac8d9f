"""Provision an administrator, owner or user account out-of-band.

Run from the project root:
    python -m scripts.provision_account --email admin@example.com --password 'S3cure-pass' --role ADMIN --verified

Environment Variables:
    PROVISION_EMAIL: Email for the account
    PROVISION_PASSWORD: Password for the account (min 8 characters)

The database is taken from DB_URI in env.yaml. Pass --init-db on a fresh
database to create the tables first.
"""

import argparse
import asyncio
import logging
import os
import sys

from sqlmodel import SQLModel

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.passwords import PASSWORD_TOO_LONG, exceeds_bcrypt_limit
from src.app.use_cases.accounts import ProvisionAccountCommand, ProvisionAccountUseCase
from src.depends import AsyncSessionLocal, engine
from src.domain.entities import RoleName

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


async def provision(command: ProvisionAccountCommand, init_db: bool = False):
    if init_db:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async with AsyncSessionLocal() as session:
        result = await ProvisionAccountUseCase(SqlAlchemyUnitOfWork(session)).execute(command)

    await engine.dispose()
    return result


def main():
    parser = argparse.ArgumentParser(
        description="Provision an account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--email", default=os.environ.get("PROVISION_EMAIL"))
    parser.add_argument("--password", default=os.environ.get("PROVISION_PASSWORD"))
    parser.add_argument(
        "--role",
        choices=[role.value for role in RoleName],
        default=RoleName.admin.value,
    )
    parser.add_argument("--first-name")
    parser.add_argument("--last-name")
    parser.add_argument(
        "--verified",
        action="store_true",
        help="Mark the email as verified immediately",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create missing tables before provisioning",
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if not args.email:
        print("Error: --email or PROVISION_EMAIL environment variable required")
        sys.exit(1)

    if not args.password or len(args.password) < MIN_PASSWORD_LENGTH:
        print(f"Error: password of at least {MIN_PASSWORD_LENGTH} characters required")
        sys.exit(1)

    if exceeds_bcrypt_limit(args.password):
        print(f"Error: {PASSWORD_TOO_LONG}")
        sys.exit(1)

    command = ProvisionAccountCommand(
        email=args.email,
        password=args.password,
        role=RoleName(args.role),
        first_name=args.first_name,
        last_name=args.last_name,
        verified=args.verified,
    )

    result = asyncio.run(provision(command, init_db=args.init_db))

    if result.is_err():
        print(f"Error: {result.error.message}")
        sys.exit(1)

    user = result.value
    print(f"Provisioned {user.role} account: {user.email} (id: {user.id})")


if __name__ == "__main__":
    main()
