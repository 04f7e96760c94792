"""Account routes: signup, login, profile and password management.

Accounts gate access to the prompt workspace. Passwords are stored as
bcrypt hashes; a successful signup or login returns a JWT bearer token.
"""

import uuid
from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, status

from prompt_forge.api.auth import (
    AuthUser,
    TokenResponse,
    get_current_user,
    hash_password,
    issue_token,
    verify_password,
)
from prompt_forge.api.dependencies import get_user_repository
from prompt_forge.api.schemas import (
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    SignupRequest,
    UserResponse,
    check_birth_date,
)
from prompt_forge.core.logging import get_logger
from prompt_forge.ports import DuplicateEmailError, UserAccount, UserRepository

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

EMAIL_IN_USE_MESSAGE = "This email address is already in use by another account."
INVALID_CREDENTIALS_MESSAGE = "Incorrect email or password. Please try again."
WRONG_PASSWORD_MESSAGE = "Incorrect current password. Please try again."

# starlette renamed HTTP_422_UNPROCESSABLE_ENTITY
PROFILE_ERROR_STATUS = 422


def _to_response(account: UserAccount) -> UserResponse:
    return UserResponse(
        id=account.id,
        email=account.email,
        first_name=account.first_name,
        last_name=account.last_name,
        dob_day=account.dob_day,
        dob_month=account.dob_month,
        dob_year=account.dob_year,
        mobile_number=account.mobile_number,
        profile_complete=account.profile_complete,
        created_at=account.created_at,
    )


async def _load_account(user: AuthUser, repository: UserRepository) -> UserAccount:
    account = await repository.get_by_id(user.user_id)
    if account is None:
        # Token outlived the account
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Account not found", "code": "ACCOUNT_NOT_FOUND"},
        )
    return account


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Account created"},
        409: {"description": "E-mail address already registered"},
    },
)
async def signup(
    request: SignupRequest,
    repository: UserRepository = Depends(get_user_repository),
) -> TokenResponse:
    """Create an account and return an access token for it."""
    account = UserAccount(
        id=uuid.uuid4().hex,
        email=request.email,
        password_hash=hash_password(request.password),
        first_name=request.first_name,
        last_name=request.last_name,
        dob_day=request.dob_day,
        dob_month=request.dob_month,
        dob_year=request.dob_year,
        mobile_number=request.mobile_number,
    )
    try:
        account = await repository.create(account)
    except DuplicateEmailError as e:
        logger.info("signup_email_in_use")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": EMAIL_IN_USE_MESSAGE, "code": "EMAIL_IN_USE"},
        ) from e

    logger.info("account_created", user_id=account.id)
    return issue_token(account.id, account.email)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        200: {"description": "Token generated successfully"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    request: LoginRequest,
    repository: UserRepository = Depends(get_user_repository),
) -> TokenResponse:
    """Exchange an e-mail and password for a JWT access token."""
    account = await repository.get_by_email(request.email)
    if account is None or not verify_password(request.password, account.password_hash):
        logger.warning("invalid_login_attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": INVALID_CREDENTIALS_MESSAGE, "code": "INVALID_CREDENTIALS"},
        )

    logger.info("token_issued", user_id=account.id)
    return issue_token(account.id, account.email)


@router.get("/me", response_model=UserResponse)
async def get_me(
    user: AuthUser = Depends(get_current_user),
    repository: UserRepository = Depends(get_user_repository),
) -> UserResponse:
    """Return the authenticated user's profile."""
    return _to_response(await _load_account(user, repository))


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    user: AuthUser = Depends(get_current_user),
    repository: UserRepository = Depends(get_user_repository),
) -> UserResponse:
    """Complete or update profile fields. Omitted fields keep their value."""
    account = await _load_account(user, repository)
    changes = request.model_dump(exclude_none=True)
    merged = replace(account, **changes)
    try:
        # A partial update can pair a new day with the stored month and year
        check_birth_date(merged.dob_day, merged.dob_month, merged.dob_year)
    except ValueError as e:
        raise HTTPException(
            status_code=PROFILE_ERROR_STATUS,
            detail={"error": str(e), "code": "INVALID_BIRTH_DATE"},
        ) from e
    account = await repository.update(merged)

    logger.info(
        "profile_updated",
        user_id=account.id,
        fields=sorted(changes),
        profile_complete=account.profile_complete,
    )
    return _to_response(account)


@router.post(
    "/password",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Password changed"},
        401: {"description": "Current password is incorrect"},
    },
)
async def change_password(
    request: PasswordChangeRequest,
    user: AuthUser = Depends(get_current_user),
    repository: UserRepository = Depends(get_user_repository),
) -> None:
    """Change the password after re-checking the current one."""
    account = await _load_account(user, repository)
    if not verify_password(request.current_password, account.password_hash):
        logger.warning("password_change_reauth_failed", user_id=account.id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": WRONG_PASSWORD_MESSAGE, "code": "REAUTH_FAILED"},
        )

    await repository.update(
        replace(account, password_hash=hash_password(request.new_password))
    )
    logger.info("password_changed", user_id=account.id)
