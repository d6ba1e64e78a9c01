import hmac
import logging

from fastapi import APIRouter, Depends

from config import get_config_value
from db.database import get_store
from db.kv_store import StoreError
from models.account import AdminSignupRequest, Role, SignInRequest, SignupRequest
from utils.auth import get_current_account_id, get_identity_provider
from utils.errors import Forbidden, InternalError, Unauthorized, ValidationError
from utils.identity import IdentityError, IdentityUnavailable
from utils.profiles import create_profile, get_profile

router = APIRouter()
logger = logging.getLogger(__name__)


def _register(payload: SignupRequest, role: Role, store, identity) -> dict:
    if not payload.email or not payload.password or not payload.name:
        raise ValidationError("Missing required fields")
    try:
        account = identity.create_user(payload.email, payload.password, payload.name, role.value)
        profile = create_profile(store, account.id, account.email, payload.name, role)
    except IdentityError as exc:
        logger.info("Identity provider refused %s signup: %s", role.value, exc)
        raise ValidationError(str(exc))
    except (IdentityUnavailable, StoreError) as exc:
        logger.error("Error in %s signup: %s", role.value, exc)
        raise InternalError("Admin signup failed" if role == Role.ADMIN else "Signup failed")
    return {
        "success": True,
        "user": {"id": profile.id, "email": profile.email, "name": profile.name, "role": profile.role.value},
    }


@router.post("/signup")
async def signup(payload: SignupRequest, store=Depends(get_store), identity=Depends(get_identity_provider)):
    """Create a student account and its profile."""
    return _register(payload, Role.STUDENT, store, identity)


@router.post("/admin/signup")
async def admin_signup(payload: AdminSignupRequest, store=Depends(get_store), identity=Depends(get_identity_provider)):
    """Create an admin account; requires the configured shared admin secret."""
    expected = str(get_config_value("auth", "admin_secret") or "")
    supplied = str(payload.admin_secret or "").encode("utf-8")
    if not expected or not hmac.compare_digest(supplied, expected.encode("utf-8")):
        raise Forbidden("Invalid admin secret")
    return _register(payload, Role.ADMIN, store, identity)


@router.post("/signin")
async def signin(payload: SignInRequest, store=Depends(get_store), identity=Depends(get_identity_provider)):
    if not payload.email or not payload.password:
        raise ValidationError("Missing required fields")
    try:
        token = identity.sign_in(payload.email, payload.password)
        account_id = identity.verify_token(token)
    except IdentityError as exc:
        raise Unauthorized(str(exc))
    except IdentityUnavailable as exc:
        logger.error("Error in signin: %s", exc)
        raise InternalError("Sign in failed")
    if not account_id:
        raise Unauthorized()
    profile = get_profile(store, account_id)
    return {"success": True, "accessToken": token, "user": profile.to_record()}


@router.get("/user")
async def current_user(account_id: str = Depends(get_current_account_id), store=Depends(get_store)):
    """Profile of the bearer-token holder."""
    try:
        profile = get_profile(store, account_id)
    except StoreError as exc:
        logger.error("Error getting user: %s", exc)
        raise InternalError("Failed to get user")
    return {"user": profile.to_record()}
