"""Request body decoding and validation for user creation"""
import json
from logging import getLogger

from pydantic import ValidationError as PydanticValidationError

from users_api.errors import DecodeError, NotFoundError, ValidationError
from users_api.models import CreateUserRequest

logger = getLogger(__name__)

# users.id is a 32-bit INTEGER column
MAX_USER_ID = 2**31 - 1


def decode_create_user(body: bytes) -> CreateUserRequest:
    """Decode a raw body into a CreateUserRequest.

    Decoding runs first: bytes that are not a JSON object, or fields of the
    wrong type, raise DecodeError. Only then are the fields checked, and a
    missing or empty name/email raises ValidationError.
    """
    try:
        data = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        logger.debug("Body is not JSON: %s", e)
        raise DecodeError() from e

    if not isinstance(data, dict):
        raise DecodeError()

    try:
        request = CreateUserRequest.model_validate(data)
    except PydanticValidationError as e:
        logger.debug("Body has the wrong shape: %s", e)
        raise DecodeError() from e

    validate_create_user(request)
    return request


def validate_create_user(request: CreateUserRequest) -> None:
    if not request.name or not request.email:
        raise ValidationError()


def parse_user_id(raw: str) -> int:
    """Parse a path-embedded id. Anything that is not a plain integer matches no user"""
    if not (raw.isascii() and raw.isdigit()):
        raise NotFoundError()
    digits = raw.lstrip("0") or "0"
    if len(digits) > len(str(MAX_USER_ID)):
        raise NotFoundError()
    user_id = int(digits)
    if user_id > MAX_USER_ID:
        raise NotFoundError()
    return user_id
