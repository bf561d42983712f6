"""
AWS IAM Query Client

AWS Identity and Access Management (IAM) Query API 的 Python 客户端。
"""

from .models import (
    User,
    AccessKey,
    Group,
    CreateUserResponse,
    GetUserResponse,
    CreateAccessKeyResponse,
    ListAccessKeysResponse,
    CreateGroupResponse,
    ListGroupsResponse,
    SimpleResponse,
    IAMError,
)

from .client import IAMClient, IAMClientError, IAMDecodeError, IAMServiceError
from .regions import Region, REGIONS, get_region
from .signer import Credentials, sign

__all__ = [
    # Client
    "IAMClient",
    "IAMClientError",
    "IAMDecodeError",
    "IAMServiceError",
    # Auth
    "Credentials",
    "sign",
    # Regions
    "Region",
    "REGIONS",
    "get_region",
    # Models
    "User",
    "AccessKey",
    "Group",
    "CreateUserResponse",
    "GetUserResponse",
    "CreateAccessKeyResponse",
    "ListAccessKeysResponse",
    "CreateGroupResponse",
    "ListGroupsResponse",
    "SimpleResponse",
    "IAMError",
]
