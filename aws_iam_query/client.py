"""
AWS IAM Query API HTTP Client

使用 httpx 实现，处理 IAM Query API 的特点：
- 所有操作都是 GET /?Action=...，参数放在 query string
- 请求使用 Signature Version 2 签名
- 响应是 XML，只有 200 视为成功 (3xx 也按错误处理)
- 不做重试、分页
"""

import logging
from datetime import datetime, timezone
from xml.etree import ElementTree as ET

from httpx import BaseTransport, Client, Response

from .models import (
    CreateAccessKeyResponse,
    CreateGroupResponse,
    CreateUserResponse,
    GetUserResponse,
    IAMError,
    IAMSchemaError,
    ListAccessKeysResponse,
    ListGroupsResponse,
    SimpleResponse,
    parse_document,
)
from .regions import Region, get_region
from .signer import HMAC_SHA256, Credentials, canonical_query, sign

logger = logging.getLogger(__name__)

API_VERSION = "2010-05-08"


class IAMClientError(Exception):
    """IAM 客户端错误"""
    def __init__(self, message: str, error: IAMError | None = None):
        super().__init__(message)
        self.error = error


class IAMServiceError(IAMClientError):
    """服务端返回的错误 (非 200)，error 一定不为空"""
    error: IAMError


class IAMDecodeError(IAMClientError):
    """成功响应的 XML 无法解析或结构不符"""
    pass


def _timestamp() -> str:
    """当前 UTC 时间 (RFC 3339)"""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class IAMClient:
    """
    AWS IAM 客户端

    构造后不再修改任何字段，可以在多个线程间共享。

    示例:
        >>> creds = Credentials("AKID", "SECRET")
        >>> with IAMClient(creds, "us-east-1") as iam:
        ...     resp = iam.create_user("bob")
        ...     resp.user.id
    """

    def __init__(
        self,
        credentials: Credentials,
        region: Region | str,
        signature_method: str = HMAC_SHA256,
        timeout: float | None = None,
        transport: BaseTransport | None = None,
    ):
        """
        初始化客户端

        Args:
            credentials: 访问凭证
            region: Region 或区域名称
            signature_method: HmacSHA256 或 HmacSHA1
            timeout: 请求超时时间，None 使用 httpx 默认值
            transport: 自定义 httpx transport (测试、代理)
        """
        if isinstance(region, str):
            region = get_region(region)
        self.credentials = credentials
        self.region = region
        self.signature_method = signature_method

        options: dict = {"base_url": region.iam_endpoint.rstrip("/")}
        if timeout is not None:
            options["timeout"] = timeout
        if transport is not None:
            options["transport"] = transport
        self.client = Client(**options)
        # 签名用 httpx 规范化后的 host (小写、去掉默认端口)，与实际发送的 Host 一致
        self.host = self.client.base_url.netloc.decode("ascii")

    def close(self):
        """关闭连接"""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    # ============ 底层请求方法 ============

    def _get(self, query: str) -> Response:
        """GET 请求，读取完整响应后释放连接"""
        with self.client.stream("GET", f"/?{query}") as resp:
            resp.read()
        return resp

    def _handle_response(self, resp: Response, response_cls):
        """
        处理响应，统一错误处理

        Args:
            resp: HTTP 响应
            response_cls: 成功时解析的响应类型

        Returns:
            response_cls 实例

        Raises:
            IAMServiceError: 服务端返回错误
            IAMDecodeError: 成功响应无法解析
        """
        if resp.status_code == 200:
            try:
                return response_cls.from_xml(parse_document(resp.content))
            except (ET.ParseError, IAMSchemaError) as e:
                raise IAMDecodeError(f"cannot decode {response_cls.__name__}: {e}") from e

        # 解析错误
        try:
            error = IAMError.from_xml(parse_document(resp.content), resp.status_code)
        except ET.ParseError:
            error = IAMError(status_code=resp.status_code)
        if not error.message:
            error.message = f"{resp.status_code} {resp.reason_phrase}".strip()

        raise IAMServiceError(str(error), error)

    def _query(self, params: dict[str, str], response_cls):
        """
        补充公共参数、签名并发送

        签名之后 params 不能再修改，query string 直接由签名用的参数生成
        """
        params["Version"] = API_VERSION
        params["Timestamp"] = _timestamp()
        sign(self.credentials, "GET", "/", params, self.host, self.signature_method)

        logger.debug("IAM %s -> %s", params["Action"], self.host)
        resp = self._get(canonical_query(params))
        logger.debug("IAM %s <- %s", params["Action"], resp.status_code)
        return self._handle_response(resp, response_cls)

    # ============ User 操作 ============

    def create_user(self, name: str, path: str = "/") -> CreateUserResponse:
        """创建用户"""
        params = {
            "Action": "CreateUser",
            "Path": path,
            "UserName": name,
        }
        return self._query(params, CreateUserResponse)

    def get_user(self, name: str | None = None) -> GetUserResponse:
        """
        获取用户

        Args:
            name: 用户名，不传时返回当前凭证对应的用户
        """
        params = {"Action": "GetUser"}
        if name is not None:
            params["UserName"] = name
        return self._query(params, GetUserResponse)

    def delete_user(self, name: str) -> SimpleResponse:
        """删除用户"""
        params = {
            "Action": "DeleteUser",
            "UserName": name,
        }
        return self._query(params, SimpleResponse)

    # ============ AccessKey 操作 ============

    def create_access_key(self, user_name: str) -> CreateAccessKeyResponse:
        """创建访问密钥 (secret 只在此响应中返回)"""
        params = {
            "Action": "CreateAccessKey",
            "UserName": user_name,
        }
        return self._query(params, CreateAccessKeyResponse)

    def list_access_keys(self, user_name: str | None = None) -> ListAccessKeysResponse:
        """列出访问密钥 (只返回第一页)"""
        params = {"Action": "ListAccessKeys"}
        if user_name is not None:
            params["UserName"] = user_name
        return self._query(params, ListAccessKeysResponse)

    def delete_access_key(self, access_key_id: str, user_name: str | None = None) -> SimpleResponse:
        """删除访问密钥"""
        params = {
            "Action": "DeleteAccessKey",
            "AccessKeyId": access_key_id,
        }
        if user_name is not None:
            params["UserName"] = user_name
        return self._query(params, SimpleResponse)

    # ============ Group 操作 ============

    def create_group(self, name: str, path: str | None = None) -> CreateGroupResponse:
        """创建组"""
        params = {
            "Action": "CreateGroup",
            "GroupName": name,
        }
        if path is not None:
            params["Path"] = path
        return self._query(params, CreateGroupResponse)

    def delete_group(self, name: str) -> SimpleResponse:
        """删除组 (组内不能有成员)"""
        params = {
            "Action": "DeleteGroup",
            "GroupName": name,
        }
        return self._query(params, SimpleResponse)

    def list_groups(self, path_prefix: str | None = None) -> ListGroupsResponse:
        """列出组 (只返回第一页)"""
        params = {"Action": "ListGroups"}
        if path_prefix is not None:
            params["PathPrefix"] = path_prefix
        return self._query(params, ListGroupsResponse)

    # ============ Group 成员操作 ============

    def add_user_to_group(self, user_name: str, group_name: str) -> SimpleResponse:
        """添加组成员"""
        params = {
            "Action": "AddUserToGroup",
            "UserName": user_name,
            "GroupName": group_name,
        }
        return self._query(params, SimpleResponse)

    def remove_user_from_group(self, user_name: str, group_name: str) -> SimpleResponse:
        """移除组成员"""
        params = {
            "Action": "RemoveUserFromGroup",
            "UserName": user_name,
            "GroupName": group_name,
        }
        return self._query(params, SimpleResponse)
