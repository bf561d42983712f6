"""
AWS Signature Version 2 签名

签名流程:
- 写入 AWSAccessKeyId / SignatureVersion / SignatureMethod
- 参数按 key 排序后做 RFC 3986 编码 (空格为 %20，不是 +)
- 对 "METHOD\\nhost\\npath\\nquery" 做 HMAC，结果 base64 后放入 Signature
"""

import base64
import hashlib
import hmac
from dataclasses import dataclass, field
from urllib.parse import quote

SIGNATURE_VERSION = "2"
HMAC_SHA256 = "HmacSHA256"
HMAC_SHA1 = "HmacSHA1"

_DIGESTS = {
    HMAC_SHA256: hashlib.sha256,
    HMAC_SHA1: hashlib.sha1,
}


@dataclass(frozen=True)
class Credentials:
    """访问凭证 (token 仅用于临时凭证)"""
    access_key: str
    secret_key: str = field(repr=False)
    token: str | None = field(default=None, repr=False)


def encode(value: str) -> str:
    """RFC 3986 编码，只保留 A-Z a-z 0-9 - _ . ~"""
    return quote(value, safe="-_.~")


def canonical_query(params: dict[str, str]) -> str:
    """按 key 排序并编码的 query string，签名和发送共用"""
    return "&".join(f"{encode(k)}={encode(params[k])}" for k in sorted(params))


def string_to_sign(method: str, host: str, path: str, params: dict[str, str]) -> str:
    return "\n".join([method, host, path, canonical_query(params)])


def sign(
    credentials: Credentials,
    method: str,
    path: str,
    params: dict[str, str],
    host: str,
    signature_method: str = HMAC_SHA256,
) -> str:
    """
    签名并把 Signature 写回 params

    Args:
        credentials: 访问凭证
        method: HTTP 方法
        path: 请求路径
        params: 请求参数 (原地修改)
        host: endpoint 主机名
        signature_method: 参数中没有 SignatureMethod 时使用的算法

    Returns:
        base64 编码的签名

    Raises:
        ValueError: 不支持的签名算法
    """
    params.pop("Signature", None)
    params["AWSAccessKeyId"] = credentials.access_key
    if credentials.token:
        params["SecurityToken"] = credentials.token
    params.setdefault("SignatureVersion", SIGNATURE_VERSION)
    params.setdefault("SignatureMethod", signature_method)

    digest = _DIGESTS.get(params["SignatureMethod"])
    if digest is None:
        raise ValueError(f"unsupported signature method: {params['SignatureMethod']}")

    payload = string_to_sign(method, host, path, params)
    mac = hmac.new(credentials.secret_key.encode("utf-8"), payload.encode("utf-8"), digest)
    signature = base64.b64encode(mac.digest()).decode("ascii")
    params["Signature"] = signature
    return signature
