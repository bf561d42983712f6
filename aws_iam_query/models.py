"""
AWS IAM 数据模型

按照 IAM Query API (2010-05-08) 的 XML 响应定义：
https://docs.aws.amazon.com/IAM/latest/APIReference/

XML 解析说明：
- 响应可能是带 namespace 的 <XxxResponse> 文档，也可能是多个顶层元素
- 统一包一层 <Document> 再解析，按路径查找时忽略 namespace
- 缺失的文本元素视为空字符串
"""

import re
from dataclasses import dataclass, field
from xml.etree import ElementTree as ET


class IAMSchemaError(ValueError):
    """响应 XML 缺少必要元素"""
    pass


# ============ XML 工具 ============

_XML_DECLARATION = re.compile(rb"^\s*<\?xml[^>]*\?>")


def parse_document(content: bytes) -> ET.Element:
    """
    解析响应体，结果统一挂在 <Document> 下

    单根文档直接解析 (保留 XML 声明中的 encoding)；
    多个顶层元素或空 body 时去掉声明再整体包一层，此时只支持 UTF-8

    Raises:
        ET.ParseError: XML 格式错误
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError:
        body = _XML_DECLARATION.sub(b"", content, count=1)
        return ET.fromstring(b"<Document>" + body + b"</Document>")
    doc = ET.Element("Document")
    doc.append(root)
    return doc


def _xpath(path: str) -> str:
    return "/".join(f"{{*}}{tag}" for tag in path.split("/"))


def find(doc: ET.Element, path: str) -> ET.Element | None:
    """在文档顶层或响应根元素下按路径查找"""
    xpath = _xpath(path)
    element = doc.find(xpath)
    if element is None:
        element = doc.find(f"*/{xpath}")
    return element


def findall(doc: ET.Element, path: str) -> list[ET.Element]:
    xpath = _xpath(path)
    return doc.findall(xpath) or doc.findall(f"*/{xpath}")


def text(element: ET.Element, path: str) -> str:
    return element.findtext(_xpath(path), default="")


def require(doc: ET.Element, path: str) -> ET.Element:
    element = find(doc, path)
    if element is None:
        raise IAMSchemaError(f"response has no <{path}> element")
    return element


def request_id(doc: ET.Element) -> str:
    element = find(doc, "ResponseMetadata/RequestId")
    if element is None:
        return ""
    return element.text or ""


# ============ 资源 ============

@dataclass
class User:
    """
    IAM 用户

    XML 字段:
    - UserName -> name
    - UserId -> id
    - Arn, Path, CreateDate
    """
    name: str
    id: str = ""
    arn: str = ""
    path: str = ""
    create_date: str = ""

    @classmethod
    def from_xml(cls, element: ET.Element) -> "User":
        return cls(
            name=text(element, "UserName"),
            id=text(element, "UserId"),
            arn=text(element, "Arn"),
            path=text(element, "Path"),
            create_date=text(element, "CreateDate"),
        )


@dataclass
class AccessKey:
    """
    访问密钥

    注意: secret 只在 CreateAccessKey 响应中返回，
    ListAccessKeys 返回的元数据里为空
    """
    user_name: str
    id: str
    secret: str = field(default="", repr=False)
    status: str = ""
    create_date: str = ""

    @classmethod
    def from_xml(cls, element: ET.Element) -> "AccessKey":
        return cls(
            user_name=text(element, "UserName"),
            id=text(element, "AccessKeyId"),
            secret=text(element, "SecretAccessKey"),
            status=text(element, "Status"),
            create_date=text(element, "CreateDate"),
        )


@dataclass
class Group:
    """IAM 组"""
    name: str
    id: str = ""
    arn: str = ""
    path: str = ""

    @classmethod
    def from_xml(cls, element: ET.Element) -> "Group":
        return cls(
            name=text(element, "GroupName"),
            id=text(element, "GroupId"),
            arn=text(element, "Arn"),
            path=text(element, "Path"),
        )


# ============ 响应类型 ============

@dataclass
class CreateUserResponse:
    user: User
    request_id: str = ""

    @classmethod
    def from_xml(cls, doc: ET.Element) -> "CreateUserResponse":
        return cls(
            user=User.from_xml(require(doc, "CreateUserResult/User")),
            request_id=request_id(doc),
        )


@dataclass
class GetUserResponse:
    user: User
    request_id: str = ""

    @classmethod
    def from_xml(cls, doc: ET.Element) -> "GetUserResponse":
        return cls(
            user=User.from_xml(require(doc, "GetUserResult/User")),
            request_id=request_id(doc),
        )


@dataclass
class CreateAccessKeyResponse:
    access_key: AccessKey
    request_id: str = ""

    @classmethod
    def from_xml(cls, doc: ET.Element) -> "CreateAccessKeyResponse":
        return cls(
            access_key=AccessKey.from_xml(require(doc, "CreateAccessKeyResult/AccessKey")),
            request_id=request_id(doc),
        )


@dataclass
class ListAccessKeysResponse:
    """只包含第一页，IsTruncated/Marker 不处理"""
    access_keys: list[AccessKey]
    request_id: str = ""

    @classmethod
    def from_xml(cls, doc: ET.Element) -> "ListAccessKeysResponse":
        result = require(doc, "ListAccessKeysResult")
        members = result.findall(_xpath("AccessKeyMetadata/member"))
        return cls(
            access_keys=[AccessKey.from_xml(m) for m in members],
            request_id=request_id(doc),
        )


@dataclass
class CreateGroupResponse:
    group: Group
    request_id: str = ""

    @classmethod
    def from_xml(cls, doc: ET.Element) -> "CreateGroupResponse":
        return cls(
            group=Group.from_xml(require(doc, "CreateGroupResult/Group")),
            request_id=request_id(doc),
        )


@dataclass
class ListGroupsResponse:
    """只包含第一页"""
    groups: list[Group]
    request_id: str = ""

    @classmethod
    def from_xml(cls, doc: ET.Element) -> "ListGroupsResponse":
        result = require(doc, "ListGroupsResult")
        members = result.findall(_xpath("Groups/member"))
        return cls(
            groups=[Group.from_xml(m) for m in members],
            request_id=request_id(doc),
        )


@dataclass
class SimpleResponse:
    """没有返回数据的操作 (Delete*, AddUserToGroup 等)"""
    request_id: str = ""

    @classmethod
    def from_xml(cls, doc: ET.Element) -> "SimpleResponse":
        require(doc, "ResponseMetadata")
        return cls(request_id=request_id(doc))


# ============ 错误 ============

@dataclass
class IAMError:
    """
    IAM 错误响应

    支持两种格式:
    - <Errors><Error>...</Error></Errors>
    - <ErrorResponse><Error>...</Error><RequestId/></ErrorResponse>

    多个 Error 时只取第一个
    """
    status_code: int = 0
    code: str = ""
    message: str = ""
    request_id: str = ""

    @classmethod
    def from_xml(cls, doc: ET.Element, status_code: int = 0) -> "IAMError":
        entries = findall(doc, "Errors/Error") or findall(doc, "Error")
        entry = entries[0] if entries else None
        # ErrorResponse 的 RequestId 在根元素下，其它格式在 ResponseMetadata 下
        req_id = find(doc, "RequestId")
        return cls(
            status_code=status_code,
            code=text(entry, "Code") if entry is not None else "",
            message=text(entry, "Message") if entry is not None else "",
            request_id=(req_id.text or "") if req_id is not None else request_id(doc),
        )

    def __str__(self) -> str:
        if self.code:
            prefix = f"{self.code}: "
        elif self.status_code > 0:
            prefix = f"{self.status_code}: "
        else:
            prefix = ""
        return prefix + self.message
