"""XML 模型与错误格式测试"""

import pytest
from xml.etree import ElementTree as ET

from aws_iam_query.models import (
    IAMError,
    IAMSchemaError,
    SimpleResponse,
    User,
    parse_document,
    require,
)
from aws_iam_query.regions import REGIONS, get_region


def test_parse_document_with_declaration():
    doc = parse_document(b'<?xml version="1.0" encoding="UTF-8"?>\n<A><B>x</B></A>')
    assert doc.find("A/B").text == "x"


def test_parse_document_multiple_roots():
    doc = parse_document(b"<A/><B/>")
    assert [child.tag for child in doc] == ["A", "B"]


def test_parse_document_malformed():
    with pytest.raises(ET.ParseError):
        parse_document(b"<A>")


def test_require_missing_element():
    with pytest.raises(IAMSchemaError):
        require(parse_document(b"<A/>"), "CreateUserResult/User")


def test_user_missing_fields_are_empty():
    user = User.from_xml(ET.fromstring("<User><UserName>bob</UserName></User>"))
    assert user == User(name="bob")


def test_simple_response_requires_metadata():
    with pytest.raises(IAMSchemaError):
        SimpleResponse.from_xml(parse_document(b"<Other/>"))


@pytest.mark.parametrize(
    "error, text",
    [
        (IAMError(status_code=403, code="AccessDenied", message="no access"), "AccessDenied: no access"),
        (IAMError(status_code=500, message="500 Internal Server Error"), "500: 500 Internal Server Error"),
        (IAMError(message="broken"), "broken"),
    ],
)
def test_error_str(error, text):
    assert str(error) == text


def test_error_from_errors_list():
    doc = parse_document(
        b"<Response><Errors><Error><Code>Throttling</Code><Message>slow down</Message></Error>"
        b"</Errors><RequestID>r</RequestID></Response>"
    )
    error = IAMError.from_xml(doc, 400)
    assert (error.status_code, error.code, error.message) == (400, "Throttling", "slow down")


def test_regions_are_read_only():
    assert get_region("us-east-1").iam_endpoint == "https://iam.amazonaws.com"
    assert get_region("us-gov-west-1").iam_endpoint == "https://iam.us-gov.amazonaws.com"
    with pytest.raises(TypeError):
        REGIONS["local"] = get_region("us-east-1")
    with pytest.raises(ValueError):
        get_region("nowhere-1")
