"""
AWS 区域与 IAM endpoint

IAM 是全局服务，大部分分区共用一个 endpoint，
只有 GovCloud 和中国区使用独立的 endpoint。
"""

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class Region:
    """区域描述 (名称 + IAM endpoint)"""
    name: str
    iam_endpoint: str


_GLOBAL_ENDPOINT = "https://iam.amazonaws.com"

REGIONS = MappingProxyType({
    r.name: r
    for r in [
        Region("us-east-1", _GLOBAL_ENDPOINT),
        Region("us-east-2", _GLOBAL_ENDPOINT),
        Region("us-west-1", _GLOBAL_ENDPOINT),
        Region("us-west-2", _GLOBAL_ENDPOINT),
        Region("ca-central-1", _GLOBAL_ENDPOINT),
        Region("eu-west-1", _GLOBAL_ENDPOINT),
        Region("eu-west-2", _GLOBAL_ENDPOINT),
        Region("eu-central-1", _GLOBAL_ENDPOINT),
        Region("ap-northeast-1", _GLOBAL_ENDPOINT),
        Region("ap-southeast-1", _GLOBAL_ENDPOINT),
        Region("ap-southeast-2", _GLOBAL_ENDPOINT),
        Region("sa-east-1", _GLOBAL_ENDPOINT),
        Region("us-gov-west-1", "https://iam.us-gov.amazonaws.com"),
        Region("cn-north-1", "https://iam.cn-north-1.amazonaws.com.cn"),
    ]
})


def get_region(name: str) -> Region:
    """
    按名称查找区域

    Raises:
        ValueError: 未知区域
    """
    try:
        return REGIONS[name]
    except KeyError:
        raise ValueError(f"unknown region: {name}") from None
