"""
Publish target groups: one Service Center endpoint per deployment target.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Subdomain patterns per environment name, in dispatch order
GROUP_SUBDOMAIN_PATTERNS = (
    "{env}",
    "{env}-coreap",
    "{env}-clientapp",
    "{env}-coreos",
    "{env}sc",
)

_SCHEME_AND_SUBDOMAIN = re.compile(r"^https://[^.]+")


@dataclass(frozen=True)
class TargetGroup:
    subdomain: str
    base_domain: str

    @property
    def host(self) -> str:
        return f"{self.subdomain}.{self.base_domain}"

    @property
    def service_center_url(self) -> str:
        return f"https://{self.host}/ServiceCenter/"

    def module_url(self, url: str) -> str:
        """Point a scanned module url at this group's subdomain."""
        return _SCHEME_AND_SUBDOMAIN.sub(f"https://{self.subdomain}", url, count=1)


def derive_groups(environment: str, base_domain: str) -> list[TargetGroup]:
    return [
        TargetGroup(subdomain=pattern.format(env=environment), base_domain=base_domain)
        for pattern in GROUP_SUBDOMAIN_PATTERNS
    ]
