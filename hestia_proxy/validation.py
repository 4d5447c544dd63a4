"""
Domain name and proxy target checks shared by the command line,
the interactive menu and the provisioning steps.

Both validators are pure and return a tagged result; the `require_*`
helpers turn a failed result into the matching panel error.
"""
import enum
import re

from hestia_proxy.errors import (
    EmptyNameError, InvalidDomainError, InvalidProxyTargetError, UnderscoreError,
)

# Labels of 1-63 characters, no leading/trailing hyphen, then a 2-6 letter TLD.
DOMAIN_RE = re.compile(r"^([A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,6}\Z")

SCHEME_RE = re.compile(r"^https?://")
PROXY_TARGET_RE = re.compile(
    r"^https?://"
    r"(?P<host>[A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?(\.[A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?)*)"
    r"(:(?P<port>[0-9]{1,5}))?"
    r"(?P<path>/[^\s;{}]*)?\Z",
)


class DomainCheck(enum.Enum):
    OK = "ok"
    EMPTY = "empty"
    UNDERSCORE = "underscore"
    FORMAT = "format"


class TargetCheck(enum.Enum):
    OK = "ok"
    EMPTY = "empty"
    SCHEME = "scheme"
    FORMAT = "format"


def validate_domain_name(name):
    if not name:
        return DomainCheck.EMPTY
    # HestiaCP refuses underscores in web domains.
    if "_" in name:
        return DomainCheck.UNDERSCORE
    if not DOMAIN_RE.match(name):
        return DomainCheck.FORMAT
    return DomainCheck.OK


def validate_proxy_target(target):
    if not target:
        return TargetCheck.EMPTY
    if not SCHEME_RE.match(target):
        return TargetCheck.SCHEME
    match = PROXY_TARGET_RE.match(target)
    if not match:
        return TargetCheck.FORMAT
    port = match.group("port")
    if port is not None and not 0 < int(port) <= 65535:
        return TargetCheck.FORMAT
    return TargetCheck.OK


def require_domain_name(name):
    result = validate_domain_name(name)
    if result is DomainCheck.EMPTY:
        raise EmptyNameError()
    if result is DomainCheck.UNDERSCORE:
        raise UnderscoreError(domain=name)
    if result is DomainCheck.FORMAT:
        raise InvalidDomainError(domain=name)
    return name


def require_proxy_target(target):
    result = validate_proxy_target(target)
    if result is TargetCheck.EMPTY:
        raise InvalidProxyTargetError(key='error_proxy_target_empty', reason=result.value)
    if result is TargetCheck.SCHEME:
        raise InvalidProxyTargetError(key='error_proxy_target_scheme', target=target, reason=result.value)
    if result is TargetCheck.FORMAT:
        raise InvalidProxyTargetError(target=target, reason=result.value)
    return target
