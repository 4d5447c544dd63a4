"""
Domain provisioning on top of the HestiaCP command line tools.

`Provisioner` is the narrow interface the setup steps talk to;
`HestiaProvisioner` implements it by running the v-* binaries from
$HESTIA/bin. `DomainSetup` chains the steps of a complete proxied
domain setup and stops at the first failure. Nothing already done is
rolled back: a half-provisioned domain is left for the operator.
"""
import abc
import os
import re

from hestia_proxy import logger
from hestia_proxy.errors import (
    CertificateError, DomainRegistrationError, IPNotFoundError, MissingBinaryError,
    ProxyPanelError, TemplateSwitchError, UnknownUserError, UsageError,
)
from hestia_proxy.modules.templates import create_template
from hestia_proxy.translations import t
from hestia_proxy.utils import is_executable, run_command
from hestia_proxy.validation import require_domain_name, require_proxy_target

IPV4_RE = re.compile(r"^[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}$")

LIST_USER_IPS = "v-list-user-ips"
ADD_WEB_DOMAIN = "v-add-web-domain"
ADD_LETSENCRYPT_DOMAIN = "v-add-letsencrypt-domain"
CHANGE_WEB_DOMAIN_TPL = "v-change-web-domain-tpl"

DEFAULT_TEMPLATE = "default"


def parse_user_ip(output):
    """First IPv4 address found in the second column of v-list-user-ips output."""
    for line in (output or "").splitlines():
        columns = line.split()
        if len(columns) >= 2 and IPV4_RE.match(columns[1]):
            return columns[1]
    return None


def letsencrypt_log_hint(config, user, domain):
    return os.path.join(config.hestia, "log", f"LE-{user}-{domain}.log")


class Provisioner(abc.ABC):
    """What the domain setup needs from the control panel."""

    @abc.abstractmethod
    def resolve_user_ip(self, user):
        """Returns the IP address assigned to `user`."""

    @abc.abstractmethod
    def register_domain(self, user, domain, ip):
        pass

    @abc.abstractmethod
    def issue_certificate(self, user, domain):
        pass

    @abc.abstractmethod
    def switch_template(self, user, domain, template):
        pass


class HestiaProvisioner(Provisioner):

    def __init__(self, config):
        self.config = config

    def _run(self, name, *args):
        path = self.config.binary(name)
        if not is_executable(path):
            raise MissingBinaryError(binary=path)
        logger.info(t('running_command', command=" ".join([name, *args])))
        try:
            result = run_command([path, *args])
        except FileNotFoundError:
            raise MissingBinaryError(binary=path)
        if result.returncode != 0:
            output = (result.stderr or result.stdout or "").strip()
            if output:
                logger.warning(output)
        return result

    def resolve_user_ip(self, user):
        result = self._run(LIST_USER_IPS, user)
        if result.returncode != 0:
            raise UnknownUserError(user=user)
        ip = parse_user_ip(result.stdout)
        if ip is None:
            raise IPNotFoundError(user=user)
        return ip

    def register_domain(self, user, domain, ip):
        # no proxy-extension list, no mail domain: the custom template does the proxying
        if self._run(ADD_WEB_DOMAIN, user, domain, ip, "no", "none").returncode != 0:
            raise DomainRegistrationError(domain=domain)

    def issue_certificate(self, user, domain):
        if self._run(ADD_LETSENCRYPT_DOMAIN, user, domain).returncode != 0:
            raise CertificateError(domain=domain, log=letsencrypt_log_hint(self.config, user, domain))

    def switch_template(self, user, domain, template):
        if self._run(CHANGE_WEB_DOMAIN_TPL, user, domain, template).returncode != 0:
            raise TemplateSwitchError(domain=domain, template=template)


class DomainSetup:
    """
    Complete setup of a proxied domain for a HestiaCP user.

    Each step states what must already hold and what holds once it
    returns, so a failed run can be finished by hand from the step
    that failed.
    """

    STEPS = (
        ('validate', 'step_validate'),
        ('resolve_ip', 'step_resolve_ip'),
        ('create_template', 'step_create_template'),
        ('register_domain', 'step_register_domain'),
        ('issue_certificate', 'step_issue_certificate'),
        ('switch_template', 'step_switch_template'),
    )

    def __init__(self, config, provisioner, user, domain, proxy_target):
        self.config = config
        self.provisioner = provisioner
        self.user = user
        self.domain = domain
        self.proxy_target = proxy_target
        self.ip = None
        self.completed = []

    def validate(self):
        """Pre: nothing. Post: user, domain and proxy target are well formed."""
        if not self.user:
            raise UsageError(key='usage_add_domain')
        require_domain_name(self.domain)
        require_proxy_target(self.proxy_target)

    def resolve_ip(self):
        """Pre: valid user name. Post: self.ip holds the user's IPv4 address."""
        self.ip = self.provisioner.resolve_user_ip(self.user)
        logger.info(t('user_ip_resolved', user=self.user, ip=self.ip))

    def create_template(self):
        """Pre: no template named after the domain. Post: <domain>.tpl and .stpl exist."""
        create_template(self.config, self.domain, self.proxy_target)

    def register_domain(self):
        """Pre: self.ip is set. Post: the web domain exists in HestiaCP."""
        self.provisioner.register_domain(self.user, self.domain, self.ip)

    def issue_certificate(self):
        """Pre: the web domain exists. Post: it has a Let's Encrypt certificate."""
        self.provisioner.issue_certificate(self.user, self.domain)

    def switch_template(self):
        """Pre: the template files exist. Post: the domain is served by them."""
        self.provisioner.switch_template(self.user, self.domain, self.domain)

    def run(self):
        total = len(self.STEPS)
        for number, (method, label_key) in enumerate(self.STEPS, start=1):
            label = t(label_key)
            logger.info(t('step_running', number=number, total=total, label=label))
            try:
                getattr(self, method)()
            except ProxyPanelError as e:
                e.at_step(number, total, label)
                raise
            self.completed.append(method)
        logger.info(t('domain_setup_complete', domain=self.domain, user=self.user))
        return True


def setup_domain(config, provisioner, user, domain, proxy_target):
    return DomainSetup(config, provisioner, user, domain, proxy_target).run()


def fix_ssl(config, provisioner, user, domain):
    """
    Re-issues the certificate of a proxied domain: switch back to the
    default template, run Let's Encrypt, then restore the custom template.
    """
    if not user:
        raise UsageError(key='usage_fix_ssl')
    require_domain_name(domain)

    logger.info(t('fix_ssl_start', domain=domain, user=user))
    provisioner.switch_template(user, domain, DEFAULT_TEMPLATE)
    provisioner.issue_certificate(user, domain)
    logger.info(t('fix_ssl_certificate_applied', domain=domain))
    provisioner.switch_template(user, domain, domain)
    logger.info(t('fix_ssl_template_restored', domain=domain))
    return True
