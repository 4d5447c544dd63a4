from hestia_proxy.translations import t


class ProxyPanelError(Exception):
    """
    Base class for every failure the panel reports to the operator.
    `exit_code` is what the command line returns for it, `key` is the
    translation key of the message, formatted with `params`.
    """
    exit_code = 1
    key = "error_generic"

    def __init__(self, key=None, **params):
        if key is not None:
            self.key = key
        self.params = params
        self.step = None
        super().__init__(self.message)

    @property
    def message(self):
        text = t(self.key, **self.params)
        if self.step is not None:
            number, total, label = self.step
            text = t('step_failed', number=number, total=total, label=label, error=text)
        return text

    def at_step(self, number, total, label):
        self.step = (number, total, label)
        self.args = (self.message,)
        return self

    def __str__(self):
        return self.message


class UsageError(ProxyPanelError):
    exit_code = 1
    key = "error_usage"


class PrivilegeError(ProxyPanelError):
    exit_code = 1
    key = "error_not_root"


class EmptyNameError(ProxyPanelError):
    exit_code = 2
    key = "error_empty_name"


class UnderscoreError(ProxyPanelError):
    exit_code = 3
    key = "error_domain_underscore"


class InvalidDomainError(ProxyPanelError):
    exit_code = 4
    key = "error_domain_format"


class InvalidProxyTargetError(ProxyPanelError):
    exit_code = 5
    key = "error_proxy_target"


class MissingBinaryError(ProxyPanelError):
    exit_code = 6
    key = "error_missing_binary"


class UnknownUserError(ProxyPanelError):
    exit_code = 7
    key = "error_unknown_user"


class IPNotFoundError(ProxyPanelError):
    exit_code = 8
    key = "error_ip_not_found"


class DomainRegistrationError(ProxyPanelError):
    exit_code = 9
    key = "error_add_web_domain"


class CertificateError(ProxyPanelError):
    exit_code = 10
    key = "error_letsencrypt"


class TemplateSwitchError(ProxyPanelError):
    exit_code = 11
    key = "error_change_template"


class TemplateExistsError(ProxyPanelError):
    exit_code = 12
    key = "error_template_exists"


class NotFoundError(ProxyPanelError):
    exit_code = 13
    key = "error_not_found"


EXIT_OS_ERROR = 14
EXIT_INTERRUPTED = 130
