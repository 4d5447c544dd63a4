import os

DEFAULT_HESTIA = "/usr/local/hestia"
CONFIG_DIR = "/etc/nginx/conf.d/domains"
DEFAULT_EDITOR = "nano"
FALLBACK_EDITOR = "vim"
DEFAULT_LOG_FILE = "/var/log/hestia_proxy.log"
DEFAULT_LANG = "en"


class ProxyConfig:
    """
    Paths, editor and logging settings shared by every operation.
    Built once at startup and handed to each module instead of
    having them read the environment themselves.
    """

    def __init__(self, hestia=DEFAULT_HESTIA, template_dir=None, config_dir=CONFIG_DIR,
                 backup_dir=None, editor=DEFAULT_EDITOR, fallback_editor=FALLBACK_EDITOR,
                 log_file=DEFAULT_LOG_FILE, language=DEFAULT_LANG):
        self.hestia = hestia.rstrip("/") or "/"
        self.template_dir = template_dir or os.path.join(self.hestia, "data/templates/web/nginx/php-fpm")
        self.config_dir = config_dir
        self.backup_dir = backup_dir or os.path.join(self.hestia, "data/templates/web/nginx_backup")
        self.bin_dir = os.path.join(self.hestia, "bin")
        self.editor = editor or DEFAULT_EDITOR
        self.fallback_editor = fallback_editor
        self.log_file = log_file or None
        self.language = language or DEFAULT_LANG

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            hestia=env.get("HESTIA") or DEFAULT_HESTIA,
            editor=env.get("EDITOR") or DEFAULT_EDITOR,
            log_file=env.get("HESTIA_PROXY_LOG", DEFAULT_LOG_FILE),
            language=env.get("HESTIA_PROXY_LANG") or DEFAULT_LANG,
        )

    def binary(self, name):
        """Absolute path of a HestiaCP command, e.g. v-add-web-domain."""
        return os.path.join(self.bin_dir, name)

    def __repr__(self):
        return (f"ProxyConfig(hestia={self.hestia!r}, template_dir={self.template_dir!r}, "
                f"config_dir={self.config_dir!r}, backup_dir={self.backup_dir!r})")
