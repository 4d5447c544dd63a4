import os

from hestia_proxy import logger
from hestia_proxy.errors import EmptyNameError, NotFoundError
from hestia_proxy.translations import t
from hestia_proxy.utils import open_in_editor

# Longest first so "example.com.ssl.conf" is not stripped to "example.com.ssl".
CONFIG_SUFFIXES = (".ssl.conf", ".conf")

def domain_from_filename(filename):
    for suffix in CONFIG_SUFFIXES:
        if filename.endswith(suffix) and len(filename) > len(suffix):
            return filename[:-len(suffix)]
    return None

def list_configs(config):
    """Sorted, de-duplicated domains that have an nginx config generated by HestiaCP."""
    try:
        filenames = os.listdir(config.config_dir)
    except FileNotFoundError:
        logger.warning(t('config_dir_not_found', path=config.config_dir))
        return []

    domains = set()
    for filename in filenames:
        domain = domain_from_filename(filename)
        if domain:
            domains.add(domain)
    return sorted(domains)

def config_files(config, domain):
    candidates = [os.path.join(config.config_dir, domain + suffix) for suffix in (".conf", ".ssl.conf")]
    return [path for path in candidates if os.path.isfile(path)]

def edit_config(config, domain):
    """Opens the first config file of `domain` in the editor."""
    if not domain:
        raise EmptyNameError()

    files = config_files(config, domain)
    if not files:
        raise NotFoundError(key='error_config_not_found', domain=domain)

    logger.info(t('opening_in_editor', path=files[0]))
    return open_in_editor(config, files[0])
