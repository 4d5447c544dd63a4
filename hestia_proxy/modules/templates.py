import glob
import os
import shutil

from hestia_proxy import logger, prompts
from hestia_proxy.errors import EmptyNameError, NotFoundError, TemplateExistsError
from hestia_proxy.translations import t
from hestia_proxy.utils import open_in_editor
from hestia_proxy.validation import (
    DomainCheck, require_domain_name, require_proxy_target, validate_domain_name,
)

HTTP_SUFFIX = ".tpl"
HTTPS_SUFFIX = ".stpl"
BACKUP_SUFFIX = ".bak"
TEMPLATE_MODE = 0o660

PROXY_HEADERS = """\
        proxy_set_header Host $host;
        proxy_set_header X-Real-IP $remote_addr;
        proxy_set_header X-Forwarded-For $proxy_add_x_forwarded_for;
        proxy_set_header X-Forwarded-Proto $scheme;"""

def render_http_template(proxy_target):
    """Server block for the plain HTTP port; %...% tokens are filled in by HestiaCP."""
    return f"""server {{
    listen      %ip%:%web_port%;
    server_name %domain_idn% %alias_idn%;
    location / {{
        proxy_pass {proxy_target};
{PROXY_HEADERS}
    }}
}}
"""

def render_https_template(proxy_target):
    return f"""server {{
    listen      %ip%:%web_ssl_port% ssl http2;
    server_name %domain_idn% %alias_idn%;
    ssl_certificate      %ssl_pem%;
    ssl_certificate_key  %ssl_key%;
    location / {{
        proxy_pass {proxy_target};
{PROXY_HEADERS}
    }}
}}
"""

def template_paths(config, name):
    return (
        os.path.join(config.template_dir, name + HTTP_SUFFIX),
        os.path.join(config.template_dir, name + HTTPS_SUFFIX),
    )

def template_files(config, name):
    """Existing files of the template, the HTTP one first."""
    return [path for path in template_paths(config, name) if os.path.exists(path)]

def _write_template_file(path, content):
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, TEMPLATE_MODE)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)
    # O_CREAT honours the umask, so set the mode explicitly.
    os.chmod(path, TEMPLATE_MODE)

def create_template(config, name, proxy_target):
    """
    Writes the <name>.tpl / <name>.stpl pair proxying to `proxy_target`.
    Nothing is written if the inputs are invalid or either file exists.
    Returns the two paths.
    """
    if not name:
        raise EmptyNameError()
    require_proxy_target(proxy_target)
    require_domain_name(name)

    tpl_path, stpl_path = template_paths(config, name)
    for path in (tpl_path, stpl_path):
        if os.path.exists(path):
            raise TemplateExistsError(name=name, path=path)

    os.makedirs(config.template_dir, exist_ok=True)
    _write_template_file(tpl_path, render_http_template(proxy_target))
    try:
        _write_template_file(stpl_path, render_https_template(proxy_target))
    except OSError:
        os.remove(tpl_path)
        raise

    logger.info(t('template_created', name=name, path=config.template_dir))
    return tpl_path, stpl_path

def list_templates(config):
    """Names of the HTTP templates in the template directory that look like domains."""
    names = []
    for path in glob.glob(os.path.join(glob.escape(config.template_dir), "*" + HTTP_SUFFIX)):
        name = os.path.basename(path)[:-len(HTTP_SUFFIX)]
        if validate_domain_name(name) is DomainCheck.OK:
            names.append(name)
    return sorted(names)

def delete_template(config, name, assume_yes=False):
    """
    Backs up and removes both files of a template. A template with only
    one of its files present is still deleted. Returns False if the
    operator declined the confirmation.
    """
    if not name:
        raise EmptyNameError()

    existing = template_files(config, name)
    if not existing:
        raise NotFoundError(path=os.path.join(config.template_dir, name + HTTP_SUFFIX))

    if not assume_yes and not prompts.ask_confirm(t('confirm_delete_template', name=name), default=False):
        logger.warning(t('operation_cancelled'))
        return False

    os.makedirs(config.backup_dir, exist_ok=True)
    for path in existing:
        backup_path = os.path.join(config.backup_dir, os.path.basename(path) + BACKUP_SUFFIX)
        try:
            shutil.copy2(path, backup_path)
        except FileNotFoundError:
            continue

    for path in existing:
        try:
            os.remove(path)
        except FileNotFoundError:
            continue

    logger.info(t('template_deleted', name=name, path=config.backup_dir))
    return True

def edit_template(config, name, ssl=False):
    """Opens the HTTP (or, with `ssl`, the HTTPS) file of a template in the editor."""
    if not name:
        raise EmptyNameError()

    tpl_path, stpl_path = template_paths(config, name)
    preferred = stpl_path if ssl else tpl_path
    if os.path.exists(preferred):
        path = preferred
    else:
        existing = template_files(config, name)
        if not existing:
            raise NotFoundError(path=preferred)
        path = existing[0]

    logger.info(t('opening_in_editor', path=path))
    return open_in_editor(config, path)
