from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from hestia_proxy import logger, prompts
from hestia_proxy.errors import ProxyPanelError
from hestia_proxy.modules.configs import edit_config, list_configs
from hestia_proxy.modules.provisioner import fix_ssl, setup_domain
from hestia_proxy.modules.templates import create_template, delete_template, edit_template, list_templates
from hestia_proxy.selection import parse_item_action, parse_menu_choice
from hestia_proxy.translations import t
from hestia_proxy.validation import DomainCheck, validate_domain_name

console = Console()

def _numbered_table(title, column, items):
    table = Table(title=title, title_style="bold cyan", show_lines=False)
    table.add_column("#", justify="right", style="bold yellow", no_wrap=True)
    table.add_column(column, style="white")
    for index, item in enumerate(items, start=1):
        table.add_row(str(index), item)
    return table

def ask_domain(message=None):
    """
    Asks for a domain until a valid one is entered.
    Returns None if the answer is empty or the prompt is cancelled.
    """
    while True:
        domain = prompts.ask_text(message or t('enter_domain_name'))
        if not domain:
            console.print(f"[red]{t('operation_cancelled')}[/red]")
            return None
        result = validate_domain_name(domain)
        if result is DomainCheck.OK:
            return domain
        if result is DomainCheck.UNDERSCORE:
            console.print(f"[red]{escape(t('error_domain_underscore', domain=domain))}[/red]")
        else:
            console.print(f"[red]{escape(t('error_domain_format', domain=domain))}[/red]")
        console.print(f"[yellow]{t('domain_retry_hint')}[/yellow]")

def add_proxy_template(config):
    console.print(f"\n[bold green]{t('add_template_title')}[/bold green]")
    name = ask_domain(t('enter_template_name'))
    if not name:
        return
    proxy_target = prompts.ask_text(t('enter_proxy_target'))
    if proxy_target is None:
        console.print(f"[red]{t('operation_cancelled')}[/red]")
        return
    create_template(config, name, proxy_target)

def complete_domain_setup(config, provisioner):
    console.print(f"\n[bold green]{t('domain_setup_title')}[/bold green]")
    user = prompts.ask_text(t('enter_hestia_user'))
    if not user:
        console.print(f"[red]{t('operation_cancelled')}[/red]")
        return
    domain = ask_domain()
    if not domain:
        return
    proxy_target = prompts.ask_text(t('enter_proxy_target'))
    if proxy_target is None:
        console.print(f"[red]{t('operation_cancelled')}[/red]")
        return
    setup_domain(config, provisioner, user, domain, proxy_target)

def show_template_list(config):
    """
    Numbered list of templates. Input like "3e" edits the third
    template, "3s" its HTTPS variant and "3d" deletes it.
    """
    while True:
        names = list_templates(config)
        if not names:
            logger.warning(t('no_templates_found', path=config.template_dir))
            return

        console.print(_numbered_table(t('templates_title'), t('template_column'), names))
        console.print(f"[dim]{t('template_actions_hint')}[/dim]")

        while True:
            answer = prompts.ask_text(t('template_action_prompt'))
            if not answer:
                return
            selection = parse_item_action(answer, len(names))
            if selection is not None:
                break
            console.print(f"[red]{escape(t('invalid_selection', value=answer))}[/red]")

        name = names[selection.index - 1]
        try:
            if selection.action == 'delete':
                delete_template(config, name)
            else:
                edit_template(config, name, ssl=selection.action == 'edit_ssl')
        except ProxyPanelError as e:
            logger.error(e)

def delete_template_interactive(config):
    console.print(f"\n[bold green]{t('delete_template_title')}[/bold green]")
    name = prompts.ask_text(t('enter_template_name_delete'))
    if not name:
        console.print(f"[red]{t('operation_cancelled')}[/red]")
        return
    delete_template(config, name)

def edit_config_interactive(config):
    console.print(f"\n[bold green]{t('edit_config_title')}[/bold green]")
    domain = ask_domain()
    if not domain:
        return
    edit_config(config, domain)

def show_config_list(config):
    """Numbered list of domain configs; picking a number opens it in the editor."""
    domains = list_configs(config)
    if not domains:
        logger.warning(t('no_configs_found', path=config.config_dir))
        return

    console.print(_numbered_table(t('configs_title'), t('domain_column'), domains))
    while True:
        answer = prompts.ask_text(t('config_select_prompt'))
        if not answer:
            return
        choice = parse_menu_choice(answer, len(domains))
        if choice is not None:
            break
        console.print(f"[red]{escape(t('invalid_selection', value=answer))}[/red]")

    edit_config(config, domains[choice - 1])

def fix_ssl_interactive(config, provisioner):
    console.print(f"\n[bold green]{t('fix_ssl_title')}[/bold green]")
    user = prompts.ask_text(t('enter_hestia_user'))
    if not user:
        console.print(f"[red]{t('operation_cancelled')}[/red]")
        return
    domain = ask_domain()
    if not domain:
        return
    fix_ssl(config, provisioner, user, domain)

def main_menu(config, provisioner, version=None):
    """Displays the main menu and handles user input."""
    menu_options = {
        t('menu_add_template'): lambda: add_proxy_template(config),
        t('menu_domain_setup'): lambda: complete_domain_setup(config, provisioner),
        t('menu_list_templates'): lambda: show_template_list(config),
        t('menu_delete_template'): lambda: delete_template_interactive(config),
        t('menu_edit_config'): lambda: edit_config_interactive(config),
        t('menu_list_configs'): lambda: show_config_list(config),
        t('menu_fix_ssl'): lambda: fix_ssl_interactive(config, provisioner),
        t('menu_exit'): "exit",
    }

    while True:
        console.clear()
        title = t('app_title') if version is None else f"{t('app_title')} v{version}"
        console.print(Panel(f"[bold bright_cyan]{title}[/bold bright_cyan]",
                            subtitle=f"[italic cyan]{config.hestia}[/italic cyan]",
                            border_style="bold magenta"))

        action = prompts.ask_select(t('main_menu_prompt'), list(menu_options.keys()))

        if action is None or menu_options.get(action) == "exit":
            console.print(f"[cyan]{t('goodbye')}[/cyan]")
            break

        selected_function = menu_options.get(action)
        if selected_function:
            try:
                selected_function()
            except ProxyPanelError as e:
                logger.error(e)
            except OSError as e:
                logger.error(t('critical_error', error=e))
            prompts.pause()
