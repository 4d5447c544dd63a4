import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from hestia_proxy import logger
from hestia_proxy.config import ProxyConfig
from hestia_proxy.errors import EXIT_INTERRUPTED, EXIT_OS_ERROR, PrivilegeError, ProxyPanelError, UsageError
from hestia_proxy.menu import main_menu, show_template_list
from hestia_proxy.modules.configs import edit_config, list_configs
from hestia_proxy.modules.provisioner import HestiaProvisioner, fix_ssl, setup_domain
from hestia_proxy.modules.templates import create_template, delete_template, list_templates
from hestia_proxy.translations import load_language, t
from hestia_proxy.utils import is_root

# Version of the application
__version__ = "0.3.0"

PROG = "hestia-proxy"

console = Console()

def display_help():
    """Prints the command overview, examples and troubleshooting notes."""
    console.print(Panel(f"[bold bright_cyan]{t('app_title')}[/bold bright_cyan]\n{t('app_description')}",
                        border_style="cyan"))
    console.print(f"[bold green]{t('help_usage')}[/bold green]  {PROG} \\[COMMAND] \\[OPTIONS]\n")

    commands = Table(title=t('help_commands'), title_justify="left", title_style="bold yellow",
                     show_header=False, box=None, padding=(0, 2))
    commands.add_column(style="bold green", no_wrap=True)
    commands.add_column()
    commands.add_row("list", t('help_cmd_list'))
    commands.add_row("add <name> <target>", t('help_cmd_add_template'))
    commands.add_row("add <user> <domain> <target>", t('help_cmd_add_domain'))
    commands.add_row("delete <name>", t('help_cmd_delete'))
    commands.add_row("edit <domain>", t('help_cmd_edit'))
    commands.add_row("configs", t('help_cmd_configs'))
    commands.add_row("fix-ssl <user> <domain>", t('help_cmd_fix_ssl'))
    commands.add_row("--version, -V", t('help_cmd_version'))
    commands.add_row("--help, -h", t('help_cmd_help'))
    console.print(commands)

    console.print(f"\n[bold yellow]{t('help_examples')}[/bold yellow]")
    examples = [
        (t('help_example_list'), f"{PROG} list"),
        (t('help_example_add_template'), f"{PROG} add app.example.com http://127.0.0.1:8080"),
        (t('help_example_add_domain'), f"{PROG} add hestiacp_user domain.com http://127.0.0.1:8080"),
        (t('help_example_delete'), f"{PROG} delete app.example.com"),
        (t('help_example_edit'), f"{PROG} edit domain.com"),
        (t('help_example_fix_ssl'), f"{PROG} fix-ssl hestiacp_user domain.com"),
    ]
    for description, command in examples:
        console.print(f"  # {description}\n  [cyan]{command}[/cyan]\n")

    console.print(f"[bold red]{t('help_note')}[/bold red] {t('help_root_note')}\n")
    console.print(f"[bold yellow]{t('help_troubleshooting')}[/bold yellow]")
    for key in ('help_trouble_installed', 'help_trouble_paths', 'help_trouble_logs'):
        console.print(f"- {t(key)}")

def _print_names(names, empty_key, path):
    if not names:
        logger.warning(t(empty_key, path=path))
        return
    for index, name in enumerate(names, start=1):
        console.print(f"[bold yellow]{index:>3}[/bold yellow]  {name}")

def _interactive():
    return sys.stdin.isatty() and sys.stdout.isatty()

def cmd_list(config, provisioner, args):
    if _interactive():
        show_template_list(config)
    else:
        logger.info(t('templates_title'))
        _print_names(list_templates(config), 'no_templates_found', config.template_dir)

def cmd_add(config, provisioner, args):
    if len(args) == 3:
        setup_domain(config, provisioner, *args)
    elif len(args) == 2:
        create_template(config, *args)
    else:
        main_menu(config, provisioner, version=__version__)

def cmd_delete(config, provisioner, args):
    if len(args) > 1:
        raise UsageError(key='usage_delete')
    delete_template(config, args[0] if args else "")

def cmd_edit(config, provisioner, args):
    if len(args) > 1:
        raise UsageError(key='usage_edit')
    edit_config(config, args[0] if args else "")

def cmd_configs(config, provisioner, args):
    logger.info(t('configs_title'))
    _print_names(list_configs(config), 'no_configs_found', config.config_dir)

def cmd_fix_ssl(config, provisioner, args):
    if len(args) != 2:
        raise UsageError(key='usage_fix_ssl')
    fix_ssl(config, provisioner, *args)

COMMANDS = {
    'list': cmd_list,
    'add': cmd_add,
    'delete': cmd_delete,
    'edit': cmd_edit,
    'configs': cmd_configs,
    'fix-ssl': cmd_fix_ssl,
    'fix_ssl': cmd_fix_ssl,
}

def main(argv=None, config=None, provisioner=None):
    """Dispatches the command line and returns the process exit code."""
    argv = sys.argv[1:] if argv is None else list(argv)
    config = config or ProxyConfig.from_env()
    load_language(config.language)
    logger.configure(config.log_file)

    if argv and argv[0] in ('--help', '-h'):
        display_help()
        return 0
    if argv and argv[0] in ('--version', '-V'):
        console.print(f"{PROG} {__version__}")
        return 0

    try:
        if not is_root():
            raise PrivilegeError()

        provisioner = provisioner or HestiaProvisioner(config)
        if not argv:
            main_menu(config, provisioner, version=__version__)
            return 0

        command = COMMANDS.get(argv[0])
        if command is None:
            display_help()
            return UsageError.exit_code

        command(config, provisioner, argv[1:])
        return 0
    except ProxyPanelError as e:
        logger.error(e)
        return e.exit_code
    except OSError as e:
        logger.error(t('critical_error', error=e))
        return EXIT_OS_ERROR
    except KeyboardInterrupt:
        console.print(f"\n[yellow]{t('operation_cancelled')}[/yellow]")
        return EXIT_INTERRUPTED

def run():
    sys.exit(main())

if __name__ == "__main__":
    run()
