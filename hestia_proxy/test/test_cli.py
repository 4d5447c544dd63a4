import contextlib
import io
import os
import stat
import tempfile
import textwrap
import unittest
from unittest import mock

import proxy_panel
from hestia_proxy import logger
from hestia_proxy.config import ProxyConfig

SCRIPTS = {
    "v-list-user-ips": """\
        echo "v-list-user-ips $*" >> "{calls}"
        [ "$1" = "myuser" ] || exit 3
        echo "IP              NAT_IP          STATUS  TYPE"
        echo "10.0.0.4        203.0.113.5     shared  web"
        """,
    "v-add-web-domain": """\
        echo "v-add-web-domain $*" >> "{calls}"
        """,
    "v-add-letsencrypt-domain": """\
        echo "v-add-letsencrypt-domain $*" >> "{calls}"
        exit ${{LE_EXIT:-0}}
        """,
    "v-change-web-domain-tpl": """\
        echo "v-change-web-domain-tpl $*" >> "{calls}"
        """,
}


class CliTestCase(unittest.TestCase):
    """
    Runs proxy_panel.main against a fake HestiaCP installation whose
    v-* commands are shell scripts appending their arguments to a file.
    """

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.config = ProxyConfig(
            hestia=os.path.join(self.tmp.name, "hestia"),
            config_dir=os.path.join(self.tmp.name, "domains"),
            log_file=os.path.join(self.tmp.name, "hestia_proxy.log"),
        )
        self.addCleanup(logger.configure, None)
        self.calls_file = os.path.join(self.tmp.name, "calls")
        os.makedirs(self.config.bin_dir)
        for name, body in SCRIPTS.items():
            path = self.config.binary(name)
            with open(path, "w") as f:
                f.write("#!/bin/sh\n" + textwrap.dedent(body).format(calls=self.calls_file))
            os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

        patcher = mock.patch.object(proxy_panel, "is_root", return_value=True)
        self.is_root = patcher.start()
        self.addCleanup(patcher.stop)

    def main(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = proxy_panel.main(list(argv), config=self.config)
        self.out, self.err = out.getvalue(), err.getvalue()
        return code

    def calls(self):
        if not os.path.exists(self.calls_file):
            return []
        with open(self.calls_file) as f:
            return f.read().splitlines()

    def template(self, name):
        return os.path.join(self.config.template_dir, name)


class DomainSetupCommandSuite(CliTestCase):

    def test_complete_domain_setup(self):
        code = self.main("add", "myuser", "shop.example.com", "http://127.0.0.1:4000")

        self.assertEqual(code, 0, self.err)
        self.assertEqual(self.calls(), [
            "v-list-user-ips myuser",
            "v-add-web-domain myuser shop.example.com 203.0.113.5 no none",
            "v-add-letsencrypt-domain myuser shop.example.com",
            "v-change-web-domain-tpl myuser shop.example.com shop.example.com",
        ])
        for filename in ("shop.example.com.tpl", "shop.example.com.stpl"):
            with open(self.template(filename)) as f:
                self.assertIn("proxy_pass http://127.0.0.1:4000;", f.read())
        self.assertIn("Domain shop.example.com setup complete", self.out)
        with open(self.config.log_file) as f:
            self.assertIn("[INFO] Domain shop.example.com setup complete for user myuser", f.read())

    def test_invalid_domain_calls_nothing(self):
        code = self.main("add", "myuser", "bad_domain.com", "http://127.0.0.1:4000")
        self.assertEqual(code, 3)
        self.assertEqual(self.calls(), [])
        self.assertIn("underscores", self.err)

    def test_unknown_user(self):
        code = self.main("add", "nobody", "shop.example.com", "http://127.0.0.1:4000")
        self.assertEqual(code, 7)
        self.assertEqual(self.calls(), ["v-list-user-ips nobody"])
        self.assertFalse(os.path.exists(self.config.template_dir))

    def test_certificate_failure(self):
        with mock.patch.dict(os.environ, {"LE_EXIT": "15"}):
            code = self.main("add", "myuser", "shop.example.com", "http://127.0.0.1:4000")
        self.assertEqual(code, 10)
        self.assertEqual(len(self.calls()), 3)
        self.assertTrue(os.path.exists(self.template("shop.example.com.tpl")))

    def test_missing_binary(self):
        os.remove(self.config.binary("v-list-user-ips"))
        code = self.main("add", "myuser", "shop.example.com", "http://127.0.0.1:4000")
        self.assertEqual(code, 6)

    def test_fix_ssl(self):
        code = self.main("fix-ssl", "myuser", "shop.example.com")
        self.assertEqual(code, 0, self.err)
        self.assertEqual(self.calls(), [
            "v-change-web-domain-tpl myuser shop.example.com default",
            "v-add-letsencrypt-domain myuser shop.example.com",
            "v-change-web-domain-tpl myuser shop.example.com shop.example.com",
        ])

    def test_fix_ssl_needs_two_arguments(self):
        self.assertEqual(self.main("fix-ssl", "myuser"), 1)
        self.assertEqual(self.calls(), [])


class TemplateCommandSuite(CliTestCase):

    def test_add_template_only(self):
        code = self.main("add", "app.example.com", "http://127.0.0.1:8080")
        self.assertEqual(code, 0, self.err)
        self.assertTrue(os.path.exists(self.template("app.example.com.tpl")))
        self.assertTrue(os.path.exists(self.template("app.example.com.stpl")))
        self.assertEqual(self.calls(), [])

    def test_add_existing_template(self):
        self.assertEqual(self.main("add", "app.example.com", "http://127.0.0.1:8080"), 0)
        self.assertEqual(self.main("add", "app.example.com", "http://127.0.0.1:9090"), 12)
        with open(self.template("app.example.com.tpl")) as f:
            self.assertIn("127.0.0.1:8080", f.read())

    def test_add_bad_target(self):
        self.assertEqual(self.main("add", "app.example.com", "ftp://x.com"), 5)

    def test_add_name_with_trailing_newline(self):
        self.assertEqual(self.main("add", "app.example.com\n", "http://127.0.0.1:8080"), 4)
        self.assertEqual(self.main("add", "myuser", "shop.example.com\n", "http://127.0.0.1:8080"), 4)
        self.assertFalse(os.path.exists(self.config.template_dir))
        self.assertEqual(self.calls(), [])

    def test_filesystem_error_is_reported(self):
        os.makedirs(os.path.dirname(self.config.hestia), exist_ok=True)
        with open(os.path.join(self.config.hestia, "data"), "w") as f:
            f.write("not a directory\n")

        code = self.main("add", "app.example.com", "http://127.0.0.1:8080")

        self.assertEqual(code, 14)
        self.assertIn("System error", self.err)
        self.assertNotIn("Traceback", self.err)

    def test_list(self):
        self.main("add", "b.example.com", "http://127.0.0.1:1")
        self.main("add", "a.example.com", "http://127.0.0.1:2")
        with mock.patch.object(proxy_panel, "_interactive", return_value=False):
            code = self.main("list")
        self.assertEqual(code, 0)
        self.assertLess(self.out.index("a.example.com"), self.out.index("b.example.com"))

    def test_delete(self):
        self.main("add", "app.example.com", "http://127.0.0.1:8080")
        with mock.patch("hestia_proxy.prompts.ask_confirm", return_value=True):
            code = self.main("delete", "app.example.com")
        self.assertEqual(code, 0, self.err)
        self.assertFalse(os.path.exists(self.template("app.example.com.tpl")))
        self.assertTrue(os.path.exists(os.path.join(self.config.backup_dir, "app.example.com.tpl.bak")))

    def test_delete_without_name(self):
        self.assertEqual(self.main("delete"), 2)

    def test_configs_and_edit(self):
        os.makedirs(self.config.config_dir)
        for filename in ("shop.example.com.conf", "shop.example.com.ssl.conf"):
            open(os.path.join(self.config.config_dir, filename), "w").close()

        self.assertEqual(self.main("configs"), 0)
        self.assertEqual(self.out.count("shop.example.com"), 1)

        with mock.patch("hestia_proxy.modules.configs.open_in_editor", return_value=0) as editor:
            self.assertEqual(self.main("edit", "shop.example.com"), 0)
        editor.assert_called_once_with(self.config, os.path.join(self.config.config_dir, "shop.example.com.conf"))

        self.assertEqual(self.main("edit", "missing.example.com"), 13)


class DispatchSuite(CliTestCase):

    def test_help_skips_root_check(self):
        self.is_root.return_value = False
        for flag in ("--help", "-h"):
            self.assertEqual(self.main(flag), 0)
            self.assertIn("fix-ssl", self.out)
        self.is_root.assert_not_called()

    def test_version(self):
        self.assertEqual(self.main("--version"), 0)
        self.assertIn(proxy_panel.__version__, self.out)

    def test_requires_root(self):
        self.is_root.return_value = False
        self.assertEqual(self.main("add", "app.example.com", "http://127.0.0.1:8080"), 1)
        self.assertIn("root", self.err)
        self.assertFalse(os.path.exists(self.config.template_dir))

    def test_unknown_command_prints_help(self):
        self.assertEqual(self.main("frobnicate"), 1)
        self.assertIn("Usage", self.out)

    def test_no_arguments_enters_menu(self):
        with mock.patch.object(proxy_panel, "main_menu") as menu:
            self.assertEqual(self.main(), 0)
        menu.assert_called_once()

    def test_add_with_other_argument_count_enters_menu(self):
        with mock.patch.object(proxy_panel, "main_menu") as menu:
            self.assertEqual(self.main("add", "only-one"), 0)
        menu.assert_called_once()

    def test_interrupt(self):
        with mock.patch.object(proxy_panel, "main_menu", side_effect=KeyboardInterrupt):
            self.assertEqual(self.main(), 130)


if __name__ == "__main__":
    unittest.main()
