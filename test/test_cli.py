#!/usr/bin/env python3
import contextlib
import io
import tempfile
import unittest
from unittest.mock import patch

from helpers import reset_logging

from am_executor import cli


class TestParseArgs(unittest.TestCase):
    def test_command_and_static_args(self):
        settings = cli.parse_args(['-v', '-p', ':9095', '-l', '/var/log/amx',
                                   '/usr/local/bin/handler.sh', '--mode', 'restart', '-x'])
        self.assertEqual(settings.command, '/usr/local/bin/handler.sh')
        self.assertEqual(settings.args, ['--mode', 'restart', '-x'])
        self.assertTrue(settings.verbose)
        self.assertEqual(settings.listen_addr, ':9095')
        self.assertEqual(settings.log_dir, '/var/log/amx')

    def test_defaults(self):
        settings = cli.parse_args(['handler.sh'])
        self.assertEqual(settings.args, [])
        self.assertEqual(settings.max_processes, 0)
        self.assertEqual(settings.listen_addr, cli.LISTEN_ADDR)

    def test_max_processes(self):
        self.assertEqual(cli.parse_args(['--max-processes', '4', 'handler.sh']).max_processes, 4)

    def test_requires_command(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as ctx:
            cli.parse_args(['-v'])
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn('Require command', stderr.getvalue())

    def test_rejects_bad_listen_addr(self):
        with contextlib.redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            cli.parse_args(['-p', 'localhost:http', 'handler.sh'])


class TestListenAddr(unittest.TestCase):
    def test_formats(self):
        self.assertEqual(cli.parse_listen_addr(':8080'), ('0.0.0.0', 8080))
        self.assertEqual(cli.parse_listen_addr('127.0.0.1:9000'), ('127.0.0.1', 9000))
        self.assertEqual(cli.parse_listen_addr('9000'), ('0.0.0.0', 9000))
        self.assertEqual(cli.parse_listen_addr('[::1]:9000'), ('::1', 9000))


class TestMain(unittest.TestCase):
    def test_main_serves_app(self):
        self.addCleanup(reset_logging)
        with tempfile.TemporaryDirectory() as tmp, patch('flask.Flask.run') as run:
            code = cli.main(['-p', '127.0.0.1:9999', '-l', tmp, 'handler.sh', 'arg'])
            reset_logging()
        self.assertEqual(code, 0)
        run.assert_called_once_with(host='127.0.0.1', port=9999, threaded=True, use_reloader=False)


if __name__ == '__main__':
    unittest.main()
