import io
import json
import logging
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import timedelta
from pathlib import Path
from unittest import mock

from tokenkeeper.application import TokensConfig, bootstrap_tokens
from tokenkeeper.application.metrics import configure_metrics_logger
from tokenkeeper.domain import OwnerRef
from tokenkeeper.infrastructure.metrics import MetricsClient
from tokenkeeper.main import load_config, parse_args, run


class LoadConfigTests(unittest.TestCase):
    def test_requires_db_path(self):
        with mock.patch.dict(os.environ, {"TOKENS_DB_PATH": ""}, clear=True):
            with self.assertRaisesRegex(RuntimeError, "TOKENS_DB_PATH is empty"):
                load_config()

    def test_defaults(self):
        with mock.patch.dict(os.environ, {"TOKENS_DB_PATH": "/tmp/tokens.db"}, clear=True):
            config = load_config()
        self.assertEqual(config.db_path, "/tmp/tokens.db")
        self.assertEqual(config.default_size, 12)
        self.assertEqual(config.default_ttl, timedelta(hours=48))
        self.assertEqual(config.max_generation_attempts, 1000)
        self.assertIsNone(config.policies_path)
        self.assertIsNone(config.metrics_path)

    def test_overrides(self):
        env = {
            "TOKENS_DB_PATH": "tokens.db",
            "TOKENS_DEFAULT_SIZE": "20",
            "TOKENS_DEFAULT_TTL_HOURS": "0",
            "TOKENS_MAX_GENERATION_ATTEMPTS": "5",
            "TOKENS_POLICIES_PATH": " tokens.yaml ",
            "TOKENS_METRICS_PATH": "metrics/actions.log",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            config = load_config()
        self.assertEqual(config.default_size, 20)
        self.assertIsNone(config.default_ttl)
        self.assertEqual(config.max_generation_attempts, 5)
        self.assertEqual(config.policies_path, "tokens.yaml")
        self.assertEqual(config.metrics_path, "metrics/actions.log")

    def test_rejects_non_positive_size(self):
        with mock.patch.dict(os.environ, {"TOKENS_DB_PATH": "x.db", "TOKENS_DEFAULT_SIZE": "0"}, clear=True):
            with self.assertRaisesRegex(RuntimeError, "TOKENS_DEFAULT_SIZE"):
                load_config()


class CommandTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.config = TokensConfig(db_path=str(Path(self.tmpdir.name) / "tokens.db"))

    async def asyncTearDown(self):
        self.tmpdir.cleanup()

    async def _run(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with redirect_stdout(out):
            code = await run(parse_args(list(argv)), self.config)
        return code, out.getvalue()

    async def test_generate_prints_value(self):
        code, output = await self._run("generate", "--size", "16")
        self.assertEqual(code, 0)
        self.assertEqual(len(output.strip()), 16)

    async def test_lookup_and_revoke(self):
        async with bootstrap_tokens(self.config) as tokens:
            token = await tokens.repository.add(OwnerRef("User", 4), "activation")

        code, output = await self._run("lookup", "User", "activation", token.value, "--valid")
        self.assertEqual(code, 0)
        shown = json.loads(output)
        self.assertEqual(shown["owner_id"], 4)
        self.assertNotIn(token.value, output)

        code, output = await self._run("revoke", "User", "4", "activation")
        self.assertEqual((code, output.strip()), (0, "Token revoked"))

        code, output = await self._run("lookup", "User", "activation", token.value)
        self.assertEqual((code, output.strip()), (1, "Token not found"))


class MetricsTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    async def asyncTearDown(self):
        logger = logging.getLogger("metrics.actions")
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
        self.tmpdir.cleanup()

    async def test_spans_are_written_as_json_lines(self):
        path = Path(self.tmpdir.name) / "metrics" / "actions.log"
        logger = configure_metrics_logger(str(path))
        self.assertIs(configure_metrics_logger(str(path)), logger)
        self.assertEqual(len(logger.handlers), 1)

        client = MetricsClient()
        client.configure(logger)

        @client.wrap_async("db:tokens.test", source="database")
        async def ok():
            return 42

        @client.wrap_async("db:tokens.fail", source="database")
        async def fail():
            raise RuntimeError("boom")

        self.assertEqual(await ok(), 42)
        with self.assertRaises(RuntimeError):
            await fail()
        for handler in logger.handlers:
            handler.flush()

        lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        self.assertEqual([line["action"] for line in lines], ["db:tokens.test", "db:tokens.fail"])
        self.assertEqual([line["success"] for line in lines], [True, False])
        self.assertEqual(lines[1]["error"], "RuntimeError")
        self.assertEqual(lines[0]["source"], "database")
