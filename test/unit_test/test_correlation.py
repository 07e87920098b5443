"""
Unit tests for correlation ID scoping and logging
"""

import asyncio
import logging
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from cusd_factory.infra.correlation import (
    CorrelationContext,
    generate_correlation_id,
    get_correlation_id,
    log_with_correlation,
)


class TestCorrelationContext(unittest.TestCase):
    """Tests for correlation ID context management"""

    def test_ids_are_short_hex_and_unique(self):
        ids = {generate_correlation_id() for _ in range(50)}
        self.assertEqual(len(ids), 50)
        for cid in ids:
            self.assertEqual(len(cid), 12)
            int(cid, 16)

    def test_scope(self):
        self.assertIsNone(get_correlation_id())
        with CorrelationContext("mint") as cid:
            self.assertTrue(cid.startswith("mint_"))
            self.assertEqual(get_correlation_id(), cid)
        self.assertIsNone(get_correlation_id())

    def test_nested_scope_restores_outer(self):
        with CorrelationContext("outer") as outer:
            with CorrelationContext() as inner:
                self.assertEqual(get_correlation_id(), inner)
                self.assertNotIn("_", inner)
            self.assertEqual(get_correlation_id(), outer)

    def test_scope_reset_on_exception(self):
        with self.assertRaises(RuntimeError):
            with CorrelationContext("burn"):
                raise RuntimeError("boom")
        self.assertIsNone(get_correlation_id())

    def test_concurrent_tasks_are_isolated(self):
        """Each asyncio task sees only its own ID"""

        async def operation(name):
            with CorrelationContext(name) as cid:
                await asyncio.sleep(0)
                return cid, get_correlation_id()

        async def run_all():
            return await asyncio.gather(*(operation(f"op{i}") for i in range(5)))

        results = asyncio.run(run_all())
        for cid, seen in results:
            self.assertEqual(cid, seen)
        self.assertEqual(len({cid for cid, _ in results}), 5)


class TestLogWithCorrelation(unittest.TestCase):

    def test_message_prefix_and_extras(self):
        logger = logging.getLogger("cusd_factory.test.correlation")
        with self.assertLogs(logger, level="INFO") as captured:
            with CorrelationContext("mint") as cid:
                log_with_correlation(logger, logging.INFO, "Submitting", "mint", amount=5)

        record = captured.records[0]
        self.assertEqual(record.getMessage(), f"[{cid}] [mint] Submitting")
        self.assertEqual(record.correlation_id, cid)
        self.assertEqual(record.operation, "mint")
        self.assertEqual(record.amount, 5)

    def test_without_context(self):
        logger = logging.getLogger("cusd_factory.test.correlation")
        with self.assertLogs(logger, level="WARNING") as captured:
            log_with_correlation(logger, logging.WARNING, "No scope", "burn")
        self.assertEqual(captured.records[0].getMessage(), "[burn] No scope")
        self.assertIsNone(captured.records[0].correlation_id)


if __name__ == "__main__":
    unittest.main()
