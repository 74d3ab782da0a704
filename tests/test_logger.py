#!/usr/bin/env python3
"""Test suite for logging configuration"""

import logging
import os
import shutil
import tempfile
import unittest

import pyspp  # noqa: F401  installs Logger.trace
from pyspp.logger import (
    ColoredFormatter, LogContext, LoggerConfig, LogLevel,
    get_logger, setup_logger, setup_logger_from_config
)


class TestLogger(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.name = 'pyspp_test_logger'

    def tearDown(self):
        logger = logging.getLogger(self.name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        shutil.rmtree(self.test_dir)

    def test_trace_level(self):
        self.assertEqual(LogLevel.TRACE.value, 5)
        self.assertEqual(logging.getLevelName(5), 'TRACE')
        logger = get_logger(self.name)
        with self.assertLogs(logger, level=5) as logs:
            logger.trace("iteration detail")
        self.assertEqual(logs.records[0].levelname, 'TRACE')

    def test_setup_logger_file(self):
        log_file = os.path.join(self.test_dir, 'spp.log')
        logger = setup_logger(self.name, level='DEBUG', log_file=log_file, console=False)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)

        logger.debug("epoch solved")
        logger.handlers[0].flush()
        with open(log_file) as f:
            content = f.read()
        self.assertIn('epoch solved', content)
        self.assertNotIn('\033[', content)

    def test_setup_replaces_handlers(self):
        setup_logger(self.name, console=True)
        logger = setup_logger(self.name, console=True)
        self.assertEqual(len(logger.handlers), 1)

    def test_unknown_level(self):
        with self.assertRaises(ValueError):
            setup_logger(self.name, level='VERBOSE')

    def test_colored_formatter_copies_record(self):
        record = logging.LogRecord(self.name, logging.WARNING, __file__, 1, "msg", None, None)
        text = ColoredFormatter('%(levelname)s %(message)s').format(record)
        self.assertIn('\033[33mWARNING', text)
        self.assertEqual(record.levelname, 'WARNING')

    def test_log_context(self):
        logger = get_logger(self.name)
        logger.setLevel(logging.INFO)
        with LogContext(logger, 'TRACE'):
            self.assertEqual(logger.level, 5)
        self.assertEqual(logger.level, logging.INFO)

    def test_module_levels(self):
        config = LoggerConfig()
        config.configure_from_dict({
            'default_level': 'WARNING',
            'module_levels': {self.name + '.child': 'DEBUG'},
        })
        self.assertEqual(config.get_level_for_module(self.name + '.child'), 'DEBUG')
        self.assertEqual(config.get_level_for_module('other'), 'WARNING')
        self.assertEqual(logging.getLogger(self.name + '.child').level, logging.DEBUG)

    def test_setup_from_config(self):
        log_file = os.path.join(self.test_dir, 'cfg.log')
        config = setup_logger_from_config({
            'default_level': 'INFO',
            'log_file': log_file,
            'console': False,
            'module_levels': {'pyspp.gnss.spp': 'TRACE'},
        })
        root = logging.getLogger('pyspp')
        try:
            self.assertIsInstance(config, LoggerConfig)
            self.assertEqual(config.module_levels, {'pyspp.gnss.spp': 'TRACE'})
            self.assertEqual(config.log_file, log_file)
            self.assertEqual(root.level, logging.INFO)
            self.assertEqual(logging.getLogger('pyspp.gnss.spp').level, 5)
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()
            root.setLevel(logging.NOTSET)
            logging.getLogger('pyspp.gnss.spp').setLevel(logging.NOTSET)


if __name__ == '__main__':
    unittest.main()
