#!/usr/bin/env python3

"""
Unit tests for configuration management.

Tests the configuration loading, validation, and environment
variable handling functionality.
"""

import unittest
import tempfile
import os
import json
import sys
from unittest.mock import patch

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from operon_finder.core.config import PipelineConfig, load_config
from operon_finder.core.exceptions import ConfigurationError


class TestPipelineConfig(unittest.TestCase):
    """Test PipelineConfig class."""

    def test_default_config(self):
        """Test default configuration values."""
        config = PipelineConfig()

        self.assertEqual(config.threshold, 1.0)
        self.assertEqual(config.memory_limit_mb, 4096)
        self.assertTrue(config.enable_memory_monitoring)
        self.assertTrue(config.write_annotation_files)
        self.assertTrue(config.generate_reports)
        self.assertFalse(config.debug_mode)

    def test_config_validation(self):
        """Test configuration validation."""
        config = PipelineConfig()
        config.validate()  # Should not raise

        with self.assertRaises(ConfigurationError):
            PipelineConfig(threshold=0)

        with self.assertRaises(ConfigurationError):
            PipelineConfig(threshold=-1.5)

        with self.assertRaises(ConfigurationError):
            PipelineConfig(threshold="high")

        with self.assertRaises(ConfigurationError):
            PipelineConfig(memory_limit_mb=50)

    def test_validate_after_override(self):
        config = PipelineConfig()
        config.threshold = 0.0
        with self.assertRaises(ConfigurationError):
            config.validate()

    def test_config_from_dict(self):
        """Test creating config from dictionary."""
        config = PipelineConfig.from_dict({
            "threshold": 2.5,
            "debug_mode": True,
            "unknown_key": "ignored"
        })

        self.assertEqual(config.threshold, 2.5)
        self.assertTrue(config.debug_mode)
        self.assertEqual(config.memory_limit_mb, 4096)

    def test_config_to_dict(self):
        config = PipelineConfig(threshold=1.5, debug_mode=True)
        config_dict = config.to_dict()

        self.assertIsInstance(config_dict, dict)
        self.assertEqual(config_dict["threshold"], 1.5)
        self.assertTrue(config_dict["debug_mode"])
        self.assertIn("memory_limit_mb", config_dict)

    def test_config_from_json_file(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({"threshold": 3.0, "write_annotation_files": False}, f)
            config_path = f.name

        try:
            config = PipelineConfig.from_file(config_path)
            self.assertEqual(config.threshold, 3.0)
            self.assertFalse(config.write_annotation_files)
            self.assertTrue(config.generate_reports)
        finally:
            os.unlink(config_path)

    def test_config_from_yaml_file(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("threshold: 1.75\nmemory_limit_mb: 2048\n")
            config_path = f.name

        try:
            config = PipelineConfig.from_file(config_path)
            self.assertEqual(config.threshold, 1.75)
            self.assertEqual(config.memory_limit_mb, 2048)
        finally:
            os.unlink(config_path)

    def test_config_from_nonexistent_file(self):
        with self.assertRaises(ConfigurationError):
            PipelineConfig.from_file("/nonexistent/config.json")

    def test_config_from_invalid_json(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            f.write("{ invalid json }")
            config_path = f.name

        try:
            with self.assertRaises(ConfigurationError):
                PipelineConfig.from_file(config_path)
        finally:
            os.unlink(config_path)

    def test_config_from_non_mapping_yaml(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yml', delete=False) as f:
            f.write("- just\n- a list\n")
            config_path = f.name

        try:
            with self.assertRaises(ConfigurationError):
                PipelineConfig.from_file(config_path)
        finally:
            os.unlink(config_path)

    def test_config_save_to_file(self):
        config = PipelineConfig(threshold=2.0, debug_mode=True)

        with tempfile.TemporaryDirectory() as tmpdir:
            for name in ("config.json", "config.yaml"):
                config_path = os.path.join(tmpdir, name)
                config.save_to_file(config_path)

                loaded_config = PipelineConfig.from_file(config_path)
                self.assertEqual(loaded_config.threshold, 2.0)
                self.assertTrue(loaded_config.debug_mode)

    def test_config_from_env(self):
        env_vars = {
            'OPERON_THRESHOLD': '1.5',
            'OPERON_MEMORY_LIMIT_MB': '2048',
            'OPERON_DEBUG_MODE': 'true',
            'OPERON_WRITE_ANNOTATION_FILES': 'no',
        }

        with patch.dict(os.environ, env_vars):
            config = PipelineConfig.from_env()

        self.assertEqual(config.threshold, 1.5)
        self.assertEqual(config.memory_limit_mb, 2048)
        self.assertTrue(config.debug_mode)
        self.assertFalse(config.write_annotation_files)
        self.assertTrue(config.generate_reports)

    def test_config_from_env_invalid_values(self):
        with patch.dict(os.environ, {'OPERON_THRESHOLD': 'invalid'}):
            with self.assertRaises(ConfigurationError):
                PipelineConfig.from_env()

        with patch.dict(os.environ, {'OPERON_THRESHOLD': '-2'}):
            with self.assertRaises(ConfigurationError):
                PipelineConfig.from_env()


class TestLoadConfig(unittest.TestCase):
    """Test load_config priority handling."""

    def test_defaults_without_sources(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_config(use_env=True)
        self.assertEqual(config.threshold, 1.0)

    def test_environment_overrides_defaults(self):
        with patch.dict(os.environ, {'OPERON_THRESHOLD': '2.0'}):
            self.assertEqual(load_config(use_env=True).threshold, 2.0)
            self.assertEqual(load_config(use_env=False).threshold, 1.0)

    def test_file_overrides_environment(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({"threshold": 4.0}, f)
            config_path = f.name

        try:
            with patch.dict(os.environ, {'OPERON_THRESHOLD': '2.0'}):
                config = load_config(config_path=config_path, use_env=True)
            self.assertEqual(config.threshold, 4.0)
        finally:
            os.unlink(config_path)

    def test_file_keeps_environment_for_unset_keys(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({"memory_limit_mb": 8000}, f)
            config_path = f.name

        try:
            with patch.dict(os.environ, {'OPERON_THRESHOLD': '2.0'}):
                config = load_config(config_path=config_path, use_env=True)
            self.assertEqual(config.threshold, 2.0)
            self.assertEqual(config.memory_limit_mb, 8000)
        finally:
            os.unlink(config_path)

    def test_invalid_file_value_rejected(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("threshold: 0\n")
            config_path = f.name

        try:
            with self.assertRaises(ConfigurationError):
                load_config(config_path=config_path, use_env=False)
        finally:
            os.unlink(config_path)


if __name__ == '__main__':
    unittest.main()
