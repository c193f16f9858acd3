"""
Unit tests for please.config module
"""
import unittest
import tempfile
import os
import shutil
import json
import logging
from pathlib import Path
from unittest.mock import patch

import yaml

from please.config import (
    load_config,
    save_config,
    get_default_config,
    get_config_path,
    configure_logging,
    merge_configs,
    apply_env_overrides,
)


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up an isolated HOME with no PLEASE_* variables"""
        self.temp_dir = tempfile.mkdtemp()
        env = {k: v for k, v in os.environ.items() if not k.startswith('PLEASE_')}
        env['HOME'] = self.temp_dir
        self.env_patcher = patch.dict(os.environ, env, clear=True)
        self.env_patcher.start()
        self.please_dir = Path(self.temp_dir) / '.please'

    def tearDown(self):
        """Clean up test environment"""
        self.env_patcher.stop()
        shutil.rmtree(self.temp_dir)

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        self.assertEqual(config['general']['please_dir'], str(self.please_dir))
        self.assertEqual(config['general']['max_concurrent_operations'], 5)
        self.assertEqual(config['search']['max_fuzzy_results'], 10)
        self.assertEqual(config['registry']['timeout_seconds'], 10)
        self.assertEqual(config['logging']['level'], 'INFO')

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        self.assertEqual(load_config(), get_default_config())

    def test_load_config_json_file(self):
        """Test loading config from JSON file"""
        self.please_dir.mkdir()
        with open(self.please_dir / 'config.json', 'w') as f:
            json.dump({'registry': {'timeout_seconds': 30}}, f)

        config = load_config()

        self.assertEqual(config['registry']['timeout_seconds'], 30)
        # Untouched keys keep their defaults
        self.assertEqual(config['search']['max_fuzzy_results'], 10)

    def test_load_config_yaml_file(self):
        """Test loading config from YAML file"""
        self.please_dir.mkdir()
        with open(self.please_dir / 'config.yaml', 'w') as f:
            yaml.safe_dump({'search': {'max_fuzzy_results': 3}}, f)

        self.assertEqual(load_config()['search']['max_fuzzy_results'], 3)

    def test_load_config_toml_file(self):
        """Test loading config from TOML file"""
        self.please_dir.mkdir()
        (self.please_dir / 'config.toml').write_text('[logging]\nlevel = "DEBUG"\n')

        self.assertEqual(load_config()['logging']['level'], 'DEBUG')

    def test_please_config_env(self):
        """PLEASE_CONFIG points at a config outside ~/.please"""
        custom = Path(self.temp_dir) / 'custom.json'
        custom.write_text(json.dumps({'general': {'please_dir': '/srv/please'}}))

        with patch.dict(os.environ, {'PLEASE_CONFIG': str(custom)}):
            self.assertEqual(get_config_path(), custom)
            self.assertEqual(load_config()['general']['please_dir'], '/srv/please')

    def test_invalid_config_falls_back_to_defaults(self):
        """A broken config file is logged and ignored"""
        self.please_dir.mkdir()
        (self.please_dir / 'config.json').write_text('{not json')

        with self.assertLogs('please', level='ERROR'):
            config = load_config()

        self.assertEqual(config, get_default_config())

    def test_save_config(self):
        """Test saving config writes JSON by default"""
        config = get_default_config()
        config['registry']['timeout_seconds'] = 42

        save_config(config)

        with open(self.please_dir / 'config.json') as f:
            self.assertEqual(json.load(f)['registry']['timeout_seconds'], 42)


class TestEnvOverrides(unittest.TestCase):

    def test_nested_key_with_underscores(self):
        config = get_default_config()
        with patch.dict(os.environ, {'PLEASE_REGISTRY_TIMEOUT_SECONDS': '30'}):
            config = apply_env_overrides(config)

        self.assertEqual(config['registry']['timeout_seconds'], 30)

    def test_string_value(self):
        config = get_default_config()
        with patch.dict(os.environ, {'PLEASE_LOGGING_LEVEL': 'debug'}):
            config = apply_env_overrides(config)

        self.assertEqual(config['logging']['level'], 'debug')

    def test_boolean_values(self):
        config = {'search': {'enabled': False}}
        with patch.dict(os.environ, {'PLEASE_SEARCH_ENABLED': 'yes'}):
            config = apply_env_overrides(config)

        self.assertIs(config['search']['enabled'], True)

    def test_unknown_key_ignored(self):
        config = get_default_config()
        with patch.dict(os.environ, {'PLEASE_NOPE_THING': '1'}):
            config = apply_env_overrides(config)

        self.assertNotIn('nope', config)


class TestMergeConfigs(unittest.TestCase):

    def test_recursive_merge(self):
        merged = merge_configs(
            {'a': {'x': 1, 'y': 2}, 'b': 1},
            {'a': {'y': 3}, 'c': 4},
        )

        self.assertEqual(merged, {'a': {'x': 1, 'y': 3}, 'b': 1, 'c': 4})


class TestConfigureLogging(unittest.TestCase):

    def tearDown(self):
        logging.getLogger('please').setLevel(logging.NOTSET)

    def test_debug_flag(self):
        self.assertEqual(configure_logging({}, debug=True), logging.DEBUG)
        self.assertEqual(logging.getLogger('please').level, logging.DEBUG)

    def test_level_from_config(self):
        level = configure_logging({'logging': {'level': 'warning'}})

        self.assertEqual(level, logging.WARNING)

    def test_unknown_level(self):
        self.assertEqual(configure_logging({'logging': {'level': 'LOUD'}}), logging.INFO)
