"""
Tests for the config module
"""

import dataclasses
import logging

import pytest

from filewatch.core.config import (
    Config,
    NotifyLevel,
    DEFAULT_IGNORE_PATTERNS,
    load_config,
    load_default_config,
)


class TestConfig:
    """Test the Config class"""

    def test_config_creation(self):
        """Test creating a Config instance"""
        config = Config(
            debounce_delay=0.25,
            notify=False,
            notify_level=NotifyLevel.WARN,
            ignore_patterns=[r'\.tmp$'],
            auto_enable=False,
        )

        assert config.debounce_delay == 0.25
        assert config.notify is False
        assert config.notify_level is NotifyLevel.WARN
        assert config.ignore_patterns == (r'\.tmp$',)
        assert config.auto_enable is False

    def test_defaults(self):
        config = Config()
        assert config.debounce_delay == 0.1
        assert config.notify is True
        assert config.notify_level is NotifyLevel.INFO
        assert config.ignore_patterns == DEFAULT_IGNORE_PATTERNS
        assert config.auto_enable is True
        assert config.rearm_delay == 0.05

    def test_config_is_immutable(self):
        config = Config()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.debounce_delay = 1.0

    def test_with_overrides(self):
        config = Config()
        changed = config.with_overrides(debounce_delay=0.5, notify=False)
        assert changed.debounce_delay == 0.5
        assert changed.notify is False
        assert config.debounce_delay == 0.1

    def test_config_from_dict(self):
        """Test creating Config from dictionary"""
        data = {
            'debounce_delay': 0.3,
            'notify': False,
            'notify_level': 'error',
            'ignore_patterns': [r'\.git/', r'\.bak$'],
            'auto_enable': False,
            'rearm_delay': 0.2,
            'log_level': 'debug',
        }

        config = Config.from_dict(data)

        assert config.debounce_delay == 0.3
        assert config.notify is False
        assert config.notify_level is NotifyLevel.ERROR
        assert config.ignore_patterns == (r'\.git/', r'\.bak$')
        assert config.auto_enable is False
        assert config.rearm_delay == 0.2
        assert config.log_level == 'debug'

    def test_config_from_dict_empty(self):
        """Test Config with empty dictionary"""
        assert Config.from_dict({}) == Config()

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            Config(debounce_delay=-1)
        with pytest.raises(ValueError):
            Config.from_dict({'rearm_delay': -0.1})

    def test_invalid_pattern_rejected(self):
        with pytest.raises(ValueError, match='Invalid ignore pattern'):
            Config(ignore_patterns=['('])

    def test_ignore_patterns_must_be_a_list(self):
        with pytest.raises(ValueError, match='must be a list'):
            Config.from_dict({'ignore_patterns': r'\.log$'})
        with pytest.raises(ValueError, match='must be a string'):
            Config(ignore_patterns=[r'\.log$', 3])

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match='Unknown notify level'):
            Config.from_dict({'notify_level': 'loud'})


class TestNotifyLevel:
    """Parsing notification levels"""

    @pytest.mark.parametrize('value,expected', [
        ('debug', NotifyLevel.DEBUG),
        ('INFO', NotifyLevel.INFO),
        ('warn', NotifyLevel.WARN),
        ('warning', NotifyLevel.WARN),
        ('Error', NotifyLevel.ERROR),
        (logging.WARNING, NotifyLevel.WARN),
        (NotifyLevel.INFO, NotifyLevel.INFO),
    ])
    def test_parse(self, value, expected):
        assert NotifyLevel.parse(value) is expected

    def test_parse_unknown_number(self):
        with pytest.raises(ValueError):
            NotifyLevel.parse(5)


class TestLoadConfig:
    """Test the load_config function"""

    def test_load_toml_config(self, tmp_path):
        """Test loading TOML configuration"""
        config_file = tmp_path / 'filewatch.config.toml'
        config_file.write_text('''
debounce_delay = 0.5
notify_level = "warn"
ignore_patterns = ["\\\\.log$"]
''')

        config = load_config(str(config_file))

        assert config is not None
        assert config.debounce_delay == 0.5
        assert config.notify_level is NotifyLevel.WARN
        assert config.ignore_patterns == (r'\.log$',)

    def test_load_nested_toml_config(self, tmp_path):
        config_file = tmp_path / 'nested.toml'
        config_file.write_text('''
[filewatch]
notify = false
auto_enable = false
''')

        config = load_config(str(config_file))

        assert config.notify is False
        assert config.auto_enable is False
        assert config.debounce_delay == 0.1

    def test_load_nonexistent_config(self, tmp_path):
        assert load_config(str(tmp_path / 'missing.toml')) is None

    def test_load_invalid_toml(self, tmp_path, caplog):
        config_file = tmp_path / 'broken.toml'
        config_file.write_text('debounce_delay = [')

        with caplog.at_level(logging.ERROR, logger='filewatch.core.config'):
            assert load_config(str(config_file)) is None
        assert 'Error loading config' in caplog.text

    def test_load_invalid_values(self, tmp_path):
        config_file = tmp_path / 'bad.toml'
        config_file.write_text('debounce_delay = -3')
        assert load_config(str(config_file)) is None

    def test_load_string_ignore_patterns(self, tmp_path):
        config_file = tmp_path / 'string.toml'
        config_file.write_text('ignore_patterns = "\\\\.log$"\n')
        assert load_config(str(config_file)) is None

    def test_load_default_config(self):
        config = load_default_config()
        assert config == Config()
