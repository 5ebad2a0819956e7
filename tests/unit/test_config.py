import pytest

from session_lib.config import DEFAULT_STORE_ARGS, SessionConfig, config_from_mapping, load_config
from session_lib.session.errors import ConfigurationError


def test_defaults():
    cfg = SessionConfig()
    assert cfg.cookie_name == 'sessionid'
    assert cfg.cookie_expiry == '+3M'
    assert cfg.store == 'file'
    assert cfg.effective_store_args() == {'directory': '/tmp/sessions', 'lock_directory': '/tmp/sessionlock'}
    assert cfg.cookie_path() is None


def test_default_store_args_only_apply_to_file_store():
    assert SessionConfig(store='memory').effective_store_args() == {}
    assert SessionConfig(store='memory', store_args={'serializer': 'json'}).effective_store_args() == {'serializer': 'json'}


def test_effective_store_args_is_a_copy():
    args = SessionConfig().effective_store_args()
    args['directory'] = '/elsewhere'
    assert DEFAULT_STORE_ARGS['directory'] == '/tmp/sessions'


def test_config_is_frozen():
    cfg = SessionConfig()
    with pytest.raises(Exception):
        cfg.cookie_name = 'other'  # type: ignore[misc]


def test_cookie_path_from_uri_base():
    assert SessionConfig(uri_base='http://example.com/shop/').cookie_path() == '/shop/'
    assert SessionConfig(uri_base='http://example.com').cookie_path() == '/'


def test_load_config_from_yaml(tmp_path):
    path = tmp_path / 'session_config.yml'
    path.write_text(
        'log_level: DEBUG\n'
        'session:\n'
        '  cookie_name: sid\n'
        '  cookie_expiry: +1h\n'
        '  store: memory\n'
        '  store_args:\n'
        '    serializer: json\n'
        '  unexpected: 1\n',
        encoding='utf-8',
    )
    cfg = load_config(path)
    assert cfg.cookie_name == 'sid'
    assert cfg.cookie_expiry == '+1h'
    assert cfg.store == 'memory'
    assert cfg.effective_store_args() == {'serializer': 'json'}
    assert cfg.log_level == 'DEBUG'
    assert cfg.extra == {'unexpected': 1}


def test_load_config_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / 'nope.yml') == SessionConfig()


def test_load_config_from_env(tmp_path, monkeypatch):
    path = tmp_path / 'cfg.yml'
    path.write_text('cookie_name: envsid\n', encoding='utf-8')
    monkeypatch.setenv('SESSION_CONFIG', str(path))
    assert load_config().cookie_name == 'envsid'


def test_invalid_yaml_raises_configuration_error(tmp_path):
    path = tmp_path / 'bad.yml'
    path.write_text('session: [unclosed\n', encoding='utf-8')
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_config_from_mapping_validation():
    with pytest.raises(ConfigurationError):
        config_from_mapping(['not', 'a', 'mapping'])
    with pytest.raises(ConfigurationError):
        config_from_mapping({'store_args': 'nope'})
    with pytest.raises(ConfigurationError):
        config_from_mapping({'cookie_name': ''})
