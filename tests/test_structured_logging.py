import json

from labelcycle.logging import StructuredLogger, configure_logging, get_logger
from labelcycle.models import Command, Intent, ItemRef, LifecycleLabel


def _records(text: str) -> list[dict]:
    return [json.loads(line) for line in text.strip().split('\n') if line]


def test_structured_logger_json_format(capsys):
    logger = StructuredLogger(name='test', json_logging=True, level='INFO')
    logger.log_operation('test_operation', param1='value1', param2=42)

    records = _records(capsys.readouterr().err)
    assert len(records) == 1
    assert records[0]['level'] == 'INFO'
    assert records[0]['operation'] == 'test_operation'
    assert records[0]['param1'] == 'value1'
    assert records[0]['param2'] == 42
    assert 'timestamp' in records[0]


def test_structured_logger_regular_format(capsys):
    logger = StructuredLogger(name='test', json_logging=False, level='INFO')
    logger.log_operation('test_operation', param1='value1')

    captured = capsys.readouterr()
    assert 'Operation: test_operation' in captured.err
    assert 'INFO' in captured.err
    assert captured.out == ''


def test_label_action_and_command_fields(capsys):
    logger = StructuredLogger(name='test', json_logging=True)
    item = ItemRef('acme', 'widgets', 3)
    logger.log_command(Command(LifecycleLabel.STALE, Intent.ADD), item, 'octocat')
    logger.log_label_action('add', item, 'lifecycle/stale', dry_run=True)

    first, second = _records(capsys.readouterr().err)
    assert first['operation'] == 'lifecycle_command'
    assert first['actor'] == 'octocat'
    assert first['intent'] == 'add'
    assert second['operation'] == 'label_add'
    assert second['item'] == 'acme/widgets#3'
    assert second['dry_run'] is True
    assert second['message'].endswith('[DRY]')


def test_log_level_filters_debug(capsys):
    logger = StructuredLogger(name='test', json_logging=True, level='WARNING')
    logger.info('hidden')
    logger.warning('shown')
    records = _records(capsys.readouterr().err)
    assert [r['message'] for r in records] == ['shown']


def test_configure_logging_replaces_global():
    configured = configure_logging(json_logging=True, level='DEBUG')
    assert get_logger() is configured
