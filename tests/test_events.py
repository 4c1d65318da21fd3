import logging
from unittest import mock

import pytest

from asyncio_apns_binary.events import EventEmitter


def test_emit_in_registration_order():
    emitter = EventEmitter()
    calls = []
    emitter.on('feedback', lambda record: calls.append(('first', record)))
    emitter.on('feedback', lambda record: calls.append(('second', record)))
    assert emitter.emit('feedback', 1)
    assert calls == [('first', 1), ('second', 1)]


def test_emit_without_listeners():
    emitter = EventEmitter()
    assert not emitter.emit('drain')


def test_once():
    emitter = EventEmitter()
    handler = mock.MagicMock()
    emitter.once('drain', handler)
    emitter.emit('drain')
    emitter.emit('drain')
    handler.assert_called_once_with()
    assert not emitter.has_listeners('drain')


def test_once_can_resubscribe():
    emitter = EventEmitter()
    calls = []

    def handler():
        calls.append(1)
        if len(calls) < 3:
            emitter.once('drain', handler)

    emitter.once('drain', handler)
    for _ in range(5):
        emitter.emit('drain')
    assert len(calls) == 3


def test_remove_listener():
    emitter = EventEmitter()
    handler = mock.MagicMock()
    emitter.on('error', handler)
    emitter.on('error', print)
    emitter.remove_listener('error', handler)
    assert emitter.listeners('error') == [print]
    emitter.remove_listener('unknown', handler)


def test_unhandled_error_logged(caplog):
    emitter = EventEmitter()
    with caplog.at_level(logging.ERROR, logger="asyncio_apns_binary.events"):
        emitter.emit('error', Exception("gateway: boom"))
    assert "gateway: boom" in caplog.text


def test_raising_handler_does_not_skip_later_handlers():
    emitter = EventEmitter()
    later = mock.MagicMock()
    emitter.on('drain', mock.MagicMock(side_effect=RuntimeError("observer failed")))
    emitter.once('drain', later)
    with pytest.raises(RuntimeError):
        emitter.emit('drain')
    later.assert_called_once_with()
    assert len(emitter.listeners('drain')) == 1


def test_once_removed_by_earlier_handler_not_called():
    emitter = EventEmitter()
    later = mock.MagicMock()
    emitter.on('drain', lambda: emitter.remove_listener('drain', later))
    emitter.once('drain', later)
    emitter.emit('drain')
    later.assert_not_called()
