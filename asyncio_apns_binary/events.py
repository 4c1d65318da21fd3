import collections
import logging

logger = logging.getLogger(__name__)


class EventEmitter:
    """
    Minimal observer registry keyed by event name.

    Handlers run synchronously in registration order. ``once`` handlers are
    unregistered right before they are called, so a handler may re-subscribe
    itself. A raising handler does not stop the others; the first exception
    is re-raised once every handler has run.
    """
    def __init__(self):
        self._handlers = collections.defaultdict(list)  # event -> [(handler, once)]

    def on(self, event: str, handler):
        self._handlers[event].append((handler, False))
        return handler

    def once(self, event: str, handler):
        self._handlers[event].append((handler, True))
        return handler

    def remove_listener(self, event: str, handler):
        handlers = self._handlers.get(event, [])
        for i, (registered, _) in enumerate(handlers):
            if registered == handler:
                del handlers[i]
                break

    def listeners(self, event: str):
        return [handler for handler, _ in self._handlers.get(event, [])]

    def has_listeners(self, event: str) -> bool:
        return bool(self._handlers.get(event))

    def emit(self, event: str, *args):
        handlers = self._handlers.get(event)
        if not handlers:
            if event == 'error':
                logger.error("Unhandled error event: %s", args[0] if args else None)
            return False
        failure = None
        for entry in list(handlers):
            handler, once = entry
            if once:
                if entry not in handlers:
                    continue
                handlers.remove(entry)
            try:
                handler(*args)
            except Exception as exc:
                # the remaining handlers still run, the first failure is re-raised
                if failure is None:
                    failure = exc
        if failure is not None:
            raise failure
        return True
