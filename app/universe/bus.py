import asyncio
import inspect
from universe.logger import get_logger


class EventBus:
    def __init__(self, name: str = "UniverseBus"):
        self.subscribers = {}
        self.log = get_logger(name)

    def subscribe(self, topic: str):
        """Ermöglicht die Nutzung als @bus.subscribe('topic') Decorator."""
        def decorator(callback):
            self.on(topic, callback)
            return callback
        return decorator

    def on(self, topic: str, callback):
        """Registriert einen Listener und gibt eine Abmelde-Funktion zurück."""
        if topic not in self.subscribers:
            self.subscribers[topic] = []
        self.subscribers[topic].append(callback)
        self.log.debug(f"👂 New Subscriber registered for: {topic} ({getattr(callback, '__name__', callback)})")
        return lambda: self.off(topic, callback)

    def off(self, topic: str, callback):
        listeners = self.subscribers.get(topic, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, topic: str, payload: dict = None):
        """Sendet ein Event synchron an alle aktuellen Subscriber."""
        if payload is None:
            payload = {}

        self.log.debug(f"📡 [EVENT] {topic}")

        # Kopie: Listener dürfen sich während der Zustellung abmelden
        for callback in list(self.subscribers.get(topic, [])):
            try:
                if inspect.iscoroutinefunction(callback):
                    self._schedule(topic, callback, payload)
                else:
                    callback(payload)
            except Exception as e:
                self.log.error(f"❌ Error in callback for '{topic}': {e}", exc_info=True)

    def _schedule(self, topic: str, callback, payload: dict):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.log.warning(f"⚠️ Kein laufender Event-Loop, async Listener für '{topic}' übersprungen.")
            return
        loop.create_task(callback(payload))


bus = EventBus()
