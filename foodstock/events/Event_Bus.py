"""Simple Event Bus / Observer implementation for product store changes.

Event names used so far:
  products.changed -> payload {"action": "added" | "updated" | "deleted", "product_id": UUID}

Subscribers can be plain callables (held strongly) or bound methods registered
with subscribe_weak (held through a weak reference, dropped once the owner is
garbage collected). The bus is handed to stores and controllers when they are
built; there is no process-wide instance.
"""
from __future__ import annotations
import logging
import weakref
from collections import defaultdict
from typing import Callable, Any, Dict, List, Union

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
PRODUCTS_CHANGED = "products.changed"

_Subscriber = Union[Callable[[str, Any], None], weakref.WeakMethod]


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[_Subscriber]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def subscribe_weak(self, event_name: str, method: Callable[[str, Any], None]):
		"""Subscribe a bound method without keeping its owner alive."""
		ref = weakref.WeakMethod(method)
		if ref not in self._subscribers[event_name]:
			self._subscribers[event_name].append(ref)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		subscribers = self._subscribers.get(event_name, [])
		for entry in list(subscribers):
			target = entry() if isinstance(entry, weakref.WeakMethod) else entry
			if target == callback:
				subscribers.remove(entry)

	def subscriber_count(self, event_name: str) -> int:
		return sum(1 for _ in self._live(event_name))

	def _live(self, event_name: str):
		subscribers = self._subscribers.get(event_name, [])
		for entry in list(subscribers):
			if isinstance(entry, weakref.WeakMethod):
				target = entry()
				if target is None:
					subscribers.remove(entry)  # owner was collected
					continue
				yield target
			else:
				yield entry

	def publish(self, event_name: str, payload: Any = None):
		for cb in list(self._live(event_name)):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %s", event_name, cb)


def publish_products_changed(bus: EventBus | None, action: str, product_id: Any) -> None:
	"""Publish a products.changed event; no-op when the store has no bus."""
	if bus is None:
		return
	bus.publish(PRODUCTS_CHANGED, {"action": action, "product_id": product_id})


__all__ = ['EventBus', 'PRODUCTS_CHANGED', 'publish_products_changed']
