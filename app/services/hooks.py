from blinker import Namespace

_signals = Namespace()

# Sent after every successful mutation so the web layer can drop stale caches.
# Receivers get ``sender=<resource name>`` plus ``action`` and ``ids`` keywords.
record_mutated = _signals.signal("record-mutated")


def notify(resource, action, **ids):
    record_mutated.send(resource, action=action, ids=ids)
