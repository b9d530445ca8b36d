from webirc_core.event_manager import SESSION_UPDATED, EventManager


def test_dispatch_adds_event_name_and_timestamp():
    manager = EventManager()
    received = []
    manager.subscribe(SESSION_UPDATED, received.append, "view")
    manager.dispatch_event(SESSION_UPDATED, {"value": 1})
    assert received[0]["event"] == SESSION_UPDATED
    assert received[0]["value"] == 1
    assert "timestamp" in received[0]


def test_duplicate_subscription_is_ignored():
    manager = EventManager()
    received = []
    manager.subscribe(SESSION_UPDATED, received.append, "view")
    manager.subscribe(SESSION_UPDATED, received.append, "view")
    manager.dispatch_event(SESSION_UPDATED, {})
    assert len(received) == 1


def test_non_callable_is_rejected():
    manager = EventManager()
    manager.subscribe(SESSION_UPDATED, "not callable", "view")
    assert manager.has_subscribers(SESSION_UPDATED) is False


def test_unsubscribe():
    manager = EventManager()
    received = []
    manager.subscribe(SESSION_UPDATED, received.append, "view")
    manager.unsubscribe(SESSION_UPDATED, received.append, "view")
    manager.dispatch_event(SESSION_UPDATED, {})
    assert received == []
    assert SESSION_UPDATED not in manager.subscriptions


def test_raising_handler_is_disabled_and_others_still_run():
    manager = EventManager()
    received = []
    calls = []

    def broken(data):
        calls.append(data)
        raise RuntimeError("bad handler")

    manager.subscribe(SESSION_UPDATED, broken, "broken")
    manager.subscribe(SESSION_UPDATED, received.append, "view")
    manager.dispatch_event(SESSION_UPDATED, {})
    manager.dispatch_event(SESSION_UPDATED, {})
    assert len(calls) == 1
    assert len(received) == 2
